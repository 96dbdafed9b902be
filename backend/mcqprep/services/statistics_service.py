from sqlalchemy import update, select, func, case
from sqlalchemy.orm import Session
from typing import Dict, Any, Iterable
import logging

from ..models.mcq import MCQ
from ..models.mock_test import MockTest
from ..models.attempt import MockTestAttempt

logger = logging.getLogger(__name__)


def running_mean(current_mean: float, count_before: int, new_value: float) -> float:
    """Mean after adding one value to count_before values averaging current_mean"""
    total = count_before + 1
    return (current_mean * count_before + new_value) / total


def next_question_statistics(stats: Dict[str, Any], is_correct: bool, time_spent: float) -> Dict[str, Any]:
    return {
        "total_attempts": stats["total_attempts"] + 1,
        "correct_attempts": stats["correct_attempts"] + (1 if is_correct else 0),
        "average_time": running_mean(stats["average_time"], stats["total_attempts"], time_spent),
    }


def next_test_statistics(stats: Dict[str, Any], score: float) -> Dict[str, Any]:
    return {
        "total_attempts": stats["total_attempts"] + 1,
        "average_score": running_mean(stats["average_score"], stats["total_attempts"], score),
        "highest_score": max(stats["highest_score"], score),
        "lowest_score": min(stats["lowest_score"], score),
    }


def success_rate(total_attempts: int, correct_attempts: int) -> float:
    if not total_attempts:
        return 0
    return correct_attempts / total_attempts


def fold_question_statistics(answers: Iterable[tuple]) -> Dict[str, Any]:
    """Apply a sequence of (is_correct, time_spent) to empty question statistics"""
    stats = {"total_attempts": 0, "correct_attempts": 0, "average_time": 0.0}
    for is_correct, time_spent in answers:
        stats = next_question_statistics(stats, is_correct, time_spent)
    return stats


class StatisticsService:
    """Applies the running statistics to stored records.

    Each update is a single UPDATE whose right-hand side reads the current
    column values, so concurrent submissions cannot overwrite each other's
    increments the way a read-modify-write in Python would.
    """

    def __init__(self, db: Session):
        self.db = db

    def record_question_attempt(self, mcq_id: int, is_correct: bool, time_spent: int) -> None:
        stmt = (
            update(MCQ)
            .where(MCQ.id == mcq_id)
            .values(
                total_attempts=MCQ.total_attempts + 1,
                correct_attempts=MCQ.correct_attempts + (1 if is_correct else 0),
                average_time=(MCQ.average_time * MCQ.total_attempts + time_spent) / (MCQ.total_attempts + 1),
            )
            .execution_options(synchronize_session="fetch")
        )
        self.db.execute(stmt)

    def record_test_score(self, mock_test_id: int, score: float) -> None:
        stmt = (
            update(MockTest)
            .where(MockTest.id == mock_test_id)
            .values(
                total_attempts=MockTest.total_attempts + 1,
                average_score=(MockTest.average_score * MockTest.total_attempts + score) / (MockTest.total_attempts + 1),
                highest_score=case((MockTest.highest_score < score, score), else_=MockTest.highest_score),
                lowest_score=case((MockTest.lowest_score > score, score), else_=MockTest.lowest_score),
            )
            .execution_options(synchronize_session="fetch")
        )
        self.db.execute(stmt)

    def recompute_test_statistics(self, mock_test_id: int) -> Dict[str, Any]:
        """Rebuild a test's statistics from its attempt history.

        Attempts are immutable, so the history is authoritative for tests.
        """
        row = self.db.execute(
            select(
                func.count(MockTestAttempt.id),
                func.avg(MockTestAttempt.score),
                func.max(MockTestAttempt.score),
                func.min(MockTestAttempt.score),
            ).where(MockTestAttempt.mock_test_id == mock_test_id)
        ).one()
        count, average, highest, lowest = row
        stats = {
            "total_attempts": count or 0,
            "average_score": float(average) if count else 0.0,
            "highest_score": float(highest) if count else 0.0,
            "lowest_score": float(lowest) if count else 100.0,
        }
        self.db.execute(
            update(MockTest)
            .where(MockTest.id == mock_test_id)
            .values(**stats)
            .execution_options(synchronize_session="fetch")
        )
        return stats

    def reconcile_all_tests(self) -> int:
        test_ids = self.db.execute(select(MockTest.id)).scalars().all()
        for test_id in test_ids:
            self.recompute_test_statistics(test_id)
        self.db.commit()
        logger.info(f"Reconciled statistics for {len(test_ids)} mock tests")
        return len(test_ids)
