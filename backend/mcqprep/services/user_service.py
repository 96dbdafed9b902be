from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func, case
from datetime import timedelta
from typing import Optional, Dict, Any, List
import logging

from ..models.user import User
from ..models.mcq import MCQ
from ..models.attempt import MCQAttempt, MockTestAttempt
from ..models.bookmark import Bookmark
from ..models.enums import AttemptType
from ..schemas.user import UserCreate, UserUpdate
from ..core.security import get_password_hash, verify_password
from ..core.exceptions import ConflictError
from ..utils.pagination import paginate
from ..utils.timezone import utc_now, local_day_key, local_week_key

logger = logging.getLogger(__name__)


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole else 0


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def create_user(self, user_data: UserCreate, is_superuser: bool = False) -> User:
        db_user = User(
            name=user_data.name,
            email=user_data.email.lower(),
            hashed_password=get_password_hash(user_data.password),
            is_superuser=is_superuser,
        )
        if user_data.profile_data:
            self._apply_profile(db_user, user_data.profile_data.model_dump(exclude_unset=True))
        self.db.add(db_user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Email already registered")
        self.db.refresh(db_user)
        logger.info(f"Registered user {db_user.id}")
        return db_user

    def update_profile(self, user: User, user_data: UserUpdate) -> User:
        update_data = user_data.model_dump(exclude_unset=True)
        if update_data.get("name") is not None:
            user.name = update_data["name"]
        if update_data.get("profile_data") is not None:
            self._apply_profile(user, update_data["profile_data"])
        self.db.commit()
        self.db.refresh(user)
        return user

    def _apply_profile(self, user: User, profile: Dict[str, Any]) -> None:
        for field in ("phone", "college", "year_of_study", "avatar"):
            if field in profile:
                setattr(user, field, profile[field])
        if "target_exam" in profile:
            target = profile["target_exam"]
            user.target_exam = target.value if hasattr(target, "value") else target

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        user = self.get_user_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            return None
        user.last_login = utc_now()
        self.db.commit()
        return user

    def get_dashboard(self, user_id: int) -> Dict[str, Any]:
        practice = self.db.query(MCQAttempt).filter(
            MCQAttempt.user_id == user_id,
            MCQAttempt.attempt_type == AttemptType.PRACTICE.value,
        )
        total_attempted = practice.count()
        correct_answers = practice.filter(MCQAttempt.is_correct.is_(True)).count()
        total_bookmarks = self.db.query(Bookmark).filter(Bookmark.user_id == user_id).count()
        mock_tests_attempted = self.db.query(MockTestAttempt).filter(MockTestAttempt.user_id == user_id).count()

        recent = (
            self.db.query(MockTestAttempt)
            .options(joinedload(MockTestAttempt.mock_test))
            .filter(MockTestAttempt.user_id == user_id)
            .order_by(MockTestAttempt.completed_at.desc())
            .limit(5)
            .all()
        )
        recent_mock_tests = [
            {
                "id": attempt.id,
                "score": attempt.score,
                "completedAt": attempt.completed_at,
                "mockTest": {"id": attempt.mock_test_id, "title": attempt.mock_test.title},
            }
            for attempt in recent
        ]

        correct_sum = func.sum(case((MCQAttempt.is_correct.is_(True), 1), else_=0))
        rows = (
            self.db.query(MCQ.topic, func.count(MCQAttempt.id), correct_sum)
            .join(MCQ, MCQ.id == MCQAttempt.mcq_id)
            .filter(
                MCQAttempt.user_id == user_id,
                MCQAttempt.attempt_type == AttemptType.PRACTICE.value,
            )
            .group_by(MCQ.topic)
            .order_by(func.count(MCQAttempt.id).desc())
            .all()
        )
        topic_performance = [
            {
                "topic": topic,
                "total": total,
                "correct": int(correct or 0),
                "accuracy": _percentage(int(correct or 0), total),
            }
            for topic, total, correct in rows
        ]

        return {
            "stats": {
                "totalAttempted": total_attempted,
                "correctAnswers": correct_answers,
                "accuracy": round(_percentage(correct_answers, total_attempted), 2),
                "totalBookmarks": total_bookmarks,
                "mockTestsAttempted": mock_tests_attempted,
            },
            "recentMockTests": recent_mock_tests,
            "topicPerformance": topic_performance,
        }

    def get_progress(self, user_id: int, timeframe_days: int = 30) -> Dict[str, Any]:
        """Daily practice accuracy and weekly mock test averages over the last N days"""
        start_date = utc_now() - timedelta(days=timeframe_days)

        practice = (
            self.db.query(MCQAttempt.created_at, MCQAttempt.is_correct)
            .filter(
                MCQAttempt.user_id == user_id,
                MCQAttempt.attempt_type == AttemptType.PRACTICE.value,
                MCQAttempt.created_at >= start_date,
            )
            .all()
        )
        daily: Dict[str, Dict[str, int]] = {}
        for created_at, is_correct in practice:
            bucket = daily.setdefault(local_day_key(created_at), {"total": 0, "correct": 0})
            bucket["total"] += 1
            bucket["correct"] += 1 if is_correct else 0
        daily_progress = [
            {
                "date": day,
                "total": bucket["total"],
                "correct": bucket["correct"],
                "accuracy": _percentage(bucket["correct"], bucket["total"]),
            }
            for day, bucket in sorted(daily.items())
        ]

        tests = (
            self.db.query(MockTestAttempt.completed_at, MockTestAttempt.score)
            .filter(
                MockTestAttempt.user_id == user_id,
                MockTestAttempt.completed_at >= start_date,
            )
            .all()
        )
        weekly: Dict[str, List[float]] = {}
        for completed_at, score in tests:
            weekly.setdefault(local_week_key(completed_at), []).append(score)
        weekly_mock_tests = [
            {"week": week, "averageScore": sum(scores) / len(scores), "count": len(scores)}
            for week, scores in sorted(weekly.items())
        ]

        return {"dailyProgress": daily_progress, "weeklyMockTests": weekly_mock_tests}

    def get_practice_attempts(self, user_id: int, page: int, limit: int):
        query = (
            self.db.query(MCQAttempt)
            .options(joinedload(MCQAttempt.mcq))
            .filter(
                MCQAttempt.user_id == user_id,
                MCQAttempt.attempt_type == AttemptType.PRACTICE.value,
            )
            .order_by(MCQAttempt.created_at.desc(), MCQAttempt.id.desc())
        )
        return paginate(query, page, limit)

    def get_mock_test_history(self, user_id: int, page: int, limit: int):
        query = (
            self.db.query(MockTestAttempt)
            .options(joinedload(MockTestAttempt.mock_test))
            .filter(MockTestAttempt.user_id == user_id)
            .order_by(MockTestAttempt.completed_at.desc(), MockTestAttempt.id.desc())
        )
        return paginate(query, page, limit)
