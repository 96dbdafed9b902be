from sqlalchemy import select, func
from sqlalchemy.orm import Session, joinedload
from typing import List, Dict, Any
import logging

from ..core.cache import cache
from ..core.config import settings
from ..models.attempt import MockTestAttempt
from ..schemas.mock_test import LeaderboardEntry
from ..schemas.user import UserSummary

logger = logging.getLogger(__name__)


def leaderboard_cache_key(mock_test_id: int, limit: int) -> str:
    return f"leaderboard:{mock_test_id}:{limit}"


class RankingService:
    def __init__(self, db: Session):
        self.db = db

    def compute_rank(self, attempt: MockTestAttempt) -> int:
        """Rank = 1 + number of attempts on the same test with a strictly higher score.

        Ties share a rank. The value is stored on the attempt once and is not
        refreshed when later attempts arrive.
        """
        higher = self.db.execute(
            select(func.count(MockTestAttempt.id)).where(
                MockTestAttempt.mock_test_id == attempt.mock_test_id,
                MockTestAttempt.score > attempt.score,
                MockTestAttempt.id != attempt.id,
            )
        ).scalar_one()
        attempt.rank = higher + 1
        return attempt.rank

    def get_leaderboard(self, mock_test_id: int, limit: int = 10) -> List[Dict[str, Any]]:
        cache_key = leaderboard_cache_key(mock_test_id, limit)
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        attempts = self.db.execute(
            select(MockTestAttempt)
            .options(joinedload(MockTestAttempt.user))
            .where(MockTestAttempt.mock_test_id == mock_test_id)
            .order_by(
                MockTestAttempt.score.desc(),
                MockTestAttempt.completed_at.desc(),
                MockTestAttempt.id.asc(),
            )
            .limit(limit)
        ).scalars().all()

        leaderboard = [
            LeaderboardEntry(
                user=UserSummary.from_model(attempt.user),
                score=attempt.score,
                completed_at=attempt.completed_at,
                rank=attempt.rank,
            ).model_dump(mode="json", by_alias=True)
            for attempt in attempts
        ]
        cache.set(cache_key, leaderboard, ttl=settings.leaderboard_cache_ttl)
        return leaderboard

    def invalidate_leaderboard(self, mock_test_id: int) -> None:
        cache.delete_pattern(f"leaderboard:{mock_test_id}:*")
