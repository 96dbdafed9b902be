from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func, cast, String
from pydantic import ValidationError
from typing import List, Optional, Tuple
import logging

from ..models.mcq import MCQ
from ..models.mock_test import MockTest
from ..models.attempt import MCQAttempt
from ..models.bookmark import Bookmark
from ..models.discussion import Discussion
from ..models.enums import AttemptType
from ..schemas.mcq import MCQCreate, MCQUpdate, PracticeAnswerRequest, PracticeAnswerResult
from ..core.exceptions import NotFoundError, ConflictError, DomainValidationError
from ..utils.pagination import apply_sort, paginate
from .access_control import restrict_to_free, ensure_access
from .statistics_service import StatisticsService

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "createdAt": MCQ.created_at,
    "topic": MCQ.topic,
    "difficulty": MCQ.difficulty,
    "totalAttempts": MCQ.total_attempts,
    "averageTime": MCQ.average_time,
}


class MCQService:
    def __init__(self, db: Session):
        self.db = db
        self.statistics = StatisticsService(db)

    def get_mcq(self, mcq_id: int) -> MCQ:
        mcq = self.db.query(MCQ).filter(MCQ.id == mcq_id).first()
        if not mcq:
            raise NotFoundError("MCQ not found")
        return mcq

    def list_mcqs(
        self,
        user,
        page: int,
        limit: int,
        topic: Optional[str] = None,
        difficulty: Optional[str] = None,
        tag: Optional[str] = None,
        sort: Optional[str] = None,
    ):
        query = restrict_to_free(self.db.query(MCQ), MCQ, user)
        if topic:
            query = query.filter(MCQ.topic == topic)
        if difficulty:
            query = query.filter(MCQ.difficulty == difficulty)
        if tag:
            # JSON arrays are stored as text on both backends
            query = query.filter(cast(MCQ.tags, String).like(f'%"{tag}"%'))
        query = apply_sort(query, sort, SORTABLE_FIELDS, [MCQ.created_at.desc(), MCQ.id.desc()])
        return paginate(query, page, limit)

    def random_mcqs(self, user, limit: int, topic: Optional[str] = None, difficulty: Optional[str] = None) -> List[MCQ]:
        query = self.db.query(MCQ).filter(MCQ.is_active.is_(True))
        query = restrict_to_free(query, MCQ, user)
        if topic:
            query = query.filter(MCQ.topic == topic)
        if difficulty:
            query = query.filter(MCQ.difficulty == difficulty)
        return query.order_by(func.random()).limit(limit).all()

    def get_mcq_for_user(self, mcq_id: int, user) -> Tuple[MCQ, Optional[MCQAttempt]]:
        mcq = self.get_mcq(mcq_id)
        ensure_access(mcq, user, "MCQ")
        attempt = None
        if user is not None:
            attempt = self._practice_attempt(user.id, mcq_id)
        return mcq, attempt

    def _practice_attempt(self, user_id: int, mcq_id: int) -> Optional[MCQAttempt]:
        return (
            self.db.query(MCQAttempt)
            .filter(
                MCQAttempt.user_id == user_id,
                MCQAttempt.mcq_id == mcq_id,
                MCQAttempt.mock_test_id.is_(None),
            )
            .first()
        )

    def create_mcq(self, data: MCQCreate, creator_id: Optional[int] = None) -> MCQ:
        mcq = MCQ(**data.model_dump(mode="json"), created_by=creator_id)
        self.db.add(mcq)
        self.db.commit()
        self.db.refresh(mcq)
        logger.info(f"Created MCQ {mcq.id} ({mcq.topic}, {mcq.difficulty})")
        return mcq

    def update_mcq(self, mcq_id: int, data: MCQUpdate) -> MCQ:
        mcq = self.get_mcq(mcq_id)
        update_data = data.model_dump(mode="json", exclude_unset=True)

        # Validate the merged record so options and correctAnswer stay consistent
        merged = {
            "question": mcq.question,
            "options": mcq.options,
            "correct_answer": mcq.correct_answer,
            "explanation": mcq.explanation,
            "topic": mcq.topic,
            "difficulty": mcq.difficulty,
            "references": mcq.references or [],
            "tags": mcq.tags or [],
            "is_premium": bool(mcq.is_premium),
            "is_active": bool(mcq.is_active),
        }
        merged.update({k: v for k, v in update_data.items() if v is not None})
        try:
            validated = MCQCreate.model_validate(merged)
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]) or "body", "message": err["msg"]}
                for err in e.errors()
            ]
            raise DomainValidationError("Validation failed", errors=errors)

        for field, value in validated.model_dump(mode="json").items():
            setattr(mcq, field, value)
        self.db.commit()
        self.db.refresh(mcq)
        return mcq

    def delete_mcq(self, mcq_id: int) -> None:
        mcq = self.get_mcq(mcq_id)
        self.db.query(Bookmark).filter(Bookmark.mcq_id == mcq_id).delete(synchronize_session=False)
        self.db.query(MCQAttempt).filter(MCQAttempt.mcq_id == mcq_id).delete(synchronize_session=False)
        self.db.query(Discussion).filter(Discussion.related_mcq_id == mcq_id).update(
            {Discussion.related_mcq_id: None}, synchronize_session=False
        )
        for mock_test in self.db.query(MockTest).all():
            if mcq_id in (mock_test.question_ids or []):
                mock_test.question_ids = [qid for qid in mock_test.question_ids if qid != mcq_id]
        self.db.delete(mcq)
        self.db.commit()
        logger.info(f"Deleted MCQ {mcq_id}")

    def submit_practice_answer(self, mcq_id: int, user, answer: PracticeAnswerRequest) -> PracticeAnswerResult:
        """Record a practice answer. Repeating it updates the single practice attempt."""
        mcq = self.get_mcq(mcq_id)
        ensure_access(mcq, user, "MCQ")
        if answer.selected_answer >= len(mcq.options):
            raise DomainValidationError(
                "Validation failed",
                errors=[{"field": "selectedAnswer", "message": "Selected answer index is out of range"}],
            )

        is_correct = answer.selected_answer == mcq.correct_answer
        try:
            attempt = self._practice_attempt(user.id, mcq_id)
            if attempt:
                attempt.selected_answer = answer.selected_answer
                attempt.is_correct = is_correct
                attempt.time_spent = answer.time_spent
            else:
                self.db.add(MCQAttempt(
                    user_id=user.id,
                    mcq_id=mcq_id,
                    selected_answer=answer.selected_answer,
                    is_correct=is_correct,
                    time_spent=answer.time_spent,
                    mock_test_id=None,
                    attempt_type=AttemptType.PRACTICE.value,
                ))
            self.statistics.record_question_attempt(mcq_id, is_correct, answer.time_spent)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Practice attempt already recorded for this MCQ")

        self.db.refresh(mcq)
        return PracticeAnswerResult(
            is_correct=is_correct,
            correct_answer=mcq.correct_answer,
            explanation=mcq.explanation,
            references=mcq.references or [],
        )

    def add_bookmark(self, mcq_id: int, user, notes: Optional[str] = "") -> Bookmark:
        self.get_mcq(mcq_id)
        existing = (
            self.db.query(Bookmark)
            .filter(Bookmark.user_id == user.id, Bookmark.mcq_id == mcq_id)
            .first()
        )
        if existing:
            raise ConflictError("MCQ already bookmarked")

        bookmark = Bookmark(user_id=user.id, mcq_id=mcq_id, notes=notes or "")
        self.db.add(bookmark)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("MCQ already bookmarked")
        self.db.refresh(bookmark)
        return bookmark

    def remove_bookmark(self, mcq_id: int, user) -> None:
        deleted = (
            self.db.query(Bookmark)
            .filter(Bookmark.user_id == user.id, Bookmark.mcq_id == mcq_id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise NotFoundError("Bookmark not found")
        self.db.commit()

    def list_bookmarks(self, user, page: int, limit: int):
        query = (
            self.db.query(Bookmark)
            .options(joinedload(Bookmark.mcq))
            .filter(Bookmark.user_id == user.id)
            .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        )
        return paginate(query, page, limit)
