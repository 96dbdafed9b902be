from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Dict, Any, Tuple
import math
import logging

from ..models.mcq import MCQ
from ..models.mock_test import MockTest
from ..models.attempt import MCQAttempt, MockTestAttempt
from ..models.enums import AttemptType
from ..schemas.mcq import SafeQuestion
from ..schemas.mock_test import (
    MockTestCreate,
    MockTestUpdate,
    SessionView,
    SessionTestMeta,
    SubmitTestRequest,
    SubmitTestResult,
)
from ..core.exceptions import NotFoundError, ConflictError, DomainValidationError
from ..utils.pagination import apply_sort, paginate
from ..utils.timezone import utc_now, to_naive_utc
from .access_control import restrict_to_free, ensure_access, deliverable_questions
from .statistics_service import StatisticsService
from .ranking_service import RankingService

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "createdAt": MockTest.created_at,
    "title": MockTest.title,
    "duration": MockTest.duration,
    "totalQuestions": MockTest.total_questions,
    "scheduledAt": MockTest.scheduled_at,
}


def compute_score(correct: int, total_questions: int) -> float:
    """Percentage of correct answers rounded half-up to two decimals; 0 for an empty test"""
    if total_questions <= 0:
        return 0.0
    percentage = Decimal(correct) * 100 / Decimal(total_questions)
    return float(percentage.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def grade_answers(questions: List[MCQ], answers) -> Tuple[int, int, List[Dict[str, Any]]]:
    """Grade submitted answers against the delivered questions.

    Answers for questions outside the list are skipped, as is any second
    answer to a question already graded in the same submission.
    Returns (correct, wrong, processed answers in submission order).
    """
    by_id = {question.id: question for question in questions}
    seen = set()
    correct = wrong = 0
    processed = []
    for answer in answers:
        question = by_id.get(answer.mcq)
        if question is None or answer.mcq in seen:
            continue
        seen.add(answer.mcq)
        is_correct = answer.selected_answer == question.correct_answer
        if is_correct:
            correct += 1
        else:
            wrong += 1
        processed.append({
            "mcq": question.id,
            "selectedAnswer": answer.selected_answer,
            "isCorrect": is_correct,
            "timeSpent": answer.time_spent or 0,
        })
    return correct, wrong, processed


class MockTestService:
    def __init__(self, db: Session):
        self.db = db
        self.statistics = StatisticsService(db)
        self.ranking = RankingService(db)

    def get_mock_test(self, mock_test_id: int) -> MockTest:
        mock_test = self.db.query(MockTest).filter(MockTest.id == mock_test_id).first()
        if not mock_test:
            raise NotFoundError("Mock test not found")
        return mock_test

    def resolve_questions(self, mock_test: MockTest) -> List[MCQ]:
        """Load the test's questions in test order; every referenced question must exist"""
        question_ids = list(mock_test.question_ids or [])
        if not question_ids:
            return []
        found = {q.id: q for q in self.db.query(MCQ).filter(MCQ.id.in_(question_ids)).all()}
        missing = [qid for qid in question_ids if qid not in found]
        if missing:
            logger.warning(f"Mock test {mock_test.id} references missing questions {missing}")
            raise NotFoundError("Question not found")
        return [found[qid] for qid in question_ids]

    def list_mock_tests(
        self,
        user,
        page: int,
        limit: int,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
        sort: Optional[str] = None,
    ):
        query = self.db.query(MockTest).filter(MockTest.is_active.is_(True))
        query = restrict_to_free(query, MockTest, user)
        if category:
            query = query.filter(MockTest.category == category)
        if difficulty:
            query = query.filter(MockTest.difficulty == difficulty)
        query = apply_sort(query, sort, SORTABLE_FIELDS, [MockTest.created_at.desc(), MockTest.id.desc()])
        return paginate(query, page, limit)

    def get_mock_test_for_user(self, mock_test_id: int, user) -> Tuple[MockTest, List[MockTestAttempt]]:
        mock_test = self.get_mock_test(mock_test_id)
        ensure_access(mock_test, user, "mock test")
        attempts = []
        if user is not None:
            attempts = (
                self.db.query(MockTestAttempt)
                .filter(
                    MockTestAttempt.user_id == user.id,
                    MockTestAttempt.mock_test_id == mock_test_id,
                )
                .order_by(MockTestAttempt.completed_at.desc())
                .all()
            )
        return mock_test, attempts

    def _check_question_ids(self, question_ids: List[int]) -> None:
        found = {
            row[0] for row in self.db.query(MCQ.id).filter(MCQ.id.in_(question_ids)).all()
        }
        missing = [qid for qid in question_ids if qid not in found]
        if missing:
            raise DomainValidationError(
                "Validation failed",
                errors=[{"field": "questions", "message": f"Unknown question ids: {missing}"}],
            )
        if len(set(question_ids)) != len(question_ids):
            raise DomainValidationError(
                "Validation failed",
                errors=[{"field": "questions", "message": "Question ids must be unique"}],
            )

    def create_mock_test(self, data: MockTestCreate, creator_id: Optional[int] = None) -> MockTest:
        self._check_question_ids(data.questions)
        values = data.model_dump(mode="json", exclude={"questions", "scheduled_at"})
        mock_test = MockTest(
            **values,
            scheduled_at=to_naive_utc(data.scheduled_at) if data.scheduled_at else None,
            question_ids=data.questions,
            created_by=creator_id,
        )
        self.db.add(mock_test)
        self.db.commit()
        self.db.refresh(mock_test)
        logger.info(f"Created mock test {mock_test.id} with {mock_test.total_questions} questions")
        return mock_test

    def update_mock_test(self, mock_test_id: int, data: MockTestUpdate) -> MockTest:
        mock_test = self.get_mock_test(mock_test_id)
        update_data = data.model_dump(mode="json", exclude_unset=True)

        if "questions" in update_data:
            questions = update_data.pop("questions")
            if questions is None:
                raise DomainValidationError(
                    "Validation failed",
                    errors=[{"field": "questions", "message": "Questions cannot be empty"}],
                )
            self._check_question_ids(questions)
            mock_test.question_ids = questions
        if "scheduled_at" in update_data:
            update_data.pop("scheduled_at")
            mock_test.scheduled_at = to_naive_utc(data.scheduled_at) if data.scheduled_at else None

        for field, value in update_data.items():
            # Only the description may be cleared
            if value is None and field != "description":
                continue
            setattr(mock_test, field, value)

        self.db.commit()
        self.db.refresh(mock_test)
        return mock_test

    def delete_mock_test(self, mock_test_id: int) -> None:
        mock_test = self.get_mock_test(mock_test_id)
        self.db.query(MCQAttempt).filter(MCQAttempt.mock_test_id == mock_test_id).delete(synchronize_session=False)
        self.db.delete(mock_test)
        self.db.commit()
        self.ranking.invalidate_leaderboard(mock_test_id)
        logger.info(f"Deleted mock test {mock_test_id}")

    def start_session(self, mock_test_id: int, user) -> SessionView:
        """Build the answer-free view of a test for the caller. Nothing is persisted."""
        mock_test = self.get_mock_test(mock_test_id)
        ensure_access(mock_test, user, "mock test")
        questions = self.resolve_questions(mock_test)

        delivered = deliverable_questions(questions, user)
        return SessionView(
            mock_test=SessionTestMeta(
                id=mock_test.id,
                title=mock_test.title,
                description=mock_test.description,
                duration=mock_test.duration,
                total_questions=len(delivered),
                instructions=mock_test.instructions or [],
            ),
            questions=[
                SafeQuestion(
                    id=q.id,
                    question=q.question,
                    options=q.options,
                    topic=q.topic,
                    difficulty=q.difficulty,
                )
                for q in delivered
            ],
            start_time=utc_now(),
        )

    def _find_submission(self, user, submission_id: Optional[str]) -> Optional[MockTestAttempt]:
        if not submission_id:
            return None
        return (
            self.db.query(MockTestAttempt)
            .filter(
                MockTestAttempt.user_id == user.id,
                MockTestAttempt.submission_id == submission_id,
            )
            .first()
        )

    @staticmethod
    def _result_of(attempt: MockTestAttempt) -> SubmitTestResult:
        return SubmitTestResult(
            attempt_id=attempt.id,
            score=attempt.score,
            rank=attempt.rank,
            correct_answers=attempt.correct_answers,
            wrong_answers=attempt.wrong_answers,
            unanswered=attempt.unanswered,
            total_time_spent=attempt.total_time_spent,
        )

    def submit(self, mock_test_id: int, user, request: SubmitTestRequest) -> SubmitTestResult:
        """Grade a submission, record it with its rank and update statistics in one transaction."""
        mock_test = self.get_mock_test(mock_test_id)
        previous = self._find_submission(user, request.submission_id)
        if previous is not None:
            if previous.mock_test_id != mock_test_id:
                raise ConflictError("Submission id already used for another mock test")
            logger.info(f"Replayed submission {request.submission_id} for user {user.id}")
            return self._result_of(previous)

        ensure_access(mock_test, user, "mock test")
        questions = self.resolve_questions(mock_test)
        delivered = deliverable_questions(questions, user)

        started_at = to_naive_utc(request.start_time)
        completed_at = to_naive_utc(request.end_time) if request.end_time else utc_now()
        if completed_at < started_at:
            raise DomainValidationError(
                "Validation failed",
                errors=[{"field": "endTime", "message": "End time must not be before start time"}],
            )

        # One attempt per user and test; per-question rows are unique on (user, mcq, test)
        already_taken = (
            self.db.query(MockTestAttempt.id)
            .filter(
                MockTestAttempt.user_id == user.id,
                MockTestAttempt.mock_test_id == mock_test_id,
            )
            .first()
        )
        if already_taken:
            raise ConflictError("Mock test already submitted")

        total_time_spent = math.floor((completed_at - started_at).total_seconds())
        correct, wrong, processed = grade_answers(delivered, request.answers)
        total_questions = len(delivered)
        unanswered = max(0, total_questions - len(request.answers))
        score = compute_score(correct, total_questions)

        try:
            for answer in processed:
                self.db.add(MCQAttempt(
                    user_id=user.id,
                    mcq_id=answer["mcq"],
                    selected_answer=answer["selectedAnswer"],
                    is_correct=answer["isCorrect"],
                    time_spent=answer["timeSpent"],
                    mock_test_id=mock_test_id,
                    attempt_type=AttemptType.MOCK_TEST.value,
                ))
                self.statistics.record_question_attempt(answer["mcq"], answer["isCorrect"], answer["timeSpent"])

            attempt = MockTestAttempt(
                user_id=user.id,
                mock_test_id=mock_test_id,
                answers=processed,
                score=score,
                total_questions=total_questions,
                correct_answers=correct,
                wrong_answers=wrong,
                unanswered=unanswered,
                total_time_spent=total_time_spent,
                started_at=started_at,
                completed_at=completed_at,
                is_completed=True,
                submission_id=request.submission_id,
            )
            self.db.add(attempt)
            self.db.flush()

            self.ranking.compute_rank(attempt)
            self.statistics.record_test_score(mock_test_id, score)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Conflicting submission for mock test {mock_test_id} by user {user.id}")
            raise ConflictError("Mock test already submitted")

        self.ranking.invalidate_leaderboard(mock_test_id)
        logger.info(
            f"User {user.id} submitted mock test {mock_test_id}: "
            f"score={score} rank={attempt.rank} correct={correct} wrong={wrong} unanswered={unanswered}"
        )
        return self._result_of(attempt)

    def get_results(self, mock_test_id: int, attempt_id: int, user) -> Dict[str, Any]:
        """The caller's own attempt with every answered question revealed"""
        attempt = (
            self.db.query(MockTestAttempt)
            .filter(
                MockTestAttempt.id == attempt_id,
                MockTestAttempt.mock_test_id == mock_test_id,
                MockTestAttempt.user_id == user.id,
            )
            .first()
        )
        if not attempt:
            raise NotFoundError("Mock test attempt not found")

        mcq_ids = [answer["mcq"] for answer in attempt.answers or []]
        mcqs = {m.id: m for m in self.db.query(MCQ).filter(MCQ.id.in_(mcq_ids)).all()} if mcq_ids else {}
        review = []
        for answer in attempt.answers or []:
            mcq = mcqs.get(answer["mcq"])
            review.append({
                **answer,
                "mcq": {
                    "id": mcq.id,
                    "question": mcq.question,
                    "options": mcq.options,
                    "correctAnswer": mcq.correct_answer,
                    "explanation": mcq.explanation,
                    "references": mcq.references or [],
                    "topic": mcq.topic,
                    "difficulty": mcq.difficulty,
                } if mcq else None,
            })

        mock_test = attempt.mock_test
        return {
            "id": attempt.id,
            "mockTest": {
                "id": mock_test.id,
                "title": mock_test.title,
                "description": mock_test.description,
                "totalQuestions": mock_test.total_questions,
                "passingScore": mock_test.passing_score,
            },
            "answers": review,
            "score": attempt.score,
            "passed": attempt.score >= mock_test.passing_score,
            "totalQuestions": attempt.total_questions,
            "correctAnswers": attempt.correct_answers,
            "wrongAnswers": attempt.wrong_answers,
            "unanswered": attempt.unanswered,
            "totalTimeSpent": attempt.total_time_spent,
            "startedAt": attempt.started_at,
            "completedAt": attempt.completed_at,
            "rank": attempt.rank,
        }

    def get_leaderboard(self, mock_test_id: int, limit: int = 10) -> List[Dict[str, Any]]:
        return self.ranking.get_leaderboard(mock_test_id, limit)
