from sqlalchemy import Column, String, Boolean, Integer, Float, ForeignKey, JSON, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel
from .enums import AttemptType


class MCQAttempt(BaseModel):
    __tablename__ = "mcq_attempts"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    mcq_id = Column(Integer, ForeignKey("mcqs.id", ondelete="CASCADE"), nullable=False)
    selected_answer = Column(Integer, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    time_spent = Column(Integer, default=0)
    mock_test_id = Column(Integer, ForeignKey("mock_tests.id", ondelete="CASCADE"), nullable=True)
    attempt_type = Column(String, default=AttemptType.PRACTICE.value, nullable=False)

    user = relationship("User", back_populates="mcq_attempts")
    mcq = relationship("MCQ")

    __table_args__ = (
        UniqueConstraint("user_id", "mcq_id", "mock_test_id", name="uq_mcq_attempt_user_mcq_test"),
        # NULL mock_test_id is never equal to itself, so practice attempts need a partial index
        Index(
            "uq_mcq_attempt_practice",
            "user_id",
            "mcq_id",
            unique=True,
            postgresql_where=mock_test_id.is_(None),
            sqlite_where=mock_test_id.is_(None),
        ),
        Index("ix_mcq_attempts_user_type", "user_id", "attempt_type"),
        Index("ix_mcq_attempts_user_correct", "user_id", "is_correct"),
    )


class MockTestAttempt(BaseModel):
    __tablename__ = "mock_test_attempts"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    mock_test_id = Column(Integer, ForeignKey("mock_tests.id", ondelete="CASCADE"), nullable=False)
    # [{mcq, selectedAnswer, isCorrect, timeSpent}] in submission order
    answers = Column(JSON, nullable=False, default=list)
    score = Column(Float, nullable=False)
    total_questions = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=False)
    wrong_answers = Column(Integer, nullable=False)
    unanswered = Column(Integer, default=0)
    total_time_spent = Column(Integer, nullable=False)
    started_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=False)
    is_completed = Column(Boolean, default=True)
    rank = Column(Integer, nullable=True)
    submission_id = Column(String, nullable=True)

    user = relationship("User", back_populates="mock_test_attempts")
    mock_test = relationship("MockTest", back_populates="attempts")

    __table_args__ = (
        UniqueConstraint("user_id", "submission_id", name="uq_mock_test_attempt_submission"),
        UniqueConstraint("user_id", "mock_test_id", name="uq_mock_test_attempt_user_test"),
        Index("ix_mock_test_attempts_test_score", "mock_test_id", "score"),
    )
