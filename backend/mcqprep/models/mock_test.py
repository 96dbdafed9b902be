from sqlalchemy import Column, String, Text, Boolean, Integer, Float, ForeignKey, JSON, DateTime, Index
from sqlalchemy.orm import relationship, validates
from .base import BaseModel
from .enums import TestCategory, TestDifficulty


class MockTest(BaseModel):
    __tablename__ = "mock_tests"

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)
    # Ordered MCQ ids; total_questions follows the list length
    question_ids = Column(JSON, nullable=False, default=list)
    total_questions = Column(Integer, nullable=False, default=0)
    passing_score = Column(Integer, default=60)
    is_premium = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True, index=True)
    scheduled_at = Column(DateTime, nullable=True, index=True)
    category = Column(String, default=TestCategory.MIXED.value)
    topics = Column(JSON, default=list)
    difficulty = Column(String, default=TestDifficulty.MIXED.value)
    instructions = Column(JSON, default=list)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Running statistics, maintained by the statistics service
    total_attempts = Column(Integer, default=0, nullable=False)
    average_score = Column(Float, default=0.0, nullable=False)
    highest_score = Column(Float, default=0.0, nullable=False)
    lowest_score = Column(Float, default=100.0, nullable=False)

    attempts = relationship("MockTestAttempt", back_populates="mock_test", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_mock_tests_category_premium", "category", "is_premium"),
    )

    @validates("question_ids")
    def _sync_total_questions(self, key, question_ids):
        question_ids = list(question_ids or [])
        self.total_questions = len(question_ids)
        return question_ids
