from sqlalchemy import Column, String, Text, Boolean, Integer, Float, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from .base import BaseModel


class MCQ(BaseModel):
    __tablename__ = "mcqs"

    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)
    correct_answer = Column(Integer, nullable=False)
    explanation = Column(Text, nullable=False)
    topic = Column(String, nullable=False)
    difficulty = Column(String, nullable=False)
    references = Column(JSON, default=list)
    tags = Column(JSON, default=list)
    is_premium = Column(Boolean, default=False, index=True)
    is_active = Column(Boolean, default=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Running statistics, maintained by the statistics service
    total_attempts = Column(Integer, default=0, nullable=False)
    correct_attempts = Column(Integer, default=0, nullable=False)
    average_time = Column(Float, default=0.0, nullable=False)

    creator = relationship("User")

    __table_args__ = (
        Index("ix_mcqs_topic_difficulty", "topic", "difficulty"),
    )

    @property
    def success_rate(self) -> float:
        from ..services.statistics_service import success_rate

        return success_rate(self.total_attempts or 0, self.correct_attempts or 0)
