from pydantic import Field, model_validator
from datetime import datetime
from typing import List, Optional

from .common import CamelModel
from ..models.enums import Topic, Difficulty


class Reference(CamelModel):
    book: Optional[str] = None
    chapter: Optional[str] = None
    page: Optional[str] = None


class MCQCreate(CamelModel):
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2, max_length=6)
    correct_answer: int = Field(..., ge=0)
    explanation: str = Field(..., min_length=1)
    topic: Topic
    difficulty: Difficulty
    references: List[Reference] = []
    tags: List[str] = []
    is_premium: bool = False
    is_active: bool = True

    @model_validator(mode="after")
    def check_correct_answer(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("Correct answer index must be valid")
        return self


class MCQUpdate(CamelModel):
    question: Optional[str] = Field(None, min_length=1)
    options: Optional[List[str]] = Field(None, min_length=2, max_length=6)
    correct_answer: Optional[int] = Field(None, ge=0)
    explanation: Optional[str] = Field(None, min_length=1)
    topic: Optional[Topic] = None
    difficulty: Optional[Difficulty] = None
    references: Optional[List[Reference]] = None
    tags: Optional[List[str]] = None
    is_premium: Optional[bool] = None
    is_active: Optional[bool] = None


class MCQStatistics(CamelModel):
    total_attempts: int = 0
    correct_attempts: int = 0
    average_time: float = 0.0


class MCQ(CamelModel):
    id: int
    question: str
    options: List[str]
    correct_answer: int
    explanation: str
    topic: Topic
    difficulty: Difficulty
    references: List[Reference] = []
    tags: List[str] = []
    is_premium: bool
    is_active: bool
    statistics: MCQStatistics
    success_rate: float
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, mcq) -> "MCQ":
        return cls(
            id=mcq.id,
            question=mcq.question,
            options=mcq.options,
            correct_answer=mcq.correct_answer,
            explanation=mcq.explanation,
            topic=mcq.topic,
            difficulty=mcq.difficulty,
            references=mcq.references or [],
            tags=mcq.tags or [],
            is_premium=bool(mcq.is_premium),
            is_active=bool(mcq.is_active),
            statistics=MCQStatistics(
                total_attempts=mcq.total_attempts,
                correct_attempts=mcq.correct_attempts,
                average_time=mcq.average_time,
            ),
            success_rate=mcq.success_rate,
            created_at=mcq.created_at,
        )


class SafeQuestion(CamelModel):
    """Question as delivered during a test: no answer, explanation or references"""
    id: int
    question: str
    options: List[str]
    topic: Topic
    difficulty: Difficulty


class PracticeAnswerRequest(CamelModel):
    selected_answer: int = Field(..., ge=0)
    time_spent: int = Field(0, ge=0)


class PracticeAnswerResult(CamelModel):
    is_correct: bool
    correct_answer: int
    explanation: str
    references: List[Reference] = []


class PracticeAttempt(CamelModel):
    id: int
    mcq_id: int
    selected_answer: int
    is_correct: bool
    time_spent: int
    attempt_type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookmarkCreate(CamelModel):
    notes: Optional[str] = Field("", max_length=500)


class Bookmark(CamelModel):
    id: int
    mcq_id: int
    notes: Optional[str] = ""
    created_at: Optional[datetime] = None
