from pydantic import Field
from datetime import datetime
from typing import List, Optional

from .common import CamelModel
from .mcq import SafeQuestion
from .user import UserSummary
from ..models.enums import TestCategory, TestDifficulty


class MockTestCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    duration: int = Field(..., ge=1)
    questions: List[int] = Field(..., min_length=1)
    passing_score: int = Field(60, ge=0, le=100)
    is_premium: bool = False
    is_active: bool = True
    scheduled_at: Optional[datetime] = None
    category: TestCategory = TestCategory.MIXED
    topics: List[str] = []
    difficulty: TestDifficulty = TestDifficulty.MIXED
    instructions: List[str] = []


class MockTestUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    questions: Optional[List[int]] = Field(None, min_length=1)
    passing_score: Optional[int] = Field(None, ge=0, le=100)
    is_premium: Optional[bool] = None
    is_active: Optional[bool] = None
    scheduled_at: Optional[datetime] = None
    category: Optional[TestCategory] = None
    topics: Optional[List[str]] = None
    difficulty: Optional[TestDifficulty] = None
    instructions: Optional[List[str]] = None


class MockTestStatistics(CamelModel):
    total_attempts: int = 0
    average_score: float = 0.0
    highest_score: float = 0.0
    lowest_score: float = 100.0


class MockTest(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    duration: int
    total_questions: int
    passing_score: int
    is_premium: bool
    is_active: bool
    scheduled_at: Optional[datetime] = None
    category: TestCategory
    topics: List[str] = []
    difficulty: TestDifficulty
    instructions: List[str] = []
    statistics: MockTestStatistics
    questions: Optional[List[int]] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, mock_test, include_questions: bool = True) -> "MockTest":
        return cls(
            id=mock_test.id,
            title=mock_test.title,
            description=mock_test.description,
            duration=mock_test.duration,
            total_questions=mock_test.total_questions,
            passing_score=mock_test.passing_score,
            is_premium=bool(mock_test.is_premium),
            is_active=bool(mock_test.is_active),
            scheduled_at=mock_test.scheduled_at,
            category=mock_test.category,
            topics=mock_test.topics or [],
            difficulty=mock_test.difficulty,
            instructions=mock_test.instructions or [],
            statistics=MockTestStatistics(
                total_attempts=mock_test.total_attempts,
                average_score=mock_test.average_score,
                highest_score=mock_test.highest_score,
                lowest_score=mock_test.lowest_score,
            ),
            questions=list(mock_test.question_ids) if include_questions else None,
            created_at=mock_test.created_at,
        )


class SessionTestMeta(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    duration: int
    total_questions: int
    instructions: List[str] = []


class SessionView(CamelModel):
    mock_test: SessionTestMeta
    questions: List[SafeQuestion]
    start_time: datetime


class AnswerSubmission(CamelModel):
    mcq: int
    selected_answer: int = Field(..., ge=0)
    time_spent: int = Field(0, ge=0)


class SubmitTestRequest(CamelModel):
    answers: List[AnswerSubmission]
    start_time: datetime
    end_time: Optional[datetime] = None
    submission_id: Optional[str] = Field(None, min_length=1, max_length=64)


class ProcessedAnswer(CamelModel):
    mcq: int
    selected_answer: int
    is_correct: bool
    time_spent: int = 0


class SubmitTestResult(CamelModel):
    attempt_id: int
    score: float
    rank: Optional[int] = None
    correct_answers: int
    wrong_answers: int
    unanswered: int
    total_time_spent: int


class MockTestAttempt(CamelModel):
    id: int
    mock_test_id: int
    answers: List[ProcessedAnswer] = []
    score: float
    total_questions: int
    correct_answers: int
    wrong_answers: int
    unanswered: int
    total_time_spent: int
    started_at: datetime
    completed_at: datetime
    is_completed: bool = True
    rank: Optional[int] = None


class LeaderboardEntry(CamelModel):
    user: UserSummary
    score: float
    completed_at: datetime
    rank: Optional[int] = None
