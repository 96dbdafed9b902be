from .auth import Token, RefreshTokenRequest
from .common import CamelModel, success_response
from .user import User, UserCreate, UserUpdate, UserSummary, ProfileData
from .mcq import MCQ, MCQCreate, MCQUpdate, SafeQuestion, PracticeAnswerRequest, PracticeAnswerResult
from .mock_test import MockTest, MockTestCreate, MockTestUpdate, SessionView, SubmitTestRequest, SubmitTestResult

__all__ = [
    "Token",
    "RefreshTokenRequest",
    "CamelModel",
    "success_response",
    "User",
    "UserCreate",
    "UserUpdate",
    "UserSummary",
    "ProfileData",
    "MCQ",
    "MCQCreate",
    "MCQUpdate",
    "SafeQuestion",
    "PracticeAnswerRequest",
    "PracticeAnswerResult",
    "MockTest",
    "MockTestCreate",
    "MockTestUpdate",
    "SessionView",
    "SubmitTestRequest",
    "SubmitTestResult",
]
