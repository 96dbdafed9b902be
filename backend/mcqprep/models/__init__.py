from .base import BaseModel
from .user import User
from .mcq import MCQ
from .mock_test import MockTest
from .attempt import MCQAttempt, MockTestAttempt
from .bookmark import Bookmark
from .discussion import Discussion, DiscussionReply, DiscussionLike

__all__ = [
    "BaseModel",
    "User",
    "MCQ",
    "MockTest",
    "MCQAttempt",
    "MockTestAttempt",
    "Bookmark",
    "Discussion",
    "DiscussionReply",
    "DiscussionLike",
]
