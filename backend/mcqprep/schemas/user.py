from pydantic import EmailStr, Field
from datetime import datetime
from typing import Optional

from .common import CamelModel
from ..models.enums import SubscriptionType, TargetExam


class ProfileData(CamelModel):
    phone: Optional[str] = None
    college: Optional[str] = None
    year_of_study: Optional[str] = None
    target_exam: Optional[TargetExam] = None
    avatar: Optional[str] = None


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    profile_data: Optional[ProfileData] = None


class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    profile_data: Optional[ProfileData] = None


class User(CamelModel):
    id: int
    name: str
    email: EmailStr
    subscription_type: SubscriptionType
    subscription_expires_at: Optional[datetime] = None
    is_superuser: bool = False
    profile_data: ProfileData
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UserSummary(CamelModel):
    """Public projection used on leaderboards and discussion threads"""
    id: int
    name: str
    college: Optional[str] = None

    @classmethod
    def from_model(cls, user) -> "UserSummary":
        return cls(id=user.id, name=user.name, college=user.college)
