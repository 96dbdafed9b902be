from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from .base import BaseModel
from .enums import SubscriptionType


class User(BaseModel):
    __tablename__ = "users"

    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_superuser = Column(Boolean(), default=False)
    is_active = Column(Boolean(), default=True)
    last_login = Column(DateTime, nullable=True)

    subscription_type = Column(String, default=SubscriptionType.FREE.value, nullable=False)
    # None together with a premium tier means a lifetime subscription
    subscription_expires_at = Column(DateTime, nullable=True)

    # Profile
    phone = Column(String, nullable=True)
    college = Column(String, nullable=True)
    year_of_study = Column(String, nullable=True)
    target_exam = Column(String, nullable=True)
    avatar = Column(String, nullable=True)

    mcq_attempts = relationship("MCQAttempt", back_populates="user", cascade="all, delete-orphan")
    mock_test_attempts = relationship("MockTestAttempt", back_populates="user", cascade="all, delete-orphan")
    bookmarks = relationship("Bookmark", back_populates="user", cascade="all, delete-orphan")

    @property
    def profile_data(self) -> dict:
        return {
            "phone": self.phone,
            "college": self.college,
            "yearOfStudy": self.year_of_study,
            "targetExam": self.target_exam,
            "avatar": self.avatar,
        }
