from sqlalchemy import Column, String, Text, Boolean, Integer, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from .base import BaseModel
from .enums import DiscussionCategory


class Discussion(BaseModel):
    __tablename__ = "discussions"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String, default=DiscussionCategory.DOUBT.value)
    topic = Column(String, nullable=True)
    related_mcq_id = Column(Integer, ForeignKey("mcqs.id", ondelete="SET NULL"), nullable=True)
    is_resolved = Column(Boolean, default=False)
    is_pinned = Column(Boolean, default=False)
    views = Column(Integer, default=0, nullable=False)

    user = relationship("User")
    related_mcq = relationship("MCQ")
    replies = relationship(
        "DiscussionReply",
        back_populates="discussion",
        order_by="DiscussionReply.id",
        cascade="all, delete-orphan",
    )
    likes = relationship("DiscussionLike", back_populates="discussion", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_discussions_category_topic", "category", "topic"),
        Index("ix_discussions_user", "user_id"),
    )

    @property
    def reply_count(self) -> int:
        return len(self.replies)

    @property
    def like_count(self) -> int:
        return len(self.likes)


class DiscussionReply(BaseModel):
    __tablename__ = "discussion_replies"

    discussion_id = Column(Integer, ForeignKey("discussions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_expert_reply = Column(Boolean, default=False)

    discussion = relationship("Discussion", back_populates="replies")
    user = relationship("User")


class DiscussionLike(BaseModel):
    __tablename__ = "discussion_likes"

    discussion_id = Column(Integer, ForeignKey("discussions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    discussion = relationship("Discussion", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("discussion_id", "user_id", name="uq_discussion_like"),
    )
