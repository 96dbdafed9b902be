from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel


class Bookmark(BaseModel):
    __tablename__ = "bookmarks"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    mcq_id = Column(Integer, ForeignKey("mcqs.id", ondelete="CASCADE"), nullable=False)
    notes = Column(String(500), default="")

    user = relationship("User", back_populates="bookmarks")
    mcq = relationship("MCQ")

    __table_args__ = (
        UniqueConstraint("user_id", "mcq_id", name="uq_bookmark_user_mcq"),
    )
