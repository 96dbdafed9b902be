from pydantic import Field
from datetime import datetime
from typing import List, Optional

from .common import CamelModel
from .user import UserSummary
from ..models.enums import DiscussionCategory, Topic


class DiscussionCreate(CamelModel):
    title: str = Field(..., min_length=5, max_length=200)
    content: str = Field(..., min_length=10)
    category: DiscussionCategory = DiscussionCategory.DOUBT
    topic: Optional[Topic] = None
    related_mcq: Optional[int] = None


class DiscussionUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    content: Optional[str] = Field(None, min_length=10)
    category: Optional[DiscussionCategory] = None
    topic: Optional[Topic] = None
    is_resolved: Optional[bool] = None


class ReplyCreate(CamelModel):
    content: str = Field(..., min_length=5)
    is_expert_reply: bool = False


class Reply(CamelModel):
    id: int
    user: UserSummary
    content: str
    is_expert_reply: bool = False
    created_at: Optional[datetime] = None


class Discussion(CamelModel):
    id: int
    user: UserSummary
    title: str
    content: str
    category: DiscussionCategory
    topic: Optional[Topic] = None
    related_mcq: Optional[int] = None
    is_resolved: bool = False
    is_pinned: bool = False
    views: int = 0
    reply_count: int = 0
    like_count: int = 0
    replies: Optional[List[Reply]] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, discussion, include_replies: bool = False) -> "Discussion":
        return cls(
            id=discussion.id,
            user=UserSummary.from_model(discussion.user),
            title=discussion.title,
            content=discussion.content,
            category=discussion.category,
            topic=discussion.topic,
            related_mcq=discussion.related_mcq_id,
            is_resolved=bool(discussion.is_resolved),
            is_pinned=bool(discussion.is_pinned),
            views=discussion.views,
            reply_count=discussion.reply_count,
            like_count=discussion.like_count,
            replies=[reply_from_model(r) for r in discussion.replies] if include_replies else None,
            created_at=discussion.created_at,
        )


def reply_from_model(reply) -> Reply:
    return Reply(
        id=reply.id,
        user=UserSummary.from_model(reply.user),
        content=reply.content,
        is_expert_reply=bool(reply.is_expert_reply),
        created_at=reply.created_at,
    )
