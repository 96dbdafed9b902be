from sqlalchemy.orm import Session, selectinload, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import update
from typing import Optional
import logging

from ..models.discussion import Discussion, DiscussionReply, DiscussionLike
from ..models.mcq import MCQ
from ..schemas.discussion import DiscussionCreate, DiscussionUpdate, ReplyCreate
from ..core.exceptions import NotFoundError, ConflictError, UnauthorizedError, DomainValidationError
from ..utils.pagination import apply_sort, paginate

logger = logging.getLogger(__name__)

GROUP_LINKS = {
    "whatsapp": {
        "general": "https://chat.whatsapp.com/general-surgery-group",
        "neetss": "https://chat.whatsapp.com/neet-ss-surgery-group",
        "iniss": "https://chat.whatsapp.com/ini-ss-surgery-group",
    },
    "telegram": {
        "general": "https://t.me/mcqsurgery_general",
        "neetss": "https://t.me/mcqsurgery_neetss",
        "iniss": "https://t.me/mcqsurgery_iniss",
    },
}

SORTABLE_FIELDS = {
    "createdAt": Discussion.created_at,
    "views": Discussion.views,
    "title": Discussion.title,
    "isPinned": Discussion.is_pinned,
}


class DiscussionService:
    def __init__(self, db: Session):
        self.db = db

    def _load(self, discussion_id: int) -> Discussion:
        discussion = (
            self.db.query(Discussion)
            .options(
                joinedload(Discussion.user),
                selectinload(Discussion.replies).joinedload(DiscussionReply.user),
                selectinload(Discussion.likes),
            )
            .filter(Discussion.id == discussion_id)
            .first()
        )
        if not discussion:
            raise NotFoundError("Discussion not found")
        return discussion

    def _check_owner(self, discussion: Discussion, user) -> None:
        if discussion.user_id != user.id:
            raise UnauthorizedError("Not authorized to modify this discussion")

    def _check_related_mcq(self, mcq_id: Optional[int]) -> None:
        if mcq_id is not None and not self.db.query(MCQ.id).filter(MCQ.id == mcq_id).first():
            raise DomainValidationError(
                "Validation failed",
                errors=[{"field": "relatedMcq", "message": "Related MCQ does not exist"}],
            )

    def list_discussions(
        self,
        page: int,
        limit: int,
        category: Optional[str] = None,
        topic: Optional[str] = None,
        sort: Optional[str] = None,
    ):
        query = self.db.query(Discussion).options(
            joinedload(Discussion.user),
            selectinload(Discussion.replies),
            selectinload(Discussion.likes),
        )
        if category:
            query = query.filter(Discussion.category == category)
        if topic:
            query = query.filter(Discussion.topic == topic)
        query = apply_sort(
            query,
            sort,
            SORTABLE_FIELDS,
            [Discussion.is_pinned.desc(), Discussion.created_at.desc(), Discussion.id.desc()],
        )
        return paginate(query, page, limit)

    def view_discussion(self, discussion_id: int) -> Discussion:
        """Fetch a thread and count the view"""
        self._load(discussion_id)
        self.db.execute(
            update(Discussion)
            .where(Discussion.id == discussion_id)
            .values(views=Discussion.views + 1)
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        return self._load(discussion_id)

    def create_discussion(self, data: DiscussionCreate, user) -> Discussion:
        self._check_related_mcq(data.related_mcq)
        discussion = Discussion(
            user_id=user.id,
            title=data.title,
            content=data.content,
            category=data.category.value,
            topic=data.topic.value if data.topic else None,
            related_mcq_id=data.related_mcq,
        )
        self.db.add(discussion)
        self.db.commit()
        logger.info(f"User {user.id} opened discussion {discussion.id}")
        return self._load(discussion.id)

    def update_discussion(self, discussion_id: int, data: DiscussionUpdate, user) -> Discussion:
        discussion = self._load(discussion_id)
        self._check_owner(discussion, user)
        for field, value in data.model_dump(mode="json", exclude_unset=True).items():
            if value is None and field != "topic":
                continue
            setattr(discussion, field, value)
        self.db.commit()
        return self._load(discussion_id)

    def delete_discussion(self, discussion_id: int, user) -> None:
        discussion = self._load(discussion_id)
        self._check_owner(discussion, user)
        self.db.delete(discussion)
        self.db.commit()
        logger.info(f"User {user.id} deleted discussion {discussion_id}")

    def add_reply(self, discussion_id: int, data: ReplyCreate, user) -> Discussion:
        self._load(discussion_id)
        self.db.add(DiscussionReply(
            discussion_id=discussion_id,
            user_id=user.id,
            content=data.content,
            # Only staff replies are marked as expert answers
            is_expert_reply=bool(data.is_expert_reply and user.is_superuser),
        ))
        self.db.commit()
        self.db.expire_all()
        return self._load(discussion_id)

    def like(self, discussion_id: int, user) -> int:
        self._load(discussion_id)
        liked = (
            self.db.query(DiscussionLike)
            .filter(DiscussionLike.discussion_id == discussion_id, DiscussionLike.user_id == user.id)
            .first()
        )
        if liked:
            raise ConflictError("Discussion already liked")
        self.db.add(DiscussionLike(discussion_id=discussion_id, user_id=user.id))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Discussion already liked")
        return self._like_count(discussion_id)

    def unlike(self, discussion_id: int, user) -> int:
        self._load(discussion_id)
        deleted = (
            self.db.query(DiscussionLike)
            .filter(DiscussionLike.discussion_id == discussion_id, DiscussionLike.user_id == user.id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise ConflictError("Discussion not liked yet")
        self.db.commit()
        return self._like_count(discussion_id)

    def _like_count(self, discussion_id: int) -> int:
        return self.db.query(DiscussionLike).filter(DiscussionLike.discussion_id == discussion_id).count()
