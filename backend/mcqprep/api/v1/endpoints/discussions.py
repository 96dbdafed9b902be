from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....core.database import get_db
from ....api.deps import get_current_user, PageParams
from ....models.user import User
from ....models.enums import DiscussionCategory, Topic
from ....schemas.common import success_response
from ....schemas.discussion import Discussion, DiscussionCreate, DiscussionUpdate, ReplyCreate
from ....services.discussion_service import DiscussionService, GROUP_LINKS

router = APIRouter()


@router.get("")
async def list_discussions(
    paging: PageParams = Depends(),
    category: Optional[DiscussionCategory] = None,
    topic: Optional[Topic] = None,
    sort: Optional[str] = Query(None, description="Comma separated fields, '-' for descending"),
    db: Session = Depends(get_db)
):
    discussions, total, pagination = DiscussionService(db).list_discussions(
        paging.page,
        paging.limit,
        category=category.value if category else None,
        topic=topic.value if topic else None,
        sort=sort,
    )
    return success_response(
        {"discussions": [Discussion.from_model(d) for d in discussions]},
        count=len(discussions),
        total=total,
        pagination=pagination,
    )


@router.get("/groups")
async def get_group_links():
    return success_response({"groups": GROUP_LINKS})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_discussion(
    body: DiscussionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    discussion = DiscussionService(db).create_discussion(body, current_user)
    return success_response({"discussion": Discussion.from_model(discussion)})


@router.get("/{discussion_id}")
async def get_discussion(
    discussion_id: int,
    db: Session = Depends(get_db)
):
    discussion = DiscussionService(db).view_discussion(discussion_id)
    return success_response({"discussion": Discussion.from_model(discussion, include_replies=True)})


@router.put("/{discussion_id}")
async def update_discussion(
    discussion_id: int,
    body: DiscussionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    discussion = DiscussionService(db).update_discussion(discussion_id, body, current_user)
    return success_response({"discussion": Discussion.from_model(discussion)})


@router.delete("/{discussion_id}")
async def delete_discussion(
    discussion_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    DiscussionService(db).delete_discussion(discussion_id, current_user)
    return success_response(message="Discussion deleted successfully")


@router.post("/{discussion_id}/reply", status_code=status.HTTP_201_CREATED)
async def add_reply(
    discussion_id: int,
    body: ReplyCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    discussion = DiscussionService(db).add_reply(discussion_id, body, current_user)
    return success_response({"discussion": Discussion.from_model(discussion, include_replies=True)})


@router.post("/{discussion_id}/like")
async def like_discussion(
    discussion_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    like_count = DiscussionService(db).like(discussion_id, current_user)
    return success_response({"likeCount": like_count}, message="Discussion liked successfully")


@router.delete("/{discussion_id}/like")
async def unlike_discussion(
    discussion_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    like_count = DiscussionService(db).unlike(discussion_id, current_user)
    return success_response({"likeCount": like_count}, message="Discussion unliked successfully")
