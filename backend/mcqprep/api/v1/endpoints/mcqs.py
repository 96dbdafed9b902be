from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....core.database import get_db
from ....api.deps import get_current_user, get_optional_user, get_current_active_superuser, PageParams
from ....models.user import User
from ....models.enums import Topic, Difficulty
from ....schemas.common import success_response
from ....schemas.mcq import (
    MCQ,
    MCQCreate,
    MCQUpdate,
    PracticeAnswerRequest,
    PracticeAttempt,
    BookmarkCreate,
    Bookmark,
)
from ....services.mcq_service import MCQService

router = APIRouter()


@router.get("")
async def list_mcqs(
    paging: PageParams = Depends(),
    topic: Optional[Topic] = None,
    difficulty: Optional[Difficulty] = None,
    tag: Optional[str] = None,
    sort: Optional[str] = Query(None, description="Comma separated fields, '-' for descending"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    mcqs, total, pagination = MCQService(db).list_mcqs(
        current_user,
        paging.page,
        paging.limit,
        topic=topic.value if topic else None,
        difficulty=difficulty.value if difficulty else None,
        tag=tag,
        sort=sort,
    )
    return success_response(
        {"mcqs": [MCQ.from_model(m) for m in mcqs]},
        count=len(mcqs),
        total=total,
        pagination=pagination,
    )


@router.get("/random")
async def random_mcqs(
    limit: int = Query(10, ge=1, le=100),
    topic: Optional[Topic] = None,
    difficulty: Optional[Difficulty] = None,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    mcqs = MCQService(db).random_mcqs(
        current_user,
        limit,
        topic=topic.value if topic else None,
        difficulty=difficulty.value if difficulty else None,
    )
    return success_response({"mcqs": [MCQ.from_model(m) for m in mcqs]}, count=len(mcqs))


@router.get("/bookmarked")
async def bookmarked_mcqs(
    paging: PageParams = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    bookmarks, total, pagination = MCQService(db).list_bookmarks(current_user, paging.page, paging.limit)
    return success_response(
        {
            "bookmarks": [
                {
                    **Bookmark.model_validate(b).model_dump(mode="json", by_alias=True),
                    "mcq": MCQ.from_model(b.mcq).model_dump(mode="json", by_alias=True),
                }
                for b in bookmarks
            ]
        },
        count=len(bookmarks),
        total=total,
        pagination=pagination,
    )


@router.get("/{mcq_id}")
async def get_mcq(
    mcq_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    mcq, attempt = MCQService(db).get_mcq_for_user(mcq_id, current_user)
    return success_response({
        "mcq": MCQ.from_model(mcq),
        "userAttempt": PracticeAttempt.model_validate(attempt) if attempt else None,
    })


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_mcq(
    mcq_data: MCQCreate,
    current_user: User = Depends(get_current_active_superuser),
    db: Session = Depends(get_db)
):
    mcq = MCQService(db).create_mcq(mcq_data, creator_id=current_user.id)
    return success_response({"mcq": MCQ.from_model(mcq)})


@router.put("/{mcq_id}")
async def update_mcq(
    mcq_id: int,
    mcq_data: MCQUpdate,
    current_user: User = Depends(get_current_active_superuser),
    db: Session = Depends(get_db)
):
    mcq = MCQService(db).update_mcq(mcq_id, mcq_data)
    return success_response({"mcq": MCQ.from_model(mcq)})


@router.delete("/{mcq_id}")
async def delete_mcq(
    mcq_id: int,
    current_user: User = Depends(get_current_active_superuser),
    db: Session = Depends(get_db)
):
    MCQService(db).delete_mcq(mcq_id)
    return success_response(message="MCQ deleted successfully")


@router.post("/{mcq_id}/submit")
async def submit_answer(
    mcq_id: int,
    answer: PracticeAnswerRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    result = MCQService(db).submit_practice_answer(mcq_id, current_user, answer)
    return success_response(result)


@router.post("/{mcq_id}/bookmark", status_code=status.HTTP_201_CREATED)
async def bookmark_mcq(
    mcq_id: int,
    body: Optional[BookmarkCreate] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    bookmark = MCQService(db).add_bookmark(mcq_id, current_user, notes=body.notes if body else "")
    return success_response({"bookmark": Bookmark.model_validate(bookmark)})


@router.delete("/{mcq_id}/bookmark")
async def remove_bookmark(
    mcq_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    MCQService(db).remove_bookmark(mcq_id, current_user)
    return success_response(message="Bookmark removed successfully")
