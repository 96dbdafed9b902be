from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ....core.database import get_db
from ....api.deps import get_current_user, PageParams
from ....models.user import User as UserModel
from ....schemas.common import success_response
from ....schemas.user import User, UserUpdate
from ....schemas.mcq import PracticeAttempt
from ....schemas.mock_test import MockTestAttempt
from ....services.user_service import UserService

router = APIRouter()


@router.get("/profile")
async def get_user_profile(
    current_user: UserModel = Depends(get_current_user)
):
    return success_response({"user": User.model_validate(current_user)})


@router.put("/profile")
async def update_user_profile(
    user_data: UserUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = UserService(db).update_profile(current_user, user_data)
    return success_response({"user": User.model_validate(user)}, message="Profile updated successfully")


@router.get("/dashboard")
async def get_dashboard(
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return success_response(UserService(db).get_dashboard(current_user.id))


@router.get("/progress")
async def get_progress(
    timeframe: int = Query(30, ge=1, le=365, description="Number of days to look back"),
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return success_response(UserService(db).get_progress(current_user.id, timeframe))


@router.get("/attempts")
async def get_practice_attempts(
    paging: PageParams = Depends(),
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    attempts, total, pagination = UserService(db).get_practice_attempts(current_user.id, paging.page, paging.limit)
    return success_response(
        {
            "attempts": [
                {
                    **PracticeAttempt.model_validate(a).model_dump(mode="json", by_alias=True),
                    "mcq": {"id": a.mcq.id, "question": a.mcq.question, "topic": a.mcq.topic},
                }
                for a in attempts
            ]
        },
        count=len(attempts),
        total=total,
        pagination=pagination,
    )


@router.get("/mock-test-history")
async def get_mock_test_history(
    paging: PageParams = Depends(),
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    attempts, total, pagination = UserService(db).get_mock_test_history(current_user.id, paging.page, paging.limit)
    return success_response(
        {
            "attempts": [
                {
                    **MockTestAttempt.model_validate(a).model_dump(mode="json", by_alias=True),
                    "mockTest": {"id": a.mock_test.id, "title": a.mock_test.title},
                }
                for a in attempts
            ]
        },
        count=len(attempts),
        total=total,
        pagination=pagination,
    )
