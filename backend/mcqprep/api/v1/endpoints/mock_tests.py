from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ....core.database import get_db
from ....api.deps import get_current_user, get_optional_user, get_current_active_superuser, PageParams
from ....models.user import User
from ....models.enums import TestCategory, TestDifficulty
from ....schemas.common import success_response
from ....schemas.mock_test import (
    MockTest,
    MockTestCreate,
    MockTestUpdate,
    MockTestAttempt,
    SubmitTestRequest,
)
from ....services.mock_test_service import MockTestService

router = APIRouter()


@router.get("")
async def list_mock_tests(
    paging: PageParams = Depends(),
    category: Optional[TestCategory] = None,
    difficulty: Optional[TestDifficulty] = None,
    sort: Optional[str] = Query(None, description="Comma separated fields, '-' for descending"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    mock_tests, total, pagination = MockTestService(db).list_mock_tests(
        current_user,
        paging.page,
        paging.limit,
        category=category.value if category else None,
        difficulty=difficulty.value if difficulty else None,
        sort=sort,
    )
    return success_response(
        {"mockTests": [MockTest.from_model(t, include_questions=False) for t in mock_tests]},
        count=len(mock_tests),
        total=total,
        pagination=pagination,
    )


@router.get("/{mock_test_id}")
async def get_mock_test(
    mock_test_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    mock_test, attempts = MockTestService(db).get_mock_test_for_user(mock_test_id, current_user)
    return success_response({
        "mockTest": MockTest.from_model(mock_test),
        "userAttempts": [MockTestAttempt.model_validate(a) for a in attempts],
    })


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_mock_test(
    mock_test_data: MockTestCreate,
    current_user: User = Depends(get_current_active_superuser),
    db: Session = Depends(get_db)
):
    mock_test = MockTestService(db).create_mock_test(mock_test_data, creator_id=current_user.id)
    return success_response({"mockTest": MockTest.from_model(mock_test)})


@router.put("/{mock_test_id}")
async def update_mock_test(
    mock_test_id: int,
    mock_test_data: MockTestUpdate,
    current_user: User = Depends(get_current_active_superuser),
    db: Session = Depends(get_db)
):
    mock_test = MockTestService(db).update_mock_test(mock_test_id, mock_test_data)
    return success_response({"mockTest": MockTest.from_model(mock_test)})


@router.delete("/{mock_test_id}")
async def delete_mock_test(
    mock_test_id: int,
    current_user: User = Depends(get_current_active_superuser),
    db: Session = Depends(get_db)
):
    MockTestService(db).delete_mock_test(mock_test_id)
    return success_response(message="Mock test deleted successfully")


@router.post("/{mock_test_id}/start")
async def start_mock_test(
    mock_test_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    session = MockTestService(db).start_session(mock_test_id, current_user)
    return success_response(session)


@router.post("/{mock_test_id}/submit")
async def submit_mock_test(
    mock_test_id: int,
    submission: SubmitTestRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    result = MockTestService(db).submit(mock_test_id, current_user, submission)
    return success_response(result, message="Mock test submitted successfully")


@router.get("/{mock_test_id}/results")
async def get_mock_test_results(
    mock_test_id: int,
    attempt_id: int = Query(..., alias="attemptId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    attempt = MockTestService(db).get_results(mock_test_id, attempt_id, current_user)
    return success_response({"attempt": attempt})


@router.get("/{mock_test_id}/leaderboard")
async def get_leaderboard(
    mock_test_id: int,
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    leaderboard = MockTestService(db).get_leaderboard(mock_test_id, limit)
    return success_response({"leaderboard": leaderboard}, count=len(leaderboard))
