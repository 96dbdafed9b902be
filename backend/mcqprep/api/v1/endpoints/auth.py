from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ....core.database import get_db
from ....core.exceptions import UnauthorizedError
from ....services.auth_service import AuthService
from ....services.user_service import UserService
from ....schemas.auth import Token, RefreshTokenRequest
from ....schemas.common import success_response
from ....schemas.user import User, UserCreate

router = APIRouter()


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    auth_service = AuthService(db)
    token = auth_service.authenticate_and_create_token(
        form_data.username, form_data.password
    )

    if not token:
        raise UnauthorizedError("Incorrect email or password")

    return token


@router.post("/refresh-token", response_model=Token)
async def refresh_access_token(
    body: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    auth_service = AuthService(db)
    new_token_data = auth_service.refresh_token(body.refresh_token)

    if not new_token_data:
        raise UnauthorizedError("Invalid refresh token or user not found")

    return new_token_data


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    user_service = UserService(db)
    user = user_service.create_user(user_data)
    token = AuthService(db).issue_tokens(user)
    return success_response(
        {
            "user": User.model_validate(user),
            "accessToken": token.access_token,
            "refreshToken": token.refresh_token,
            "tokenType": token.token_type,
        },
        message="User registered successfully",
    )
