from sqlalchemy.orm import Session
from typing import Optional

from ..core.security import create_access_token, verify_token, create_refresh_token
from .user_service import UserService
from ..schemas.auth import Token
from ..models.user import User


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)

    def issue_tokens(self, user: User) -> Token:
        return Token(
            access_token=create_access_token(data={"sub": user.email}),
            token_type="bearer",
            refresh_token=create_refresh_token(data={"sub": user.email}),
        )

    def authenticate_and_create_token(self, email: str, password: str) -> Optional[Token]:
        user = self.user_service.authenticate_user(email, password)
        if not user:
            return None
        return self.issue_tokens(user)

    def refresh_token(self, refresh_token: str) -> Optional[Token]:
        email = verify_token(refresh_token, token_type="refresh")
        if email is None:
            return None

        user = self.user_service.get_user_by_email(email)
        if not user or not user.is_active:
            return None
        return self.issue_tokens(user)

    def get_current_user(self, token: str) -> Optional[User]:
        email = verify_token(token)
        if email is None:
            return None
        user = self.user_service.get_user_by_email(email)
        if user is None or not user.is_active:
            return None
        return user
