from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.exceptions import UnauthorizedError, ForbiddenError
from ..core.security import oauth2_scheme, optional_oauth2_scheme
from ..services.auth_service import AuthService
from ..models.user import User
from ..utils.pagination import page_params


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    auth_service = AuthService(db)
    user = auth_service.get_current_user(token)

    if user is None:
        raise UnauthorizedError("Could not validate credentials")

    return user


def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """The caller if a valid bearer token was sent, else None. Never rejects."""
    if not token:
        return None
    return AuthService(db).get_current_user(token)


def get_current_active_superuser(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_superuser:
        raise ForbiddenError()
    return current_user


class PageParams:
    def __init__(
        self,
        page: Optional[int] = Query(None, ge=1),
        limit: Optional[int] = Query(None, ge=1),
    ):
        self.page, self.limit = page_params(page, limit)
