"""Shared API dependencies for session authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from dongne_board.core.security import verify_session_token
from dongne_board.core.settings import settings
from dongne_board.db.session import get_db
from dongne_board.models import User
from dongne_board.services.user_service import get_user_by_open_id
from dongne_board.services.notifications import NotificationService, get_notification_service
from dongne_board.services.storage import LocalStorage, get_storage

# Session cookie scheme; missing cookies are handled per route.
session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_user(
    token: Annotated[str | None, Depends(session_cookie)],
    db: SessionDep,
) -> User | None:
    """Resolve the session cookie to a user, or None for anonymous callers."""
    open_id = verify_session_token(token)
    if open_id is None:
        return None
    return get_user_by_open_id(db, open_id)


def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Get the current authenticated user from the session cookie.

    Raises:
        HTTPException: 401 if the cookie is missing, invalid, or names no user
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please login (10001)",
        )
    return user


def get_admin_user(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require the admin role on top of authentication.

    Raises:
        HTTPException: 403 if the caller is not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have required permission (10002)",
        )
    return user


def get_notification_service_dep() -> NotificationService:
    """Return the notification service configured from settings."""
    return get_notification_service()


def get_storage_dep() -> LocalStorage:
    """Return the configured storage backend."""
    return get_storage()


# Type aliases for identity and service dependencies
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
AdminUserDep = Annotated[User, Depends(get_admin_user)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service_dep)]
StorageDep = Annotated[LocalStorage, Depends(get_storage_dep)]
