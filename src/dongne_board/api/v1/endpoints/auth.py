"""Authentication endpoints for the Dongne Board API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from dongne_board.core.security import create_session_token
from dongne_board.core.settings import settings
from dongne_board.models import User
from dongne_board.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from dongne_board.services.user_service import get_user_by_email, new_open_id, upsert_user

from ..dependencies import OptionalUserDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _ensure_dev_login_enabled() -> None:
    if not settings.dev_login_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


def _set_session_cookie(response: Response, user: User) -> None:
    token = create_session_token(user.open_id, name=user.name or "")
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
        path="/",
    )


@router.get("/me", response_model=UserResponse | None)
async def me(current_user: OptionalUserDep) -> User | None:
    """Return the signed-in user, or null for anonymous callers."""
    return current_user


@router.post("/logout")
async def logout(response: Response) -> dict[str, bool]:
    """Clear the session cookie."""
    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return {"success": True}


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, response: Response, db: SessionDep) -> AuthResponse:
    """Development login without password verification.

    The user is looked up by email when one is given; otherwise a new account
    is created with the supplied nickname.

    Args:
        payload: Email and/or nickname identifying the user
        response: Outgoing response that receives the session cookie
        db: Database session

    Returns:
        The signed-in user

    Raises:
        HTTPException: 404 when development login is disabled, 422 when
            neither email nor nickname is given
    """
    _ensure_dev_login_enabled()
    if not payload.email and not payload.nickname:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Email or nickname is required",
        )

    existing = get_user_by_email(db, payload.email) if payload.email else None
    if existing is not None:
        user = upsert_user(db, existing.open_id, login_method="dev")
    else:
        nickname = payload.nickname or (payload.email or "").split("@", 1)[0]
        user = upsert_user(
            db,
            new_open_id(),
            name=nickname,
            nickname=nickname,
            email=payload.email,
            login_method="dev",
        )

    logger.info("User %s signed in", user.id)
    _set_session_cookie(response, user)
    return AuthResponse(user=UserResponse.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, response: Response, db: SessionDep) -> AuthResponse:
    """Create a new development account and sign it in."""
    _ensure_dev_login_enabled()
    user = upsert_user(
        db,
        new_open_id(),
        name=payload.nickname,
        nickname=payload.nickname,
        email=payload.email,
        login_method="dev",
    )
    logger.info("Registered user %s", user.id)
    _set_session_cookie(response, user)
    return AuthResponse(user=UserResponse.model_validate(user))
