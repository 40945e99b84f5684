"""Helpers for creating and updating user accounts."""
from __future__ import annotations

import logging
import secrets
from typing import Any

from sqlalchemy.orm import Session

from dongne_board.core.settings import settings
from dongne_board.db.time import utcnow
from dongne_board.models import Role, User

logger = logging.getLogger(__name__)

__all__ = [
    "get_user_by_open_id",
    "get_user_by_email",
    "new_open_id",
    "upsert_user",
    "update_profile",
]


def get_user_by_open_id(db: Session, open_id: str) -> User | None:
    return db.query(User).filter(User.open_id == open_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def new_open_id(prefix: str = "dev") -> str:
    """Return a fresh open id for an account created by the dev login."""
    return f"{prefix}_{secrets.token_urlsafe(12)}"


def upsert_user(db: Session, open_id: str, **fields: Any) -> User:
    """Create the user keyed by ``open_id`` or update the given fields.

    ``last_signed_in`` is always refreshed. The configured owner open id is
    promoted to the admin role unless a role is passed explicitly.
    """
    user = get_user_by_open_id(db, open_id)
    created = user is None
    if user is None:
        user = User(open_id=open_id)
        db.add(user)

    for key, value in fields.items():
        if value is not None:
            setattr(user, key, value)

    if "role" not in fields and settings.owner_open_id and open_id == settings.owner_open_id:
        user.role = Role.ADMIN

    user.last_signed_in = utcnow()
    db.commit()
    db.refresh(user)
    if created:
        logger.info("Created user %s (%s)", user.id, user.login_method)
    return user


def update_profile(db: Session, user: User, updates: dict[str, Any]) -> User:
    """Apply partial profile updates, skipping fields set to None."""
    changed = False
    for key, value in updates.items():
        if value is None:
            continue
        setattr(user, key, value)
        changed = True

    if changed:
        db.commit()
        db.refresh(user)
    return user
