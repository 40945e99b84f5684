"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    comments_router,
    empathy_router,
    neighborhoods_router,
    notifications_router,
    posts_router,
    profile_router,
    storage_router,
)

__all__ = [
    "auth_router",
    "posts_router",
    "comments_router",
    "empathy_router",
    "notifications_router",
    "profile_router",
    "admin_router",
    "storage_router",
    "neighborhoods_router",
]
