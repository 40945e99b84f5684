"""Business logic services for the Dongne Board application."""

from .engagement import AlreadyEmpathizedError, EngagementService
from .notifications import NotificationService, get_notification_service
from .storage import LocalStorage, get_storage

__all__ = [
    "AlreadyEmpathizedError",
    "EngagementService",
    "LocalStorage",
    "NotificationService",
    "get_notification_service",
    "get_storage",
]
