"""
Notification models and enums.
"""

from enum import Enum


class NotificationStatus(str, Enum):
    """Read flag, the only field a user can change."""
    UNREAD = "unread"
    READ = "read"


class NotificationType(str, Enum):
    STATUS_UPDATE = "status_update"


class DeliveryStatus(str, Enum):
    """Bookkeeping written by the scheduled dispatcher."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
