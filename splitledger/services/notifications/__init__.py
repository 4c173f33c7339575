"""Notification scheduling package."""

from splitledger.services.notifications.interface import (
    NotificationError,
    NotificationSchedulerInterface,
    ReminderRequest,
)
from splitledger.services.notifications.scheduler import (
    InMemoryNotificationScheduler,
    LoggingNotificationScheduler,
)

__all__ = [
    "InMemoryNotificationScheduler",
    "LoggingNotificationScheduler",
    "NotificationError",
    "NotificationSchedulerInterface",
    "ReminderRequest",
]
