"""Schedulers that need no platform notification center."""

from datetime import datetime
from typing import Optional

from splitledger.logs import get_logger
from splitledger.services.notifications.interface import (
    NotificationSchedulerInterface,
    ReminderRequest,
)


logger = get_logger(__name__)


class InMemoryNotificationScheduler(NotificationSchedulerInterface):
    """Keeps pending reminders in a dict keyed by identifier."""

    def __init__(self):
        self._pending: dict[str, ReminderRequest] = {}

    def schedule(self, identifier: str, title: str, body: str, fire_at: datetime) -> None:
        self._pending[identifier] = ReminderRequest(
            identifier=identifier,
            title=title,
            body=body,
            fire_at=fire_at,
        )

    def cancel(self, identifier: str) -> None:
        self._pending.pop(identifier, None)

    def get(self, identifier: str) -> Optional[ReminderRequest]:
        return self._pending.get(identifier)

    @property
    def pending(self) -> list[ReminderRequest]:
        """Pending reminders, soonest first."""
        return sorted(self._pending.values(), key=lambda r: r.fire_at)


class LoggingNotificationScheduler(NotificationSchedulerInterface):
    """Only logs requests. Used when no platform scheduler is injected."""

    def schedule(self, identifier: str, title: str, body: str, fire_at: datetime) -> None:
        logger.info(
            "reminder_scheduled",
            identifier=identifier,
            title=title,
            body=body,
            fire_at=fire_at.isoformat(),
        )

    def cancel(self, identifier: str) -> None:
        logger.info("reminder_cancelled", identifier=identifier)
