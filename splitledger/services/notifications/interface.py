"""
Abstract Notification Scheduler Interface

Payment reminders are one-shot, calendar-based alerts. The ledger only
asks for them to be scheduled or cancelled; delivery belongs to the
platform. Scheduling is best-effort: callers log failures and move on.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ReminderRequest(BaseModel):
    """A scheduled one-shot reminder."""
    model_config = ConfigDict(frozen=True)

    identifier: str
    title: str
    body: str
    fire_at: datetime


class NotificationSchedulerInterface(ABC):
    """Anything that can schedule a one-shot reminder."""

    @abstractmethod
    def schedule(self, identifier: str, title: str, body: str, fire_at: datetime) -> None:
        """
        Schedule a reminder. A new request replaces any pending request
        with the same identifier.

        Raises:
            NotificationError: If the platform refused the request
        """
        pass

    @abstractmethod
    def cancel(self, identifier: str) -> None:
        """Cancel a pending reminder. Unknown identifiers are ignored."""
        pass


class NotificationError(Exception):
    """The platform could not schedule or cancel a reminder."""
    pass
