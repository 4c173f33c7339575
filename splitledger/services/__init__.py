"""Services package."""

from splitledger.services.notifications import (
    InMemoryNotificationScheduler,
    LoggingNotificationScheduler,
    NotificationError,
    NotificationSchedulerInterface,
    ReminderRequest,
)
from splitledger.services.storage import (
    BlobStoreInterface,
    DecodeError,
    FileBlobStore,
    InMemoryBlobStore,
    PersistenceError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Notification services
    "InMemoryNotificationScheduler",
    "LoggingNotificationScheduler",
    "NotificationError",
    "NotificationSchedulerInterface",
    "ReminderRequest",
    # Storage services
    "BlobStoreInterface",
    "DecodeError",
    "FileBlobStore",
    "InMemoryBlobStore",
    "PersistenceError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
