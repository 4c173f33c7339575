"""
Abstract Blob Store Interface

DESIGN DECISION: The ledger persists into a flat key-value byte store.
This allows us to:
1. Use in-memory storage for testing
2. Swap the file backend for a platform key-value store later
3. Keep the ledger's consistency rules decoupled from storage

The interface is intentionally tiny: two keys, whole-value reads and
writes, last write wins. Anything smarter belongs to the store above it.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStoreInterface(ABC):
    """
    Abstract interface for a key-value byte store.

    Any backend (files, a platform preferences store, a test double)
    must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under key.

        Args:
            key: The blob key

        Returns:
            The stored bytes, or None if nothing was ever written

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """
        Replace the value stored under key.

        Args:
            key: The blob key
            value: The full new value

        Raises:
            StorageWriteError: If the write did not happen
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Could not read from the storage backend."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass


class DecodeError(StorageError):
    """Persisted bytes do not match the expected collection schema."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Could not decode '{key}': {reason}")


class PersistenceError(StorageError):
    """A ledger mutation could not be persisted (fail-loud policy only)."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(message)
