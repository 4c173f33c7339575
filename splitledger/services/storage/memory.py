"""In-memory blob store, for tests and throwaway sessions."""

from typing import Optional

from splitledger.services.storage.interface import BlobStoreInterface


class InMemoryBlobStore(BlobStoreInterface):
    """Dict-backed blob store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._blobs: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._blobs[key] = bytes(value)

    def keys(self) -> list[str]:
        return sorted(self._blobs)

    def __contains__(self, key: str) -> bool:
        return key in self._blobs
