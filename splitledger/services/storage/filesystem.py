"""
File System Blob Store

DESIGN DECISION: One file per key inside a data directory.

TRADEOFFS:
- Whole-file rewrites on every save (fine for a personal ledger)
- No cross-key transactions (the ledger never needs one)
- Writes go through a temp file and an atomic rename, so a crash mid-write
  leaves the previous value intact rather than a truncated blob
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from splitledger.logs import get_logger
from splitledger.services.storage.interface import (
    BlobStoreInterface,
    StorageReadError,
    StorageWriteError,
)


_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")
BLOB_SUFFIX = ".blob"

logger = get_logger(__name__)


@retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, max=1),
    reraise=True,
)
def _write_atomic(path: Path, value: bytes) -> None:
    """Write value to path via a sibling temp file and os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(value)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class FileBlobStore(BlobStoreInterface):
    """
    Blob store backed by files under a directory.

    The directory is created on first write.
    """

    def __init__(self, directory: Path, write_attempts: int = 3):
        self._directory = Path(directory)
        self._write = _write_atomic.retry_with(stop=stop_after_attempt(write_attempts))

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File holding key's blob."""
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid blob key: {key!r}")
        return self._directory / f"{key}{BLOB_SUFFIX}"

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageReadError(f"Failed to read blob '{key}' from {path}: {e}")

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        try:
            self._write(path, value)
        except OSError as e:
            raise StorageWriteError(f"Failed to write blob '{key}' to {path}: {e}")
        logger.debug("blob_written", key=key, path=str(path), size=len(value))
