"""
Storage Services Package

Provides the blob store interface, its concrete backends, and the codec
that turns ledger collections into blobs.
"""

from splitledger.services.storage.interface import (
    BlobStoreInterface,
    DecodeError,
    PersistenceError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from splitledger.services.storage.codec import (
    DECODE_ERROR_POLICIES,
    CollectionCodec,
    DecodeErrorPolicy,
    DecodeResult,
    empty_collection,
    raise_decode_error,
    recipients_codec,
    transactions_codec,
)
from splitledger.services.storage.filesystem import FileBlobStore
from splitledger.services.storage.memory import InMemoryBlobStore

__all__ = [
    # Interface
    "BlobStoreInterface",
    # Exceptions
    "DecodeError",
    "PersistenceError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Codec
    "DECODE_ERROR_POLICIES",
    "CollectionCodec",
    "DecodeErrorPolicy",
    "DecodeResult",
    "empty_collection",
    "raise_decode_error",
    "recipients_codec",
    "transactions_codec",
    # Backends
    "FileBlobStore",
    "InMemoryBlobStore",
]
