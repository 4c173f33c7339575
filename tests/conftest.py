"""Shared fixtures: blob store doubles and the Alice/Bob dinner ledger."""

from collections import Counter
from decimal import Decimal
from typing import Optional
from uuid import uuid4

import pytest

from splitledger.models.ledger import (
    ExtraPrices,
    Recipient,
    Split,
    Transaction,
)
from splitledger.services.storage import (
    InMemoryBlobStore,
    StorageReadError,
    StorageWriteError,
)
from splitledger.store import LedgerStore


class RecordingBlobStore(InMemoryBlobStore):
    """In-memory store that counts writes per key."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        super().__init__(initial)
        self.writes: Counter = Counter()

    def set(self, key: str, value: bytes) -> None:
        self.writes[key] += 1
        super().set(key, value)


class FailingBlobStore(InMemoryBlobStore):
    """In-memory store whose writes (and optionally reads) always fail."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None, fail_reads: bool = False):
        super().__init__(initial)
        self.fail_reads = fail_reads

    def get(self, key: str) -> Optional[bytes]:
        if self.fail_reads:
            raise StorageReadError(f"cannot read {key}")
        return super().get(key)

    def set(self, key: str, value: bytes) -> None:
        raise StorageWriteError(f"disk full while writing {key}")


@pytest.fixture
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
def store(blob_store) -> LedgerStore:
    ledger = LedgerStore(blob_store)
    ledger.load()
    return ledger


@pytest.fixture
def alice() -> Recipient:
    return Recipient(id=uuid4(), name="Alice")


@pytest.fixture
def bob() -> Recipient:
    return Recipient(id=uuid4(), name="Bob")


def make_dinner(alice: Recipient, bob: Recipient) -> Transaction:
    return Transaction(
        name="Dinner",
        splits=(
            Split(recipient_id=alice.id, price=Decimal("20.00")),
            Split(recipient_id=bob.id, price=Decimal("15.00")),
        ),
        extra_prices=ExtraPrices(tax=Decimal("3.00"), tip=Decimal("5.00")),
    )


@pytest.fixture
def dinner(alice, bob) -> Transaction:
    return make_dinner(alice, bob)


@pytest.fixture
def populated_store(store, alice, bob, dinner) -> LedgerStore:
    store.add_recipient(alice)
    store.add_recipient(bob)
    store.add_transaction(dinner)
    return store
