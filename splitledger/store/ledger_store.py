"""
Ledger Store

The single authoritative in-memory copy of the ledger: an ordered list of
transactions and an ordered list of recipients, saved through to a blob
store on every mutation.

GUARANTEES:
- Every persisted blob is the full current collection, never a delta
- A split never points at a deleted recipient (see delete_recipient)
- Not-found is never an error: the mutation is a no-op and returns False
- In-memory state is updated before any write, so reads always reflect
  the latest mutation even when a write fails

ORPHANED SPLITS: load() unassigns, in memory only, every split whose
recipient id is missing from the loaded recipients (e.g. the recipient
blob was corrupt or absent) and logs orphan_splits_unassigned. Nothing is
written during load; the cleared splits reach storage with the next write
of the transaction collection.

One instance is created at startup (see splitledger.orchestrator.create_ledger)
and passed explicitly to every consumer. There is no global default store.
"""

from decimal import Decimal
from typing import Callable, Iterable, Iterator, Optional, Sequence, Union
from uuid import UUID

from splitledger.config import LedgerPolicySettings, StorageSettings
from splitledger.logs import get_logger
from splitledger.models.events import ChangeEvent, ChangeKind, LedgerCollection
from splitledger.models.ledger import Recipient, Split, Transaction
from splitledger.services.storage import (
    DECODE_ERROR_POLICIES,
    BlobStoreInterface,
    CollectionCodec,
    DecodeError,
    DecodeErrorPolicy,
    PersistenceError,
    StorageError,
    empty_collection,
    recipients_codec,
    transactions_codec,
)


ChangeListener = Callable[[ChangeEvent], None]

logger = get_logger(__name__)


class LedgerStore:
    """
    Transactions and recipients with save-through persistence.

    All operations are synchronous and run to completion; a mutation
    returns only after its writes were issued.
    """

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        transactions_key: str = "saved_transactions",
        recipients_key: str = "recipients",
        on_decode_error: DecodeErrorPolicy = empty_collection,
        raise_on_write_failure: bool = False,
    ):
        """
        Initialize an empty store. Call load() to read persisted state.

        Args:
            blob_store: Backend for the two collection blobs
            transactions_key: Blob key of the transaction collection
            recipients_key: Blob key of the recipient collection
            on_decode_error: Policy applied when a blob cannot be decoded.
                            The default turns it into an empty collection.
            raise_on_write_failure: Raise PersistenceError after a failed
                            write instead of only logging it
        """
        self._blob_store = blob_store
        self._codecs: dict[LedgerCollection, CollectionCodec] = {
            LedgerCollection.TRANSACTIONS: transactions_codec(transactions_key),
            LedgerCollection.RECIPIENTS: recipients_codec(recipients_key),
        }
        self._on_decode_error = on_decode_error
        self._raise_on_write_failure = raise_on_write_failure

        self._transactions: list[Transaction] = []
        self._recipients: list[Recipient] = []
        self._listeners: list[ChangeListener] = []

    @classmethod
    def from_settings(
        cls,
        blob_store: BlobStoreInterface,
        storage: StorageSettings,
        policy: LedgerPolicySettings,
    ) -> "LedgerStore":
        return cls(
            blob_store,
            transactions_key=storage.transactions_key,
            recipients_key=storage.recipients_key,
            on_decode_error=DECODE_ERROR_POLICIES[policy.decode_error_policy],
            raise_on_write_failure=policy.write_failure_policy == "raise",
        )

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Current transactions in display order."""
        return tuple(self._transactions)

    @property
    def recipients(self) -> tuple[Recipient, ...]:
        """Current recipients in display order."""
        return tuple(self._recipients)

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        index = self._transaction_index(transaction_id)
        return None if index is None else self._transactions[index]

    def get_recipient(self, recipient_id: UUID) -> Optional[Recipient]:
        index = self._recipient_index(recipient_id)
        return None if index is None else self._recipients[index]

    def recipient_name(self, ref: Union[Split, UUID, None]) -> Optional[str]:
        """
        Current name of the recipient a split (or id) points at.

        Always resolved by id against the live list, so renames show up
        immediately. None for unassigned splits.
        """
        recipient_id = ref.recipient_id if isinstance(ref, Split) else ref
        if recipient_id is None:
            return None
        recipient = self.get_recipient(recipient_id)
        return recipient.name if recipient else None

    # -------------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a listener called with a ChangeEvent after every mutation.

        Returns a callable that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                # A broken observer must not undo or block a committed change
                logger.error(
                    "change_listener_failed",
                    error=str(e),
                    **event.to_log_dict(),
                )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """
        Replace in-memory state with the persisted collections.

        A missing blob loads as empty. An undecodable (or unreadable) blob
        goes through the decode-error policy; the collections are loaded
        independently, so a corrupt transaction blob never affects
        recipients. Splits pointing at recipients that did not load are
        unassigned.
        """
        self._transactions = self._read(LedgerCollection.TRANSACTIONS)
        self._recipients = self._read(LedgerCollection.RECIPIENTS)
        self._unassign_orphans()

        self._emit(ChangeEvent(collection=LedgerCollection.TRANSACTIONS, kind=ChangeKind.LOADED))
        self._emit(ChangeEvent(collection=LedgerCollection.RECIPIENTS, kind=ChangeKind.LOADED))

        logger.info(
            "ledger_loaded",
            transactions=len(self._transactions),
            recipients=len(self._recipients),
        )

    def _unassign_orphans(self) -> None:
        """Unassign loaded splits whose recipient is not in the loaded list."""
        live = {r.id for r in self._recipients}
        orphans = {
            split.recipient_id
            for transaction in self._transactions
            for split in transaction.splits
            if split.recipient_id is not None and split.recipient_id not in live
        }
        if not orphans:
            return

        count = sum(
            1
            for transaction in self._transactions
            for split in transaction.splits
            if split.recipient_id in orphans
        )
        self._transactions = [t.without_recipients(orphans) for t in self._transactions]
        logger.warning(
            "orphan_splits_unassigned",
            splits=count,
            recipient_ids=sorted(str(i) for i in orphans),
        )

    def save(self) -> None:
        """Persist both collections in full."""
        self._commit(
            (LedgerCollection.TRANSACTIONS, ChangeKind.SAVED, ()),
            (LedgerCollection.RECIPIENTS, ChangeKind.SAVED, ()),
        )

    def _read(self, collection: LedgerCollection) -> list:
        codec = self._codecs[collection]

        try:
            data = self._blob_store.get(codec.key)
        except StorageError as e:
            logger.error("collection_read_failed", key=codec.key, error=str(e))
            return self._on_decode_error(DecodeError(codec.key, f"unreadable: {e}"))

        if data is None:
            logger.debug("collection_absent", key=codec.key)
            return []

        result = codec.decode(data)
        if not result.ok:
            logger.warning(
                "collection_decode_failed",
                key=codec.key,
                reason=result.error.reason,
                size=len(data),
            )
        return result.unwrap_or_else(self._on_decode_error)

    def _items(self, collection: LedgerCollection) -> list:
        if collection is LedgerCollection.TRANSACTIONS:
            return self._transactions
        return self._recipients

    def _write(self, collection: LedgerCollection) -> Optional[StorageError]:
        """Write one full collection. Returns the error instead of raising."""
        codec = self._codecs[collection]
        try:
            self._blob_store.set(codec.key, codec.encode(self._items(collection)))
        except StorageError as e:
            logger.warning(
                "persistence_write_failed",
                key=codec.key,
                error=str(e),
            )
            return e
        return None

    def _commit(self, *changes: tuple[LedgerCollection, ChangeKind, Sequence[UUID]]) -> None:
        """
        Persist each changed collection once, then publish one event each.

        Every write is attempted even if an earlier one failed. Under the
        fail-loud policy the first failure is raised after all events went out.
        """
        failures = []
        for collection, kind, entity_ids in changes:
            error = self._write(collection)
            if error is not None:
                failures.append((self._codecs[collection].key, error))
            self._emit(ChangeEvent(
                collection=collection,
                kind=kind,
                entity_ids=tuple(entity_ids),
                persisted=error is None,
            ))

        if failures and self._raise_on_write_failure:
            key, error = failures[0]
            raise PersistenceError(key, f"Failed to persist '{key}': {error}") from error

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def _transaction_index(self, transaction_id: UUID) -> Optional[int]:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        return None

    def add_transaction(self, transaction: Transaction) -> bool:
        """
        Append a transaction and persist.

        The store does not validate content (that is the caller's job), but
        it refuses a second transaction with an existing id.
        """
        if self._transaction_index(transaction.id) is not None:
            logger.warning("duplicate_transaction_ignored", transaction_id=str(transaction.id))
            return False

        self._transactions.append(transaction)
        self._commit((LedgerCollection.TRANSACTIONS, ChangeKind.ADDED, (transaction.id,)))
        logger.debug("transaction_added", transaction_id=str(transaction.id))
        return True

    def update_transaction(self, transaction: Transaction) -> bool:
        """Replace the transaction with the same id, keeping its position."""
        index = self._transaction_index(transaction.id)
        if index is None:
            return False

        self._transactions[index] = transaction
        self._commit((LedgerCollection.TRANSACTIONS, ChangeKind.UPDATED, (transaction.id,)))
        logger.debug("transaction_updated", transaction_id=str(transaction.id))
        return True

    def delete_transaction(self, transaction_id: UUID) -> bool:
        """Remove a transaction by id. No-op if it does not exist."""
        index = self._transaction_index(transaction_id)
        if index is None:
            return False
        return self.delete_transactions_at([index])

    def delete_transactions_at(self, indices: Iterable[int]) -> bool:
        """
        Remove transactions by display position (e.g. a swipe-to-delete set).

        Out-of-range positions are ignored. Returns False if nothing matched.
        """
        doomed = {i for i in indices if 0 <= i < len(self._transactions)}
        if not doomed:
            return False

        removed = [t.id for i, t in enumerate(self._transactions) if i in doomed]
        self._transactions = [t for i, t in enumerate(self._transactions) if i not in doomed]
        self._commit((LedgerCollection.TRANSACTIONS, ChangeKind.DELETED, removed))
        logger.debug("transactions_deleted", transaction_ids=[str(i) for i in removed])
        return True

    @staticmethod
    def total_for_transaction(transaction: Transaction) -> Decimal:
        """sum(split prices) + tax + tip. Pure."""
        return transaction.total_amount

    def transactions_for_recipient(self, recipient_id: UUID) -> Iterator[Transaction]:
        """
        Lazily yield transactions with at least one split for the recipient.

        Recomputed on every call; iterates over a snapshot, so mutating the
        store mid-iteration is safe.
        """
        snapshot = tuple(self._transactions)
        return (t for t in snapshot if t.involves(recipient_id))

    # -------------------------------------------------------------------------
    # Recipients
    # -------------------------------------------------------------------------

    def _recipient_index(self, recipient_id: UUID) -> Optional[int]:
        for index, recipient in enumerate(self._recipients):
            if recipient.id == recipient_id:
                return index
        return None

    def add_recipient(self, recipient: Recipient) -> bool:
        """Append a recipient and persist. Refuses an existing id."""
        if self._recipient_index(recipient.id) is not None:
            logger.warning("duplicate_recipient_ignored", recipient_id=str(recipient.id))
            return False

        self._recipients.append(recipient)
        self._commit((LedgerCollection.RECIPIENTS, ChangeKind.ADDED, (recipient.id,)))
        logger.debug("recipient_added", recipient_id=str(recipient.id))
        return True

    def update_recipient(self, recipient: Recipient) -> bool:
        """Replace the recipient with the same id in place (e.g. a rename)."""
        index = self._recipient_index(recipient.id)
        if index is None:
            return False

        self._recipients[index] = recipient
        self._commit((LedgerCollection.RECIPIENTS, ChangeKind.UPDATED, (recipient.id,)))
        logger.debug("recipient_updated", recipient_id=str(recipient.id))
        return True

    def delete_recipient(self, recipient_id: UUID) -> bool:
        """Delete a recipient by id, unassigning its splits. No-op if missing."""
        index = self._recipient_index(recipient_id)
        if index is None:
            return False
        return self.delete_recipients_at([index])

    def delete_recipients_at(self, indices: Iterable[int]) -> bool:
        """
        Delete recipients by display position, cascading to splits.

        1. Every split owned by a deleted recipient is reassigned to
           unassigned. Splits are never removed; count and order are kept.
        2. Both collections are updated in memory first.
        3. The transaction collection is written once, only if a split
           changed; then the recipient collection is written once.

        The two writes are separate (no cross-key atomicity in the blob
        store). Transactions go first: if the process dies between them,
        the recipient is still listed but nothing dangles.
        """
        doomed_indices = {i for i in indices if 0 <= i < len(self._recipients)}
        if not doomed_indices:
            return False

        doomed = [r.id for i, r in enumerate(self._recipients) if i in doomed_indices]

        changed: list[UUID] = []
        updated: list[Transaction] = []
        for transaction in self._transactions:
            cleared = transaction.without_recipients(doomed)
            if cleared is not transaction:
                changed.append(transaction.id)
            updated.append(cleared)

        if changed:
            self._transactions = updated
        self._recipients = [r for i, r in enumerate(self._recipients) if i not in doomed_indices]

        commits = []
        if changed:
            commits.append((LedgerCollection.TRANSACTIONS, ChangeKind.CASCADED, changed))
        commits.append((LedgerCollection.RECIPIENTS, ChangeKind.DELETED, doomed))
        self._commit(*commits)

        logger.info(
            "recipients_deleted",
            recipient_ids=[str(i) for i in doomed],
            transactions_unassigned=len(changed),
        )
        return True
