"""
Main Orchestrator for SplitLedger

This module ties together the store, the validator and the reminder
scheduler, and defines the form-level flows a presentation layer calls:
1. Transaction create/edit/delete (form -> validate -> store -> reminder)
2. Recipient add/rename/delete

DESIGN DECISION: The orchestrator enforces the boundaries:
- No transaction reaches the store from a form without validation
- Reminder scheduling is best-effort and never blocks a save
- Components are constructed once, by create_ledger(), and passed
  explicitly; nothing here reaches for a hidden default store
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from splitledger.config import AppSettings, Settings, get_settings
from splitledger.logs import configure_logging, get_logger
from splitledger.models.forms import (
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)
from splitledger.models.ledger import (
    ExtraPrices,
    Recipient,
    Split,
    Transaction,
    TransactionNotification,
)
from splitledger.queries import LedgerQueries
from splitledger.services.notifications import (
    LoggingNotificationScheduler,
    NotificationSchedulerInterface,
)
from splitledger.services.storage import (
    BlobStoreInterface,
    FileBlobStore,
    InMemoryBlobStore,
)
from splitledger.store import LedgerStore
from splitledger.validation import TransactionValidator


logger = get_logger(__name__)


def reminder_fire_time(moment: datetime) -> datetime:
    """Reminders are calendar triggers with minute resolution."""
    return moment.replace(second=0, microsecond=0)


def _not_found(entity: str, entity_id: UUID) -> ValidationResult:
    return ValidationResult(issues=[
        ValidationIssue(
            field="id",
            issue_type="not_found",
            message=f"{entity.capitalize()} {entity_id} no longer exists",
            severity="error",
        ),
    ])


class LedgerService:
    """
    Form-level operations on the ledger.

    Flow for a new transaction:
    1. Validate the draft (full rules)
    2. Build the Transaction (fresh ids, reminder record if enabled)
    3. Add it to the store (which persists)
    4. Schedule the reminder (best-effort)
    """

    def __init__(
        self,
        store: LedgerStore,
        validator: Optional[TransactionValidator] = None,
        scheduler: Optional[NotificationSchedulerInterface] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._store = store
        self._settings = settings or AppSettings()
        self._validator = validator or TransactionValidator(store, self._settings)
        self._scheduler = scheduler or LoggingNotificationScheduler()

    @property
    def store(self) -> LedgerStore:
        return self._store

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def create_transaction(
        self,
        draft: TransactionDraft,
    ) -> tuple[Optional[Transaction], ValidationResult]:
        """
        Create a transaction from the add form.

        Returns:
            (transaction, validation_result)

        transaction is None when validation found errors.
        """
        result = self._validator.validate_new(draft)
        if result.has_errors:
            logger.info("transaction_rejected", errors=result.error_count)
            return None, result

        transaction = self._build_transaction(uuid4(), draft)
        if not self._store.add_transaction(transaction):
            return None, result

        if transaction.notification is not None:
            self._sync_reminder(transaction)

        logger.info(
            "transaction_created",
            transaction_id=str(transaction.id),
            splits=len(transaction.splits),
            total=str(transaction.total_amount),
        )
        return transaction, result

    def edit_transaction(
        self,
        transaction_id: UUID,
        draft: TransactionDraft,
    ) -> tuple[Optional[Transaction], ValidationResult]:
        """
        Apply the edit form to an existing transaction.

        The id and the ids of kept splits are preserved. Turning the reminder
        off cancels any pending one.
        """
        if self._store.get_transaction(transaction_id) is None:
            return None, _not_found("transaction", transaction_id)

        result = self._validator.validate_edit(draft)
        if result.has_errors:
            logger.info(
                "transaction_edit_rejected",
                transaction_id=str(transaction_id),
                errors=result.error_count,
            )
            return None, result

        transaction = self._build_transaction(transaction_id, draft)
        if not self._store.update_transaction(transaction):
            return None, _not_found("transaction", transaction_id)

        self._sync_reminder(transaction)
        return transaction, result

    def delete_transaction(self, transaction_id: UUID) -> bool:
        """Delete a transaction and cancel its reminder."""
        if not self._store.delete_transaction(transaction_id):
            return False

        try:
            self._scheduler.cancel(str(transaction_id))
        except Exception as e:
            logger.warning(
                "reminder_cancel_failed",
                transaction_id=str(transaction_id),
                error=str(e),
            )
        return True

    def _build_transaction(self, transaction_id: UUID, draft: TransactionDraft) -> Transaction:
        notification = None
        if draft.reminder_enabled and draft.reminder_time is not None:
            notification = TransactionNotification(
                name=f"{self._settings.reminder_title} for {draft.name}",
                time=draft.reminder_time,
            )

        return Transaction(
            id=transaction_id,
            name=draft.name,
            note=draft.note,
            notification=notification,
            splits=tuple(
                Split(
                    id=split.id or uuid4(),
                    recipient_id=split.recipient_id,
                    price=split.price,
                )
                for split in draft.splits
            ),
            extra_prices=ExtraPrices(tax=draft.tax, tip=draft.tip),
        )

    def _sync_reminder(self, transaction: Transaction) -> None:
        """Schedule (or cancel) the transaction's reminder. Never raises."""
        identifier = str(transaction.id)
        notification = transaction.notification
        try:
            if notification is None:
                self._scheduler.cancel(identifier)
            else:
                self._scheduler.schedule(
                    identifier=identifier,
                    title=self._settings.reminder_title,
                    body=f"Payment due for: {transaction.name}",
                    fire_at=reminder_fire_time(notification.time),
                )
        except Exception as e:
            logger.warning(
                "reminder_schedule_failed",
                transaction_id=identifier,
                error=str(e),
            )

    # -------------------------------------------------------------------------
    # Recipients
    # -------------------------------------------------------------------------

    def add_recipient(self, name: str) -> tuple[Optional[Recipient], ValidationResult]:
        """Create a recipient from the entered name."""
        result = self._validator.validate_recipient_name(name)
        if result.has_errors:
            return None, result

        recipient = Recipient(name=name.strip())
        if not self._store.add_recipient(recipient):
            return None, result
        return recipient, result

    def rename_recipient(
        self,
        recipient_id: UUID,
        name: str,
    ) -> tuple[Optional[Recipient], ValidationResult]:
        """Rename in place. Splits keep pointing at the recipient by id."""
        recipient = self._store.get_recipient(recipient_id)
        if recipient is None:
            return None, _not_found("recipient", recipient_id)

        result = self._validator.validate_recipient_name(name, recipient_id=recipient_id)
        if result.has_errors:
            return None, result

        renamed = recipient.model_copy(update={"name": name.strip()})
        self._store.update_recipient(renamed)
        return renamed, result

    def delete_recipient(self, recipient_id: UUID) -> bool:
        """Delete a recipient; its splits become unassigned."""
        return self._store.delete_recipient(recipient_id)


def create_blob_store(settings: Settings) -> BlobStoreInterface:
    """Blob store backend selected by SPLITLEDGER_STORAGE_BACKEND."""
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryBlobStore()
    return FileBlobStore(storage.data_dir, write_attempts=storage.write_retry_attempts)


def create_ledger(
    settings: Optional[Settings] = None,
    blob_store: Optional[BlobStoreInterface] = None,
    scheduler: Optional[NotificationSchedulerInterface] = None,
) -> tuple[LedgerStore, LedgerService, LedgerQueries]:
    """
    Factory function to create all application components.

    Call once at startup and hand the results to every consumer.

    Args:
        settings: Settings to use. Loaded from the environment if None.
        blob_store: Backend override (tests, platform stores).
                    Chosen from settings if None.
        scheduler: Platform reminder scheduler. Logs only if None.

    Returns:
        (store, service, queries), with the store already loaded
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)

    storage = settings.storage
    if blob_store is None:
        blob_store = create_blob_store(settings)

    store = LedgerStore.from_settings(
        blob_store,
        storage,
        settings.policy,
    )
    store.load()

    app_settings = settings.app
    service = LedgerService(
        store,
        validator=TransactionValidator(store, app_settings),
        scheduler=scheduler,
        settings=app_settings,
    )

    return store, service, LedgerQueries(store)
