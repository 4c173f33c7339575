"""
Data Models Package

This package contains all Pydantic models used in SplitLedger.
Everything the store persists or publishes conforms to these schemas.
"""

from splitledger.models.ledger import (
    UNASSIGNED_RECIPIENT_ID,
    ExtraPrices,
    Recipient,
    Split,
    Transaction,
    TransactionNotification,
)
from splitledger.models.events import (
    ChangeEvent,
    ChangeKind,
    LedgerCollection,
)
from splitledger.models.forms import (
    SplitDraft,
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)
from splitledger.models.reports import (
    RecipientLine,
    RecipientSummary,
    RecipientTotal,
)

__all__ = [
    # Ledger models
    "UNASSIGNED_RECIPIENT_ID",
    "ExtraPrices",
    "Recipient",
    "Split",
    "Transaction",
    "TransactionNotification",
    # Change events
    "ChangeEvent",
    "ChangeKind",
    "LedgerCollection",
    # Forms
    "SplitDraft",
    "TransactionDraft",
    "ValidationIssue",
    "ValidationResult",
    # Reports
    "RecipientLine",
    "RecipientSummary",
    "RecipientTotal",
]
