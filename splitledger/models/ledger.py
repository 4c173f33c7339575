"""
Core Data Models for SplitLedger

These models define the schemas for everything the ledger persists.
They are designed to:
1. Keep money exact (Decimal, never float)
2. Serialize to the persisted wire format (camelCase field names)
3. Be immutable, so snapshots handed to callers cannot drift from storage

DESIGN DECISION: A split's recipient reference is Optional[UUID].
None means "unassigned". The nil UUID is only a wire encoding for that state
and is never a valid recipient id, so no real id can collide with it.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel


# Wire encoding of an unassigned split
UNASSIGNED_RECIPIENT_ID = UUID(int=0)

ZERO = Decimal("0")

# Numeric timestamps in legacy blobs count seconds from this date, not 1970
LEGACY_DATE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def legacy_timestamp(value):
    """Read a numeric legacy timestamp as seconds since LEGACY_DATE_EPOCH."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return LEGACY_DATE_EPOCH + timedelta(seconds=value)
    return value


class LedgerModel(BaseModel):
    """Shared config: frozen, camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# RECIPIENTS
# =============================================================================

class Recipient(LedgerModel):
    """
    A person who owes (or is owed) a share of a transaction.

    Names are display-only. Splits always point at recipients by id,
    so a rename is visible everywhere immediately.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique recipient ID (never reused)"
    )
    name: str = Field(
        ...,
        description="Display name"
    )
    date_added: datetime = Field(
        default_factory=utc_now,
        description="When the recipient was created"
    )

    @field_validator('date_added', mode='before')
    @classmethod
    def read_legacy_date(cls, v):
        return legacy_timestamp(v)

    @field_validator('id')
    @classmethod
    def reject_reserved_id(cls, v: UUID) -> UUID:
        """The nil UUID encodes 'unassigned' and cannot name a recipient."""
        if v == UNASSIGNED_RECIPIENT_ID:
            raise ValueError("The nil UUID is reserved for unassigned splits")
        return v


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Split(LedgerModel):
    """
    A portion of a transaction's cost attributed to one recipient.

    recipient_id is None when the split is unassigned.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique split ID (distinct from recipient IDs)"
    )
    recipient_id: Optional[UUID] = Field(
        default=None,
        description="Owning recipient, or None when unassigned"
    )
    price: Decimal = Field(
        ...,
        description="Amount charged to this split"
    )

    @field_validator('recipient_id')
    @classmethod
    def nil_means_unassigned(cls, v: Optional[UUID]) -> Optional[UUID]:
        if v == UNASSIGNED_RECIPIENT_ID:
            return None
        return v

    @field_serializer('recipient_id', when_used='json')
    def serialize_recipient_id(self, v: Optional[UUID]) -> str:
        return str(v if v is not None else UNASSIGNED_RECIPIENT_ID)

    @property
    def is_assigned(self) -> bool:
        return self.recipient_id is not None

    def unassigned(self) -> "Split":
        """Copy of this split with its recipient cleared."""
        return self.model_copy(update={"recipient_id": None})


class ExtraPrices(LedgerModel):
    """Charges added on top of the splits."""

    tax: Decimal = Field(default=ZERO, ge=0)
    tip: Decimal = Field(default=ZERO, ge=0)

    @property
    def total(self) -> Decimal:
        return self.tax + self.tip


class TransactionNotification(LedgerModel):
    """Payment reminder attached to a transaction."""

    name: str
    time: datetime

    @field_validator('time', mode='before')
    @classmethod
    def read_legacy_time(cls, v):
        return legacy_timestamp(v)


class Transaction(LedgerModel):
    """
    A recorded purchase, split across recipients.

    total_amount is always derived from the splits and extra prices.
    It is never stored.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    name: str = Field(
        ...,
        description="Display name"
    )
    note: str = Field(
        default="",
        description="Free-text note"
    )
    notification: Optional[TransactionNotification] = Field(
        default=None,
        description="Optional payment reminder"
    )
    splits: tuple[Split, ...] = Field(
        default=(),
        description="Splits in display order"
    )
    extra_prices: ExtraPrices = Field(
        default_factory=ExtraPrices,
        description="Tax and tip"
    )

    @property
    def split_total(self) -> Decimal:
        return sum((split.price for split in self.splits), ZERO)

    @property
    def total_amount(self) -> Decimal:
        """sum(split prices) + tax + tip"""
        return self.split_total + self.extra_prices.total

    def involves(self, recipient_id: UUID) -> bool:
        """Does any split belong to this recipient?"""
        return any(split.recipient_id == recipient_id for split in self.splits)

    def share_of(self, recipient_id: Optional[UUID]) -> Decimal:
        """
        Sum of split prices attributed to a recipient.

        Pass None for the unassigned share. Tax and tip are not apportioned.
        """
        return sum(
            (split.price for split in self.splits if split.recipient_id == recipient_id),
            ZERO,
        )

    def without_recipients(self, recipient_ids: Iterable[UUID]) -> "Transaction":
        """
        Reassign splits owned by any of recipient_ids to unassigned.

        Returns self unchanged (same object) when no split matched, so callers
        can detect a change with an identity check. Split count and order are
        preserved.
        """
        doomed = set(recipient_ids)
        if not any(split.recipient_id in doomed for split in self.splits):
            return self

        splits = tuple(
            split.unassigned() if split.recipient_id in doomed else split
            for split in self.splits
        )
        return self.model_copy(update={"splits": splits})
