"""
Report Models

Read-only rows produced by the query layer for "who owes what" screens.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class RecipientTotal(BaseModel):
    """Total of all splits attributed to one recipient."""

    recipient_id: UUID
    name: str
    amount: Decimal = Field(
        ...,
        description="Sum of the recipient's split prices (tax/tip excluded)"
    )
    transaction_count: int = Field(ge=0)


class RecipientLine(BaseModel):
    """One transaction as seen from a recipient's detail screen."""

    transaction_id: UUID
    transaction_name: str
    share: Decimal
    transaction_total: Decimal


class RecipientSummary(BaseModel):
    """Everything a recipient detail screen shows."""

    recipient_id: UUID
    name: str
    lines: list[RecipientLine] = Field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((line.share for line in self.lines), Decimal("0"))

    @property
    def has_transactions(self) -> bool:
        return len(self.lines) > 0
