"""
Form and Validation Models

Drafts are the raw values a presentation layer collects from its
add/edit forms. They are deliberately permissive: negative tips or zero
prices are representable here so the validator can report them instead
of the form crashing on them.

Only a draft that passed validation is turned into a Transaction.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from splitledger.models.ledger import ZERO, Transaction


# =============================================================================
# DRAFTS
# =============================================================================

class SplitDraft(BaseModel):
    """One row of the splits section of a transaction form."""

    id: Optional[UUID] = Field(
        default=None,
        description="Existing split ID when editing; None for a new row"
    )
    recipient_id: Optional[UUID] = Field(
        default=None,
        description="Selected recipient, None for unassigned"
    )
    price: Decimal = ZERO


class TransactionDraft(BaseModel):
    """Values entered in the add/edit transaction form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    note: str = ""
    splits: list[SplitDraft] = Field(default_factory=lambda: [SplitDraft()])
    tax: Decimal = ZERO
    tip: Decimal = ZERO
    reminder_enabled: bool = False
    reminder_time: Optional[datetime] = None

    @property
    def total(self) -> Decimal:
        return sum((split.price for split in self.splits), ZERO) + self.tax + self.tip

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        """Pre-fill an edit form from a stored transaction."""
        notification = transaction.notification
        return cls(
            name=transaction.name,
            note=transaction.note,
            splits=[
                SplitDraft(id=split.id, recipient_id=split.recipient_id, price=split.price)
                for split in transaction.splits
            ],
            tax=transaction.extra_prices.tax,
            tip=transaction.extra_prices.tip,
            reminder_enabled=notification is not None,
            reminder_time=notification.time if notification else None,
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_recipient')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating a form.

    Warnings never block; any error does.
    """

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    def issues_for(self, field: str) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.field == field]
