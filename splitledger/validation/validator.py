"""
Form Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - STRUCTURAL:
- Name presence
- At least one split
- Price and extra-charge signs

STAGE 2 - REFERENTIAL / SEMANTIC:
- Every assigned split points at a live recipient
- Reminder has a time, and that time is not already past
- Absurd total detection

Stage 2 needs the store (for live recipients); without one, the
recipient check is skipped.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the form can show them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from splitledger.config import AppSettings
from splitledger.models.forms import (
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)
from splitledger.store import LedgerStore


class TransactionValidator:
    """
    Validates transaction and recipient forms before they reach the store.

    New transactions get the full rule set. Edits skip the positive-price
    rule and only warn on a blank name.
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        settings: Optional[AppSettings] = None,
    ):
        """
        Initialize validator.

        Args:
            store: Store used to check recipient references.
                   If None, recipient checks are skipped.
            settings: App settings (for the total sanity threshold).
        """
        self._store = store
        self._settings = settings or AppSettings()

    def validate_new(self, draft: TransactionDraft) -> ValidationResult:
        """Validate the add-transaction form."""
        issues = self._validate_structure(draft, editing=False)
        issues.extend(self._validate_semantic(draft))
        return ValidationResult(issues=issues)

    def validate_edit(self, draft: TransactionDraft) -> ValidationResult:
        """Validate the edit-transaction form."""
        issues = self._validate_structure(draft, editing=True)
        issues.extend(self._validate_semantic(draft))
        return ValidationResult(issues=issues)

    def validate_recipient_name(
        self,
        name: str,
        recipient_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """
        Validate a recipient name for add or rename.

        Args:
            name: The entered name
            recipient_id: The recipient being renamed, excluded from the
                          duplicate check
        """
        issues = []
        cleaned = name.strip()

        if not cleaned:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Recipient name cannot be empty",
                severity="error",
            ))
        elif self._store is not None:
            clash = any(
                r.name.strip().casefold() == cleaned.casefold() and r.id != recipient_id
                for r in self._store.recipients
            )
            if clash:
                issues.append(ValidationIssue(
                    field="name",
                    issue_type="duplicate",
                    message=f"Another recipient is already named '{cleaned}'",
                    severity="warning",
                    suggested_fix="Use a distinguishing name to avoid mix-ups",
                ))

        return ValidationResult(issues=issues)

    def _validate_structure(
        self,
        draft: TransactionDraft,
        editing: bool,
    ) -> list[ValidationIssue]:
        """
        Stage 1: structural checks.

        Returns: list_of_issues
        """
        issues = []

        if not draft.name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Transaction name is required",
                severity="warning" if editing else "error",
                suggested_fix="Give the transaction a short name, e.g. 'Dinner'",
            ))

        if not draft.splits:
            issues.append(ValidationIssue(
                field="splits",
                issue_type="missing",
                message="A transaction needs at least one split",
                severity="error",
                suggested_fix="Add a split with the amount owed",
            ))

        if not editing:
            for index, split in enumerate(draft.splits):
                if split.price <= 0:
                    issues.append(ValidationIssue(
                        field=f"splits[{index}].price",
                        issue_type="invalid_value",
                        message=f"Split {index + 1} must have an amount greater than zero",
                        severity="error",
                    ))

        for field, amount in (("tax", draft.tax), ("tip", draft.tip)):
            if amount < 0:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_value",
                    message=f"{field.capitalize()} cannot be negative",
                    severity="error",
                    suggested_fix="Enter 0 if there is none",
                ))

        return issues

    def _validate_semantic(self, draft: TransactionDraft) -> list[ValidationIssue]:
        """
        Stage 2: references and sanity checks.

        Returns: list_of_issues
        """
        issues = []

        if self._store is not None:
            live = {r.id for r in self._store.recipients}
            for index, split in enumerate(draft.splits):
                if split.recipient_id is not None and split.recipient_id not in live:
                    issues.append(ValidationIssue(
                        field=f"splits[{index}].recipient_id",
                        issue_type="unknown_recipient",
                        message=f"Split {index + 1} points at a recipient that no longer exists",
                        severity="error",
                        suggested_fix="Pick another recipient or leave the split unassigned",
                    ))

        if draft.reminder_enabled:
            if draft.reminder_time is None:
                issues.append(ValidationIssue(
                    field="reminder_time",
                    issue_type="missing",
                    message="Reminder is enabled but has no time",
                    severity="error",
                ))
            elif _as_aware(draft.reminder_time) < datetime.now(timezone.utc):
                issues.append(ValidationIssue(
                    field="reminder_time",
                    issue_type="past_date",
                    message="Reminder time is in the past and will never fire",
                    severity="warning",
                    suggested_fix="Pick a future date and time",
                ))

        limit = Decimal(str(self._settings.max_transaction_amount))
        if draft.total > limit:
            issues.append(ValidationIssue(
                field="total",
                issue_type="suspicious_value",
                message=f"Total {draft.total} is unusually large (over {limit})",
                severity="warning",
                suggested_fix="Please verify the amounts are correct",
            ))

        return issues


def _as_aware(moment: datetime) -> datetime:
    """Naive datetimes are local wall-clock times, as a form picker yields."""
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment
