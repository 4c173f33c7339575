"""
Ledger Queries

DESIGN DECISION: Totals are computed on demand from the store's current
snapshot. Nothing is cached, so a rename or a cascading delete is
reflected on the very next call. At personal-ledger scale a full scan per
query is cheap; a larger ledger would want an index by recipient id.

Shares are split prices only. Tax and tip belong to the transaction
total and are not apportioned to recipients.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from splitledger.models.ledger import ZERO
from splitledger.models.reports import (
    RecipientLine,
    RecipientSummary,
    RecipientTotal,
)
from splitledger.store import LedgerStore


class LedgerQueries:
    """
    Read-only "who owes what" views over a LedgerStore.

    GUARANTEES:
    - Only reads from the store, never mutates it
    - Recipients are reported in store (display) order
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    def totals_by_recipient(self) -> list[RecipientTotal]:
        """One row per recipient, including recipients with nothing owed."""
        amounts: dict[UUID, Decimal] = {}
        counts: dict[UUID, int] = {}

        for transaction in self._store.transactions:
            seen = set()
            for split in transaction.splits:
                if split.recipient_id is None:
                    continue
                amounts[split.recipient_id] = amounts.get(split.recipient_id, ZERO) + split.price
                seen.add(split.recipient_id)
            for recipient_id in seen:
                counts[recipient_id] = counts.get(recipient_id, 0) + 1

        return [
            RecipientTotal(
                recipient_id=recipient.id,
                name=recipient.name,
                amount=amounts.get(recipient.id, ZERO),
                transaction_count=counts.get(recipient.id, 0),
            )
            for recipient in self._store.recipients
        ]

    def amount_owed_by(self, recipient_id: UUID) -> Decimal:
        """Sum of one recipient's split prices across all transactions."""
        return sum(
            (t.share_of(recipient_id) for t in self._store.transactions_for_recipient(recipient_id)),
            ZERO,
        )

    def unassigned_total(self) -> Decimal:
        """Sum of split prices not attributed to anyone."""
        return sum((t.share_of(None) for t in self._store.transactions), ZERO)

    def grand_total(self) -> Decimal:
        """Sum of every transaction total (splits, tax and tip)."""
        return sum((t.total_amount for t in self._store.transactions), ZERO)

    def recipient_summary(self, recipient_id: UUID) -> Optional[RecipientSummary]:
        """
        A recipient's transactions with their share of each.

        Returns None for an unknown recipient.
        """
        recipient = self._store.get_recipient(recipient_id)
        if recipient is None:
            return None

        lines = [
            RecipientLine(
                transaction_id=transaction.id,
                transaction_name=transaction.name,
                share=transaction.share_of(recipient_id),
                transaction_total=transaction.total_amount,
            )
            for transaction in self._store.transactions_for_recipient(recipient_id)
        ]

        return RecipientSummary(
            recipient_id=recipient.id,
            name=recipient.name,
            lines=lines,
        )
