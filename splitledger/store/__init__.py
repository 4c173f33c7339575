"""Ledger store package."""

from splitledger.store.ledger_store import ChangeListener, LedgerStore

__all__ = ["ChangeListener", "LedgerStore"]
