"""Ledger query package."""

from splitledger.queries.totals import LedgerQueries

__all__ = ["LedgerQueries"]
