"""
SplitLedger - Source Package

A personal expense-splitting ledger: transactions are split across
recipients, tax and tip are added on top, and totals owed per recipient
are derived on demand.

DESIGN PRINCIPLES:
1. One authoritative store, passed explicitly to every consumer
2. Every mutation persists the full collection snapshot
3. Deleting a recipient never leaves a dangling split
4. Fail open by default, fail loud when configured
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SplitLedger Team"
