"""Ledger package."""

from wallet_ledger.ledger.store import ChangeListener, LedgerStore

__all__ = ["ChangeListener", "LedgerStore"]
