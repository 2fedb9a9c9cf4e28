"""Validation package."""

from wallet_ledger.validation.validator import LedgerValidator

__all__ = ["LedgerValidator"]
