"""
Ledger Errors

Every error here is raised BEFORE the store mutates anything, so a caller
that catches one can show the message and carry on with an unchanged ledger.
"""

from decimal import Decimal
from typing import Optional

from wallet_ledger.models.validation import ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Bad or missing input: amount, same source/destination, zero adjustment."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class NotFoundError(LedgerError):
    """Referenced wallet or transaction does not exist."""

    def __init__(self, entity_type: str, entity_id: Optional[str]):
        super().__init__(f"{entity_type.capitalize()} not found: {entity_id}")
        self.entity_type = entity_type
        self.entity_id = entity_id


class InsufficientFundsError(LedgerError):
    """Transfer amount exceeds the source wallet balance."""

    def __init__(self, wallet_id: str, balance: Decimal, requested: Decimal):
        super().__init__(
            f"Wallet {wallet_id} has {balance}, cannot transfer {requested}"
        )
        self.wallet_id = wallet_id
        self.balance = balance
        self.requested = requested


class LastWalletError(LedgerError):
    """Attempt to delete the only remaining wallet."""

    def __init__(self, wallet_id: str):
        super().__init__("Cannot delete the last remaining wallet")
        self.wallet_id = wallet_id


class LedgerIntegrityError(LedgerError):
    """A wallet balance no longer matches its transactions."""

    def __init__(self, mismatches: dict[str, tuple[Decimal, Decimal]]):
        details = ", ".join(
            f"{wallet_id}: {balance} != {expected}"
            for wallet_id, (balance, expected) in mismatches.items()
        )
        super().__init__(f"Balance mismatch in wallets: {details}")
        self.mismatches = mismatches
