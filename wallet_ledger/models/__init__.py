"""
Data Models Package

This package contains all Pydantic models used in the Wallet Ledger system.
All data flowing through the system must conform to these schemas.
"""

from wallet_ledger.models.ledger import (
    ChartTotals,
    DailyStatistics,
    LedgerSnapshot,
    Transaction,
    TransactionType,
    Wallet,
    WalletSummary,
    generate_id,
)
from wallet_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from wallet_ledger.models.validation import ValidationIssue

__all__ = [
    # Ledger models
    "ChartTotals",
    "DailyStatistics",
    "LedgerSnapshot",
    "Transaction",
    "TransactionType",
    "Wallet",
    "WalletSummary",
    "generate_id",
    # Validation models
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
