"""
Audit Models for Wallet Ledger

Every ledger mutation, and every rejected attempt at one, is logged.
This provides:
1. Complete traceability of balance changes
2. Debugging information when things go wrong
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Wallet lifecycle
    WALLET_CREATED = "wallet_created"
    WALLET_RENAMED = "wallet_renamed"
    WALLET_DELETED = "wallet_deleted"
    ACTIVE_WALLET_CHANGED = "active_wallet_changed"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    BALANCE_ADJUSTED = "balance_adjusted"
    TRANSFER_COMPLETED = "transfer_completed"
    TRANSACTION_DELETED = "transaction_deleted"

    # Rejections
    OPERATION_REJECTED = "operation_rejected"

    # Persistence
    SNAPSHOT_LOADED = "snapshot_loaded"
    PERSISTENCE_FAILED = "persistence_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every ledger mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'wallet', 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., both legs of a transfer)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.wallet_created(wallet_id, name, balance)
        event = AuditEventBuilder.operation_rejected("transfer", "ValidationError", msg)
    """

    @staticmethod
    def wallet_created(
        wallet_id: str,
        name: str,
        initial_balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WALLET_CREATED,
            entity_type="wallet",
            entity_id=wallet_id,
            description=f"Wallet created: {name}",
            details={
                "name": name,
                "initial_balance": str(initial_balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def wallet_renamed(
        wallet_id: str,
        old_name: str,
        new_name: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WALLET_RENAMED,
            entity_type="wallet",
            entity_id=wallet_id,
            description=f"Wallet renamed: {old_name} -> {new_name}",
            details={
                "old_name": old_name,
                "new_name": new_name,
            },
            is_user_action=True,
        )

    @staticmethod
    def wallet_deleted(
        wallet_id: str,
        name: str,
        transaction_count: int,
        new_active_wallet_id: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WALLET_DELETED,
            entity_type="wallet",
            entity_id=wallet_id,
            description=f"Wallet deleted: {name}",
            details={
                "name": name,
                "transaction_count": transaction_count,
                "new_active_wallet_id": new_active_wallet_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def active_wallet_changed(
        wallet_id: str,
        previous_wallet_id: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTIVE_WALLET_CHANGED,
            severity=AuditSeverity.DEBUG,
            entity_type="wallet",
            entity_id=wallet_id,
            description="Active wallet changed",
            details={
                "previous_wallet_id": previous_wallet_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_added(
        wallet_id: str,
        transaction_id: str,
        transaction_type: str,
        amount: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="wallet",
            entity_id=wallet_id,
            description=f"{transaction_type.capitalize()} recorded: {amount}",
            details={
                "transaction_id": transaction_id,
                "type": transaction_type,
                "amount": str(amount),
                "balance": str(balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def balance_adjusted(
        wallet_id: str,
        transaction_id: str,
        amount: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_ADJUSTED,
            entity_type="wallet",
            entity_id=wallet_id,
            description=f"Balance adjusted by {amount}",
            details={
                "transaction_id": transaction_id,
                "amount": str(amount),
                "balance": str(balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def transfer_completed(
        from_wallet_id: str,
        to_wallet_id: str,
        amount: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSFER_COMPLETED,
            entity_type="wallet",
            entity_id=from_wallet_id,
            correlation_id=correlation_id,
            description=f"Transferred {amount} between wallets",
            details={
                "from_wallet_id": from_wallet_id,
                "to_wallet_id": to_wallet_id,
                "amount": str(amount),
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        wallet_id: str,
        transaction_id: str,
        amount: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="wallet",
            entity_id=wallet_id,
            description=f"Transaction deleted: {amount} reverted",
            details={
                "transaction_id": transaction_id,
                "amount": str(amount),
                "balance": str(balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        error_type: str,
        error_message: str,
        entity_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="wallet" if entity_id else None,
            entity_id=entity_id,
            description=f"Operation rejected: {operation}",
            error_code=error_type,
            error_message=error_message,
            details={
                "operation": operation,
            },
            is_user_action=True,
        )

    @staticmethod
    def snapshot_loaded(
        wallet_count: int,
        active_wallet_id: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            description=f"Ledger loaded with {wallet_count} wallets",
            details={
                "wallet_count": wallet_count,
                "active_wallet_id": active_wallet_id,
            },
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not persist ledger after {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
