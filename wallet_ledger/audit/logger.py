"""
Audit Logger

DESIGN DECISION: Every ledger mutation is logged.
This provides:
1. Complete traceability of balance changes
2. Debugging capability
3. User can see history of their actions

The audit logger:
- Is synchronous, like the ledger that calls it
- Gracefully handles storage failures (doesn't break the ledger if logging fails)
- Supports correlation IDs to trace related events
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from wallet_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from wallet_ledger.services.storage import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility), if configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("wallet_ledger.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_wallet_created(
        self,
        wallet_id: str,
        name: str,
        initial_balance: Decimal,
    ) -> None:
        """Log wallet creation."""
        self.log(AuditEventBuilder.wallet_created(
            wallet_id=wallet_id,
            name=name,
            initial_balance=initial_balance,
        ))

    def log_wallet_renamed(
        self,
        wallet_id: str,
        old_name: str,
        new_name: str,
    ) -> None:
        """Log wallet rename."""
        self.log(AuditEventBuilder.wallet_renamed(
            wallet_id=wallet_id,
            old_name=old_name,
            new_name=new_name,
        ))

    def log_wallet_deleted(
        self,
        wallet_id: str,
        name: str,
        transaction_count: int,
        new_active_wallet_id: Optional[str],
    ) -> None:
        """Log wallet deletion."""
        self.log(AuditEventBuilder.wallet_deleted(
            wallet_id=wallet_id,
            name=name,
            transaction_count=transaction_count,
            new_active_wallet_id=new_active_wallet_id,
        ))

    def log_active_wallet_changed(
        self,
        wallet_id: str,
        previous_wallet_id: Optional[str],
    ) -> None:
        self.log(AuditEventBuilder.active_wallet_changed(
            wallet_id=wallet_id,
            previous_wallet_id=previous_wallet_id,
        ))

    def log_transaction_added(
        self,
        wallet_id: str,
        transaction_id: str,
        transaction_type: str,
        amount: Decimal,
        balance: Decimal,
    ) -> None:
        """Log an income or expense entry."""
        self.log(AuditEventBuilder.transaction_added(
            wallet_id=wallet_id,
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            balance=balance,
        ))

    def log_balance_adjusted(
        self,
        wallet_id: str,
        transaction_id: str,
        amount: Decimal,
        balance: Decimal,
    ) -> None:
        """Log a manual adjustment."""
        self.log(AuditEventBuilder.balance_adjusted(
            wallet_id=wallet_id,
            transaction_id=transaction_id,
            amount=amount,
            balance=balance,
        ))

    def log_transfer_completed(
        self,
        from_wallet_id: str,
        to_wallet_id: str,
        amount: Decimal,
        correlation_id: UUID,
    ) -> None:
        """Log a completed transfer."""
        self.log(AuditEventBuilder.transfer_completed(
            from_wallet_id=from_wallet_id,
            to_wallet_id=to_wallet_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_transaction_deleted(
        self,
        wallet_id: str,
        transaction_id: str,
        amount: Decimal,
        balance: Decimal,
    ) -> None:
        """Log transaction removal."""
        self.log(AuditEventBuilder.transaction_deleted(
            wallet_id=wallet_id,
            transaction_id=transaction_id,
            amount=amount,
            balance=balance,
        ))

    def log_operation_rejected(
        self,
        operation: str,
        error: Exception,
        entity_id: Optional[str] = None,
    ) -> None:
        """Log an operation the ledger refused."""
        self.log(AuditEventBuilder.operation_rejected(
            operation=operation,
            error_type=type(error).__name__,
            error_message=str(error),
            entity_id=entity_id,
        ))

    def log_snapshot_loaded(
        self,
        wallet_count: int,
        active_wallet_id: Optional[str],
    ) -> None:
        self.log(AuditEventBuilder.snapshot_loaded(
            wallet_count=wallet_count,
            active_wallet_id=active_wallet_id,
        ))

    def log_persistence_failed(
        self,
        operation: str,
        error_message: str,
    ) -> None:
        """Log a failed snapshot save."""
        self.log(AuditEventBuilder.persistence_failed(
            operation=operation,
            error_message=error_message,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Used to tie together the two legs of a transfer.
    """
    return uuid4()
