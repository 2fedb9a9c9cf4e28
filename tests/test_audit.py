"""
Tests for the audit logger and audit event models.
"""

from decimal import Decimal

import pytest

from wallet_ledger.audit import AuditLogger, create_correlation_id
from wallet_ledger.exceptions import InsufficientFundsError
from wallet_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from wallet_ledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    StorageConnectionError,
)


class BrokenAuditStorage(AuditStorageInterface):
    """Audit storage that cannot be written."""

    def append_event(self, event):
        raise StorageConnectionError("read-only filesystem")

    def get_events_by_entity(self, entity_type, entity_id):
        return []

    def get_recent_events(self, limit=100):
        return []


class TestAuditEvents:
    """Tests for audit event construction."""

    def test_wallet_created(self):
        """Test wallet creation event."""
        event = AuditEventBuilder.wallet_created("w1", "Savings", Decimal("100000"))
        assert event.event_type == AuditEventType.WALLET_CREATED
        assert event.entity_type == "wallet"
        assert event.entity_id == "w1"
        assert event.details["initial_balance"] == "100000"
        assert event.is_user_action

    def test_operation_rejected(self):
        """Test rejection event carries the error class."""
        event = AuditEventBuilder.operation_rejected(
            "transfer", "InsufficientFundsError", "not enough", "w1"
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "InsufficientFundsError"
        assert event.details == {"operation": "transfer"}

    def test_persistence_failed_is_error(self):
        """Test failed save severity."""
        event = AuditEventBuilder.persistence_failed("transfer", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.entity_id is None

    def test_to_log_dict(self):
        """Test structured log conversion."""
        correlation_id = create_correlation_id()
        event = AuditEventBuilder.transfer_completed("a", "b", Decimal("5"), correlation_id)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transfer_completed"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["to_wallet_id"] == "b"


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_without_storage(self):
        """Test that local-only logging reports success."""
        logger = AuditLogger()
        assert logger.storage is None
        assert logger.log(AuditEventBuilder.snapshot_loaded(2, "w1")) is True

    def test_log_to_storage(self):
        """Test that events reach the storage backend."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)

        logger.log_transaction_added("w1", "t1", "income", Decimal("10"), Decimal("10"))

        assert len(storage.events) == 1
        assert storage.events[0].event_type == AuditEventType.TRANSACTION_ADDED
        assert storage.events[0].details["type"] == "income"

    def test_storage_failure_is_not_raised(self):
        """Test that a broken audit backend never breaks the caller."""
        logger = AuditLogger(BrokenAuditStorage())
        assert logger.log(AuditEventBuilder.snapshot_loaded(1, None)) is False
        logger.log_wallet_renamed("w1", "A", "B")

    def test_log_operation_rejected(self):
        """Test logging a ledger error."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        error = InsufficientFundsError("w1", Decimal("5"), Decimal("10"))

        logger.log_operation_rejected("transfer", error, "w1")

        event = storage.events[0]
        assert event.error_code == "InsufficientFundsError"
        assert event.error_message == str(error)

    def test_log_error(self):
        """Test system error logging."""
        storage = InMemoryAuditStorage()
        AuditLogger(storage).log_error(
            "CorruptSnapshotError", "bad file", details={"operation": "open"}
        )
        event = storage.events[0]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.details["operation"] == "open"

    def test_transfer_events_share_correlation_id(self, store, audit_storage):
        """Test that a transfer is tagged with a correlation ID."""
        a = store.create_wallet("A", 10)
        b = store.create_wallet("B", 0)
        store.transfer(a.id, b.id, 5)

        transfer_event = audit_storage.events[-1]
        assert transfer_event.event_type == AuditEventType.TRANSFER_COMPLETED
        assert transfer_event.correlation_id is not None

    def test_event_json_round_trip(self):
        """Test that events survive JSON serialization."""
        event = AuditEventBuilder.wallet_deleted("w1", "Old", 3, "w2")
        restored = AuditEvent.model_validate_json(event.model_dump_json())
        assert restored == event


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
