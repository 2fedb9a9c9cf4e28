"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for browser storage, SQLite or anything else later
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from storage implementation

The ledger persists a whole snapshot after every mutation; there is no
per-wallet or per-transaction table.
"""

from abc import ABC, abstractmethod
from typing import Optional

from wallet_ledger.models.audit import AuditEvent
from wallet_ledger.models.ledger import LedgerSnapshot


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for ledger snapshot storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> Optional[LedgerSnapshot]:
        """
        Load the last saved snapshot.

        Returns:
            The snapshot, or None if nothing has been saved yet

        Raises:
            CorruptSnapshotError: If stored data cannot be parsed
            StorageConnectionError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save(self, snapshot: LedgerSnapshot) -> None:
        """
        Replace the stored snapshot.

        Raises:
            StorageError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """Stored data exists but is not a valid snapshot."""
    pass


class StorageConnectionError(StorageError):
    """Could not read from or write to the storage backend."""
    pass
