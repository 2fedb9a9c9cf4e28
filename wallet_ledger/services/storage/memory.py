"""
In-Memory Storage Implementation

Used for tests and for session-only ledgers when no file storage is
configured. Snapshots are kept as JSON text, so a save/load round trip goes
through the same serialization as the file backend.
"""

from typing import Optional

from pydantic import ValidationError as SchemaValidationError

from wallet_ledger.models.audit import AuditEvent
from wallet_ledger.models.ledger import LedgerSnapshot
from wallet_ledger.services.storage.interface import (
    AuditStorageInterface,
    CorruptSnapshotError,
    SnapshotStorageInterface,
)


class InMemorySnapshotStorage(SnapshotStorageInterface):
    """Snapshot storage that lives as long as the object does."""

    def __init__(self, data: Optional[str] = None):
        self._data = data
        self.save_count = 0

    @property
    def data(self) -> Optional[str]:
        """The raw JSON text of the last save."""
        return self._data

    def load(self) -> Optional[LedgerSnapshot]:
        if self._data is None:
            return None
        try:
            return LedgerSnapshot.from_json(self._data)
        except SchemaValidationError as e:
            raise CorruptSnapshotError(f"Invalid in-memory snapshot: {e}")

    def save(self, snapshot: LedgerSnapshot) -> None:
        self._data = snapshot.to_json()
        self.save_count += 1


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit storage kept in a list, oldest first."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            event for event in self.events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = list(reversed(self.events))
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
