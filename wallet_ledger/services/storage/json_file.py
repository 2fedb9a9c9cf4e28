"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document is the default backend because:
1. It is exactly the snapshot shape the browser tracker kept in localStorage
2. Users can open and back up the file by hand
3. No database setup required

TRADEOFFS:
- The whole ledger is rewritten on every mutation (fine for personal use)
- Writes go to a temp file first and are swapped in with os.replace,
  so a crash mid-write never leaves a half-written snapshot behind

The audit log is a separate JSON-lines file, appended one event per line.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as SchemaValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wallet_ledger.config import get_settings
from wallet_ledger.models.audit import AuditEvent
from wallet_ledger.models.ledger import LedgerSnapshot
from wallet_ledger.services.storage.interface import (
    AuditStorageInterface,
    CorruptSnapshotError,
    SnapshotStorageInterface,
    StorageConnectionError,
)


def _retrying(attempts: int) -> Retrying:
    """Retry policy for local file writes."""
    return Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.2, max=2),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )


class JsonFileSnapshotStorage(SnapshotStorageInterface):
    """
    Snapshot storage backed by one JSON file.

    A missing file means a fresh ledger.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        settings = get_settings().storage
        self._path = Path(path) if path is not None else settings.snapshot_path
        self._attempts = settings.write_retry_attempts

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[LedgerSnapshot]:
        """Load the snapshot from disk."""
        try:
            data = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageConnectionError(f"Failed to read {self._path}: {e}")

        if not data.strip():
            return None

        try:
            return LedgerSnapshot.from_json(data)
        except SchemaValidationError as e:
            raise CorruptSnapshotError(f"Invalid snapshot in {self._path}: {e}")

    def save(self, snapshot: LedgerSnapshot) -> None:
        """Atomically replace the snapshot file."""
        payload = snapshot.to_json()
        try:
            for attempt in _retrying(self._attempts):
                with attempt:
                    self._write_atomic(payload)
        except OSError as e:
            raise StorageConnectionError(f"Failed to save {self._path}: {e}")

    def _write_atomic(self, payload: str) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=".wallets_", suffix=".json", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self._path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON object per line.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        settings = get_settings().storage
        self._path = Path(path) if path is not None else settings.audit_path
        self._attempts = settings.write_retry_attempts

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        line = event.model_dump_json() + "\n"
        try:
            for attempt in _retrying(self._attempts):
                with attempt:
                    self._path.parent.mkdir(parents=True, exist_ok=True)
                    with self._path.open("a", encoding="utf-8") as f:
                        f.write(line)
        except OSError as e:
            raise StorageConnectionError(f"Failed to append to {self._path}: {e}")
        return True

    def _read_events(self) -> list[AuditEvent]:
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageConnectionError(f"Failed to read {self._path}: {e}")

        events = []
        for line in lines:
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except SchemaValidationError:
                continue  # Skip malformed lines
        return events

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get events by entity."""
        events = [
            event for event in self._read_events()
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        events = self._read_events()
        # Newest first; reversed first so same-timestamp events keep
        # later-written-first order
        events.reverse()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
