"""Services package."""

from wallet_ledger.services.storage import (
    AuditStorageInterface,
    CorruptSnapshotError,
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
    JsonFileSnapshotStorage,
    JsonLinesAuditStorage,
    SnapshotStorageInterface,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptSnapshotError",
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
    "JsonLinesAuditStorage",
    "SnapshotStorageInterface",
    "StorageConnectionError",
    "StorageError",
]
