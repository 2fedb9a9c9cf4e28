"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a local JSON file as the backend, plus in-memory
storage for tests, but designed to be swappable.
"""

from wallet_ledger.services.storage.interface import (
    AuditStorageInterface,
    CorruptSnapshotError,
    SnapshotStorageInterface,
    StorageConnectionError,
    StorageError,
)
from wallet_ledger.services.storage.json_file import (
    JsonFileSnapshotStorage,
    JsonLinesAuditStorage,
)
from wallet_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SnapshotStorageInterface",
    # Exceptions
    "CorruptSnapshotError",
    "StorageConnectionError",
    "StorageError",
    # JSON file implementation
    "JsonFileSnapshotStorage",
    "JsonLinesAuditStorage",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemorySnapshotStorage",
]
