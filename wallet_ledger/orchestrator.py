"""
Main Orchestrator for Wallet Ledger

Wires the ledger store, its storage and audit log, and the statistics
engine together for a presentation layer.

DESIGN DECISION: The presentation layer only ever talks to two objects:
- LedgerStore for every change
- StatisticsEngine for everything it displays

It registers one on_change callback and re-queries after each call.
"""

from typing import Optional

from wallet_ledger.audit import AuditLogger
from wallet_ledger.config import get_settings
from wallet_ledger.ledger import ChangeListener, LedgerStore
from wallet_ledger.queries import StatisticsEngine
from wallet_ledger.services.storage import (
    AuditStorageInterface,
    JsonFileSnapshotStorage,
    JsonLinesAuditStorage,
    SnapshotStorageInterface,
    StorageError,
)


def create_app_components(
    use_storage: bool = True,
    on_change: Optional[ChangeListener] = None,
) -> tuple[LedgerStore, StatisticsEngine]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the configured JSON files.
                    Set to False for a session-only ledger.
        on_change: Called with the store after every successful mutation.

    Returns:
        (ledger_store, statistics_engine), the store already loaded and
        holding at least one wallet

    Raises:
        StorageError: If a saved snapshot exists but cannot be read
    """
    snapshot_storage: Optional[SnapshotStorageInterface] = None
    audit_storage: Optional[AuditStorageInterface] = None

    if use_storage:
        settings = get_settings().storage
        snapshot_storage = JsonFileSnapshotStorage(settings.snapshot_path)
        audit_storage = JsonLinesAuditStorage(settings.audit_path)

    audit_logger = AuditLogger(audit_storage)

    try:
        store = LedgerStore.open(
            snapshot_storage,
            audit_logger=audit_logger,
            on_change=on_change,
        )
    except StorageError as e:
        audit_logger.log_error(
            error_type=type(e).__name__,
            error_message=str(e),
            details={"operation": "open"},
        )
        raise

    return store, StatisticsEngine()
