"""Shared fixtures: an in-memory ledger with an inspectable audit trail."""

import pytest

from wallet_ledger.audit import AuditLogger
from wallet_ledger.ledger import LedgerStore
from wallet_ledger.services.storage import (
    InMemoryAuditStorage,
    InMemorySnapshotStorage,
)


@pytest.fixture
def snapshot_storage():
    return InMemorySnapshotStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def store(snapshot_storage, audit_logger):
    """A freshly opened store holding only the default wallet."""
    return LedgerStore.open(snapshot_storage, audit_logger=audit_logger)

