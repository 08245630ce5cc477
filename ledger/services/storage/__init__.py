"""
Storage Services Package

Provides the abstract snapshot interface and its implementations:
a local JSON file (default), an in-memory store and Google Sheets.
"""

from ledger.services.storage.interface import (
    SNAPSHOT_SCHEMA_VERSION,
    FinanceStateStorageInterface,
    SnapshotFormatError,
    SnapshotTooLargeError,
    StorageConnectionError,
    StorageError,
    dumps_snapshot,
    loads_snapshot,
    snapshot_to_state,
    state_to_snapshot,
)
from ledger.services.storage.json_file import JsonFileStateStorage
from ledger.services.storage.memory import InMemoryStateStorage
from ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsStateStorage,
)

__all__ = [
    # Interface
    "FinanceStateStorageInterface",
    "SNAPSHOT_SCHEMA_VERSION",
    "dumps_snapshot",
    "loads_snapshot",
    "snapshot_to_state",
    "state_to_snapshot",
    # Exceptions
    "SnapshotFormatError",
    "SnapshotTooLargeError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsStateStorage",
    "InMemoryStateStorage",
    "JsonFileStateStorage",
]
