"""
Abstract Storage Interface

DESIGN DECISION: The ledger is persisted as one full snapshot of the
FinanceState after every mutation. There are no partial writes and no
per-transaction rows to keep in sync.

This allows us to:
1. Swap the JSON file for Google Sheets (or anything else)
2. Use in-memory storage for testing
3. Keep the engine unaware of where the state lives

The snapshot is wrapped in a versioned envelope so that an incompatible
shape fails loudly on load instead of producing a half-valid ledger.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import ValidationError

from ledger.models.ledger import FinanceState


SNAPSHOT_SCHEMA_VERSION = 1


class FinanceStateStorageInterface(ABC):
    """
    Abstract interface for finance-state persistence.
    
    Any storage implementation must implement these methods.
    """
    
    @abstractmethod
    async def load(self) -> Optional[FinanceState]:
        """
        Load the last saved snapshot.
        
        Returns:
            The stored state, or None if nothing was saved yet
            
        Raises:
            SnapshotFormatError: If the stored data has an unknown shape
            StorageError: If the backend cannot be read
        """
        pass
    
    @abstractmethod
    async def save(self, state: FinanceState) -> None:
        """
        Replace the stored snapshot with ``state``.
        
        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SnapshotFormatError(StorageError):
    """Stored snapshot cannot be decoded into a FinanceState."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class SnapshotTooLargeError(StorageError):
    """
    The snapshot does not fit the backend's limits.
    
    Retrying cannot help: the same state fails the same way.
    """
    pass


def state_to_snapshot(state: FinanceState) -> dict[str, Any]:
    """Wrap a state in the versioned snapshot envelope (JSON-safe)."""
    return {
        "schema_version": SNAPSHOT_SCHEMA_VERSION,
        "state": state.model_dump(mode="json"),
    }


def snapshot_to_state(snapshot: Any) -> FinanceState:
    """
    Decode a snapshot envelope.
    
    Raises:
        SnapshotFormatError: On a missing/unknown version or invalid state
    """
    if not isinstance(snapshot, dict):
        raise SnapshotFormatError("Snapshot must be a JSON object")
    
    version = snapshot.get("schema_version")
    if version != SNAPSHOT_SCHEMA_VERSION:
        raise SnapshotFormatError(
            f"Unsupported snapshot schema version: {version!r} "
            f"(expected {SNAPSHOT_SCHEMA_VERSION})"
        )
    
    try:
        return FinanceState.model_validate(snapshot.get("state", {}))
    except ValidationError as e:
        raise SnapshotFormatError(f"Snapshot does not match the ledger model: {e}")


def dumps_snapshot(state: FinanceState) -> str:
    return json.dumps(state_to_snapshot(state), ensure_ascii=False, indent=2)


def loads_snapshot(text: str) -> FinanceState:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotFormatError(f"Snapshot is not valid JSON: {e}")
    return snapshot_to_state(data)
