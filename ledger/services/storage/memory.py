"""
In-Memory Storage

Keeps the serialized snapshot text in memory. Going through the same
encode/decode path as the file backend means tests exercise the real
snapshot format.
"""

from typing import Optional

from ledger.models.ledger import FinanceState
from ledger.services.storage.interface import (
    FinanceStateStorageInterface,
    dumps_snapshot,
    loads_snapshot,
)


class InMemoryStateStorage(FinanceStateStorageInterface):
    """Snapshot storage that lives as long as the object does."""
    
    def __init__(self, initial: Optional[FinanceState] = None):
        self._snapshot: Optional[str] = dumps_snapshot(initial) if initial is not None else None
        self.save_count = 0
    
    async def load(self) -> Optional[FinanceState]:
        if self._snapshot is None:
            return None
        return loads_snapshot(self._snapshot)
    
    async def save(self, state: FinanceState) -> None:
        self._snapshot = dumps_snapshot(state)
        self.save_count += 1
    
    @property
    def raw_snapshot(self) -> Optional[str]:
        return self._snapshot
