"""
JSON File Storage

The default backend: one JSON document on local disk holding the
whole finance state.

Writes go to a temporary file next to the target and are moved into
place with os.replace, so a crash mid-write leaves the previous
snapshot intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from ledger.config import get_settings
from ledger.models.ledger import FinanceState
from ledger.services.storage.interface import (
    FinanceStateStorageInterface,
    StorageError,
    dumps_snapshot,
    loads_snapshot,
)


def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace ``path`` with ``text`` via a temporary sibling file.

    Creates the parent directory. Raises OSError on failure, leaving
    any previous file in place.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class JsonFileStateStorage(FinanceStateStorageInterface):
    """
    Snapshot storage backed by a single JSON file.
    
    The parent directory is created on first save.
    """
    
    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else get_settings().storage.state_path
    
    @property
    def path(self) -> Path:
        return self._path
    
    async def load(self) -> Optional[FinanceState]:
        """Load the snapshot, or None if the file does not exist yet."""
        if not self._path.exists():
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read snapshot {self._path}: {e}")
        return loads_snapshot(text)
    
    async def save(self, state: FinanceState) -> None:
        """Atomically replace the snapshot file."""
        try:
            atomic_write_text(self._path, dumps_snapshot(state))
        except OSError as e:
            raise StorageError(f"Failed to write snapshot {self._path}: {e}")
