"""In-memory database holding every collection of the snapshot.

The store is filled once by the snapshot loader. Until then, callers go
through :meth:`InMemoryDB.wait_until_ready`, which runs the load exactly
once and suspends everyone else until it has finished.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Dict, List, Optional

from snapshot_rest.errors import CollectionNotFound, RecordNotFound
from snapshot_rest.loader import normalize

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[], Awaitable[Dict[str, Any]]]


def id_text(value: Any) -> str:
    """String form of an id, so that 1, 1.0 and "1" all address the same record."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class InMemoryDB:
    """Collections keyed by name, each an ordered list of records."""

    def __init__(self) -> None:
        self.collections: Dict[str, List[Any]] = {}
        self._ready = False
        self._load_task: Optional[asyncio.Task] = None

    # --- Ready gate ---

    @property
    def ready(self) -> bool:
        return self._ready

    def seed(self, data: Dict[str, Any]) -> None:
        """Replace the contents with ``data`` and open the gate."""
        self.collections = normalize(copy.deepcopy(dict(data)))
        self._ready = True

    def start_loading(self, loader: SnapshotLoader) -> None:
        """Schedule ``loader`` unless a load already ran or is running."""
        if self._ready or self._load_task is not None:
            return
        self._load_task = asyncio.ensure_future(self._run_loader(loader))

    async def wait_until_ready(self, loader: SnapshotLoader) -> None:
        self.start_loading(loader)
        if self._load_task is not None and not self._ready:
            await asyncio.shield(self._load_task)

    async def _run_loader(self, loader: SnapshotLoader) -> None:
        try:
            data = await loader()
        except Exception:
            logger.exception("Snapshot load crashed; serving an empty store")
            data = {}
        self.seed(data)

    # --- Reads ---

    def collection_names(self) -> List[str]:
        return list(self.collections)

    def has_collection(self, resource: str) -> bool:
        return resource in self.collections

    def get_collection(self, resource: str) -> List[Any]:
        """Return the live list for ``resource``."""
        try:
            return self.collections[resource]
        except KeyError:
            raise CollectionNotFound(resource) from None

    def index_of(self, resource: str, record_id: str) -> int:
        """Position of the first record whose id matches ``record_id``."""
        target = id_text(record_id)
        for index, record in enumerate(self.get_collection(resource)):
            if isinstance(record, Mapping) and "id" in record:
                if id_text(record["id"]) == target:
                    return index
        raise RecordNotFound(resource, target)

    def get_record(self, resource: str, record_id: str) -> Any:
        return self.collections[resource][self.index_of(resource, record_id)]

    def id_in_use(self, resource: str, record_id: str) -> bool:
        try:
            self.index_of(resource, record_id)
        except RecordNotFound:
            return False
        return True

    # --- Writes ---

    def append(self, resource: str, record: Dict[str, Any]) -> Dict[str, Any]:
        self.get_collection(resource).append(record)
        return record

    def replace_at(self, resource: str, index: int, record: Dict[str, Any]) -> Dict[str, Any]:
        self.get_collection(resource)[index] = record
        return record

    def remove_at(self, resource: str, index: int) -> Any:
        return self.get_collection(resource).pop(index)


# --- Singleton ---

_db: Optional[InMemoryDB] = None


def get_db() -> InMemoryDB:
    global _db
    if _db is None:
        _db = InMemoryDB()
    return _db


def reset_db() -> InMemoryDB:
    """Discard the current store (useful for testing)."""
    global _db
    _db = None
    return get_db()
