"""Create, replace, merge and delete records in the store.

Writes only ever touch collections that already exist. Once a record has
an id, neither a replace nor a merge can change it.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from snapshot_rest.db import InMemoryDB
from snapshot_rest.errors import CollectionNotFound

logger = logging.getLogger(__name__)


def _fresh_id(db: InMemoryDB, resource: str) -> str:
    record_id = str(uuid.uuid4())
    while db.id_in_use(resource, record_id):
        record_id = str(uuid.uuid4())
    return record_id


def create_record(db: InMemoryDB, resource: str, body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Append ``body`` to the collection, assigning an id if it has none."""
    if not db.has_collection(resource):
        raise CollectionNotFound(resource)
    record = dict(body or {})
    if "id" not in record:
        record["id"] = _fresh_id(db, resource)
    db.append(resource, record)
    logger.info("Created %s/%s", resource, record["id"])
    return record


def replace_record(
    db: InMemoryDB, resource: str, record_id: str, body: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    index = db.index_of(resource, record_id)
    original_id = db.get_collection(resource)[index]["id"]
    record = dict(body or {})
    record["id"] = original_id
    db.replace_at(resource, index, record)
    logger.info("Replaced %s/%s", resource, original_id)
    return record


def merge_record(
    db: InMemoryDB, resource: str, record_id: str, body: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    """Shallow-merge ``body`` over the stored record."""
    index = db.index_of(resource, record_id)
    existing = db.get_collection(resource)[index]
    record = {**existing, **(body or {})}
    record["id"] = existing["id"]
    db.replace_at(resource, index, record)
    logger.info("Merged %s/%s", resource, record["id"])
    return record


def delete_record(db: InMemoryDB, resource: str, record_id: str) -> Any:
    index = db.index_of(resource, record_id)
    removed = db.remove_at(resource, index)
    logger.info("Deleted %s/%s", resource, removed["id"])
    return removed
