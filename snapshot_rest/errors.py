"""Exception types raised by the snapshot loader, store and engines."""

from __future__ import annotations


class SnapshotRestError(Exception):
    """Base class for all snapshot-rest errors."""


# --- Snapshot loading ---


class LoadFailure(SnapshotRestError):
    """A snapshot source could not produce a dataset."""


class SnapshotNotFoundError(LoadFailure):
    """None of the candidate snapshot files exist."""


class SnapshotParseError(LoadFailure):
    """Snapshot content is not a JSON object."""


class SnapshotFetchError(LoadFailure):
    """Remote snapshot request failed or returned a non-success status."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


# --- Lookups ---


class CollectionNotFound(SnapshotRestError):
    def __init__(self, resource: str) -> None:
        super().__init__(f"Collection '{resource}' not found")
        self.resource = resource


class RecordNotFound(SnapshotRestError):
    def __init__(self, resource: str, record_id: str) -> None:
        super().__init__(f"Record '{record_id}' not found in '{resource}'")
        self.resource = resource
        self.record_id = record_id
