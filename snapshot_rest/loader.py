"""Snapshot loading: local file, remote URL, and the startup fallback chain.

A snapshot is a JSON object whose top-level keys are collection names and
whose values are lists of records. Every source normalizes its result so
that each collection is a list, even when the file says otherwise.
"""

from __future__ import annotations

import asyncio
import json
import logging
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

import httpx

from snapshot_rest.config import SnapshotRestSettings
from snapshot_rest.errors import (
    LoadFailure,
    SnapshotFetchError,
    SnapshotNotFoundError,
    SnapshotParseError,
)

logger = logging.getLogger(__name__)

Snapshot = Dict[str, List[Any]]


def normalize(raw: Dict[str, Any]) -> Snapshot:
    """Replace every non-list collection with an empty list."""
    for name, value in raw.items():
        if not isinstance(value, list):
            raw[name] = []
    return raw


def _parse(text: str, source: str) -> Snapshot:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise SnapshotParseError(f"{source}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise SnapshotParseError(
            f"{source}: expected a JSON object of collections, got {type(data).__name__}"
        )
    return normalize(data)


# --- Sources ---


def load_local(candidate_paths: Iterable[str | Path]) -> Snapshot:
    """Parse the first candidate path that exists."""
    tried = []
    for path in candidate_paths:
        path = Path(path)
        tried.append(str(path))
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LoadFailure(f"{path}: {exc}") from exc
        return _parse(text, str(path))
    raise SnapshotNotFoundError(f"no snapshot file found (tried {', '.join(tried)})")


async def load_remote(
    url: str,
    *,
    timeout: float = 15.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Snapshot:
    """GET the snapshot from ``url``."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url)
    except httpx.HTTPError as exc:
        raise SnapshotFetchError(url, str(exc) or type(exc).__name__) from exc

    if not response.is_success:
        raise SnapshotFetchError(url, f"HTTP {response.status_code}")
    return _parse(response.text, url)


# --- Startup chain ---


async def _load_local_async(candidate_paths: List[Path]) -> Snapshot:
    return await asyncio.to_thread(load_local, candidate_paths)


def snapshot_sources(
    settings: SnapshotRestSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Tuple[str, Callable[[], Awaitable[Snapshot]]]]:
    """Return (label, loader) pairs in the order they should be tried."""
    sources = []
    if settings.data_url:
        sources.append((
            settings.data_url,
            partial(
                load_remote,
                settings.data_url,
                timeout=settings.fetch_timeout,
                transport=transport,
            ),
        ))
    paths = settings.candidate_paths
    sources.append((
        " | ".join(str(p) for p in paths),
        partial(_load_local_async, paths),
    ))
    return sources


async def load_snapshot(
    settings: SnapshotRestSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Snapshot:
    """Try each configured source in turn; an empty snapshot if all fail."""
    for label, source in snapshot_sources(settings, transport):
        try:
            data = await source()
        except LoadFailure as exc:
            logger.warning("Snapshot source %s failed: %s", label, exc)
            continue
        logger.info("Snapshot loaded from %s (%d collections)", label, len(data))
        return data

    logger.error("No snapshot source succeeded; serving an empty store")
    return {}
