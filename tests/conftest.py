"""Shared fixtures: a seeded store, isolated settings, an in-process client."""

from __future__ import annotations

import json

import httpx
import pytest

from snapshot_rest.app import create_app
from snapshot_rest.config import SnapshotRestSettings
from snapshot_rest.db import get_db, reset_db


@pytest.fixture
def snapshot() -> dict:
    return {
        "books": [
            {"id": "1", "title": "Dune", "year": 1965},
            {"id": "2", "title": "Foundation", "year": 1951},
        ],
        "authors": [
            {"id": 1, "name": "Frank Herbert", "country": "US", "active": False},
            {"id": 2, "name": "Isaac Asimov", "country": "US", "active": False},
            {"id": 3, "name": "William Gibson", "country": "CA", "active": True},
        ],
        "wishlist": [],
    }


@pytest.fixture(autouse=True)
def _reset_db():
    reset_db()
    yield
    reset_db()


@pytest.fixture
def db(snapshot):
    store = get_db()
    store.seed(snapshot)
    return store


@pytest.fixture
def settings(tmp_path) -> SnapshotRestSettings:
    """Settings whose snapshot sources all point at files that do not exist."""
    return SnapshotRestSettings(
        data_url=None,
        db_path=tmp_path / "db.json",
        fallback_db_path=tmp_path / "fallback.json",
    )


@pytest.fixture
def write_snapshot(tmp_path):
    def _write(data, name: str = "db.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
async def client(db, settings):
    app = create_app(settings)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
