"""Tests for the in-memory store and its ready gate."""

from __future__ import annotations

import asyncio

import pytest

from snapshot_rest.db import InMemoryDB, get_db, id_text, reset_db
from snapshot_rest.errors import CollectionNotFound, RecordNotFound


class TestIdText:
    @pytest.mark.parametrize(
        "value, expected",
        [("1", "1"), (1, "1"), (1.0, "1"), (1.5, "1.5"), (True, "true"), (None, "null")],
    )
    def test_id_text(self, value, expected):
        assert id_text(value) == expected


class TestReads:
    def test_collection_names_keep_snapshot_order(self, db):
        assert db.collection_names() == ["books", "authors", "wishlist"]

    def test_get_collection(self, db):
        assert [b["title"] for b in db.get_collection("books")] == ["Dune", "Foundation"]

    def test_empty_collection_exists(self, db):
        assert db.has_collection("wishlist")
        assert db.get_collection("wishlist") == []

    def test_unknown_collection(self, db):
        assert not db.has_collection("ghosts")
        with pytest.raises(CollectionNotFound) as exc_info:
            db.get_collection("ghosts")
        assert exc_info.value.resource == "ghosts"

    def test_get_record(self, db):
        assert db.get_record("books", "2")["title"] == "Foundation"

    def test_numeric_ids_match_their_string_form(self, db):
        assert db.get_record("authors", "3")["name"] == "William Gibson"

    def test_unknown_record(self, db):
        with pytest.raises(RecordNotFound) as exc_info:
            db.get_record("books", "99")
        assert exc_info.value.record_id == "99"

    def test_first_match_wins_on_duplicate_ids(self):
        store = InMemoryDB()
        store.seed({"items": [{"id": "x", "n": 1}, {"id": "x", "n": 2}]})
        assert store.get_record("items", "x")["n"] == 1

    def test_records_without_id_are_not_addressable(self):
        store = InMemoryDB()
        store.seed({"items": [{"name": "anonymous"}, 7, {"id": None}]})
        with pytest.raises(RecordNotFound):
            store.index_of("items", "undefined")
        assert store.index_of("items", "null") == 2


class TestSeed:
    def test_seed_normalizes_collections(self):
        store = InMemoryDB()
        store.seed({"books": [{"id": "1"}], "settings": {"theme": "dark"}, "count": 3})
        assert store.collections == {"books": [{"id": "1"}], "settings": [], "count": []}
        assert store.ready

    def test_seed_copies_its_input(self, snapshot):
        store = InMemoryDB()
        store.seed(snapshot)
        store.get_collection("books").append({"id": "3"})
        store.get_collection("authors")[0]["name"] = "changed"
        assert len(snapshot["books"]) == 2
        assert snapshot["authors"][0]["name"] == "Frank Herbert"


class TestReadyGate:
    async def test_waiters_share_one_load(self):
        calls = []
        release = asyncio.Event()

        async def loader():
            calls.append(1)
            await release.wait()
            return {"books": [{"id": "1"}]}

        store = InMemoryDB()
        waiters = [asyncio.ensure_future(store.wait_until_ready(loader)) for _ in range(5)]
        await asyncio.sleep(0)
        assert not store.ready
        assert not any(w.done() for w in waiters)

        release.set()
        await asyncio.gather(*waiters)
        assert calls == [1]
        assert store.ready
        assert store.collection_names() == ["books"]

    async def test_seeded_store_never_calls_loader(self, db):
        async def loader():
            raise AssertionError("loader should not run")

        await db.wait_until_ready(loader)
        assert db.ready

    async def test_start_loading_then_wait(self):
        async def loader():
            return {"books": []}

        store = InMemoryDB()
        store.start_loading(loader)
        await store.wait_until_ready(loader)
        assert store.collection_names() == ["books"]

    async def test_crashing_loader_leaves_empty_ready_store(self, caplog):
        async def loader():
            raise RuntimeError("disk on fire")

        store = InMemoryDB()
        await store.wait_until_ready(loader)
        assert store.ready
        assert store.collections == {}
        assert "Snapshot load crashed" in caplog.text


class TestSingleton:
    def test_get_db_is_shared(self):
        assert get_db() is get_db()

    def test_reset_db_discards_state(self, db):
        fresh = reset_db()
        assert fresh is not db
        assert not fresh.ready
        assert fresh.collections == {}
