"""
Tests for curator.orchestration.catalog_cache
===============================================

These tests verify the fail-soft catalog view:
    - A good manifest replaces the cached list (even when empty)
    - Network errors, 404s, malformed JSON and private repositories keep
      the previous list
    - get(), len() and last_refreshed_at
"""

import json

from curator.core.config import StoreConnection
from curator.core.exceptions import NetworkError
from curator.core.models import ArtifactRecord
from curator.infrastructure import manifest_codec
from curator.infrastructure.remote_store import InMemoryRemoteStore
from curator.orchestration.catalog_cache import CatalogCache


MANIFEST = "gallery.json"


def _connection() -> StoreConnection:
    return StoreConnection(owner="alexandra", collection="portfolio")


def _record(record_id: str) -> ArtifactRecord:
    return ArtifactRecord(id=record_id, locator=f"u/{record_id}", title=record_id.upper())


def _primed() -> tuple[InMemoryRemoteStore, CatalogCache]:
    """Store with [b, a] and a cache that has already loaded it."""
    store = InMemoryRemoteStore()
    store.put_file(MANIFEST, manifest_codec.serialize([_record("b"), _record("a")]))
    return store, CatalogCache(store.bind, MANIFEST)


class TestRefresh:
    """Tests for CatalogCache.refresh()."""

    async def test_loads_manifest(self) -> None:
        """A readable manifest populates the cache in order."""
        store, cache = _primed()
        records = await cache.refresh(_connection())
        assert [r.id for r in records] == ["b", "a"]
        assert len(cache) == 2
        assert cache.last_refreshed_at is not None

    async def test_network_error_keeps_previous(self) -> None:
        """A failed refresh returns and keeps the last good list."""
        store, cache = _primed()
        await cache.refresh(_connection())

        store.fail_next("read_public", NetworkError("connection reset"))
        records = await cache.refresh(_connection())

        assert [r.id for r in records] == ["b", "a"]

    async def test_malformed_json_keeps_previous(self) -> None:
        """A corrupt public manifest keeps the last good list."""
        store, cache = _primed()
        await cache.refresh(_connection())
        refreshed_at = cache.last_refreshed_at

        store.put_file(MANIFEST, b"<html>oops</html>")
        await cache.refresh(_connection())

        assert [r.id for r in cache.records] == ["b", "a"]
        assert cache.last_refreshed_at == refreshed_at

    async def test_off_schema_entry_does_not_hide_catalog(self) -> None:
        """An entry with a null field is skipped; the rest are shown."""
        store = InMemoryRemoteStore()
        entries = [
            _record("b").model_dump(mode="json", by_alias=True),
            {"id": "old", "imageUrl": "u/old", "title": "Old", "description": None},
            _record("a").model_dump(mode="json", by_alias=True),
        ]
        store.put_file(MANIFEST, json.dumps(entries).encode("utf-8"))
        cache = CatalogCache(store.bind, MANIFEST)

        records = await cache.refresh(_connection())

        assert [r.id for r in records] == ["b", "a"]
        assert cache.last_refreshed_at is not None

    async def test_missing_manifest_keeps_previous(self) -> None:
        """A 404 keeps the last good list."""
        store = InMemoryRemoteStore()
        cache = CatalogCache(store.bind, MANIFEST)
        assert await cache.refresh(_connection()) == []
        assert cache.last_refreshed_at is None

    async def test_private_repository_keeps_previous(self) -> None:
        """A repository turned private is unreadable anonymously."""
        store, cache = _primed()
        await cache.refresh(_connection())
        store.private = True
        assert len(await cache.refresh(_connection())) == 2

    async def test_empty_manifest_empties_cache(self) -> None:
        """A valid empty manifest is trusted."""
        store, cache = _primed()
        await cache.refresh(_connection())
        store.put_file(MANIFEST, b"[]")
        assert await cache.refresh(_connection()) == []
        assert len(cache) == 0

    async def test_unconfigured_connection_skipped(self) -> None:
        """No repository coordinates → nothing fetched, nothing lost."""
        store, cache = _primed()
        await cache.refresh(_connection())
        assert len(await cache.refresh(StoreConnection())) == 2

    async def test_refresh_sees_latest_commit(self) -> None:
        """Every refresh re-reads the store."""
        store, cache = _primed()
        await cache.refresh(_connection())
        store.put_file(MANIFEST, manifest_codec.serialize([_record("c"), _record("b"), _record("a")]))
        assert [r.id for r in await cache.refresh(_connection())] == ["c", "b", "a"]


class TestAccessors:
    """get(), records copy, clear()."""

    async def test_get_by_id(self) -> None:
        """get() finds a record by id or returns None."""
        _, cache = _primed()
        await cache.refresh(_connection())
        assert cache.get("a").title == "A"
        assert cache.get("zzz") is None

    async def test_records_is_a_copy(self) -> None:
        """Mutating the returned list doesn't touch the cache."""
        _, cache = _primed()
        await cache.refresh(_connection())
        cache.records.clear()
        assert len(cache) == 2

    async def test_clear(self) -> None:
        """clear() forgets everything."""
        _, cache = _primed()
        await cache.refresh(_connection())
        cache.clear()
        assert len(cache) == 0
        assert cache.last_refreshed_at is None
