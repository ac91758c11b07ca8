"""
curator.orchestration.catalog_cache - Read-only Catalog View
==============================================================

Holds the last successfully fetched manifest for display. Refreshes go
through the public, unauthenticated path, so they see exactly what a
visitor to the published site sees.

Fail-soft Refresh:
    Network error, missing manifest, malformed JSON or an unconfigured
    connection all leave the previous list in place. A valid manifest
    (including an empty one) replaces it. Entries that are not valid
    records are skipped for display and logged.

The cache is never used as the base for a write; the publisher always
re-reads the manifest with its integrity token.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterator, Optional

import structlog

from curator.core.config import StoreConnection
from curator.core.exceptions import CuratorError
from curator.core.models import ArtifactRecord
from curator.infrastructure import manifest_codec
from curator.infrastructure.remote_store import StoreFactory


logger = structlog.get_logger()


class CatalogCache:
    """Last known good list of published records, newest first.

    Example:
        >>> cache = CatalogCache(store_factory)
        >>> await cache.refresh(connection)
        >>> len(cache)
        3
    """

    def __init__(self, store_factory: StoreFactory, manifest_path: str = "gallery.json") -> None:
        self._store_factory = store_factory
        self._manifest_path = manifest_path
        self._records: list[ArtifactRecord] = []
        self._last_refreshed_at: Optional[datetime] = None
        self._logger = logger.bind(component="catalog_cache")

    @property
    def records(self) -> list[ArtifactRecord]:
        return list(self._records)

    @property
    def last_refreshed_at(self) -> Optional[datetime]:
        """When the cache last accepted a manifest (None if never)."""
        return self._last_refreshed_at

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ArtifactRecord]:
        return iter(list(self._records))

    def get(self, record_id: str) -> Optional[ArtifactRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    async def refresh(self, connection: StoreConnection) -> list[ArtifactRecord]:
        """Fetch the public manifest and replace the cached list.

        Returns:
            The cached list after the refresh (the previous one on failure).
        """
        if not connection.is_configured:
            self._logger.debug("catalog_refresh_skipped", reason="unconfigured")
            return self.records

        store = self._store_factory(connection)
        locator = store.locator_for(self._manifest_path)

        try:
            raw = await store.read_public(locator)
        except CuratorError as exc:
            self._logger.warning(
                "catalog_refresh_failed",
                repository=connection.display_name,
                error_code=exc.error_code,
                error=exc.message,
                kept=len(self._records),
            )
            return self.records

        if raw is None:
            self._logger.info(
                "catalog_manifest_missing",
                repository=connection.display_name,
                kept=len(self._records),
            )
            return self.records

        try:
            entries = manifest_codec.parse_entries(raw)
        except CuratorError as exc:
            self._logger.warning(
                "catalog_manifest_unreadable",
                repository=connection.display_name,
                error=exc.message,
                kept=len(self._records),
            )
            return self.records

        records, skipped = manifest_codec.to_records(entries)
        if skipped:
            self._logger.warning(
                "catalog_entries_not_displayable",
                repository=connection.display_name,
                indexes=skipped,
            )

        self._records = records
        self._last_refreshed_at = datetime.now(timezone.utc)
        self._logger.info(
            "catalog_refreshed",
            repository=connection.display_name,
            count=len(records),
        )
        return self.records

    def clear(self) -> None:
        self._records = []
        self._last_refreshed_at = None
