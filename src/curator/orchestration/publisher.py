"""
curator.orchestration.publisher - Manifest Synchronization Core
=================================================================

The PublishOrchestrator turns one PublishRequest into a durable, publicly
visible catalog entry using nothing but whole-file reads and conditional
writes on the backing store.

Publish State Machine (strictly sequential, one attempt):

    UPLOAD_BINARY ──▶ FETCH_MANIFEST ──▶ MERGE ──▶ COMMIT_MANIFEST ──▶ COMPLETE
         │                  │                            │
         ▼                  ▼                            ▼
       abort            abort (blob                  abort (blob
   (nothing durable)    left orphaned)               left orphaned)

    1. UPLOAD_BINARY    write the image to {image_dir}/{timestamp}-{name}
    2. FETCH_MANIFEST   authenticated read → entries + integrity token
                        absent     → [] and no token (first publish creates it)
                        corrupt    → [] and the existing token, logged loudly
    3. MERGE            [new_record, *entries]; existing entries are written
                        back exactly as read, valid records or not
    4. COMMIT_MANIFEST  write(manifest, encode(merged), expected_token=token)
                        stale token → ConflictError, surfaced, not retried
    5. COMPLETE         only now is the publish durable

Guarantees:
    - At most one manifest write per attempt.
    - No manifest write without a prior successful binary upload, so the
      committed record's locator always resolves.
    - Concurrent writers cannot silently overwrite each other: the
      integrity-token precondition turns a lost update into ConflictError.

Concurrency:
    One publish at a time per orchestrator (PublishInFlightError otherwise).
    Cancelling before the commit discards local state. Once the commit
    request is dispatched it is shielded: cancellation waits for a definitive
    answer from the store, logs it, and then propagates.

Usage:
    >>> orchestrator = PublishOrchestrator(store, StoreConfig())
    >>> receipt = await orchestrator.publish(
    ...     PublishRequest(filename="Nocturne.PNG", content=png, title="Nocturne")
    ... )
    >>> receipt.record.locator
    'https://raw.githubusercontent.com/alexandra/portfolio/main/images/1718000000000-nocturne.png'
"""

from __future__ import annotations

import asyncio
import re
import time
from typing import Any, Callable, Optional
from uuid import uuid4

import structlog
from pydantic import BaseModel, Field

from curator.core.config import StoreConfig
from curator.core.enums import PublishStage
from curator.core.exceptions import CodecError, CuratorError, PublishInFlightError
from curator.core.models import ArtifactRecord, PublishReceipt, PublishRequest
from curator.infrastructure import manifest_codec
from curator.infrastructure.remote_store import RemoteStore


logger = structlog.get_logger()

ProgressCallback = Callable[[PublishStage], None]

_UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_filename(filename: str) -> str:
    """Reduce a filename to a store-safe path segment.

    Drops every character outside [A-Za-z0-9.-] and lowercases the rest.
    A name with nothing left becomes "image".

    Example:
        >>> sanitize_filename("Mon Tableau (v2)!.PNG")
        'montableauv2.png'
    """
    return _UNSAFE_PATH_CHARS.sub("", filename).lower() or "image"


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


# =============================================================================
# Manifest Snapshot
# =============================================================================
class ManifestSnapshot(BaseModel):
    """What FETCH_MANIFEST observed.

    Attributes:
        entries: Stored entries as raw JSON values, newest first ([] if
            absent or corrupt). Never re-validated, so entries older tools
            wrote survive the rewrite unchanged.
        integrity_token: Token to send with the commit. None only when
            the manifest does not exist yet.
        recovered: True when the manifest existed but could not be decoded
            and is being treated as empty.
    """

    entries: list[Any] = Field(default_factory=list)
    integrity_token: Optional[str] = None
    recovered: bool = False


# =============================================================================
# Publish Orchestrator
# =============================================================================
class PublishOrchestrator:
    """Runs publish attempts against one RemoteStore.

    Attributes:
        store: The store client (bound to one connection).
        stage: Stage of the current or most recent attempt (None before
            the first attempt).
        in_flight: True while an attempt is running.

    Example:
        >>> orchestrator = PublishOrchestrator(store, progress=print)
        >>> receipt = await orchestrator.publish(request)
    """

    def __init__(
        self,
        store: RemoteStore,
        config: Optional[StoreConfig] = None,
        *,
        progress: Optional[ProgressCallback] = None,
        clock: Callable[[], int] = _wall_clock_ms,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: RemoteStore bound to the target connection.
            config: Manifest path, image directory and corrupt-manifest
                policy. Defaults to StoreConfig().
            progress: Called with each PublishStage as it starts.
            clock: Epoch-millisecond source. Timestamps handed out are made
                strictly increasing on top of it.
        """
        self._store = store
        self._config = config or StoreConfig()
        self._progress = progress
        self._clock = clock

        self._lock = asyncio.Lock()
        self._stage: Optional[PublishStage] = None
        self._last_timestamp = 0

        self._logger = logger.bind(
            component="publish_orchestrator",
            owner=store.connection.owner,
            collection=store.connection.collection,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def store(self) -> RemoteStore:
        return self._store

    @property
    def stage(self) -> Optional[PublishStage]:
        return self._stage

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    # =========================================================================
    # Public API
    # =========================================================================

    async def publish(self, request: PublishRequest) -> PublishReceipt:
        """Run one publish attempt end to end.

        Args:
            request: The artifact to publish.

        Returns:
            PublishReceipt once the manifest commit has succeeded.

        Raises:
            PublishInFlightError: Another attempt is running on this orchestrator.
            AuthError, NotFoundError, NetworkError, StoreError: From the store;
                ``details["stage"]`` names the failing stage.
            ConflictError: The manifest changed between read and commit.
            CodecError: The manifest is corrupt and overwriting it is disabled.
        """
        if self._lock.locked():
            raise PublishInFlightError(
                details={"running_stage": self._stage.value if self._stage else None},
            )

        async with self._lock:
            return await self._run(request)

    async def fetch_manifest(self) -> ManifestSnapshot:
        """Read the manifest with its integrity token.

        Returns:
            The snapshot. Absent → empty, no token. Undecodable → empty,
            existing token, recovered=True (unless the config forbids it).

        Raises:
            CodecError: Manifest undecodable and allow_corrupt_manifest_overwrite
                is False.
        """
        path = self._config.manifest_path
        handle = await self._store.read_authenticated(path)
        if handle is None:
            self._logger.info("manifest_absent_creating_new", path=path)
            return ManifestSnapshot()

        try:
            entries = manifest_codec.decode_entries(handle.content)
        except CodecError as exc:
            exc.details.setdefault("path", path)
            if not self._config.allow_corrupt_manifest_overwrite:
                self._logger.error(
                    "manifest_unreadable_publish_refused",
                    path=path,
                    integrity_token=handle.integrity_token,
                    reason=exc.message,
                )
                raise
            self._logger.error(
                "manifest_unreadable_treating_as_empty",
                path=path,
                integrity_token=handle.integrity_token,
                reason=exc.message,
                consequence="existing entries will be replaced on commit",
            )
            return ManifestSnapshot(
                integrity_token=handle.integrity_token,
                recovered=True,
            )

        _, legacy = manifest_codec.to_records(entries)
        if legacy:
            self._logger.warning(
                "manifest_legacy_entries_preserved",
                path=path,
                indexes=legacy,
            )
        return ManifestSnapshot(entries=entries, integrity_token=handle.integrity_token)

    @staticmethod
    def merge(
        entries: list[Any],
        new_record: ArtifactRecord,
    ) -> list[Any]:
        """Prepend the new record. No field-level merge, no dedup."""
        return [new_record, *entries]

    def binary_path_for(self, filename: str, timestamp: int) -> str:
        """Repository path for an upload: {image_dir}/{timestamp}-{sanitized}."""
        image_dir = self._config.image_dir.strip("/")
        return f"{image_dir}/{timestamp}-{sanitize_filename(filename)}"

    # =========================================================================
    # Internal: the attempt
    # =========================================================================

    async def _run(self, request: PublishRequest) -> PublishReceipt:
        attempt_logger = self._logger.bind(attempt_id=uuid4().hex[:12], title=request.title)
        timestamp = self._next_timestamp()
        binary_path = self.binary_path_for(request.filename, timestamp)

        # --- 1. UPLOAD_BINARY -------------------------------------------------
        self._enter(PublishStage.UPLOAD_BINARY)
        try:
            await self._store.write(
                binary_path,
                manifest_codec.to_transport(request.content),
                f"Upload artwork: {sanitize_filename(request.filename)}",
            )
        except CuratorError as exc:
            self._tag(exc)
            attempt_logger.warning(
                "publish_failed",
                stage=self._stage.value,
                error_code=exc.error_code,
                error=exc.message,
            )
            raise
        attempt_logger.info("binary_uploaded", path=binary_path, size=len(request.content))

        record = ArtifactRecord(
            locator=self._store.locator_for(binary_path),
            title=request.title,
            description=request.description,
            medium=request.medium,
            tags=list(request.tags),
            created_at=timestamp,
        )

        try:
            # --- 2. FETCH_MANIFEST --------------------------------------------
            self._enter(PublishStage.FETCH_MANIFEST)
            snapshot = await self.fetch_manifest()

            # --- 3. MERGE -----------------------------------------------------
            self._enter(PublishStage.MERGE)
            merged = self.merge(snapshot.entries, record)

            # --- 4. COMMIT_MANIFEST -------------------------------------------
            self._enter(PublishStage.COMMIT_MANIFEST)
            manifest_token = await self._commit(
                merged,
                snapshot.integrity_token,
                f"Add artwork: {request.title}",
                attempt_logger,
            )
        except CuratorError as exc:
            self._tag(exc)
            attempt_logger.warning(
                "publish_failed",
                stage=self._stage.value,
                error_code=exc.error_code,
                error=exc.message,
                orphaned_binary=binary_path,
            )
            raise
        except asyncio.CancelledError:
            attempt_logger.info(
                "publish_aborted",
                stage=self._stage.value,
                orphaned_binary=binary_path,
            )
            raise

        # --- 5. COMPLETE ------------------------------------------------------
        self._enter(PublishStage.COMPLETE)
        attempt_logger.info(
            "publish_committed",
            record_id=record.id,
            manifest_size=len(merged),
            manifest_token=manifest_token,
            recovered_from_corrupt_manifest=snapshot.recovered,
        )
        return PublishReceipt(
            record=record,
            binary_path=binary_path,
            manifest_token=manifest_token,
            manifest_size=len(merged),
            recovered_from_corrupt_manifest=snapshot.recovered,
        )

    async def _commit(
        self,
        entries: list[Any],
        expected_token: Optional[str],
        message: str,
        attempt_logger: Any,
    ) -> str:
        commit = asyncio.ensure_future(
            self._store.write(
                self._config.manifest_path,
                manifest_codec.encode(entries),
                message,
                expected_token,
            )
        )
        try:
            return await asyncio.shield(commit)
        except asyncio.CancelledError:
            # The request is on the wire; wait for the store's verdict.
            attempt_logger.warning("publish_cancel_deferred_until_commit_settles")
            await asyncio.wait({commit})
            if commit.cancelled():
                attempt_logger.warning(
                    "commit_settled_after_cancel",
                    committed=None,
                    error="commit task cancelled",
                )
            else:
                error = commit.exception()
                attempt_logger.warning(
                    "commit_settled_after_cancel",
                    committed=error is None,
                    error=str(error) if error else None,
                )
            raise

    def _enter(self, stage: PublishStage) -> None:
        self._stage = stage
        if self._progress is not None:
            self._progress(stage)

    def _tag(self, exc: CuratorError) -> None:
        if self._stage is not None:
            exc.details.setdefault("stage", self._stage.value)

    def _next_timestamp(self) -> int:
        now = self._clock()
        if now <= self._last_timestamp:
            now = self._last_timestamp + 1
        self._last_timestamp = now
        return now
