"""
curator.facade - Curator Top-Level Facade
===========================================

The single entry point a curator-facing surface (CLI, admin panel, script)
talks to. It wires the layers together and turns every failure into a
result object with a status line, so nothing fails silently.

    ┌──────────────────────────────────────────────────────┐
    │                   Curator (Facade)                    │
    │                                                       │
    │   save_settings ─ describe_artwork ─ publish_artwork  │
    │                   refresh_catalog                     │
    │  ┌──────────────────────────────────────────────────┐ │
    │  │  Orchestration                                    │ │
    │  │  PublishOrchestrator (one per connection)         │ │
    │  │  AccessVerifier, CatalogCache                     │ │
    │  └────────────────────────┬─────────────────────────┘ │
    │  ┌────────────────────────▼─────────────────────────┐ │
    │  │  Infrastructure                                   │ │
    │  │  RemoteStore (GitHub over shared httpx client)    │ │
    │  └──────────────────────────────────────────────────┘ │
    │  ┌──────────────────────────────────────────────────┐ │
    │  │  Core: CuratorConfig, ConfigStore                 │ │
    │  │  Integrations: BaseDescriber                      │ │
    │  └──────────────────────────────────────────────────┘ │
    └──────────────────────────────────────────────────────┘

Usage:
    >>> async with Curator(load_config()) as curator:
    ...     outcome = await curator.save_settings(
    ...         StoreConnection(owner="alexandra", collection="portfolio", credential=token)
    ...     )
    ...     outcome = await curator.publish_artwork(
    ...         PublishRequest(filename="nocturne.png", content=png, title="Nocturne")
    ...     )
    ...     outcome.status
    'Published Successfully'
"""

from __future__ import annotations

from typing import Any, Optional, Union

import httpx
import structlog
from pydantic import ValidationError

from curator.core.config import CuratorConfig, StoreConnection
from curator.core.config_store import ConfigStore
from curator.core.enums import PublishStage
from curator.core.exceptions import CuratorError, DescriberError
from curator.core.models import (
    ArtifactRecord,
    PublishOutcome,
    PublishRequest,
    SettingsOutcome,
)
from curator.infrastructure.remote_store import GitHubRemoteStore, RemoteStore, StoreFactory
from curator.integrations.describer.base import ArtworkDescription, BaseDescriber
from curator.integrations.describer.factory import create_describer
from curator.orchestration import status
from curator.orchestration.access_verifier import AccessVerifier
from curator.orchestration.catalog_cache import CatalogCache
from curator.orchestration.publisher import ProgressCallback, PublishOrchestrator


logger = structlog.get_logger()


class Curator:
    """Top-level facade for publishing to and browsing the catalog.

    Lifecycle:
        1. ``Curator(config)``: wire components
        2. ``await initialize()``: open the HTTP client, load the persisted
           connection, warm the catalog
        3. operations
        4. ``await shutdown()``: close what initialize() opened

    Attributes:
        _config: Curator configuration.
        _config_store: Persisted StoreConnection (explicit load/save).
        _store_factory: Builds a RemoteStore for a connection.
        _verifier: Credential and visibility checks.
        _catalog: Read-only view of the public manifest.
        _describer: Optional metadata suggestions.
        _orchestrators: One PublishOrchestrator per distinct connection.
    """

    def __init__(
        self,
        config: Optional[CuratorConfig] = None,
        *,
        config_store: Optional[ConfigStore] = None,
        store_factory: Optional[StoreFactory] = None,
        describer: Optional[BaseDescriber] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        """Initialize the facade.

        Args:
            config: Curator configuration. Defaults to CuratorConfig()
                (environment variables and defaults).
            config_store: Where the connection is persisted. Defaults to a
                ConfigStore at config.connection_file.
            store_factory: Builds RemoteStore clients. Defaults to
                GitHubRemoteStore over a shared httpx.AsyncClient.
            describer: Metadata describer. Defaults to create_describer(config.describer).
            http_client: Shared HTTP client for the default store factory.
                If omitted, one is created on initialize() and closed on shutdown().
            progress: Called with each PublishStage during publish_artwork().
        """
        # --- Configuration ---
        self._config = config or CuratorConfig()
        self._config_store = config_store or ConfigStore(self._config.connection_file)

        # --- Infrastructure ---
        self._http = http_client
        self._owns_http = False
        self._default_store = store_factory is None
        self._store_factory: StoreFactory = store_factory or self._github_store

        # --- Orchestration ---
        self._verifier = AccessVerifier(self._store_factory)
        self._catalog = CatalogCache(self._store_factory, self._config.store.manifest_path)
        self._orchestrators: dict[tuple[str, str, str, Optional[str]], PublishOrchestrator] = {}

        # --- Integrations ---
        self._describer = describer or create_describer(self._config.describer)

        # --- Tracking ---
        self._progress = progress
        self._last_status = ""
        self._initialized = False
        self._logger = logger.bind(component="curator")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> CuratorConfig:
        return self._config

    @property
    def connection(self) -> StoreConnection:
        """The active (persisted) store connection."""
        return self._config_store.connection

    @property
    def catalog(self) -> list[ArtifactRecord]:
        """Last successfully fetched public manifest, newest first."""
        return self._catalog.records

    @property
    def catalog_cache(self) -> CatalogCache:
        return self._catalog

    @property
    def describer(self) -> BaseDescriber:
        return self._describer

    @property
    def last_status(self) -> str:
        """Status line of the most recent operation or publish stage."""
        return self._last_status

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def initialize(self) -> None:
        """Open resources and load the persisted connection.

        Idempotent: Safe to call multiple times.
        """
        if self._initialized:
            self._logger.debug("curator_already_initialized")
            return

        self._logger.info("curator_initializing", environment=self._config.environment)

        if self._http is None and self._default_store:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.store.timeout_seconds),
                follow_redirects=True,
            )
            self._owns_http = True

        connection = self._config_store.load()
        self._initialized = True

        if connection.is_configured:
            await self._catalog.refresh(connection)

        self._logger.info(
            "curator_initialized",
            repository=connection.display_name,
            catalog_size=len(self._catalog),
        )

    async def shutdown(self) -> None:
        """Close the HTTP client if this facade created it.

        Idempotent: Safe to call multiple times.
        """
        if not self._initialized:
            self._logger.debug("curator_not_initialized_skipping_shutdown")
            return

        self._logger.info("curator_shutting_down")

        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None
            self._owns_http = False

        self._orchestrators.clear()
        self._initialized = False
        self._logger.info("curator_shutdown_complete")

    async def __aenter__(self) -> Curator:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.shutdown()

    # =========================================================================
    # Settings
    # =========================================================================

    async def save_settings(self, connection: StoreConnection) -> SettingsOutcome:
        """Verify a connection and, only if it works, persist it.

        Steps: verify credential → inspect visibility → save → refresh catalog.

        Returns:
            SettingsOutcome. verified=False means nothing was saved.
        """
        self._ensure_initialized()

        if not await self._verifier.verify(connection):
            return self._settings_outcome(
                SettingsOutcome(verified=False, status=status.ACCESS_DENIED)
            )

        visibility = await self._verifier.inspect_visibility(connection)
        warning = AccessVerifier.visibility_warning(visibility)

        try:
            self._config_store.save(connection)
        except CuratorError as exc:
            self._logger.error(
                "settings_save_failed",
                error_code=exc.error_code,
                error=exc.message,
            )
            return self._settings_outcome(
                SettingsOutcome(verified=False, visibility=visibility, status=exc.message)
            )

        await self._catalog.refresh(connection)

        return self._settings_outcome(
            SettingsOutcome(
                verified=True,
                visibility=visibility,
                warning=warning,
                status=status.ACCESS_VERIFIED,
            )
        )

    # =========================================================================
    # Metadata Suggestions
    # =========================================================================

    async def describe_artwork(
        self,
        image: bytes,
        mime_type: str,
    ) -> Optional[ArtworkDescription]:
        """Ask the describer for suggested metadata.

        Returns:
            The suggestion, or None if the describer failed (the curator
            fills the fields in by hand).
        """
        try:
            description = await self._describer.describe(image, mime_type)
        except DescriberError as exc:
            self._last_status = status.DESCRIBE_FAILED
            self._logger.warning(
                "describe_failed",
                provider=exc.provider,
                error=exc.message,
            )
            return None

        self._logger.info("describe_succeeded", title=description.title)
        return description

    # =========================================================================
    # Publishing
    # =========================================================================

    async def publish_artwork(
        self,
        request: Union[PublishRequest, dict[str, Any]],
    ) -> PublishOutcome:
        """Publish one artwork: upload the image, then add it to the catalog.

        Args:
            request: A PublishRequest, or its fields as a dict (validated here).

        Returns:
            PublishOutcome. success=True only once the manifest commit landed.
        """
        self._ensure_initialized()

        if not isinstance(request, PublishRequest):
            try:
                request = PublishRequest.model_validate(request)
            except ValidationError as exc:
                self._logger.info("publish_rejected", reason="invalid_request", errors=exc.error_count())
                return self._publish_outcome(
                    PublishOutcome(
                        success=False,
                        status=status.INCOMPLETE_REQUEST,
                        error_code="INVALID_REQUEST",
                    )
                )

        connection = self.connection
        if not connection.can_publish:
            self._logger.info(
                "publish_rejected",
                reason="connection_not_publishable",
                repository=connection.display_name,
            )
            return self._publish_outcome(
                PublishOutcome(
                    success=False,
                    status=status.MISSING_CREDENTIAL,
                    error_code="AUTH_REQUIRED",
                )
            )

        orchestrator = self._orchestrator_for(connection)
        self._last_status = status.PREPARING

        try:
            receipt = await orchestrator.publish(request)
        except CuratorError as exc:
            stage = exc.details.get("stage")
            return self._publish_outcome(
                PublishOutcome(
                    success=False,
                    status=status.describe_failure(exc),
                    error_code=exc.error_code,
                    stage=PublishStage(stage) if stage else None,
                )
            )

        await self._catalog.refresh(connection)

        return self._publish_outcome(
            PublishOutcome(success=True, status=status.PUBLISHED, receipt=receipt)
        )

    # =========================================================================
    # Catalog
    # =========================================================================

    async def refresh_catalog(self) -> list[ArtifactRecord]:
        """Re-read the public manifest (keeps the previous list on failure)."""
        return await self._catalog.refresh(self.connection)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _github_store(self, connection: StoreConnection) -> RemoteStore:
        if self._http is None:
            raise RuntimeError(
                "Curator has not been initialized. "
                "Call await curator.initialize() or use 'async with Curator() as curator:'"
            )
        return GitHubRemoteStore(connection, self._http, self._config.store)

    def _orchestrator_for(self, connection: StoreConnection) -> PublishOrchestrator:
        key = (connection.owner, connection.collection, connection.branch, connection.credential)
        orchestrator = self._orchestrators.get(key)
        if orchestrator is None:
            orchestrator = PublishOrchestrator(
                self._store_factory(connection),
                self._config.store,
                progress=self._on_stage,
            )
            self._orchestrators[key] = orchestrator
        return orchestrator

    def _on_stage(self, stage: PublishStage) -> None:
        self._last_status = status.stage_status(stage)
        if self._progress is not None:
            self._progress(stage)

    def _settings_outcome(self, outcome: SettingsOutcome) -> SettingsOutcome:
        self._last_status = outcome.status
        self._logger.info(
            "settings_outcome",
            verified=outcome.verified,
            visibility=outcome.visibility.value,
            warning=outcome.warning,
        )
        return outcome

    def _publish_outcome(self, outcome: PublishOutcome) -> PublishOutcome:
        self._last_status = outcome.status
        self._logger.info(
            "publish_outcome",
            success=outcome.success,
            error_code=outcome.error_code,
            stage=outcome.stage.value if outcome.stage else None,
        )
        return outcome

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "Curator has not been initialized. "
                "Call await curator.initialize() or use 'async with Curator() as curator:'"
            )

    def __repr__(self) -> str:
        return (
            f"Curator("
            f"initialized={self._initialized}, "
            f"repository={self.connection.display_name!r}, "
            f"catalog={len(self._catalog)})"
        )
