"""
Shared Test Fixtures for Curator
==================================

Reusable pytest fixtures, organized by layer:

    1. Configuration fixtures
    2. Infrastructure fixtures (InMemoryRemoteStore)
    3. Orchestration fixtures (PublishOrchestrator)
    4. Integration fixtures (MockDescriber)
    5. Request fixtures
"""

from __future__ import annotations

from pathlib import Path

import pytest

from curator.core.config import CuratorConfig, StoreConfig, StoreConnection
from curator.core.config_store import ConfigStore
from curator.core.models import PublishRequest
from curator.infrastructure.remote_store import InMemoryRemoteStore
from curator.integrations.describer.mock import MockDescriber
from curator.orchestration.publisher import PublishOrchestrator


# Smallest valid PNG signature plus a few bytes; content is never rendered.
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01"


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def connection() -> StoreConnection:
    """A publishable connection (owner, collection, credential all set)."""
    return StoreConnection(owner="alexandra", collection="portfolio", credential="ghp_test")


@pytest.fixture
def store_config() -> StoreConfig:
    """StoreConfig with defaults."""
    return StoreConfig()


@pytest.fixture
def config(tmp_path: Path) -> CuratorConfig:
    """CuratorConfig whose connection file lives under tmp_path."""
    return CuratorConfig(connection_file=tmp_path / "connection.json")


@pytest.fixture
def config_store(config: CuratorConfig) -> ConfigStore:
    """ConfigStore backed by a temporary file."""
    return ConfigStore(config.connection_file)


# =============================================================================
# Infrastructure
# =============================================================================

@pytest.fixture
def store(connection: StoreConnection) -> InMemoryRemoteStore:
    """Fresh, public, empty InMemoryRemoteStore bound to `connection`."""
    return InMemoryRemoteStore(connection)


# =============================================================================
# Orchestration
# =============================================================================

@pytest.fixture
def orchestrator(store: InMemoryRemoteStore, store_config: StoreConfig) -> PublishOrchestrator:
    """PublishOrchestrator over the in-memory store."""
    return PublishOrchestrator(store, store_config)


# =============================================================================
# Integrations
# =============================================================================

@pytest.fixture
def mock_describer() -> MockDescriber:
    """Fresh MockDescriber with no queued descriptions."""
    return MockDescriber()


# =============================================================================
# Requests
# =============================================================================

@pytest.fixture
def publish_request() -> PublishRequest:
    """A complete, valid PublishRequest."""
    return PublishRequest(
        filename="Nocturne in Blue.PNG",
        content=PNG_BYTES,
        mime_type="image/png",
        title="Nocturne in Blue",
        description="Ink wash at dusk.",
        medium="Ink on paper",
        tags=["ink", "night"],
    )
