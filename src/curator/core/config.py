"""
curator.core.config - Configuration Management
================================================

Configuration for Curator comes from these sources (highest priority first):

    1. Explicit constructor arguments
    2. Environment variables (prefixed with CURATOR_)
    3. YAML configuration file (curator.yaml)
    4. Default values defined in the models below

The store connection (owner / collection / branch / credential) is NOT part
of this settings object. It is entered by the curator, verified, and then
persisted by ConfigStore (see config_store.py). Settings describe how the
client behaves; the connection describes where it publishes.

    CuratorConfig
        ├── StoreConfig      → RemoteStore clients, PublishOrchestrator, CatalogCache
        ├── DescriberConfig  → Describer providers
        └── (other settings) → Curator facade, ConfigStore

Environment Variables:
    CURATOR_ENVIRONMENT=prod
    CURATOR_CONNECTION_FILE=/srv/curator/connection.json
    CURATOR_STORE__TIMEOUT_SECONDS=10
    CURATOR_STORE__MANIFEST_PATH=catalog/gallery.json
    CURATOR_DESCRIBER__PROVIDER=mock
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


# =============================================================================
# Store Connection
# =============================================================================
# Where the catalog lives. Supplied by the curator, verified once by the
# AccessVerifier, persisted by ConfigStore, and only ever sent to the
# store's own API endpoint.
# =============================================================================
class StoreConnection(BaseModel):
    """Coordinates and credential for one backing repository.

    Attributes:
        owner: Account or organisation that owns the repository.
        collection: Repository name.
        branch: Branch that holds the catalog.
        credential: Bearer token with contents write access. Optional
            because public reads need none. Hidden from repr.

    Example:
        >>> conn = StoreConnection(owner="alexandra", collection="portfolio")
        >>> conn.is_configured
        True
        >>> conn.can_publish
        False
    """

    owner: str = Field(default="", description="Repository owner")
    collection: str = Field(default="", description="Repository name")
    branch: str = Field(default="main", description="Branch holding the catalog")
    credential: Optional[str] = Field(
        default=None,
        repr=False,
        description="Bearer token for authenticated calls",
    )

    @property
    def is_configured(self) -> bool:
        """Owner and collection are both set."""
        return bool(self.owner and self.collection)

    @property
    def can_publish(self) -> bool:
        """Configured and carrying a credential."""
        return self.is_configured and bool(self.credential)

    @property
    def display_name(self) -> str:
        """'owner / collection' for status lines, or 'Not Connected'."""
        if not self.is_configured:
            return "Not Connected"
        return f"{self.owner} / {self.collection}"


# =============================================================================
# Store Configuration
# =============================================================================
# How the client talks to the backing store. Defaults target GitHub's
# REST API and its raw content host.
# =============================================================================
class StoreConfig(BaseModel):
    """Configuration for the remote store client and the catalog layout.

    Attributes:
        api_base_url: REST API root used for authenticated calls.
        raw_base_url: Raw content host used for public, unauthenticated reads.
        timeout_seconds: Hard timeout applied to every network call.
        manifest_path: Repository path of the catalog manifest.
        image_dir: Repository directory that receives uploaded binaries.
        allow_corrupt_manifest_overwrite: When True, an undecodable manifest
            is treated as empty and the next publish replaces it. When False,
            the publish aborts with CodecError instead.
        user_agent: User-Agent header sent with every request.
    """

    api_base_url: str = Field(
        default="https://api.github.com",
        description="REST API base URL",
    )
    raw_base_url: str = Field(
        default="https://raw.githubusercontent.com",
        description="Public raw content host",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300.0,
        description="Per-request timeout in seconds",
    )
    manifest_path: str = Field(
        default="gallery.json",
        min_length=1,
        description="Repository path of the catalog manifest",
    )
    image_dir: str = Field(
        default="images",
        min_length=1,
        description="Repository directory for uploaded images",
    )
    allow_corrupt_manifest_overwrite: bool = Field(
        default=True,
        description="Treat an undecodable manifest as empty instead of aborting",
    )
    user_agent: str = Field(
        default="curator/0.1.0",
        description="User-Agent header for store requests",
    )


# =============================================================================
# Describer Configuration
# =============================================================================
class DescriberConfig(BaseModel):
    """Configuration for the AI metadata describer.

    Attributes:
        provider: Describer implementation name ("mock").
        model: Model identifier within the provider.
        api_key: Provider API key (None for the mock provider).
    """

    provider: str = Field(
        default="mock",
        description="Describer provider name",
    )
    model: str = Field(
        default="mock-vision",
        description="Model identifier within the provider",
    )
    api_key: Optional[str] = Field(
        default=None,
        repr=False,
        description="Provider API key (None for mock)",
    )


# =============================================================================
# Main Configuration
# =============================================================================
#   CURATOR_ENVIRONMENT            → config.environment
#   CURATOR_CONNECTION_FILE        → config.connection_file
#   CURATOR_STORE__MANIFEST_PATH   → config.store.manifest_path
#   CURATOR_DESCRIBER__PROVIDER    → config.describer.provider
# =============================================================================
class CuratorConfig(BaseSettings):
    """Top-level configuration for Curator.

    Attributes:
        environment: Deployment environment.
        connection_file: Where ConfigStore persists the StoreConnection.
        store: Remote store and catalog layout settings.
        describer: Metadata describer settings.

    Example:
        >>> config = CuratorConfig(
        ...     environment="prod",
        ...     store=StoreConfig(manifest_path="catalog.json"),
        ... )
    """

    environment: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Deployment environment",
    )
    connection_file: Path = Field(
        default_factory=lambda: Path.home() / ".curator" / "connection.json",
        description="Local file holding the persisted store connection",
    )

    store: StoreConfig = Field(
        default_factory=StoreConfig,
        description="Remote store configuration",
    )
    describer: DescriberConfig = Field(
        default_factory=DescriberConfig,
        description="Describer configuration",
    )

    model_config = {
        "env_prefix": "CURATOR_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None) -> CuratorConfig:
    """Load Curator configuration from a YAML file and/or environment variables.

    Args:
        path: Path to a YAML configuration file. If None, looks for
            'curator.yaml' in the current directory, falling back to pure
            defaults + environment variables.

    Returns:
        A fully validated CuratorConfig instance.

    Raises:
        FileNotFoundError: If an explicit path is provided but doesn't exist.
    """
    if path is None:
        default_path = Path("curator.yaml")
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {path}. "
                f"Create a curator.yaml or use environment variables."
            )

        with open(config_path) as f:
            raw_data = yaml.safe_load(f)
            if isinstance(raw_data, dict):
                yaml_data = raw_data

    return CuratorConfig(**yaml_data)
