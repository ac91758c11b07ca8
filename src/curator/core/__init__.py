"""
curator.core - Foundation Layer
=================================

The building blocks every other Curator module depends on:

    - config:        Settings (CuratorConfig, StoreConfig, DescriberConfig)
                     and the StoreConnection model
    - config_store:  Explicit load()/save() persistence of the StoreConnection
    - enums:         Visibility, PublishStage
    - models:        ArtifactRecord, RemoteFileHandle, publish request/results
    - exceptions:    Structured exception hierarchy

Dependency Rule:
    core/ depends on NOTHING else in the curator package.
"""

from curator.core.config import (
    CuratorConfig,
    DescriberConfig,
    StoreConfig,
    StoreConnection,
)
from curator.core.config_store import ConfigStore
from curator.core.enums import PublishStage, Visibility
from curator.core.exceptions import (
    AuthError,
    CodecError,
    ConfigurationError,
    ConflictError,
    CuratorError,
    DescriberError,
    NetworkError,
    NotFoundError,
    PublishError,
    PublishInFlightError,
    StoreError,
)
from curator.core.models import (
    ArtifactRecord,
    PublishOutcome,
    PublishReceipt,
    PublishRequest,
    RemoteFileHandle,
    SettingsOutcome,
)

__all__ = [
    # Config
    "CuratorConfig",
    "StoreConfig",
    "DescriberConfig",
    "StoreConnection",
    "ConfigStore",
    # Enums
    "Visibility",
    "PublishStage",
    # Models
    "ArtifactRecord",
    "RemoteFileHandle",
    "PublishRequest",
    "PublishReceipt",
    "PublishOutcome",
    "SettingsOutcome",
    # Exceptions
    "CuratorError",
    "ConfigurationError",
    "StoreError",
    "AuthError",
    "NotFoundError",
    "ConflictError",
    "NetworkError",
    "CodecError",
    "PublishError",
    "PublishInFlightError",
    "DescriberError",
]
