"""
curator.infrastructure - Store & Wire Format Layer
====================================================

    ┌─────────────── ORCHESTRATION LAYER ─────────────────┐
    │  PublishOrchestrator, AccessVerifier, CatalogCache   │
    └─────────────────────┬───────────────────────────────┘
                          │
    ┌─────────────── INFRASTRUCTURE LAYER ────────────────┐
    │  RemoteStore (ABC)                                   │
    │    ├── GitHubRemoteStore   (httpx, REST contents API)│
    │    └── InMemoryRemoteStore (dev / tests)             │
    │                                                      │
    │  manifest_codec: list[ArtifactRecord] ⇄ base64 JSON  │
    └──────────────────────────────────────────────────────┘
"""

from curator.infrastructure import manifest_codec
from curator.infrastructure.remote_store import (
    GitHubRemoteStore,
    InMemoryRemoteStore,
    RemoteStore,
    StoreFactory,
    git_blob_sha,
)

__all__ = [
    "manifest_codec",
    "RemoteStore",
    "GitHubRemoteStore",
    "InMemoryRemoteStore",
    "StoreFactory",
    "git_blob_sha",
]
