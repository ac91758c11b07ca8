"""
curator.orchestration - Orchestration Layer
=============================================

Coordinates the store client and codec into the curator's operations:

    - PublishOrchestrator: Upload → fetch manifest → merge → conditional commit
    - AccessVerifier:      Credential and visibility checks (fail closed)
    - CatalogCache:        Last known good public manifest (fail soft)
    - status:              Stage / failure → human-readable status line
"""

from curator.orchestration import status
from curator.orchestration.access_verifier import PRIVATE_REPOSITORY_WARNING, AccessVerifier
from curator.orchestration.catalog_cache import CatalogCache
from curator.orchestration.publisher import (
    ManifestSnapshot,
    ProgressCallback,
    PublishOrchestrator,
    sanitize_filename,
)

__all__ = [
    "PublishOrchestrator",
    "ManifestSnapshot",
    "ProgressCallback",
    "sanitize_filename",
    "AccessVerifier",
    "PRIVATE_REPOSITORY_WARNING",
    "CatalogCache",
    "status",
]
