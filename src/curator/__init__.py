"""
Curator - Catalog Publishing over a Version-Controlled File Store
===================================================================

Curator publishes artwork to a static gallery whose only backend is a
repository: images are committed as files, and a single JSON manifest
(gallery.json) lists every published piece, newest first.

    upload image  →  read manifest + token  →  prepend record  →  conditional commit

Architecture Layers (top to bottom):
    1. Facade               - Curator (settings, describe, publish, catalog)
    2. Orchestration Layer  - PublishOrchestrator, AccessVerifier, CatalogCache
    3. Infrastructure Layer - RemoteStore clients, manifest codec
    4. Integration Layer    - Metadata describers
    5. Core                 - Config, models, exceptions

Quick Start:
    >>> from curator import Curator
    >>> async with Curator() as curator:
    ...     outcome = await curator.publish_artwork(request)
"""

# =============================================================================
# Package Version
# =============================================================================
__version__ = "0.1.0"

# =============================================================================
# Package-Level Exports
# =============================================================================
# For specific components, import from submodules directly:
#   from curator.core.config import CuratorConfig, StoreConnection
#   from curator.core.models import PublishRequest
# =============================================================================
from curator.facade import Curator

__all__ = ["Curator", "__version__"]
