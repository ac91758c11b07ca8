"""
curator.core.enums - Type-Safe Enumerations
=============================================

All enums inherit from both `str` and `Enum`, so they serialize to plain
strings and compare equal to their values:

    >>> PublishStage.COMMIT_MANIFEST == "commit_manifest"
    True
"""

from enum import Enum


# =============================================================================
# Repository Visibility
# =============================================================================
# Reported by the Access Verifier as an operational warning only. A private
# repository still accepts writes, but the public raw host will not serve
# its files, so the gallery stays empty for readers.
# =============================================================================
class Visibility(str, Enum):
    """Visibility of the backing repository."""

    PUBLIC = "public"
    PRIVATE = "private"
    UNKNOWN = "unknown"     # Check failed; never blocks saving settings


# =============================================================================
# Publish Stage
# =============================================================================
# The publish state machine. Stages run strictly in this order; a failure
# at any stage aborts the remaining ones.
#
#   UPLOAD_BINARY → FETCH_MANIFEST → MERGE → COMMIT_MANIFEST → COMPLETE
# =============================================================================
class PublishStage(str, Enum):
    """Stages of a single publish attempt."""

    UPLOAD_BINARY = "upload_binary"         # Write the image blob
    FETCH_MANIFEST = "fetch_manifest"       # Read manifest + integrity token
    MERGE = "merge"                         # Prepend the new record
    COMMIT_MANIFEST = "commit_manifest"     # Conditional write of the manifest
    COMPLETE = "complete"                   # Commit succeeded; durable
