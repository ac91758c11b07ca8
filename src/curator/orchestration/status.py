"""
curator.orchestration.status - Human-readable Status Lines
============================================================

Every operation the curator triggers ends with a short status line. This
module is the single place those strings live.

    PublishStage  ──stage_status()──────▶ "Uploading to Archives..."
    Exception     ──describe_failure()──▶ "Catalogue changed during publish. Refresh and try again."
"""

from __future__ import annotations

from curator.core.enums import PublishStage
from curator.core.exceptions import (
    AuthError,
    CodecError,
    ConflictError,
    CuratorError,
    DescriberError,
    NetworkError,
    NotFoundError,
    PublishInFlightError,
)


PREPARING = "Preparing..."
PUBLISHED = "Published Successfully"
ACCESS_DENIED = "Access Denied. Verify Token scopes."
ACCESS_VERIFIED = "Connection verified. Settings saved."
INCOMPLETE_REQUEST = "Please select an image and ensure a title is set."
MISSING_CREDENTIAL = "GitHub Token is missing. Please check Settings."
DESCRIBE_FAILED = "Failed to analyze image. Ensure API Key is valid."
GENERIC_FAILURE = "Failed to publish artwork"

_STAGE_STATUS: dict[PublishStage, str] = {
    PublishStage.UPLOAD_BINARY: "Uploading to Archives...",
    PublishStage.FETCH_MANIFEST: "Updating Catalogue...",
    PublishStage.MERGE: "Updating Catalogue...",
    PublishStage.COMMIT_MANIFEST: "Updating Catalogue...",
    PublishStage.COMPLETE: PUBLISHED,
}


def stage_status(stage: PublishStage) -> str:
    return _STAGE_STATUS[stage]


def describe_failure(error: BaseException) -> str:
    """Map a failure to the status line shown to the curator.

    Auth failures carry the store's own message verbatim, since it usually
    names the missing scope.
    """
    if isinstance(error, PublishInFlightError):
        return "A publish is already in progress."
    if isinstance(error, ConflictError):
        return "Catalogue changed during publish. Refresh and try again."
    if isinstance(error, AuthError):
        return error.message
    if isinstance(error, NotFoundError):
        return "Repository or branch not found. Check Settings."
    if isinstance(error, NetworkError):
        if error.error_code == "STORE_TIMEOUT":
            return "The archive did not respond in time. Try again."
        return "Could not reach the archive. Check your connection."
    if isinstance(error, CodecError):
        return "Catalogue file is unreadable. Repair it before publishing."
    if isinstance(error, DescriberError):
        return DESCRIBE_FAILED
    if isinstance(error, CuratorError):
        return error.message or GENERIC_FAILURE
    return GENERIC_FAILURE
