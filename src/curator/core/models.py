"""
curator.core.models - Core Data Models
========================================

The Pydantic models that flow between Curator's layers.

Model Overview:
    ArtifactRecord    → One published piece, as stored in the manifest
    RemoteFileHandle  → Content + integrity token from an authenticated read
    PublishRequest    → What the curator wants to publish
    PublishReceipt    → What a successful publish committed
    PublishOutcome    → Facade-level result, success or failure, with status text
    SettingsOutcome   → Facade-level result of saving a store connection

Wire Format:
    ArtifactRecord keeps the field names already used in gallery.json
    (imageUrl, createdAt) as aliases. Python code uses locator / created_at.
    Unknown keys are kept so that rewriting the manifest never drops data
    written by other tools.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from curator.core.enums import PublishStage, Visibility


def _generate_id() -> str:
    """Generate a unique record identifier (UUID4)."""
    return str(uuid4())


def _now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


# =============================================================================
# Artifact Record
# =============================================================================
# Immutable by convention: a correction is a new record with a new id.
# The locator must point at content that was durably written BEFORE the
# record is committed to the manifest.
# =============================================================================
class ArtifactRecord(BaseModel):
    """One published artifact in the catalog manifest.

    Attributes:
        id: Unique identifier, never reused.
        locator: Public URL of the uploaded binary (wire key: imageUrl).
        title: Display title.
        description: Free-text description.
        medium: Materials / technique.
        tags: Short labels, order preserved, duplicates allowed.
        created_at: Epoch milliseconds at creation (wire key: createdAt).
            Informational ordering only, never used for conflict resolution.

    Example:
        >>> record = ArtifactRecord(
        ...     locator="https://raw.githubusercontent.com/a/b/main/images/1-x.png",
        ...     title="Nocturne",
        ...     tags=["ink", "night"],
        ... )
        >>> record.model_dump(by_alias=True)["imageUrl"]
        'https://raw.githubusercontent.com/a/b/main/images/1-x.png'
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(
        default_factory=_generate_id,
        description="Unique record identifier (UUID4)",
    )
    locator: str = Field(
        alias="imageUrl",
        description="Resolvable URL of the binary content",
    )
    title: str = Field(description="Display title")
    description: str = Field(default="", description="Free-text description")
    medium: str = Field(default="", description="Materials or technique")
    tags: list[str] = Field(default_factory=list, description="Short labels")
    created_at: int = Field(
        default_factory=_now_ms,
        alias="createdAt",
        description="Creation time in epoch milliseconds",
    )

    @property
    def created_datetime(self) -> datetime:
        """created_at as an aware UTC datetime."""
        return datetime.fromtimestamp(self.created_at / 1000, tz=timezone.utc)


# =============================================================================
# Remote File Handle
# =============================================================================
class RemoteFileHandle(BaseModel):
    """Result of an authenticated read.

    The integrity token is the store's content hash for the path at read
    time; it must be passed back on the next write of the same path so the
    store can refuse the write if someone else committed in between.

    Attributes:
        path: Repository path that was read.
        content: Transport-encoded (base64) content exactly as the store
            returned it, line breaks included.
        integrity_token: The store's current content hash (git blob sha).
    """

    path: str = Field(description="Repository path")
    content: str = Field(default="", description="Transport-encoded content")
    integrity_token: str = Field(description="Content hash for conditional writes")


# =============================================================================
# Publish Request
# =============================================================================
class PublishRequest(BaseModel):
    """A new artifact the curator wants to publish.

    Attributes:
        filename: Original file name; sanitized before use as a store path.
        content: Raw image bytes.
        mime_type: Content type of the image.
        title: Required display title.
        description: Optional description.
        medium: Optional medium.
        tags: Optional labels.
    """

    filename: str = Field(min_length=1, description="Original file name")
    content: bytes = Field(min_length=1, description="Raw image bytes")
    mime_type: str = Field(default="application/octet-stream", description="Image MIME type")
    title: str = Field(description="Display title")
    description: str = Field(default="")
    medium: str = Field(default="")
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


# =============================================================================
# Publish Receipt
# =============================================================================
class PublishReceipt(BaseModel):
    """Proof of a durable publish: the manifest commit succeeded.

    Attributes:
        record: The record now at the head of the manifest.
        binary_path: Repository path of the uploaded binary.
        manifest_token: Integrity token of the manifest after the commit.
        manifest_size: Number of records in the committed manifest.
        recovered_from_corrupt_manifest: True when the previous manifest was
            undecodable and was replaced (its entries are gone).
    """

    record: ArtifactRecord
    binary_path: str
    manifest_token: str
    manifest_size: int = Field(ge=1)
    recovered_from_corrupt_manifest: bool = False


# =============================================================================
# Facade Results
# =============================================================================
# Every operation the curator triggers ends in one of these, carrying a
# short status string. Absence of success=True is the failure signal.
# =============================================================================
class PublishOutcome(BaseModel):
    """Result of Curator.publish_artwork().

    Attributes:
        success: True only when the manifest commit succeeded.
        status: Short human-readable status line.
        receipt: The receipt on success.
        error_code: Machine-readable code on failure.
        stage: Stage at which the attempt failed, if it got that far.
    """

    success: bool
    status: str
    receipt: Optional[PublishReceipt] = None
    error_code: Optional[str] = None
    stage: Optional[PublishStage] = None


class SettingsOutcome(BaseModel):
    """Result of Curator.save_settings().

    Attributes:
        verified: Credential could reach the repository; settings were saved.
        visibility: Repository visibility, UNKNOWN if the check failed.
        warning: Operational warning (e.g., private repository).
        status: Short human-readable status line.
    """

    verified: bool
    visibility: Visibility = Visibility.UNKNOWN
    warning: Optional[str] = None
    status: str
