"""
curator.core.exceptions - Custom Exception Hierarchy
======================================================

Structured exceptions for Curator. Components raise and catch these
specific types instead of generic Exception, and every exception carries
a machine-readable error code plus a details dict.

Exception Hierarchy:
    CuratorError (base)
        ├── ConfigurationError     - Invalid or incomplete connection/config
        ├── StoreError             - Backing store returned an error
        │     ├── AuthError        - Missing or rejected credential
        │     ├── NotFoundError    - Repository, branch or path absent
        │     ├── ConflictError    - Stale integrity token on write
        │     └── NetworkError     - Transport failure or timeout
        ├── CodecError             - Manifest cannot be decoded
        ├── PublishError           - Publish request rejected
        │     └── PublishInFlightError
        └── DescriberError         - Metadata generation failed

Recovery Rules (applied by the orchestration layer, not here):
    - NotFoundError on manifest read  → "first write", not an error
    - CodecError on manifest read     → empty manifest, logged loudly
    - AuthError / ConflictError / NetworkError → abort the publish attempt,
      surface to the user, never retried automatically

Usage:
    >>> from curator.core.exceptions import ConflictError
    >>> raise ConflictError(
    ...     message="gallery.json was modified by another writer",
    ...     details={"path": "gallery.json", "expected_token": "3f2a..."},
    ... )
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
# All Curator exceptions inherit from this base class, so callers can
# catch every library-specific failure with a single except clause:
#
#   try:
#       await orchestrator.publish(request)
#   except CuratorError as e:
#       logger.error(e.message, error_code=e.error_code, details=e.details)
# =============================================================================
class CuratorError(Exception):
    """Base exception for all Curator errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code for programmatic handling.
            Convention: UPPER_SNAKE_CASE (e.g., "INTEGRITY_CONFLICT").
        details: Additional debugging context (paths, status codes, stage).
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary.

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
class ConfigurationError(CuratorError):
    """Raised when the store connection or settings are unusable.

    Common Causes:
        - Owner or collection not configured
        - Persisted connection file cannot be written
        - Malformed curator.yaml
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Store Errors
# =============================================================================
# Raised by RemoteStore implementations. status_code is the HTTP status the
# store answered with (None for transport failures and in-memory fakes).
# =============================================================================
class StoreError(CuratorError):
    """Raised when the backing store answers with an unexpected error.

    Attributes:
        status_code: HTTP status returned by the store, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: str = "STORE_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        if status_code is not None:
            enriched_details["status_code"] = status_code

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.status_code = status_code


class AuthError(StoreError):
    """Raised when a credential is missing or rejected by the store.

    Fatal to the attempted operation. The message is shown to the curator
    verbatim and the operation is never retried automatically.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: str = "AUTH_DENIED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )


class NotFoundError(StoreError):
    """Raised when the repository, branch or path does not exist."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 404,
        error_code: str = "NOT_FOUND",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )


class ConflictError(StoreError):
    """Raised when a conditional write carries a stale integrity token.

    Another writer committed between our read and our write. The store
    refused the write, so nothing was overwritten.

    Example:
        >>> raise ConflictError(
        ...     message="gallery.json changed since it was read",
        ...     details={"path": "gallery.json", "expected_token": "abc123"},
        ... )
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 409,
        error_code: str = "INTEGRITY_CONFLICT",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )


class NetworkError(StoreError):
    """Raised when the store cannot be reached or a request times out."""

    def __init__(
        self,
        message: str,
        error_code: str = "STORE_UNREACHABLE",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=None,
            error_code=error_code,
            details=details,
        )


# =============================================================================
# Codec Error
# =============================================================================
class CodecError(CuratorError):
    """Raised when a manifest cannot be decoded.

    Means "manifest unreadable", which is different from "manifest absent".
    """

    def __init__(
        self,
        message: str,
        error_code: str = "MANIFEST_UNREADABLE",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Publish Errors
# =============================================================================
class PublishError(CuratorError):
    """Raised when a publish request cannot be started."""

    def __init__(
        self,
        message: str,
        error_code: str = "PUBLISH_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class PublishInFlightError(PublishError):
    """Raised when a publish is requested while another one is running."""

    def __init__(
        self,
        message: str = "A publish is already in progress",
        error_code: str = "PUBLISH_IN_FLIGHT",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Describer Error
# =============================================================================
class DescriberError(CuratorError):
    """Raised when the metadata describer fails to analyse an image."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        error_code: str = "DESCRIBE_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        if provider:
            enriched_details["provider"] = provider

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.provider = provider
