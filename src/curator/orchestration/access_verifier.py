"""
curator.orchestration.access_verifier - Credential & Visibility Checks
========================================================================

Answers two questions about a StoreConnection before it is trusted:

    1. Can this credential reach the repository?        verify()
    2. Will published images be publicly resolvable?    inspect_visibility()

Both checks are read-only and fail closed: any auth, network or store
failure means "not verified" / "visibility unknown", never an exception.

Usage:
    >>> verifier = AccessVerifier(store_factory)
    >>> if await verifier.verify(connection):
    ...     visibility = await verifier.inspect_visibility(connection)
    ...     warning = AccessVerifier.visibility_warning(visibility)
"""

from __future__ import annotations

from typing import Optional

import structlog

from curator.core.config import StoreConnection
from curator.core.enums import Visibility
from curator.core.exceptions import CuratorError
from curator.infrastructure.remote_store import StoreFactory


logger = structlog.get_logger()

PRIVATE_REPOSITORY_WARNING = "Repository is PRIVATE. Images will not be visible on public site."


class AccessVerifier:
    """Checks a connection's credential and repository visibility.

    Attributes:
        store_factory: Builds a RemoteStore for a given connection.
    """

    def __init__(self, store_factory: StoreFactory) -> None:
        self._store_factory = store_factory
        self._logger = logger.bind(component="access_verifier")

    async def verify(self, connection: StoreConnection) -> bool:
        """Return True only if the credential can reach the repository."""
        if not connection.can_publish:
            self._logger.info(
                "access_unverified",
                reason="incomplete_connection",
                repository=connection.display_name,
            )
            return False

        try:
            granted = await self._store_factory(connection).check_access()
        except CuratorError as exc:
            self._logger.warning(
                "access_check_failed",
                repository=connection.display_name,
                error_code=exc.error_code,
                error=exc.message,
            )
            return False

        self._logger.info(
            "access_checked",
            repository=connection.display_name,
            granted=granted,
        )
        return granted

    async def inspect_visibility(self, connection: StoreConnection) -> Visibility:
        """Return the repository's visibility, or UNKNOWN if it cannot be read."""
        if not connection.is_configured:
            return Visibility.UNKNOWN

        try:
            visibility = await self._store_factory(connection).get_visibility()
        except CuratorError as exc:
            self._logger.warning(
                "visibility_check_failed",
                repository=connection.display_name,
                error_code=exc.error_code,
            )
            return Visibility.UNKNOWN

        if visibility == Visibility.PRIVATE:
            self._logger.warning("repository_private", repository=connection.display_name)
        return visibility

    @staticmethod
    def visibility_warning(visibility: Visibility) -> Optional[str]:
        return PRIVATE_REPOSITORY_WARNING if visibility == Visibility.PRIVATE else None
