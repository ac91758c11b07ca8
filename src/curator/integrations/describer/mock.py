"""
curator.integrations.describer.mock - Mock Describer for Testing
==================================================================

Returns configurable suggestions without calling any vision model.

How It Works:
    1. If failure simulation is on, raise DescriberError.
    2. If suggestions are queued, return the next one (FIFO).
    3. Otherwise return a deterministic default derived from the image
       size and MIME type, so tests can predict it.

Every call is recorded in call_history.

Usage:
    >>> describer = MockDescriber()
    >>> describer.queue_description(ArtworkDescription(title="Nocturne"))
    >>> (await describer.describe(png, "image/png")).title
    'Nocturne'
"""

from __future__ import annotations

from collections import deque
from typing import Any, Optional

import structlog

from curator.core.config import DescriberConfig
from curator.core.exceptions import DescriberError
from curator.integrations.describer.base import ArtworkDescription, BaseDescriber


logger = structlog.get_logger()


class MockDescriber(BaseDescriber):
    """Mock describer for testing and offline development.

    Attributes:
        _queue: FIFO of ArtworkDescription to return.
        _call_history: One entry per describe() call.
        _should_fail: If True, describe() raises DescriberError.
        _failure_message: Message for the simulated failure.

    Example:
        >>> describer = MockDescriber()
        >>> describer.set_should_fail(True)
        >>> await describer.describe(b"...", "image/png")
        Traceback (most recent call last):
        ...
        DescriberError: Mock describer error
    """

    def __init__(self, config: Optional[DescriberConfig] = None) -> None:
        if config is None:
            config = DescriberConfig(provider="mock", model="mock-vision")
        super().__init__(config)

        self._queue: deque[ArtworkDescription] = deque()
        self._call_history: list[dict[str, Any]] = []

        # --- Error Simulation ---
        self._should_fail: bool = False
        self._failure_message: str = "Mock describer error"

        self._logger = logger.bind(component="mock_describer")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Recorded calls: {"size": int, "mime_type": str}."""
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    # =========================================================================
    # Queue Management
    # =========================================================================

    def queue_description(self, description: ArtworkDescription) -> None:
        self._queue.append(description)

    def clear_queue(self) -> None:
        self._queue.clear()

    def set_should_fail(self, should_fail: bool, message: str = "Mock describer error") -> None:
        """Make every describe() call raise DescriberError (or stop doing so)."""
        self._should_fail = should_fail
        self._failure_message = message

    # =========================================================================
    # Describer Interface
    # =========================================================================

    async def describe(self, image: bytes, mime_type: str) -> ArtworkDescription:
        self._call_history.append({"size": len(image), "mime_type": mime_type})
        self._logger.debug(
            "mock_describe_called",
            size=len(image),
            mime_type=mime_type,
            queue_size=len(self._queue),
        )

        if self._should_fail:
            raise DescriberError(
                message=self._failure_message,
                provider=self.provider_name,
            )

        if self._queue:
            return self._queue.popleft()

        return self._default_description(image, mime_type)

    @staticmethod
    def _default_description(image: bytes, mime_type: str) -> ArtworkDescription:
        fmt = mime_type.split("/")[-1].upper() if "/" in mime_type else "IMAGE"
        return ArtworkDescription(
            title=f"Untitled Study ({len(image)} bytes)",
            description=f"A {fmt} work awaiting the curator's own words.",
            medium="Digital",
            tags=["untitled", fmt.lower()],
        )
