"""
curator.integrations.describer.base - Abstract Describer Interface
====================================================================

The contract every metadata describer implements.

    ┌───────────────┐   describe(image, mime)   ┌──────────────────┐
    │    Curator    │ ────────────────────────▶ │  BaseDescriber   │
    │   (facade)    │ ◀── ArtworkDescription ── │   (abstract)     │
    └───────────────┘                           └────────┬─────────┘
                                                         │
                                              ┌──────────┴─────────┐
                                              │                    │
                                         ┌────▼────┐      ┌────────▼──────┐
                                         │  Mock   │      │ vision model  │
                                         └─────────┘      │  providers    │
                                                          └───────────────┘

Implementations raise DescriberError on any failure; the facade turns that
into "no suggestion" and lets the curator carry on by hand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from curator.core.config import DescriberConfig


# =============================================================================
# Describer Result
# =============================================================================
class ArtworkDescription(BaseModel):
    """Suggested catalog metadata for one image.

    Attributes:
        title: Short evocative title.
        description: One or two sentences for the gallery card.
        medium: Materials / technique (e.g., "Oil on canvas").
        tags: Free-form keywords.
    """

    title: str
    description: str = ""
    medium: str = ""
    tags: list[str] = Field(default_factory=list)


# =============================================================================
# Abstract Base Describer
# =============================================================================
class BaseDescriber(ABC):
    """Abstract base class for metadata describers.

    Attributes:
        _config: Provider name, model and credentials.
    """

    def __init__(self, config: DescriberConfig) -> None:
        self._config = config

    @property
    def provider_name(self) -> str:
        return self._config.provider

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def config(self) -> DescriberConfig:
        return self._config

    @abstractmethod
    async def describe(self, image: bytes, mime_type: str) -> ArtworkDescription:
        """Suggest metadata for an image.

        Args:
            image: Raw image bytes.
            mime_type: The image's MIME type (e.g., "image/png").

        Returns:
            ArtworkDescription with at least a title.

        Raises:
            DescriberError: If the provider fails or returns something unusable.
        """
        ...

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"provider={self.provider_name!r}, "
            f"model={self.model!r})"
        )
