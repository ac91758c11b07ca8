"""
curator.integrations.describer - AI Metadata Suggestions
==========================================================

Looks at an image and proposes catalog metadata. Suggestions only: the
curator can always type the fields by hand, and a failing describer never
blocks a publish.

Available Describers:
    - BaseDescriber: Abstract contract.
    - MockDescriber: Queued or deterministic suggestions (tests, offline use).

Usage:
    >>> describer = create_describer(config.describer)
    >>> suggestion = await describer.describe(image_bytes, "image/png")
"""

from curator.integrations.describer.base import ArtworkDescription, BaseDescriber
from curator.integrations.describer.mock import MockDescriber
from curator.integrations.describer.factory import create_describer

__all__ = [
    "ArtworkDescription",
    "BaseDescriber",
    "MockDescriber",
    "create_describer",
]
