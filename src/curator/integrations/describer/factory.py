"""
curator.integrations.describer.factory - Describer Factory
============================================================

Maps DescriberConfig.provider to a concrete BaseDescriber.

Usage:
    >>> describer = create_describer(DescriberConfig(provider="mock"))
    >>> type(describer)  # MockDescriber
"""

from __future__ import annotations

from curator.core.config import DescriberConfig
from curator.integrations.describer.base import BaseDescriber


def create_describer(config: DescriberConfig) -> BaseDescriber:
    """Create a describer for the configured provider.

    Args:
        config: Describer configuration.

    Returns:
        A BaseDescriber ready for describe() calls.

    Raises:
        ValueError: If the provider name is not recognized.
    """
    provider_name = config.provider.lower()

    if provider_name == "mock":
        from curator.integrations.describer.mock import MockDescriber
        return MockDescriber(config)

    raise ValueError(
        f"Unknown describer provider: '{provider_name}'. "
        f"Available providers: 'mock'."
    )
