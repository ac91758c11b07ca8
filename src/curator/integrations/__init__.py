"""
curator.integrations - External Service Integration Layer
===========================================================

Adapters for services the curator consults but does not depend on for
correctness. Each integration sits behind an interface so the backend can
be swapped (real provider ⇄ mock) without touching the facade.

Sub-packages:
    describer/ - Image → suggested title, description, medium, tags
"""

__all__: list[str] = []
