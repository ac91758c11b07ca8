"""
Publish Artwork Example: One Curator Session, No Network
==========================================================

This example walks through a complete curator session against an
in-memory repository:

    1. Save (and verify) the repository settings
    2. Ask the describer for suggested metadata
    3. Publish the image and its catalog entry
    4. Browse the refreshed catalog

Swap ``store_factory=store.bind`` out (and set a real token) to publish
to GitHub instead.

Usage:
    python examples/publish_artwork.py
"""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from curator.core.config import CuratorConfig, StoreConnection
from curator.core.enums import PublishStage
from curator.facade import Curator
from curator.infrastructure.remote_store import InMemoryRemoteStore
from curator.integrations.describer.base import ArtworkDescription
from curator.integrations.describer.mock import MockDescriber
from curator.orchestration import status


IMAGE = b"\x89PNG\r\n\x1a\n" + bytes(range(64))


async def main() -> None:
    """Publish one artwork and print every step."""
    workdir = Path(tempfile.mkdtemp(prefix="curator-"))
    config = CuratorConfig(connection_file=workdir / "connection.json")

    # The repository lives in memory; the describer answers from a queue.
    store = InMemoryRemoteStore()
    describer = MockDescriber()
    describer.queue_description(
        ArtworkDescription(
            title="Nocturne in Blue",
            description="Ink wash of the harbour at dusk.",
            medium="Ink on paper",
            tags=["ink", "night", "harbour"],
        )
    )

    def on_stage(stage: PublishStage) -> None:
        print(f"  [{stage.value}] {status.stage_status(stage)}")

    async with Curator(
        config,
        store_factory=store.bind,
        describer=describer,
        progress=on_stage,
    ) as curator:
        settings = await curator.save_settings(
            StoreConnection(owner="alexandra", collection="portfolio", credential="ghp_demo")
        )
        print(f"Settings : {settings.status} ({settings.visibility.value})")

        suggestion = await curator.describe_artwork(IMAGE, "image/png")
        print(f"Suggested: {suggestion.title!r} / {suggestion.medium}")

        print("Publishing...")
        outcome = await curator.publish_artwork(
            {
                "filename": "Nocturne in Blue.png",
                "content": IMAGE,
                "mime_type": "image/png",
                **suggestion.model_dump(),
            }
        )
        print(f"Outcome  : {outcome.status}")
        if outcome.receipt is not None:
            print(f"Binary   : {outcome.receipt.binary_path}")
            print(f"Locator  : {outcome.receipt.record.locator}")

        print()
        print("Catalog")
        print("-" * 40)
        for record in curator.catalog:
            print(f"{record.created_datetime:%Y-%m-%d %H:%M}  {record.title}  {record.tags}")

    print()
    print("Commits")
    print("-" * 40)
    for path, message in store.commits:
        print(f"{message:<40} {path}")


if __name__ == "__main__":
    asyncio.run(main())
