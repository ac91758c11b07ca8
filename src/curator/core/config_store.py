"""
curator.core.config_store - Persisted Store Connection
========================================================

Holds the curator's StoreConnection in a local JSON file so the owner,
repository, branch and token do not have to be re-entered every session.

Lifecycle:
    load at startup → hand the ConfigStore to whoever needs it →
    save() on every verified update (write-through)

There is no ambient global: the facade creates one ConfigStore and passes it
by reference. The file holds a single record under one fixed key and has no
schema versioning:

    {
      "curator_store_connection": {
        "owner": "alexandra",
        "collection": "portfolio",
        "branch": "main",
        "credential": "ghp_..."
      }
    }

The file is written with mode 0600 because it contains the credential.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Union

import structlog
from pydantic import ValidationError

from curator.core.config import StoreConnection
from curator.core.exceptions import ConfigurationError


logger = structlog.get_logger()

CONFIG_KEY = "curator_store_connection"


class ConfigStore:
    """Explicit load()/save() persistence for the StoreConnection.

    Attributes:
        path: Location of the JSON file.

    Example:
        >>> store = ConfigStore(Path("~/.curator/connection.json").expanduser())
        >>> conn = store.load()
        >>> store.save(conn.model_copy(update={"branch": "gh-pages"}))
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._connection = StoreConnection()
        self._logger = logger.bind(component="config_store")

    @property
    def connection(self) -> StoreConnection:
        """The connection most recently loaded or saved."""
        return self._connection

    def load(self) -> StoreConnection:
        """Read the persisted connection.

        A missing file yields an empty StoreConnection. A file that cannot be
        parsed is logged and also yields an empty connection, leaving the
        file untouched until the next save().

        Returns:
            The loaded StoreConnection.
        """
        if not self.path.exists():
            self._logger.debug("connection_file_missing", path=str(self.path))
            self._connection = StoreConnection()
            return self._connection

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            record = raw.get(CONFIG_KEY, {}) if isinstance(raw, dict) else {}
            self._connection = StoreConnection.model_validate(record)
        except (OSError, ValueError, ValidationError) as exc:
            self._logger.warning(
                "connection_file_unreadable",
                path=str(self.path),
                error=str(exc),
            )
            self._connection = StoreConnection()
            return self._connection

        self._logger.info(
            "connection_loaded",
            owner=self._connection.owner,
            collection=self._connection.collection,
            branch=self._connection.branch,
            has_credential=bool(self._connection.credential),
        )
        return self._connection

    def save(self, connection: StoreConnection) -> None:
        """Persist a connection and make it the current one.

        Args:
            connection: The connection to write.

        Raises:
            ConfigurationError: If the file cannot be written.
        """
        payload = json.dumps({CONFIG_KEY: connection.model_dump()}, indent=2)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise ConfigurationError(
                message=f"Cannot save connection to {self.path}: {exc}",
                error_code="CONFIG_WRITE_FAILED",
                details={"path": str(self.path)},
            ) from exc

        self._connection = connection
        self._logger.info(
            "connection_saved",
            owner=connection.owner,
            collection=connection.collection,
            branch=connection.branch,
        )

    def clear(self) -> None:
        """Delete the persisted file and reset to an empty connection."""
        if self.path.exists():
            self.path.unlink()
        self._connection = StoreConnection()
        self._logger.info("connection_cleared", path=str(self.path))
