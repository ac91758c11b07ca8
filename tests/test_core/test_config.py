"""
Tests for curator.core.config
===============================

These tests verify that the configuration system works correctly:
    - Default values are sensible and complete
    - Environment variables override defaults
    - YAML files are parsed correctly
    - Validation catches invalid values
    - StoreConnection helpers and credential hiding

All tests are unit tests; no network access is needed.
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from curator.core.config import (
    CuratorConfig,
    DescriberConfig,
    StoreConfig,
    StoreConnection,
    load_config,
)


# =============================================================================
# Test: Default Configuration
# =============================================================================
class TestDefaultConfig:
    """Tests for default configuration values."""

    def test_default_config_creates_successfully(self) -> None:
        """CuratorConfig() should work with no arguments."""
        config = CuratorConfig()
        assert config.environment == "dev"

    def test_default_connection_file_under_home(self) -> None:
        """The persisted connection defaults to ~/.curator/connection.json."""
        config = CuratorConfig()
        assert config.connection_file == Path.home() / ".curator" / "connection.json"

    def test_default_store_targets_github(self) -> None:
        """Store defaults point at the GitHub API and raw content host."""
        store = CuratorConfig().store
        assert store.api_base_url == "https://api.github.com"
        assert store.raw_base_url == "https://raw.githubusercontent.com"
        assert store.manifest_path == "gallery.json"
        assert store.image_dir == "images"

    def test_default_timeout_is_thirty_seconds(self) -> None:
        """Every request gets a hard 30s timeout by default."""
        assert StoreConfig().timeout_seconds == 30.0

    def test_corrupt_manifest_overwrite_allowed_by_default(self) -> None:
        """An unreadable manifest is treated as empty unless configured otherwise."""
        assert StoreConfig().allow_corrupt_manifest_overwrite is True

    def test_default_describer_is_mock(self) -> None:
        """The describer defaults to the mock provider with no API key."""
        describer = DescriberConfig()
        assert describer.provider == "mock"
        assert describer.api_key is None

    def test_unknown_setting_rejected(self) -> None:
        """A misspelled or retired setting is an error, not silently ignored."""
        with pytest.raises(ValidationError):
            CuratorConfig(log_level="DEBUG")


# =============================================================================
# Test: Validation
# =============================================================================
class TestConfigValidation:
    """Tests for invalid values."""

    def test_invalid_environment_rejected(self) -> None:
        """Only dev/staging/prod are accepted."""
        with pytest.raises(ValidationError):
            CuratorConfig(environment="qa")

    def test_zero_timeout_rejected(self) -> None:
        """A timeout must be positive."""
        with pytest.raises(ValidationError):
            StoreConfig(timeout_seconds=0)

    def test_huge_timeout_rejected(self) -> None:
        """A timeout above five minutes is rejected."""
        with pytest.raises(ValidationError):
            StoreConfig(timeout_seconds=301)

    def test_empty_manifest_path_rejected(self) -> None:
        """The manifest path cannot be empty."""
        with pytest.raises(ValidationError):
            StoreConfig(manifest_path="")


# =============================================================================
# Test: Environment Variable Overrides
# =============================================================================
class TestEnvironmentOverrides:
    """Tests for CURATOR_* environment variables."""

    def test_env_var_overrides_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CURATOR_ENVIRONMENT should override the environment."""
        monkeypatch.setenv("CURATOR_ENVIRONMENT", "prod")
        assert CuratorConfig().environment == "prod"

    def test_nested_env_var_overrides_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CURATOR_STORE__MANIFEST_PATH should reach the nested store config."""
        monkeypatch.setenv("CURATOR_STORE__MANIFEST_PATH", "catalog/gallery.json")
        assert CuratorConfig().store.manifest_path == "catalog/gallery.json"

    def test_env_var_overrides_connection_file(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """CURATOR_CONNECTION_FILE should relocate the persisted connection."""
        target = tmp_path / "elsewhere.json"
        monkeypatch.setenv("CURATOR_CONNECTION_FILE", str(target))
        assert CuratorConfig().connection_file == target


# =============================================================================
# Test: YAML Loading
# =============================================================================
class TestYAMLLoading:
    """Tests for load_config()."""

    def test_load_valid_yaml(self, tmp_path: Path) -> None:
        """Values from the YAML file should be applied."""
        config_file = tmp_path / "curator.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "environment": "staging",
                    "store": {"image_dir": "art", "timeout_seconds": 10},
                }
            )
        )

        config = load_config(str(config_file))

        assert config.environment == "staging"
        assert config.store.image_dir == "art"
        assert config.store.timeout_seconds == 10

    def test_load_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        """An empty YAML file should yield the defaults."""
        config_file = tmp_path / "curator.yaml"
        config_file.write_text("")

        config = load_config(str(config_file))

        assert config.environment == "dev"
        assert config.store.manifest_path == "gallery.json"

    def test_missing_explicit_file_raises(self, tmp_path: Path) -> None:
        """An explicit path that doesn't exist should raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_no_path_and_no_default_file(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Without a path or a curator.yaml in cwd, defaults are used."""
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.environment == "dev"

    def test_picks_up_curator_yaml_in_cwd(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """curator.yaml in the working directory is loaded automatically."""
        (tmp_path / "curator.yaml").write_text(yaml.dump({"environment": "prod"}))
        monkeypatch.chdir(tmp_path)
        assert load_config().environment == "prod"


# =============================================================================
# Test: StoreConnection
# =============================================================================
class TestStoreConnection:
    """Tests for the StoreConnection model."""

    def test_empty_connection_is_not_configured(self) -> None:
        """A blank connection is neither configured nor publishable."""
        conn = StoreConnection()
        assert conn.is_configured is False
        assert conn.can_publish is False
        assert conn.display_name == "Not Connected"

    def test_default_branch_is_main(self) -> None:
        """Branch defaults to main."""
        assert StoreConnection().branch == "main"

    def test_configured_without_credential(self) -> None:
        """Owner + collection is enough for public reads, not for publishing."""
        conn = StoreConnection(owner="alexandra", collection="portfolio")
        assert conn.is_configured is True
        assert conn.can_publish is False
        assert conn.display_name == "alexandra / portfolio"

    def test_publishable_with_credential(self) -> None:
        """A credential makes a configured connection publishable."""
        conn = StoreConnection(owner="a", collection="b", credential="tok")
        assert conn.can_publish is True

    def test_credential_hidden_from_repr(self) -> None:
        """The credential must never appear in repr()."""
        conn = StoreConnection(owner="a", collection="b", credential="ghp_secret")
        assert "ghp_secret" not in repr(conn)
