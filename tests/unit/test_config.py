"""Unit tests for probe configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from lifecycle_probe.config import (
    Credentials,
    ProbeConfig,
    config_keys,
    load_config,
    load_credentials,
    save_config,
    unset_config,
)
from lifecycle_probe.errors import ConfigError, MissingCredentialsError
from lifecycle_probe.shared.paths import FIXTURES_DIR


class TestProbeConfigDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = ProbeConfig()
        assert config.location == "test"
        assert config.timeout == 10.0
        assert config.http_timeout == 30.0
        assert config.platform_cli == "cloudron"
        assert config.dataplane_cli == "surfer"
        assert config.appstore_id == "io.cloudron.surfer"
        assert config.headless is False
        assert config.workdir is None
        assert config.fixtures_dir == FIXTURES_DIR

    def test_packaged_fixtures_exist(self):
        """index.html, test.txt and test/test.txt ship with the package."""
        assert (FIXTURES_DIR / "index.html").is_file()
        assert (FIXTURES_DIR / "test.txt").is_file()
        assert (FIXTURES_DIR / "test" / "test.txt").is_file()

    def test_config_keys_exclude_private(self):
        keys = config_keys()
        assert "_sources" not in keys
        assert keys[0] == "location"

    def test_source_defaults_to_default(self):
        assert ProbeConfig().get_source("location") == "default"


class TestOverride:
    """Tests for CLI flag overrides."""

    def test_override_sets_value_and_source(self):
        config = ProbeConfig()
        config.override("location", "staging")
        assert config.location == "staging"
        assert config.get_source("location") == "flag"

    def test_override_none_is_ignored(self):
        config = ProbeConfig()
        config.override("location", None)
        assert config.location == "test"
        assert config.get_source("location") == "default"

    def test_override_coerces(self):
        config = ProbeConfig()
        config.override("timeout", "2.5")
        config.override("workdir", "/tmp/app")
        assert config.timeout == 2.5
        assert config.workdir == Path("/tmp/app")

    def test_override_false_flag_applies(self):
        """--no-headless is a real value, not an unset flag."""
        config = ProbeConfig(headless=True)
        config.override("headless", False)
        assert config.headless is False

    def test_as_dict_stringifies_paths(self):
        config = ProbeConfig(workdir=Path("/app"))
        data = config.as_dict()
        assert data["workdir"] == "/app"
        assert data["fixtures_dir"] == str(FIXTURES_DIR)
        assert "_sources" not in data


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config.location == "test"
        assert config.get_source("location") == "default"

    def test_file_values(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("location: staging\ntimeout: 20\nheadless: true\n")

        config = load_config(config_file)

        assert config.location == "staging"
        assert config.timeout == 20.0
        assert config.headless is True
        assert config.get_source("location") == "config file"
        assert config.get_source("platform_cli") == "default"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("location: staging\n")
        monkeypatch.setenv("PROBE_LOCATION", "ci")
        monkeypatch.setenv("PROBE_HEADLESS", "1")

        config = load_config(config_file)

        assert config.location == "ci"
        assert config.headless is True
        assert config.get_source("location") == "environment"

    def test_default_path(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("dataplane_cli: /opt/surfer\n")

        with patch("lifecycle_probe.config.get_config_path", return_value=config_file):
            config = load_config()

        assert config.dataplane_cli == "/opt/surfer"

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("location: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config(config_file)

    def test_non_mapping(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(config_file)

    def test_bad_value_in_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("timeout: soon\n")

        with pytest.raises(ConfigError, match="Invalid value for timeout"):
            load_config(config_file)

    def test_bad_value_in_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PROBE_TIMEOUT", "soon")

        with pytest.raises(ConfigError, match="PROBE_TIMEOUT"):
            load_config(tmp_path / "missing.yaml")


class TestCredentials:
    """Tests for load_credentials."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("USERNAME", "admin")
        monkeypatch.setenv("PASSWORD", "s3cret")
        assert load_credentials() == Credentials("admin", "s3cret")

    @pytest.mark.parametrize("missing", ["USERNAME", "PASSWORD"])
    def test_missing(self, monkeypatch, missing):
        monkeypatch.setenv("USERNAME", "admin")
        monkeypatch.setenv("PASSWORD", "s3cret")
        monkeypatch.delenv(missing)

        with pytest.raises(MissingCredentialsError):
            load_credentials()

    def test_empty_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("USERNAME", "admin")
        monkeypatch.setenv("PASSWORD", "")

        with pytest.raises(MissingCredentialsError):
            load_credentials()

    def test_repr_masks_password(self):
        assert "s3cret" not in repr(Credentials("admin", "s3cret"))


class TestSaveConfig:
    """Tests for save_config and unset_config."""

    def test_save_creates_file(self, tmp_path):
        config_file = tmp_path / "nested" / "config.yaml"

        save_config("location", "staging", config_file)

        assert yaml.safe_load(config_file.read_text()) == {"location": "staging"}

    def test_save_keeps_other_keys(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("location: staging\n")

        save_config("timeout", "15", config_file)

        assert yaml.safe_load(config_file.read_text()) == {"location": "staging", "timeout": 15.0}

    def test_save_invalid_value(self, tmp_path):
        with pytest.raises(ValueError):
            save_config("timeout", "soon", tmp_path / "config.yaml")

    def test_saved_value_loads_back(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        save_config("headless", "yes", config_file)
        assert load_config(config_file).headless is True

    def test_unset_existing(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("location: staging\ntimeout: 5\n")

        assert unset_config("location", config_file) is True
        assert yaml.safe_load(config_file.read_text()) == {"timeout": 5}

    def test_unset_missing_key(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("timeout: 5\n")
        assert unset_config("location", config_file) is False

    def test_unset_missing_file(self, tmp_path):
        assert unset_config("location", tmp_path / "missing.yaml") is False
