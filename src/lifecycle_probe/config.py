"""Probe configuration management.

Handles persistent configuration stored in ~/.lifecycle-probe/config.yaml.
Supports environment variable overrides and CLI flag precedence.
Credentials are never stored; they come from USERNAME/PASSWORD only.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, MissingCredentialsError
from .shared.paths import FIXTURES_DIR, PROBE_DIR, ensure_dirs

# Default values
DEFAULT_LOCATION = "test"
DEFAULT_TIMEOUT = 10.0
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_PLATFORM_CLI = "cloudron"
DEFAULT_DATAPLANE_CLI = "surfer"
DEFAULT_APPSTORE_ID = "io.cloudron.surfer"
DEFAULT_LOG_LEVEL = "warning"

# Environment variable mappings
ENV_VARS = {
    "location": "PROBE_LOCATION",
    "timeout": "PROBE_TIMEOUT",
    "http_timeout": "PROBE_HTTP_TIMEOUT",
    "platform_cli": "PROBE_PLATFORM_CLI",
    "dataplane_cli": "PROBE_DATAPLANE_CLI",
    "appstore_id": "PROBE_APPSTORE_ID",
    "headless": "PROBE_HEADLESS",
    "workdir": "PROBE_WORKDIR",
    "fixtures_dir": "PROBE_FIXTURES_DIR",
    "log_level": "PROBE_LOG_LEVEL",
}

USERNAME_ENV = "USERNAME"
PASSWORD_ENV = "PASSWORD"


@dataclass
class ProbeConfig:
    """Lifecycle probe configuration."""

    location: str = DEFAULT_LOCATION
    timeout: float = DEFAULT_TIMEOUT
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    platform_cli: str = DEFAULT_PLATFORM_CLI
    dataplane_cli: str = DEFAULT_DATAPLANE_CLI
    appstore_id: str = DEFAULT_APPSTORE_ID
    headless: bool = False
    workdir: Path | None = None
    fixtures_dir: Path = field(default_factory=lambda: FIXTURES_DIR)
    log_level: str = DEFAULT_LOG_LEVEL

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def override(self, key: str, value: Any) -> None:
        """Apply a CLI flag value, ignoring unset (None) flags."""
        if value is None:
            return
        setattr(self, key, _coerce(key, value))
        self._sources[key] = "flag"

    def as_dict(self) -> dict[str, Any]:
        """Config values as plain YAML/JSON-friendly types."""
        values: dict[str, Any] = {}
        for key in config_keys():
            value = getattr(self, key)
            values[key] = str(value) if isinstance(value, Path) else value
        return values


@dataclass(frozen=True)
class Credentials:
    """Admin credentials shared by the UI and the data-plane CLI."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='****')"


def config_keys() -> list[str]:
    """Public config keys, in declaration order."""
    return [f.name for f in fields(ProbeConfig) if not f.name.startswith("_")]


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw file/env value to the field's type."""
    if key in ("timeout", "http_timeout"):
        return float(value)
    if key == "headless":
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if key in ("workdir", "fixtures_dir"):
        return Path(value).expanduser()
    return str(value)


def get_config_path() -> Path:
    """Get the probe config file path.

    Returns:
        Path to ~/.lifecycle-probe/config.yaml
    """
    return PROBE_DIR / "config.yaml"


def _read_config_file(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            message=f"Cannot parse {config_path}: {e}",
            data={"path": str(config_path)},
        )
    if not isinstance(data, dict):
        raise ConfigError(
            message=f"Config file {config_path} must contain a mapping",
            data={"path": str(config_path)},
        )
    return data


def load_config(config_path: Path | None = None) -> ProbeConfig:
    """Load probe configuration.

    Precedence (highest to lowest):
    1. CLI flags (applied by the caller via ProbeConfig.override)
    2. Environment variables
    3. Config file (~/.lifecycle-probe/config.yaml)
    4. Defaults

    Args:
        config_path: Explicit config file; defaults to get_config_path()

    Returns:
        ProbeConfig with values and sources

    Raises:
        ConfigError: If the file exists but is not valid YAML, or a value
                     has the wrong type
    """
    config = ProbeConfig()
    sources: dict[str, str] = {key: "default" for key in config_keys()}

    path = config_path or get_config_path()
    if path.exists():
        file_config = _read_config_file(path)
        for key in config_keys():
            if key in file_config and file_config[key] is not None:
                try:
                    setattr(config, key, _coerce(key, file_config[key]))
                except (TypeError, ValueError):
                    raise ConfigError(
                        message=f"Invalid value for {key} in {path}: {file_config[key]!r}",
                        data={"path": str(path), "key": key},
                    )
                sources[key] = "config file"

    for key, env_var in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if not raw:
            continue
        try:
            setattr(config, key, _coerce(key, raw))
        except ValueError:
            raise ConfigError(
                message=f"Invalid value for {env_var}: {raw!r}",
                data={"env": env_var},
            )
        sources[key] = "environment"

    config._sources = sources
    return config


def load_credentials() -> Credentials:
    """Read admin credentials from the environment.

    Raises:
        MissingCredentialsError: If USERNAME or PASSWORD is unset or empty
    """
    username = os.environ.get(USERNAME_ENV)
    password = os.environ.get(PASSWORD_ENV)
    if not username or not password:
        raise MissingCredentialsError()
    return Credentials(username=username, password=password)


def save_config(key: str, value: Any, config_path: Path | None = None) -> None:
    """Save a config value to the config file.

    Args:
        key: Config key (see config_keys())
        value: Value to save
        config_path: Explicit config file; defaults to get_config_path()
    """
    path = config_path or get_config_path()

    existing: dict[str, Any] = {}
    if path.exists():
        existing = _read_config_file(path)

    coerced = _coerce(key, value)
    existing[key] = str(coerced) if isinstance(coerced, Path) else coerced

    if path.parent == PROBE_DIR:
        ensure_dirs()
    else:
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)


def unset_config(key: str, config_path: Path | None = None) -> bool:
    """Remove a config value from the config file.

    Args:
        key: Config key to remove
        config_path: Explicit config file; defaults to get_config_path()

    Returns:
        True if key was removed, False if not found
    """
    path = config_path or get_config_path()
    if not path.exists():
        return False

    existing = _read_config_file(path)
    if key not in existing:
        return False

    del existing[key]

    with open(path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)

    return True
