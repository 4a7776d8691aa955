"""CLI configuration management.

Handles persistent CLI settings stored in ~/.cpinit/config.yaml and the init
file that describes the control plane. Supports environment variable
overrides and CLI flag precedence.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .cluster.waiter import DEFAULT_POLL_INTERVAL, DEFAULT_READY_TIMEOUT
from .components import COMPONENTS, ComponentSpec, parse_component_spec
from .errors import ConfigError
from .shared.paths import CONFIG_FILE

# Default values
DEFAULT_LOG_LEVEL = "warning"
DEFAULT_NAME = "controlplane"
DEFAULT_NAMESPACE = "cp-system"

# Environment variable mappings
ENV_VARS = {
    "kubeconfig": "CPINIT_KUBECONFIG",
    "ready_timeout": "CPINIT_READY_TIMEOUT",
    "poll_interval": "CPINIT_POLL_INTERVAL",
    "log_level": "CPINIT_LOG_LEVEL",
}

# Settings value types, used for parsing file and env values
KEY_TYPES: dict[str, type] = {
    "kubeconfig": str,
    "ready_timeout": float,
    "poll_interval": float,
    "log_level": str,
}


@dataclass
class CLIConfig:
    """CLI configuration."""

    kubeconfig: str | None = None
    ready_timeout: float = DEFAULT_READY_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    log_level: str = DEFAULT_LOG_LEVEL

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def values(self) -> dict[str, Any]:
        return {key: getattr(self, key) for key in KEY_TYPES}


def get_config_path() -> Path:
    """Get the CLI config file path.

    Returns:
        Path to ~/.cpinit/config.yaml
    """
    return CONFIG_FILE


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw value to the type of the settings key.

    Raises:
        ConfigError: For unknown keys or values of the wrong type.
    """
    if key not in KEY_TYPES:
        raise ConfigError(f"unknown config key '{key}' (valid: {', '.join(KEY_TYPES)})")
    try:
        value = KEY_TYPES[key](value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid value for '{key}': {value!r}") from e
    if key in ("ready_timeout", "poll_interval") and value <= 0:
        raise ConfigError(f"'{key}' must be positive, got {value}")
    return value


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_config() -> CLIConfig:
    """Load CLI configuration.

    Precedence (highest to lowest):
    1. Environment variables
    2. Config file (~/.cpinit/config.yaml)
    3. Defaults

    Returns:
        CLIConfig with values and sources

    Raises:
        ConfigError: If the config file or an environment value is invalid.
    """
    config = CLIConfig()
    sources: dict[str, str] = {key: "default" for key in KEY_TYPES}

    config_path = get_config_path()
    if config_path.exists():
        for key, value in _read_config_file(config_path).items():
            if value is None:
                continue
            setattr(config, key, _coerce(key, value))
            sources[key] = "config file"

    for key, env_var in ENV_VARS.items():
        if os.environ.get(env_var):
            setattr(config, key, _coerce(key, os.environ[env_var]))
            sources[key] = "environment"

    config._sources = sources
    return config


def save_config(key: str, value: Any) -> None:
    """Save a config value to the config file.

    Args:
        key: Config key (kubeconfig, ready_timeout, poll_interval, log_level)
        value: Value to save

    Raises:
        ConfigError: For unknown keys or invalid values.
    """
    value = _coerce(key, value)
    config_path = get_config_path()

    existing: dict[str, Any] = {}
    if config_path.exists():
        existing = _read_config_file(config_path)

    existing[key] = value

    config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)


def unset_config(key: str) -> bool:
    """Remove a config value from the config file.

    Args:
        key: Config key to remove

    Returns:
        True if key was removed, False if not found
    """
    config_path = get_config_path()
    if not config_path.exists():
        return False

    existing = _read_config_file(config_path)
    if key not in existing:
        return False

    del existing[key]

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)

    return True


@dataclass
class InitConfig:
    """Parsed init file."""

    name: str = DEFAULT_NAME
    namespace: str = DEFAULT_NAMESPACE
    components: dict[str, ComponentSpec] = field(default_factory=dict)


def load_init_config(path: str | Path) -> InitConfig:
    """Load the init file describing the control plane.

    Components missing from the file are installed locally with defaults.

    Args:
        path: Path to the YAML init file.

    Returns:
        InitConfig

    Raises:
        ConfigError: If the file is unreadable or malformed.
    """
    data = _read_config_file(Path(path))

    raw_components = data.get("components") or {}
    if not isinstance(raw_components, dict):
        raise ConfigError("'components' must be a mapping")

    unknown = set(raw_components) - set(COMPONENTS)
    if unknown:
        raise ConfigError(f"unknown components: {', '.join(sorted(unknown))}")

    return InitConfig(
        name=str(data.get("name") or DEFAULT_NAME),
        namespace=str(data.get("namespace") or DEFAULT_NAMESPACE),
        components={
            component: parse_component_spec(component, raw_components.get(component))
            for component in COMPONENTS
        },
    )
