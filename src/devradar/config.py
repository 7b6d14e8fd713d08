"""Configuration management for devradar."""

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import platformdirs
import yaml

from .console import debug, warning


@dataclass
class Settings:
    """User-tunable settings. Every field has a working default."""

    refresh_interval: float = 5.0  # Seconds between discovery cycles
    probe_timeout: float = 1.5  # Seconds per health request
    health_ttl: float = 4.0  # Seconds a health result stays valid
    max_probe_workers: int = 16
    kill_grace: float = 3.0  # Seconds between SIGTERM and SIGKILL
    custom_paths: dict[int, str] = field(default_factory=dict)  # port -> URL path

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_config_dir() -> Path:
    """Get the configuration directory for devradar.

    Returns:
        Path to config directory (not created)
    """
    return Path(platformdirs.user_config_dir("devradar", "devradar"))


def get_config_path() -> Path:
    """Get the config file path, honouring DEVRADAR_CONFIG.

    Returns:
        Path to config.yaml
    """
    override = os.getenv("DEVRADAR_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.yaml"


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML file.

    A missing or broken file gives the defaults. Keys with a value of the
    wrong type are ignored one by one; unknown keys are ignored.

    Args:
        path: Config file. Defaults to get_config_path().

    Returns:
        Effective settings
    """
    path = path or get_config_path()
    settings = Settings()

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        debug(f"No config file at {path}")
        return settings
    except (OSError, yaml.YAMLError) as e:
        warning(f"Ignoring unreadable config {path}: {e}")
        return settings

    if not isinstance(data, dict):
        return settings

    for option in fields(Settings):
        if option.name not in data:
            continue
        value = _coerce(option.name, data[option.name])
        if value is None:
            warning(f"Ignoring invalid value for '{option.name}' in {path}")
            continue
        setattr(settings, option.name, value)

    return settings


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw YAML value to the field's type, or None if it does not fit."""
    if name == "custom_paths":
        return _parse_custom_paths(value)

    if isinstance(value, bool):
        return None

    if name == "max_probe_workers":
        if isinstance(value, int) and value > 0:
            return value
        return None

    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return None


def _parse_custom_paths(value: Any) -> dict[int, str] | None:
    if not isinstance(value, dict):
        return None

    paths: dict[int, str] = {}
    for port, path in value.items():
        try:
            port_num = int(port)
        except (TypeError, ValueError):
            continue
        if not isinstance(path, str):
            continue
        paths[port_num] = path if path.startswith("/") or not path else f"/{path}"
    return paths
