"""
Configuration management for pathmark.

The configuration is stored as a TOML file in the pathmark home directory
(``~/.pathmark`` unless PATHMARK_HOME is set). It is optional: a missing
file means defaults, and it is only written by ``pathmark config KEY VALUE``.

Priority: command-line flag > environment variables > pathmark.toml > defaults.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli_w

from .store import STORE_FILENAME


CONFIG_FILENAME = "pathmark.toml"


@dataclass
class PathmarkConfig:
    """Complete pathmark configuration."""
    home: Path
    store_file: str = STORE_FILENAME
    lock: bool = True
    exclusive_quick: bool = False
    # Set from PATHMARK_STORE / --store, never persisted
    store_override: Optional[Path] = field(default=None, repr=False)

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.home / CONFIG_FILENAME

    @property
    def store_path(self) -> Path:
        """Effective store file location."""
        if self.store_override is not None:
            return self.store_override.expanduser()
        p = Path(self.store_file).expanduser()
        return p if p.is_absolute() else self.home / p

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


# Settable keys: dotted TOML name -> (attribute, type)
CONFIG_KEYS: dict[str, tuple[str, type]] = {
    "store.file": ("store_file", str),
    "store.lock": ("lock", bool),
    "quick.exclusive": ("exclusive_quick", bool),
}


def get_home_dir() -> Path:
    """Resolve the pathmark home directory, respecting PATHMARK_HOME."""
    env = os.environ.get("PATHMARK_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".pathmark"


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def load_config(home: Optional[Path] = None) -> PathmarkConfig:
    """
    Load configuration from the home directory and environment.

    Raises:
        ValueError: If the config file is invalid
    """
    home = home if home is not None else get_home_dir()
    config = PathmarkConfig(home=home)

    if config.config_path.exists():
        try:
            with open(config.config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config {config.config_path}: {e}") from e

        store = data.get("store", {})
        quick = data.get("quick", {})
        if "file" in store:
            config.store_file = str(store["file"])
        if "lock" in store:
            config.lock = _parse_bool(store["lock"])
        if "exclusive" in quick:
            config.exclusive_quick = _parse_bool(quick["exclusive"])

    env_store = os.environ.get("PATHMARK_STORE")
    if env_store:
        config.store_override = Path(env_store)

    return config


def save_config(config: PathmarkConfig) -> None:
    """
    Save configuration to the home directory.

    Creates the directory if it doesn't exist.
    """
    config.home.mkdir(parents=True, exist_ok=True)
    data = {
        "store": {
            "file": config.store_file,
            "lock": config.lock,
        },
        "quick": {
            "exclusive": config.exclusive_quick,
        },
    }
    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def set_config_value(config: PathmarkConfig, key: str, value: str) -> PathmarkConfig:
    """
    Validate and apply one dotted-key setting, then persist it.

    Raises:
        KeyError: If the key is unknown
        ValueError: If the value cannot be converted
    """
    if key not in CONFIG_KEYS:
        raise KeyError(f"Unknown config key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}")
    attr, kind = CONFIG_KEYS[key]
    if kind is bool:
        converted: Any = _parse_bool(value)
    else:
        converted = value.strip()
        if not converted:
            raise ValueError(f"{key} must not be empty")
    setattr(config, attr, converted)
    save_config(config)
    return config


def config_as_dict(config: PathmarkConfig) -> dict[str, Any]:
    """Effective configuration as a flat dict for display."""
    d: dict[str, Any] = {key: getattr(config, attr) for key, (attr, _) in CONFIG_KEYS.items()}
    d["home"] = str(config.home)
    d["store.path"] = str(config.store_path)
    d["config.path"] = str(config.config_path)
    return d
