"""Configuration loading for cputune."""

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cputune.errors import ConfigError
from cputune.models import Profile
from cputune.sampler import DEFAULT_SYSFS_ROOT

CONFIG_ENV_VAR = "CPUTUNE_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/cputune/config.json")

DEFAULT_CONFIG: dict[str, Any] = {
    "poll_interval": 2.0,
    "sysfs_root": DEFAULT_SYSFS_ROOT,
    "show_default_profiles": False,
    "log_level": "warning",
    "custom_profiles": [],
}


@dataclass(slots=True)
class Config:
    """Runtime settings."""

    poll_interval: float = 2.0
    sysfs_root: str = DEFAULT_SYSFS_ROOT
    show_default_profiles: bool = False
    log_level: str = "warning"
    custom_profiles: list[Profile] = field(default_factory=list)


def default_config_path() -> Path:
    """``$CPUTUNE_CONFIG`` if set, else ``~/.config/cputune/config.json``."""
    env = os.environ.get(CONFIG_ENV_VAR)
    return Path(env) if env else DEFAULT_CONFIG_PATH.expanduser()


def load_config(path: Path | str | None = None) -> Config:
    """
    Load configuration, overlaying the JSON file at ``path`` on the defaults.

    A missing file yields the defaults.

    Raises:
        ConfigError: The file exists but cannot be read or parsed.
    """
    config_path = Path(path) if path is not None else default_config_path()
    data = copy.deepcopy(DEFAULT_CONFIG)

    if config_path.exists():
        try:
            with config_path.open("r", encoding="utf-8") as f:
                user_cfg = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read {config_path}: {exc}") from exc
        if not isinstance(user_cfg, dict):
            raise ConfigError(f"{config_path}: top level must be an object")
        _deep_update(data, user_cfg)

    try:
        return Config(
            poll_interval=float(data["poll_interval"]),
            sysfs_root=str(data["sysfs_root"]),
            show_default_profiles=bool(data["show_default_profiles"]),
            log_level=str(data["log_level"]),
            custom_profiles=[Profile.from_dict(p) for p in data["custom_profiles"]],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"{config_path}: invalid value: {exc}") from exc


def _deep_update(target: dict[str, Any], source: dict[str, Any]) -> None:
    """Recursively merge ``source`` into ``target``."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value
