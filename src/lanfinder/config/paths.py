from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "lanfinder"
CONFIG_FILENAME = "config.toml"


def xdg_config_home() -> Path:
    # an empty XDG_CONFIG_HOME is treated as unset
    value = os.environ.get("XDG_CONFIG_HOME")
    if not value:
        return Path.home() / ".config"
    return expand_path(value)


def default_config_path() -> Path:
    return xdg_config_home() / APP_NAME / CONFIG_FILENAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))
