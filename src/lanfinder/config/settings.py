from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "LANFINDER_CONFIG"
CONCURRENCY_ENV_VAR = "LANFINDER_CONCURRENCY"

DEFAULT_CONCURRENCY = 32


class ScanningConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    port: int = Field(default=80, ge=1, le=65535)
    timeout: float = Field(default=0.25, gt=0)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    default_ranges: list[str] = Field(default_factory=list)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    scanning: ScanningConfig = Field(default_factory=ScanningConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


def apply_env_overrides(settings: Settings) -> Settings:
    """Apply environment overrides on top of file settings.

    ``LANFINDER_CONCURRENCY`` replaces ``scanning.concurrency``.
    """
    raw = os.environ.get(CONCURRENCY_ENV_VAR)
    if not raw:
        return settings

    try:
        scanning = ScanningConfig.model_validate(
            {**settings.scanning.model_dump(), "concurrency": raw}
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid {CONCURRENCY_ENV_VAR}={raw!r}\n{exc}") from exc
    return settings.model_copy(update={"scanning": scanning})


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    settings = load_settings(path) if exists else Settings()
    return apply_env_overrides(settings)


def _toml_value(value: object) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    scanning = settings.scanning
    lines = [
        "# lanfinder configuration",
        "",
        "[scanning]",
        f"port = {scanning.port}",
        f"timeout = {scanning.timeout}",
        f"concurrency = {scanning.concurrency}",
        f"default_ranges = {_toml_value(scanning.default_ranges)}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
