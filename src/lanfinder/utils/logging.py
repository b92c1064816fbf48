from __future__ import annotations

import logging
import os
from typing import Literal

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

LOGLEVEL_ENV_VARS = ("LANFINDER_LOGLEVEL", "LOGLEVEL")

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"


def resolve_log_level(level: str | None = None) -> str:
    """Explicit level, then ``LANFINDER_LOGLEVEL``, then ``LOGLEVEL``."""
    if level:
        return level.upper()
    for name in LOGLEVEL_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value.upper()
    return DEFAULT_LEVEL


def setup_logging(level: LogLevel | None = None) -> None:
    resolved = resolve_log_level(level)

    coloredlogs.install(
        level=resolved,
        fmt=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    # keep event loop debug noise out of LOGLEVEL=DEBUG scan output
    logging.getLogger("asyncio").setLevel(logging.WARNING)
