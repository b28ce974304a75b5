"""Reader settings drawn from environment variables and an optional .env file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

ENV_MAX_WIDTH = "TERMREADER_MAX_WIDTH"
ENV_SIDE_MARGIN = "TERMREADER_SIDE_MARGIN"
ENV_RESERVED_ROWS = "TERMREADER_RESERVED_ROWS"
ENV_TAB_SIZE = "TERMREADER_TAB_SIZE"
ENV_LOG_PATH = "TERMREADER_LOG_PATH"
ENV_LOG_LEVEL = "TERMREADER_LOG_LEVEL"
ENV_LIBRARY_DIR = "TERMREADER_LIBRARY_DIR"


class ConfigError(ValueError):
    """Raised when a setting cannot be interpreted."""


@dataclass(frozen=True)
class ReaderSettings:
    max_text_width: int = 80
    side_margin: int = 10
    reserved_rows: int = 7
    tab_size: int = 4
    log_path: Path = Path("debug.log")
    log_level: str = "INFO"
    library_dir: Path = Path(".")


def _int_setting(env: Mapping[str, str], name: str, default: int, *, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}.") from None
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}.")
    return value


def validate_log_level(value: str, *, name: str = ENV_LOG_LEVEL) -> str:
    """Return ``value`` as an upper-case logging level name, or raise ConfigError."""
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{name} must be a logging level such as DEBUG or INFO, got {value!r}.")
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ReaderSettings:
    """
    Build ``ReaderSettings`` from ``environ``.

    When ``environ`` is omitted, a ``.env`` file in the working directory is
    loaded first (existing variables win) and ``os.environ`` is used.
    """
    if environ is None:
        load_dotenv(override=False)
        environ = os.environ
    defaults = ReaderSettings()
    return ReaderSettings(
        max_text_width=_int_setting(environ, ENV_MAX_WIDTH, defaults.max_text_width, minimum=1),
        side_margin=_int_setting(environ, ENV_SIDE_MARGIN, defaults.side_margin),
        reserved_rows=_int_setting(environ, ENV_RESERVED_ROWS, defaults.reserved_rows),
        tab_size=_int_setting(environ, ENV_TAB_SIZE, defaults.tab_size),
        log_path=Path(environ.get(ENV_LOG_PATH) or defaults.log_path).expanduser(),
        log_level=validate_log_level(environ.get(ENV_LOG_LEVEL) or defaults.log_level),
        library_dir=Path(environ.get(ENV_LIBRARY_DIR) or defaults.library_dir).expanduser(),
    )


__all__ = ["ConfigError", "ReaderSettings", "load_settings", "validate_log_level"]
