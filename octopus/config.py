"""
octopus/config.py
-----------------
Centralised configuration for octopus-db-tools.

Loads settings from environment variables (with ``.env`` file support via
python-dotenv). Settings are exposed as frozen dataclasses so configuration
is immutable for the lifetime of a command.

The CLI flags (source/target format, package, prefixes) are read by
:mod:`octopus.cli` with their own ``OCTOPUS_*`` environment fallbacks; this
module only holds process-wide settings that are not part of a single
conversion request.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path.cwd() / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=_env_path)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings."""
    level: str = field(
        default_factory=lambda: os.getenv("OCTOPUS_LOG_LEVEL", "INFO").upper()
    )
    log_file: str | None = field(
        default_factory=lambda: os.getenv("OCTOPUS_LOG_FILE")  # None → stderr only
    )


@dataclass(frozen=True)
class XlsxConfig:
    """Spreadsheet layout settings shared by the xlsx decoder and encoder."""
    meta_sheet: str = "Meta"
    default_group_sheet: str = "Common"
    font_name: str = field(
        default_factory=lambda: os.getenv("OCTOPUS_XLSX_FONT", "Verdana")
    )
    font_size: int = field(
        default_factory=lambda: int(os.getenv("OCTOPUS_XLSX_FONT_SIZE", "10"))
    )


@dataclass(frozen=True)
class AppConfig:
    """Root application configuration."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    xlsx: XlsxConfig = field(default_factory=XlsxConfig)
    app_name: str = "octopus-db-tools"
    app_version: str = "0.1.0"
    default_schema_file: str = "db.ojson"


def load_config() -> AppConfig:
    """
    Build and return the application configuration.

    Example::

        cfg = load_config()
        print(cfg.xlsx.font_name)   # "Verdana"
    """
    return AppConfig()


# Module-level singleton used throughout the application
CONFIG: AppConfig = load_config()


def get_log_level() -> int:
    """Convert string log level from config to logging module constant."""
    level = getattr(logging, CONFIG.logging.level, None)
    if not isinstance(level, int):
        return logging.INFO
    return level
