"""
poultry_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files or environment variables directly.

Architecture position:
    Configuration sits beside ``poultry_kernel``.  The kernel never imports
    from ``poultry_config``; values are passed in (packaging weight, UTC
    offset, engine parameters) by whoever wires the system together.

Environment:
    POULTRY_LEDGER_CONFIG        alternate YAML file
    POULTRY_LEDGER_DATABASE_URL  overrides ``database.url``

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``ValueError`` -- validation failures.

Audit relevance:
    Every load emits a ``config_loaded`` log entry carrying the config id,
    source file and checksum.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path

from poultry_config.loader import load_config_file
from poultry_config.schema import (
    DatabaseSettings,
    LedgerSettings,
    LoggingSettings,
    PoultryLedgerConfig,
)
from poultry_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "POULTRY_LEDGER_CONFIG"
DATABASE_URL_ENV = "POULTRY_LEDGER_DATABASE_URL"

_active: PoultryLedgerConfig | None = None
_lock = threading.Lock()


def get_active_config(path: Path | str | None = None) -> PoultryLedgerConfig:
    """
    The ONLY public configuration entrypoint.

    The first call loads and validates the file (``path``, else
    ``$POULTRY_LEDGER_CONFIG``, else the bundled default set) and caches
    the result; later calls without ``path`` return the cached config.
    Passing ``path`` always reloads.
    """
    global _active
    with _lock:
        if _active is not None and path is None:
            return _active

        config_path = Path(path or os.environ.get(CONFIG_PATH_ENV) or _DEFAULT_CONFIG_FILE)
        config = load_config_file(config_path, database_url=os.environ.get(DATABASE_URL_ENV))
        _active = config

    _logger.info(
        "config_loaded",
        extra={
            "config_id": config.config_id,
            "source": config.source,
            "checksum": config.checksum,
            "packaging_weight_per_unit": str(config.ledger.packaging_weight_per_unit),
            "utc_offset_minutes": config.ledger.utc_offset_minutes,
        },
    )
    return config


def reset_active_config() -> None:
    """Forget the cached configuration. FOR TESTING ONLY."""
    global _active
    with _lock:
        _active = None


__all__ = [
    "DatabaseSettings",
    "LedgerSettings",
    "LoggingSettings",
    "PoultryLedgerConfig",
    "get_active_config",
    "reset_active_config",
]
