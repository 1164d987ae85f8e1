"""
Configuration Loader (``poultry_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen
``poultry_config.schema`` dataclasses.  The single public runtime entry
point is ``poultry_config.get_active_config()``; this module is the
parsing machinery behind it.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Invalid values raise ``ValueError`` with a descriptive message; nothing
  is silently corrected.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from poultry_config.schema import (
    DEFAULT_PACKAGING_WEIGHT_PER_UNIT,
    DatabaseSettings,
    LedgerSettings,
    LoggingSettings,
    PoultryLedgerConfig,
)

_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level of a configuration file must be a mapping")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_ledger(data: dict[str, Any]) -> LedgerSettings:
    raw_weight = data.get("packaging_weight_per_unit", DEFAULT_PACKAGING_WEIGHT_PER_UNIT)
    try:
        weight = Decimal(str(raw_weight))
    except InvalidOperation as exc:
        raise ValueError(f"ledger.packaging_weight_per_unit is not a number: {raw_weight!r}") from exc
    if not weight.is_finite() or weight < 0:
        raise ValueError(f"ledger.packaging_weight_per_unit must be >= 0, got {raw_weight!r}")

    offset = int(data.get("utc_offset_minutes", 0))
    if not -14 * 60 <= offset <= 14 * 60:
        raise ValueError(f"ledger.utc_offset_minutes out of range: {offset}")

    return LedgerSettings(packaging_weight_per_unit=weight, utc_offset_minutes=offset)


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    settings = DatabaseSettings(
        url=str(data.get("url", DatabaseSettings.url)),
        pool_size=int(data.get("pool_size", DatabaseSettings.pool_size)),
        max_overflow=int(data.get("max_overflow", DatabaseSettings.max_overflow)),
        pool_timeout_seconds=int(
            data.get("pool_timeout_seconds", DatabaseSettings.pool_timeout_seconds)
        ),
        statement_timeout_ms=int(
            data.get("statement_timeout_ms", DatabaseSettings.statement_timeout_ms)
        ),
        echo=bool(data.get("echo", False)),
    )
    if not settings.url:
        raise ValueError("database.url must not be empty")
    for name in ("pool_size", "pool_timeout_seconds", "statement_timeout_ms"):
        if getattr(settings, name) <= 0:
            raise ValueError(f"database.{name} must be positive, got {getattr(settings, name)}")
    if settings.max_overflow < 0:
        raise ValueError(f"database.max_overflow must be >= 0, got {settings.max_overflow}")
    return settings


def parse_logging(data: dict[str, Any]) -> LoggingSettings:
    level = str(data.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"logging.level unknown: {level!r}")
    return LoggingSettings(level=level)


def parse_config(data: dict[str, Any], source: str = "") -> PoultryLedgerConfig:
    """Parse a whole configuration mapping into a PoultryLedgerConfig."""
    return PoultryLedgerConfig(
        config_id=str(data.get("config_id", "default")),
        ledger=parse_ledger(data.get("ledger") or {}),
        database=parse_database(data.get("database") or {}),
        logging=parse_logging(data.get("logging") or {}),
        checksum=compute_checksum(data),
        source=source,
    )


def load_config_file(path: Path, database_url: str | None = None) -> PoultryLedgerConfig:
    """
    Load and parse one configuration file.

    Args:
        path: YAML file to read.
        database_url: Optional override for ``database.url``.
    """
    data = load_yaml_file(path)
    if database_url:
        data = {**data, "database": {**(data.get("database") or {}), "url": database_url}}
    return parse_config(data, source=str(path))
