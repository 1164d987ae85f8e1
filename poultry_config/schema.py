"""
Configuration schema (``poultry_config.schema``).

Frozen dataclasses describing one parsed configuration set.  Nothing in
here reads files or the environment; see ``poultry_config.loader``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

DEFAULT_PACKAGING_WEIGHT_PER_UNIT = Decimal("8")


@dataclass(frozen=True)
class LedgerSettings:
    """Business rules of the stock ledger."""

    # Crate/packaging mass deducted per bird when deriving net weight
    packaging_weight_per_unit: Decimal = DEFAULT_PACKAGING_WEIGHT_PER_UNIT
    # Offset of the business day from UTC, in minutes
    utc_offset_minutes: int = 0


@dataclass(frozen=True)
class DatabaseSettings:
    url: str = "sqlite://"
    pool_size: int = 10
    max_overflow: int = 10
    pool_timeout_seconds: int = 10
    statement_timeout_ms: int = 5000
    echo: bool = False


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class PoultryLedgerConfig:
    """
    One fully parsed and validated configuration set.

    ``checksum`` identifies the parsed content (SHA-256 of its canonical
    JSON form) and ``source`` names the file it came from.
    """

    config_id: str
    ledger: LedgerSettings = field(default_factory=LedgerSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    checksum: str = ""
    source: str = ""
