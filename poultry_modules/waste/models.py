"""
Waste Domain Models (``poultry_modules.waste.models``).

Frozen value objects for the daily waste ledger.  One ``DailyWaste`` row
exists per (day, chicken type); it separates over-distribution (stock
handed out beyond what the loading batches could cover) from other waste
entered by an operator, and carries the derived totals.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class DailyWaste:
    id: UUID
    waste_date: date
    chicken_type_id: UUID
    over_distribution_quantity: int
    over_distribution_net_weight: Decimal
    other_waste_quantity: int
    other_waste_net_weight: Decimal
    total_waste_quantity: int
    total_waste_net_weight: Decimal
    notes: str | None = None


@dataclass(frozen=True)
class WasteDayReport:
    """All waste rows of one day with the day's totals."""

    waste_date: date
    entries: tuple[DailyWaste, ...]
    total_quantity: int
    total_net_weight: Decimal


@dataclass(frozen=True)
class WasteDayEntry:
    waste_date: date
    quantity: int
    net_weight: Decimal


@dataclass(frozen=True)
class ChickenTypeWaste:
    chicken_type_id: UUID
    chicken_type_name: str
    total_quantity: int
    total_net_weight: Decimal
    days: tuple[WasteDayEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WasteSummary:
    """
    Waste over a window, grouped two ways.

    ``by_chicken_type`` carries per-type totals with their per-day entries;
    ``by_day`` carries per-day totals, newest day first.
    """

    by_chicken_type: tuple[ChickenTypeWaste, ...]
    by_day: tuple[WasteDayEntry, ...]
    total_quantity: int
    total_net_weight: Decimal
