"""
Loading Domain Models (``poultry_modules.loading.models``).

Responsibility
--------------
Frozen value objects for the loading ledger: one loading batch (an intake
of birds of one chicken type from one supplier) and the aggregate
statistics over a window of loadings.

Invariants
----------
- ``remaining_quantity == quantity - distributed_quantity`` and
  ``remaining_net_weight == net_weight - distributed_net_weight``.
- Under the clamped allocation policy neither remaining counter is ever
  negative.
- All weights and money are ``Decimal``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class QualityGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"


@dataclass(frozen=True)
class LoadingBatch:
    """One intake event with its running consumption counters."""

    id: UUID
    chicken_type_id: UUID
    supplier_id: UUID
    loading_date: date
    quantity: int
    gross_weight: Decimal | None
    empty_weight: Decimal
    net_weight: Decimal
    loading_price: Decimal
    total_loading: Decimal
    distributed_quantity: int
    distributed_net_weight: Decimal
    remaining_quantity: int
    remaining_net_weight: Decimal
    quality_grade: QualityGrade = QualityGrade.A
    notes: str | None = None
    batch_number: str | None = None
    vehicle_number: str | None = None
    driver_name: str | None = None
    recorded_at: datetime | None = None
    recorded_by_id: UUID | None = None


@dataclass(frozen=True)
class LoadingStatistics:
    loading_count: int
    total_quantity: int
    total_net_weight: Decimal
    total_loading_cost: Decimal
    average_loading_price: Decimal
