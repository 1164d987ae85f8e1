"""
Distribution Domain Models (``poultry_modules.distribution.models``).

Frozen value objects for the distribution ledger.  A ``Distribution`` is
one outflow of birds to a customer; besides its inputs and derived fields
it records how much of it was actually drawn from its source loading
batch (``allocated_*``) and how much was booked as over-distribution waste
(``shortage_*``), so that updates and deletes reverse exactly what was
applied.

Invariants
----------
- ``net_weight == max(0, gross_weight - empty_weight)``
- ``total_amount == net_weight * price`` as of the last save.
- ``allocated_* + shortage_* <= requested`` for both measures.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class Distribution:
    id: UUID
    customer_id: UUID
    chicken_type_id: UUID
    source_loading_id: UUID | None
    distribution_date: date
    quantity: int
    gross_weight: Decimal
    empty_weight: Decimal
    net_weight: Decimal
    price: Decimal
    total_amount: Decimal
    allocated_quantity: int
    allocated_net_weight: Decimal
    shortage_quantity: int
    shortage_net_weight: Decimal
    recorded_at: datetime | None = None
    recorded_by_id: UUID | None = None

    @property
    def has_shortage(self) -> bool:
        return self.shortage_quantity > 0 or self.shortage_net_weight > 0


@dataclass(frozen=True)
class DailyNetWeight:
    distribution_date: date
    total_net_weight: Decimal
    distribution_count: int
