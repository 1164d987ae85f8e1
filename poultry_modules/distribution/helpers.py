"""
Distribution Pure Functions (``poultry_modules.distribution.helpers``).

Responsibility
--------------
Stateless batch selection and allocation arithmetic for the distribution
ledger.  No I/O, no session, no clock.

Selection policy
----------------
The eligible pool is every loading batch of the chicken type loaded on or
before the distribution day with remaining quantity above zero; stock
carries forward from earlier days.  The single source batch is the one
with the largest remaining quantity; ties go to the earliest loading date,
then the earliest recording time, then the lowest id.

Allocation is single-batch: the source gives ``min(requested, remaining)``
for quantity and net weight independently.  Shortage is measured against
the whole pool: ``max(0, requested - sum of remaining)``.

Invariants
----------
- Allocation never drives a batch's remaining below zero.
- ``allocated + shortage <= requested`` for each measure.

Failure Modes
-------------
- ``resize_portions`` raises ``InsufficientInventoryError`` when an
  increase exceeds what the source batch still holds.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from poultry_kernel.domain.values import ZERO
from poultry_kernel.exceptions import InsufficientInventoryError


@dataclass(frozen=True)
class BatchAvailability:
    """What one eligible loading batch can still give."""

    loading_id: UUID
    loading_date: date
    recorded_at: datetime | None
    remaining_quantity: int
    remaining_net_weight: Decimal


@dataclass(frozen=True)
class AllocationPlan:
    source_loading_id: UUID | None
    allocated_quantity: int
    allocated_net_weight: Decimal
    shortage_quantity: int
    shortage_net_weight: Decimal
    available_quantity: int
    available_net_weight: Decimal

    @property
    def has_shortage(self) -> bool:
        return self.shortage_quantity > 0 or self.shortage_net_weight > 0


def _selection_key(batch: BatchAvailability):
    recorded = batch.recorded_at.timestamp() if batch.recorded_at else 0.0
    return (-batch.remaining_quantity, batch.loading_date, recorded, str(batch.loading_id))


def choose_source(batches: Sequence[BatchAvailability]) -> BatchAvailability | None:
    """Largest remaining quantity first; None when nothing is eligible."""
    eligible = [b for b in batches if b.remaining_quantity > 0]
    if not eligible:
        return None
    return min(eligible, key=_selection_key)


def plan_allocation(
    requested_quantity: int,
    requested_net_weight: Decimal,
    batches: Sequence[BatchAvailability],
) -> AllocationPlan:
    """
    Decide the source batch and the allocated / shortage split.

    With no eligible batch the whole request is shortage.
    """
    eligible = [b for b in batches if b.remaining_quantity > 0]
    available_quantity = sum(b.remaining_quantity for b in eligible)
    available_weight = sum((max(ZERO, b.remaining_net_weight) for b in eligible), ZERO)

    source = choose_source(eligible)
    if source is None:
        allocated_quantity, allocated_weight = 0, ZERO
    else:
        allocated_quantity = min(requested_quantity, max(0, source.remaining_quantity))
        allocated_weight = min(requested_net_weight, max(ZERO, source.remaining_net_weight))

    return AllocationPlan(
        source_loading_id=source.loading_id if source else None,
        allocated_quantity=allocated_quantity,
        allocated_net_weight=allocated_weight,
        shortage_quantity=max(0, requested_quantity - available_quantity),
        shortage_net_weight=max(ZERO, requested_net_weight - available_weight),
        available_quantity=available_quantity,
        available_net_weight=available_weight,
    )


def resize_portions(
    *,
    measure: str,
    loading_id: UUID | None,
    old_requested,
    new_requested,
    allocated,
    shortage,
    headroom,
):
    """
    Re-split one measure of a distribution whose requested amount changed.

    A decrease is absorbed by the unbooked part and the shortage before it
    reaches the allocation.  An increase is drawn only from the source
    batch's ``headroom`` (its remaining amount); shortage is unchanged.

    Returns:
        (new_allocated, new_shortage)

    Raises:
        InsufficientInventoryError: if the increase exceeds the headroom.
    """
    increase = new_requested - old_requested
    if increase > 0:
        available = max(headroom, 0)
        if increase > available:
            raise InsufficientInventoryError(
                str(loading_id) if loading_id else "none",
                measure,
                str(increase),
                str(available),
            )
        return allocated + increase, shortage

    new_allocated = min(allocated, new_requested)
    new_shortage = min(shortage, new_requested - new_allocated)
    return new_allocated, new_shortage
