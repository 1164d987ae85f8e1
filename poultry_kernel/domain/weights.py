"""
Quantity / weight calculator.

Responsibility:
    Pure functions that turn a (count, weight, unit price) input into the
    derived empty weight, net weight and total amount of a loading or a
    distribution.  Every create/update handler calls these explicitly at its
    start; nothing recomputes derived fields in an ORM hook.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - empty_weight = quantity * packaging_weight_per_unit
    - Net weight derived from gross weight is max(0, gross - empty).
    - A manually entered net weight is used as-is.
    - total_amount = net_weight * unit_price, exactly (Decimal arithmetic).

Failure modes:
    - InvalidInputError on negative, non-finite or non-numeric inputs, on a
      quantity below 1, or when neither / both of net and gross weight are
      supplied for a loading.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from poultry_kernel.domain.values import ZERO, require_count, require_non_negative
from poultry_kernel.exceptions import InvalidInputError

PACKAGING_WEIGHT_PER_UNIT = Decimal("8")


@dataclass(frozen=True)
class WeighedValues:
    """Derived fields of one weighed consignment."""

    quantity: int
    gross_weight: Decimal | None
    empty_weight: Decimal
    net_weight: Decimal
    unit_price: Decimal
    total_amount: Decimal


def empty_weight_for(quantity: int, packaging_weight_per_unit: Decimal = PACKAGING_WEIGHT_PER_UNIT) -> Decimal:
    return Decimal(quantity) * packaging_weight_per_unit


def net_from_gross(
    quantity: int,
    gross_weight: Decimal,
    packaging_weight_per_unit: Decimal = PACKAGING_WEIGHT_PER_UNIT,
) -> Decimal:
    return max(ZERO, gross_weight - empty_weight_for(quantity, packaging_weight_per_unit))


def compute_loading_values(
    quantity,
    unit_price,
    *,
    net_weight=None,
    gross_weight=None,
    packaging_weight_per_unit: Decimal = PACKAGING_WEIGHT_PER_UNIT,
) -> WeighedValues:
    """
    Derive the values of a loading.

    Exactly one of ``net_weight`` (entered by hand) and ``gross_weight``
    (net derived by deducting packaging) must be given.
    """
    if (net_weight is None) == (gross_weight is None):
        raise InvalidInputError(
            "net_weight", "provide exactly one of net_weight or gross_weight"
        )
    count = require_count(quantity, "quantity")
    price = require_non_negative(unit_price, "loading_price")
    empty = empty_weight_for(count, packaging_weight_per_unit)

    if gross_weight is not None:
        gross = require_non_negative(gross_weight, "gross_weight")
        net = net_from_gross(count, gross, packaging_weight_per_unit)
    else:
        gross = None
        net = require_non_negative(net_weight, "net_weight")

    return WeighedValues(
        quantity=count,
        gross_weight=gross,
        empty_weight=empty,
        net_weight=net,
        unit_price=price,
        total_amount=net * price,
    )


def compute_distribution_values(
    quantity,
    gross_weight,
    unit_price,
    packaging_weight_per_unit: Decimal = PACKAGING_WEIGHT_PER_UNIT,
) -> WeighedValues:
    """Derive the values of a distribution; net weight always comes from gross."""
    count = require_count(quantity, "quantity")
    gross = require_non_negative(gross_weight, "gross_weight")
    price = require_non_negative(unit_price, "price")
    net = net_from_gross(count, gross, packaging_weight_per_unit)
    return WeighedValues(
        quantity=count,
        gross_weight=gross,
        empty_weight=empty_weight_for(count, packaging_weight_per_unit),
        net_weight=net,
        unit_price=price,
        total_amount=net * price,
    )
