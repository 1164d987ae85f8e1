"""Pure domain helpers: clock, business calendar, tagged references, value coercion."""

from poultry_kernel.domain.calendar import BusinessCalendar, DateRange, week_bounds
from poultry_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from poultry_kernel.domain.references import (
    ChickenTypeById,
    ChickenTypeByName,
    ChickenTypeRef,
    chicken_type_ref,
)
from poultry_kernel.domain.weights import (
    PACKAGING_WEIGHT_PER_UNIT,
    WeighedValues,
    compute_distribution_values,
    compute_loading_values,
)

__all__ = [
    "PACKAGING_WEIGHT_PER_UNIT",
    "BusinessCalendar",
    "ChickenTypeById",
    "ChickenTypeByName",
    "ChickenTypeRef",
    "Clock",
    "DateRange",
    "DeterministicClock",
    "SystemClock",
    "WeighedValues",
    "chicken_type_ref",
    "compute_distribution_values",
    "compute_loading_values",
    "week_bounds",
]
