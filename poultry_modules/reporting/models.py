"""
Reporting Domain Models (``poultry_modules.reporting.models``).

Frozen value objects for the read side: the daily stock snapshot, profit
reports and customer statements.  None of these is a source of truth;
each is recomputed from the loading, distribution, payment, expense and
waste records on demand.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class StockSnapshot:
    """
    Loaded vs distributed net weight for one day.

    ``result == (net_loading_weight - net_distribution_weight) - admin_adjustment``.
    ``persisted`` tells whether an operator upserted this day.
    """

    stock_date: date
    net_loading_weight: Decimal
    net_distribution_weight: Decimal
    admin_adjustment: Decimal
    result: Decimal
    notes: str | None = None
    persisted: bool = False


@dataclass(frozen=True)
class ProfitReport:
    """
    Profit over a window (a single day, a range, or all time).

    ``profit == distributions_total - loadings_total - expenses_total
    - discounts_total - waste_cost``.
    """

    start: date | None
    end: date | None
    distributions_total: Decimal
    loadings_total: Decimal
    expenses_total: Decimal
    discounts_total: Decimal
    waste_cost: Decimal
    profit: Decimal


@dataclass(frozen=True)
class CustomerStatement:
    customer_id: UUID
    customer_name: str
    outstanding_debts: Decimal
    distributions_total: Decimal
    distribution_count: int
    paid_total: Decimal
    discounts_total: Decimal
    payment_count: int
