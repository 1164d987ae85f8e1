"""
Reporting Pure Functions (``poultry_modules.reporting.helpers``).

The two reconciliation formulas, kept free of I/O so they can be tested
on their own.
"""

from __future__ import annotations

from decimal import Decimal


def stock_result(
    net_loading_weight: Decimal,
    net_distribution_weight: Decimal,
    admin_adjustment: Decimal,
) -> Decimal:
    """(loaded - distributed) - adjustment."""
    return (net_loading_weight - net_distribution_weight) - admin_adjustment


def profit(
    distributions_total: Decimal,
    loadings_total: Decimal,
    expenses_total: Decimal,
    discounts_total: Decimal,
    waste_cost: Decimal,
) -> Decimal:
    """
    Revenue minus cost of stock, expenses, discounts granted, and waste.

    The fourth term is the sum of payment discounts in the window.
    """
    return distributions_total - loadings_total - expenses_total - discounts_total - waste_cost
