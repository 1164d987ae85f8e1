"""
Poultry Modules.

One sub-package per ledger over the poultry kernel.  Each contains:
- DTOs (``models.py``, frozen dataclasses)
- ORM rows (``orm.py``)
- Pure arithmetic where there is any (``helpers.py``)
- An orchestration service that owns its transaction (``service.py``)

Modules:
- Loading: stock intake batches and their remaining counters
- Distribution: deliveries to customers, allocation and settlement
- Payment: customer payments and the debt overwrite
- Waste: per-day, per-chicken-type over-distribution and other waste
- Expenses: employee expenses
- Transfers: cash moved between employees
- Reporting: daily stock snapshots, profit, customer statements
"""

from poultry_modules import (
    loading,
    distribution,
    payment,
    waste,
    expenses,
    transfers,
    reporting,
)

__all__ = [
    "loading",
    "distribution",
    "payment",
    "waste",
    "expenses",
    "transfers",
    "reporting",
]
