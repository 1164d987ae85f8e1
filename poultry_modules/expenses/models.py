"""
Expense Domain Models (``poultry_modules.expenses.models``).

An employee expense is cash an employee spent on the business (fuel,
meals, crates).  The daily sum of expense values is the expense term of
the profit formula, and an employee's expenses reduce the cash they can
hand over in a transfer.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class EmployeeExpense:
    id: UUID
    employee_id: UUID
    name: str
    value: Decimal
    expense_date: date
    recorded_at: datetime | None = None
