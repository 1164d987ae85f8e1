"""Employee expenses: cash spent by staff, deducted in profit and in their cash position."""

from poultry_modules.expenses.models import EmployeeExpense

__all__ = ["EmployeeExpense"]
