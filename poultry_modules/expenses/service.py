"""
Expense Module Service (``poultry_modules.expenses.service``).

Create, list and delete employee expenses.  Each write method owns its
transaction boundary: commit on success, rollback and re-raise on failure.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from poultry_kernel.domain.calendar import BusinessCalendar, DateRange
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.values import require_non_negative, required_text, to_date
from poultry_kernel.exceptions import ExpenseNotFoundError
from poultry_kernel.logging_config import get_logger
from poultry_kernel.services.base import owned_transaction
from poultry_kernel.services.directory_service import DirectoryService
from poultry_modules.expenses.models import EmployeeExpense
from poultry_modules.expenses.orm import EmployeeExpenseModel

logger = get_logger("modules.expenses.service")


class ExpenseService:

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        calendar: BusinessCalendar | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._calendar = calendar or BusinessCalendar()
        self._directory = DirectoryService(session)

    def create_expense(
        self,
        employee_id: UUID,
        name: str,
        value: Decimal,
        actor_id: UUID,
        expense_date: date | None = None,
    ) -> EmployeeExpense:
        clean_name = required_text(name, "name", 100)
        amount = require_non_negative(value, "value")
        day = to_date(expense_date, "expense_date") if expense_date is not None else self._calendar.today(self._clock)

        with owned_transaction(self._session, "EmployeeExpense"):
            self._directory.require_employee(employee_id)
            expense = EmployeeExpenseModel(
                employee_id=employee_id,
                name=clean_name,
                value=amount,
                expense_date=day,
                recorded_at=self._clock.now(),
                created_by_id=actor_id,
            )
            self._session.add(expense)
            self._session.flush()
            logger.info("expense_created", extra={
                "expense_id": str(expense.id),
                "employee_id": str(employee_id),
                "value": str(amount),
            })
            dto = expense.to_dto()
        return dto

    def delete_expense(self, expense_id: UUID, actor_id: UUID) -> EmployeeExpense:
        with owned_transaction(self._session, "EmployeeExpense", expense_id):
            expense = self._session.get(EmployeeExpenseModel, expense_id)
            if expense is None:
                raise ExpenseNotFoundError(str(expense_id))
            dto = expense.to_dto()
            self._session.delete(expense)
            self._session.flush()
            logger.info("expense_deleted", extra={
                "expense_id": str(expense_id),
                "deleted_by": str(actor_id),
            })
        return dto

    def list_expenses(
        self,
        employee_id: UUID | None = None,
        window: DateRange | None = None,
    ) -> list[EmployeeExpense]:
        """Expenses matching the filters, newest first."""
        stmt = select(EmployeeExpenseModel)
        if employee_id is not None:
            stmt = stmt.where(EmployeeExpenseModel.employee_id == employee_id)
        if window is not None and window.start is not None:
            stmt = stmt.where(EmployeeExpenseModel.expense_date >= window.start)
        if window is not None and window.end is not None:
            stmt = stmt.where(EmployeeExpenseModel.expense_date <= window.end)
        stmt = stmt.order_by(
            EmployeeExpenseModel.expense_date.desc(),
            EmployeeExpenseModel.recorded_at.desc(),
        )
        return [row.to_dto() for row in self._session.execute(stmt).scalars()]
