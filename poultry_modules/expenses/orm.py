"""
Module: poultry_modules.expenses.orm
Responsibility: SQLAlchemy ORM persistence for employee expenses.

Architecture position: Modules > Expenses > ORM.  Inherits from TrackedBase.
    employee_id references the kernel directory with no FK.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class EmployeeExpenseModel(TrackedBase):
    """
    ORM model for one employee expense.

    Maps to: poultry_modules.expenses.models.EmployeeExpense (frozen dataclass).
    """

    __tablename__ = "employee_expenses"

    __table_args__ = (
        CheckConstraint("value >= 0", name="ck_expense_value_non_negative"),
        Index("idx_expense_employee", "employee_id"),
        Index("idx_expense_date", "expense_date"),
    )

    employee_id: Mapped[UUID] = mapped_column()
    name: Mapped[str] = mapped_column(String(100))
    value: Mapped[Decimal] = mapped_column()
    expense_date: Mapped[date] = mapped_column(Date)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def to_dto(self):
        """Convert ORM model to frozen EmployeeExpense DTO."""
        from poultry_modules.expenses.models import EmployeeExpense
        return EmployeeExpense(
            id=self.id,
            employee_id=self.employee_id,
            name=self.name,
            value=self.value,
            expense_date=self.expense_date,
            recorded_at=self.recorded_at,
        )

    def __repr__(self) -> str:
        return f"<EmployeeExpenseModel {self.id} {self.name} {self.value}>"
