"""
Module: poultry_kernel.models.employee
Responsibility: ORM persistence for staff members who collect payments,
    incur expenses and hand cash to each other.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - version is the optimistic-lock column.  Cash transfers lock the
      sender row and bump the version so that two concurrent transfers
      from the same employee cannot both pass the funds check.
"""

from enum import Enum

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class EmployeeRole(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Employee(TrackedBase):
    __tablename__ = "employees"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[EmployeeRole] = mapped_column(
        String(20),
        nullable=False,
        default=EmployeeRole.EMPLOYEE,
    )

    version: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Employee {self.name} ({self.role})>"
