"""
Module: poultry_kernel.models.customer
Responsibility: ORM persistence for customers, the debtor accounts that
    distributions charge and payments settle.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - outstanding_debts is never persisted negative (CHECK constraint; the
      debt account clamps before writing).
    - version is the optimistic-lock column; a concurrent writer that
      loses the race gets StaleDataError on flush.
"""

from decimal import Decimal

from sqlalchemy import BigInteger, CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class Customer(TrackedBase):
    """
    A wholesale customer.

    ``outstanding_debts`` is a cache owned by CustomerDebtAccount; nothing
    else writes it.
    """

    __tablename__ = "customers"

    __table_args__ = (
        CheckConstraint("outstanding_debts >= 0", name="ck_customer_debt_non_negative"),
        Index("idx_customer_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    address: Mapped[str | None] = mapped_column(String(200), nullable=True)

    outstanding_debts: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    version: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Customer {self.name} debt={self.outstanding_debts}>"
