"""
Module: poultry_modules.transfers.orm
Responsibility: SQLAlchemy ORM persistence for staff cash transfers.

Architecture position: Modules > Transfers > ORM.  Inherits from
    TrackedBase.  Employee references carry no FK.

Invariants enforced:
    - amount >= 0.01 and sender != receiver (CHECK constraints; the
      service raises typed errors before either is reached).
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class TransferModel(TrackedBase):
    """
    ORM model for one cash transfer.

    Maps to: poultry_modules.transfers.models.Transfer (frozen dataclass).
    """

    __tablename__ = "transfers"

    __table_args__ = (
        CheckConstraint("amount >= 0.01", name="ck_transfer_amount_minimum"),
        CheckConstraint("from_employee_id <> to_employee_id", name="ck_transfer_distinct_employees"),
        Index("idx_transfer_from", "from_employee_id"),
        Index("idx_transfer_to", "to_employee_id"),
    )

    from_employee_id: Mapped[UUID] = mapped_column()
    to_employee_id: Mapped[UUID] = mapped_column()
    amount: Mapped[Decimal] = mapped_column()
    transfer_date: Mapped[date] = mapped_column(Date)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def to_dto(self):
        """Convert ORM model to frozen Transfer DTO."""
        from poultry_modules.transfers.models import Transfer
        return Transfer(
            id=self.id,
            from_employee_id=self.from_employee_id,
            to_employee_id=self.to_employee_id,
            amount=self.amount,
            transfer_date=self.transfer_date,
            note=self.note,
            recorded_at=self.recorded_at,
        )

    def __repr__(self) -> str:
        return (
            f"<TransferModel {self.id} {self.from_employee_id} -> "
            f"{self.to_employee_id} {self.amount}>"
        )
