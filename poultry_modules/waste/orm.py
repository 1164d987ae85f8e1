"""
Module: poultry_modules.waste.orm
Responsibility: SQLAlchemy ORM persistence for the daily waste ledger.

Architecture position: Modules > Waste > ORM.  Inherits from TrackedBase.
    chicken_type_id references the kernel directory with no FK.

Invariants enforced:
    - One row per (waste_date, chicken_type_id) (uq_daily_waste_day_type).
    - total_* = over_distribution_* + other_waste_*; recomputed by
      ``recompute_totals()`` on every write, never by a lifecycle hook.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import BigInteger, Date, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class DailyWasteModel(TrackedBase):
    """
    ORM model for one (day, chicken type) waste aggregate.

    Maps to: poultry_modules.waste.models.DailyWaste (frozen dataclass).
    """

    __tablename__ = "daily_waste"

    __table_args__ = (
        UniqueConstraint("waste_date", "chicken_type_id", name="uq_daily_waste_day_type"),
        Index("idx_daily_waste_date", "waste_date"),
    )

    waste_date: Mapped[date] = mapped_column(Date)
    chicken_type_id: Mapped[UUID] = mapped_column()

    over_distribution_quantity: Mapped[int] = mapped_column(BigInteger, default=0)
    over_distribution_net_weight: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    other_waste_quantity: Mapped[int] = mapped_column(BigInteger, default=0)
    other_waste_net_weight: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total_waste_quantity: Mapped[int] = mapped_column(BigInteger, default=0)
    total_waste_net_weight: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def recompute_totals(self) -> None:
        self.total_waste_quantity = self.over_distribution_quantity + self.other_waste_quantity
        self.total_waste_net_weight = self.over_distribution_net_weight + self.other_waste_net_weight

    def to_dto(self):
        """Convert ORM model to frozen DailyWaste DTO."""
        from poultry_modules.waste.models import DailyWaste
        return DailyWaste(
            id=self.id,
            waste_date=self.waste_date,
            chicken_type_id=self.chicken_type_id,
            over_distribution_quantity=self.over_distribution_quantity,
            over_distribution_net_weight=self.over_distribution_net_weight,
            other_waste_quantity=self.other_waste_quantity,
            other_waste_net_weight=self.other_waste_net_weight,
            total_waste_quantity=self.total_waste_quantity,
            total_waste_net_weight=self.total_waste_net_weight,
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return (
            f"<DailyWasteModel {self.waste_date} type={self.chicken_type_id} "
            f"total={self.total_waste_quantity}>"
        )
