"""
Module: poultry_modules.reporting.orm
Responsibility: SQLAlchemy ORM persistence for daily stock snapshots.

Architecture position: Modules > Reporting > ORM.  Inherits from TrackedBase.

Invariants enforced:
    - One snapshot per day (uq_daily_stock_date).
    - The snapshot is a materialized view: the two weight sums are
      recomputed on every upsert, and only admin_adjustment and notes come
      from the operator.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class DailyStockModel(TrackedBase):
    """
    ORM model for one day's stock reconciliation.

    Maps to: poultry_modules.reporting.models.StockSnapshot (frozen dataclass).
    """

    __tablename__ = "daily_stock"

    __table_args__ = (
        UniqueConstraint("stock_date", name="uq_daily_stock_date"),
    )

    stock_date: Mapped[date] = mapped_column(Date)
    net_loading_weight: Mapped[Decimal] = mapped_column()
    net_distribution_weight: Mapped[Decimal] = mapped_column()
    admin_adjustment: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    result: Mapped[Decimal] = mapped_column()
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def to_dto(self):
        """Convert ORM model to frozen StockSnapshot DTO."""
        from poultry_modules.reporting.models import StockSnapshot
        return StockSnapshot(
            stock_date=self.stock_date,
            net_loading_weight=self.net_loading_weight,
            net_distribution_weight=self.net_distribution_weight,
            admin_adjustment=self.admin_adjustment,
            result=self.result,
            notes=self.notes,
            persisted=True,
        )

    def __repr__(self) -> str:
        return f"<DailyStockModel {self.stock_date} result={self.result}>"
