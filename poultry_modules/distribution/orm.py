"""
Module: poultry_modules.distribution.orm
Responsibility: SQLAlchemy ORM persistence for distribution records.

Architecture position: Modules > Distribution > ORM.  Inherits from
    TrackedBase.  References customers, chicken types and loading batches
    via UUID columns with NO foreign key constraints.

Invariants enforced:
    - Weights and money use Decimal (Numeric(38,9)), never float.
    - Allocated and shortage portions are stored, never re-derived, so that
      reversals undo exactly what the create applied.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class DistributionModel(TrackedBase):
    """
    ORM model for one distribution.

    Maps to: poultry_modules.distribution.models.Distribution (frozen dataclass).
    """

    __tablename__ = "distributions"

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_distribution_quantity_positive"),
        CheckConstraint("allocated_quantity >= 0", name="ck_distribution_allocated_qty"),
        CheckConstraint("shortage_quantity >= 0", name="ck_distribution_shortage_qty"),
        Index("idx_distribution_customer", "customer_id"),
        Index("idx_distribution_date", "distribution_date"),
        Index("idx_distribution_source", "source_loading_id"),
    )

    customer_id: Mapped[UUID] = mapped_column()
    chicken_type_id: Mapped[UUID] = mapped_column()
    source_loading_id: Mapped[UUID | None] = mapped_column(nullable=True)
    distribution_date: Mapped[date] = mapped_column(Date)

    quantity: Mapped[int] = mapped_column(BigInteger)
    gross_weight: Mapped[Decimal] = mapped_column()
    empty_weight: Mapped[Decimal] = mapped_column()
    net_weight: Mapped[Decimal] = mapped_column()
    price: Mapped[Decimal] = mapped_column()
    total_amount: Mapped[Decimal] = mapped_column()

    # What this record actually applied
    allocated_quantity: Mapped[int] = mapped_column(BigInteger, default=0)
    allocated_net_weight: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    shortage_quantity: Mapped[int] = mapped_column(BigInteger, default=0)
    shortage_net_weight: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def to_dto(self):
        """Convert ORM model to frozen Distribution DTO."""
        from poultry_modules.distribution.models import Distribution
        return Distribution(
            id=self.id,
            customer_id=self.customer_id,
            chicken_type_id=self.chicken_type_id,
            source_loading_id=self.source_loading_id,
            distribution_date=self.distribution_date,
            quantity=self.quantity,
            gross_weight=self.gross_weight,
            empty_weight=self.empty_weight,
            net_weight=self.net_weight,
            price=self.price,
            total_amount=self.total_amount,
            allocated_quantity=self.allocated_quantity,
            allocated_net_weight=self.allocated_net_weight,
            shortage_quantity=self.shortage_quantity,
            shortage_net_weight=self.shortage_net_weight,
            recorded_at=self.recorded_at,
            recorded_by_id=self.created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<DistributionModel {self.id} qty={self.quantity} "
            f"amount={self.total_amount} source={self.source_loading_id}>"
        )
