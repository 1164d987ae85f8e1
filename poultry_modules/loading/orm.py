"""
Module: poultry_modules.loading.orm
Responsibility: SQLAlchemy ORM persistence for loading batches.

Architecture position: Modules > Loading > ORM.  Inherits from TrackedBase
    (poultry_kernel.db.base).  References kernel directory entities
    (chicken type, supplier) via UUID columns with NO foreign key
    constraints; existence is checked by the service.

Invariants enforced:
    - Weights and money use Decimal (Numeric(38,9)), never float.
    - Distributed counters never exceed the batch (CHECK constraints).
    - version is the optimistic-lock column; distributions lock the row
      with SELECT ... FOR UPDATE before touching the counters.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class LoadingBatchModel(TrackedBase):
    """
    ORM model for one loading batch.

    Maps to: poultry_modules.loading.models.LoadingBatch (frozen dataclass).
    """

    __tablename__ = "loadings"

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_loading_quantity_positive"),
        CheckConstraint("distributed_quantity >= 0", name="ck_loading_distributed_qty"),
        CheckConstraint("distributed_net_weight >= 0", name="ck_loading_distributed_weight"),
        Index("idx_loading_type_date", "chicken_type_id", "loading_date"),
        Index("idx_loading_supplier", "supplier_id"),
        Index("idx_loading_date", "loading_date"),
    )

    chicken_type_id: Mapped[UUID] = mapped_column()
    supplier_id: Mapped[UUID] = mapped_column()
    loading_date: Mapped[date] = mapped_column(Date)

    # Inputs and derived weights
    quantity: Mapped[int] = mapped_column(BigInteger)
    gross_weight: Mapped[Decimal | None] = mapped_column(nullable=True)
    empty_weight: Mapped[Decimal] = mapped_column()
    net_weight: Mapped[Decimal] = mapped_column()
    loading_price: Mapped[Decimal] = mapped_column()
    total_loading: Mapped[Decimal] = mapped_column()

    # Running counters
    distributed_quantity: Mapped[int] = mapped_column(BigInteger, default=0)
    distributed_net_weight: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    remaining_quantity: Mapped[int] = mapped_column(BigInteger)
    remaining_net_weight: Mapped[Decimal] = mapped_column()

    quality_grade: Mapped[str] = mapped_column(String(1), default="A")
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    vehicle_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    driver_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Clock time of recording; tie-breaker for batch selection
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    version: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    def refresh_remaining(self) -> None:
        """Recompute remaining counters from the batch and its consumption."""
        self.remaining_quantity = self.quantity - self.distributed_quantity
        self.remaining_net_weight = self.net_weight - self.distributed_net_weight

    def to_dto(self):
        """Convert ORM model to frozen LoadingBatch DTO."""
        from poultry_modules.loading.models import LoadingBatch, QualityGrade
        return LoadingBatch(
            id=self.id,
            chicken_type_id=self.chicken_type_id,
            supplier_id=self.supplier_id,
            loading_date=self.loading_date,
            quantity=self.quantity,
            gross_weight=self.gross_weight,
            empty_weight=self.empty_weight,
            net_weight=self.net_weight,
            loading_price=self.loading_price,
            total_loading=self.total_loading,
            distributed_quantity=self.distributed_quantity,
            distributed_net_weight=self.distributed_net_weight,
            remaining_quantity=self.remaining_quantity,
            remaining_net_weight=self.remaining_net_weight,
            quality_grade=QualityGrade(self.quality_grade),
            notes=self.notes,
            batch_number=self.batch_number,
            vehicle_number=self.vehicle_number,
            driver_name=self.driver_name,
            recorded_at=self.recorded_at,
            recorded_by_id=self.created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<LoadingBatchModel {self.id} qty={self.quantity} "
            f"remaining={self.remaining_quantity}>"
        )
