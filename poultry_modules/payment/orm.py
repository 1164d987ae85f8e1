"""
Module: poultry_modules.payment.orm
Responsibility: SQLAlchemy ORM persistence for customer payments.

Architecture position: Modules > Payment > ORM.  Inherits from TrackedBase.
    customer_id and collected_by_id reference the kernel directory with
    no FK.

Invariants enforced:
    - Money uses Decimal (Numeric(38,9)), never float.
    - status is stored as a string (PaymentStatus value).
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class PaymentModel(TrackedBase):
    """
    ORM model for one payment.

    Maps to: poultry_modules.payment.models.Payment (frozen dataclass).
    """

    __tablename__ = "payments"

    __table_args__ = (
        CheckConstraint("remaining_amount >= 0", name="ck_payment_remaining_non_negative"),
        Index("idx_payment_customer_date", "customer_id", "payment_date"),
        Index("idx_payment_collected_by", "collected_by_id"),
    )

    customer_id: Mapped[UUID] = mapped_column()

    total_price: Mapped[Decimal] = mapped_column()
    paid_amount: Mapped[Decimal] = mapped_column()
    discount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    remaining_amount: Mapped[Decimal] = mapped_column()
    status: Mapped[str] = mapped_column(String(20))

    payment_method: Mapped[str] = mapped_column(String(20), default="cash")
    payment_date: Mapped[date] = mapped_column(Date)
    collected_by_id: Mapped[UUID | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Clock time of recording; second key of "most recent payment"
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def to_dto(self):
        """Convert ORM model to frozen Payment DTO."""
        from poultry_modules.payment.models import Payment, PaymentMethod, PaymentStatus
        return Payment(
            id=self.id,
            customer_id=self.customer_id,
            total_price=self.total_price,
            paid_amount=self.paid_amount,
            discount=self.discount,
            remaining_amount=self.remaining_amount,
            status=PaymentStatus(self.status),
            payment_method=PaymentMethod(self.payment_method),
            payment_date=self.payment_date,
            collected_by_id=self.collected_by_id,
            notes=self.notes,
            recorded_at=self.recorded_at,
            recorded_by_id=self.created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<PaymentModel {self.id} customer={self.customer_id} "
            f"remaining={self.remaining_amount} status={self.status}>"
        )
