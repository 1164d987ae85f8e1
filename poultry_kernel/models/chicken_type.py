"""
Module: poultry_kernel.models.chicken_type
Responsibility: ORM persistence for chicken types (product catalogue).
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - name is unique (uq_chicken_type_name).
    - price is the current price per kilogram; waste is valued at it.
    - stock is a SIGNED counter: loadings decrement it, loading deletes
      restore it.  It is never clamped.
"""

from decimal import Decimal

from sqlalchemy import BigInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class ChickenType(TrackedBase):
    """A kind of bird sold by weight."""

    __tablename__ = "chicken_types"

    __table_args__ = (
        UniqueConstraint("name", name="uq_chicken_type_name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Current price per kilogram
    price: Mapped[Decimal] = mapped_column(nullable=False)

    stock: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ChickenType {self.name} @ {self.price}>"
