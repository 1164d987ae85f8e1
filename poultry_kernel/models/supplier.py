"""
Module: poultry_kernel.models.supplier
Responsibility: ORM persistence for suppliers that loadings are received from.
Architecture position: Kernel > Models.  May import from db/ only.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import TrackedBase


class Supplier(TrackedBase):
    __tablename__ = "suppliers"

    __table_args__ = (
        Index("idx_supplier_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    address: Mapped[str | None] = mapped_column(String(200), nullable=True)

    def __repr__(self) -> str:
        return f"<Supplier {self.name}>"
