"""
DTOs -- Immutable views of directory entities.

Responsibility:
    Frozen dataclasses returned by the kernel services and selectors in
    place of ORM rows.  ``from_model()`` class methods are the boundary
    converters and are only invoked from the service/selector layer.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  ORM classes are imported for type
    checking only.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from poultry_kernel.models.chicken_type import ChickenType as ChickenTypeModel
    from poultry_kernel.models.customer import Customer as CustomerModel
    from poultry_kernel.models.employee import Employee as EmployeeModel
    from poultry_kernel.models.supplier import Supplier as SupplierModel


@dataclass(frozen=True)
class CustomerInfo:
    id: UUID
    name: str
    phone: str | None
    address: str | None
    outstanding_debts: Decimal

    @classmethod
    def from_model(cls, model: CustomerModel) -> CustomerInfo:
        return cls(
            id=model.id,
            name=model.name,
            phone=model.phone,
            address=model.address,
            outstanding_debts=model.outstanding_debts,
        )


@dataclass(frozen=True)
class ChickenTypeInfo:
    """A chicken type with its current price per kilogram and signed stock."""

    id: UUID
    name: str
    price: Decimal
    stock: int

    @classmethod
    def from_model(cls, model: ChickenTypeModel) -> ChickenTypeInfo:
        return cls(
            id=model.id,
            name=model.name,
            price=model.price,
            stock=model.stock,
        )


@dataclass(frozen=True)
class SupplierInfo:
    id: UUID
    name: str
    phone: str | None
    address: str | None

    @classmethod
    def from_model(cls, model: SupplierModel) -> SupplierInfo:
        return cls(
            id=model.id,
            name=model.name,
            phone=model.phone,
            address=model.address,
        )


@dataclass(frozen=True)
class EmployeeInfo:
    id: UUID
    name: str
    role: str

    @classmethod
    def from_model(cls, model: EmployeeModel) -> EmployeeInfo:
        return cls(id=model.id, name=model.name, role=str(getattr(model.role, "value", model.role)))
