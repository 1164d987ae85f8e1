"""
Module: poultry_kernel.selectors.directory_selector
Responsibility: Read-only lookups over the directory entities (customers,
    chicken types, suppliers, employees) and resolution of tagged chicken
    type references into canonical ids.
Architecture position: Kernel > Selectors.

Failure modes:
    - *NotFoundError when a looked-up entity does not exist.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select

from poultry_kernel.db.base import Base
from poultry_kernel.domain.dtos import (
    ChickenTypeInfo,
    CustomerInfo,
    EmployeeInfo,
    SupplierInfo,
)
from poultry_kernel.domain.references import ChickenTypeById, ChickenTypeRef
from poultry_kernel.exceptions import (
    ChickenTypeNotFoundError,
    CustomerNotFoundError,
    EmployeeNotFoundError,
    SupplierNotFoundError,
)
from poultry_kernel.models.chicken_type import ChickenType
from poultry_kernel.models.customer import Customer
from poultry_kernel.models.employee import Employee
from poultry_kernel.models.supplier import Supplier
from poultry_kernel.selectors.base import BaseSelector


class DirectorySelector(BaseSelector[Base]):
    """Queries for the four directory entities."""

    def get_customer(self, customer_id: UUID) -> CustomerInfo:
        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        return CustomerInfo.from_model(customer)

    def list_customers(self) -> list[CustomerInfo]:
        rows = self.session.execute(select(Customer).order_by(Customer.name)).scalars().all()
        return [CustomerInfo.from_model(row) for row in rows]

    def get_chicken_type(self, chicken_type_id: UUID) -> ChickenTypeInfo:
        chicken_type = self.session.get(ChickenType, chicken_type_id)
        if chicken_type is None:
            raise ChickenTypeNotFoundError(str(chicken_type_id))
        return ChickenTypeInfo.from_model(chicken_type)

    def find_chicken_type_by_name(self, name: str) -> ChickenTypeInfo | None:
        """Case-insensitive lookup by display name."""
        stmt = select(ChickenType).where(func.lower(ChickenType.name) == name.strip().lower())
        chicken_type = self.session.execute(stmt).scalar_one_or_none()
        return ChickenTypeInfo.from_model(chicken_type) if chicken_type else None

    def list_chicken_types(self) -> list[ChickenTypeInfo]:
        rows = self.session.execute(select(ChickenType).order_by(ChickenType.name)).scalars().all()
        return [ChickenTypeInfo.from_model(row) for row in rows]

    def resolve_chicken_type(self, ref: ChickenTypeRef) -> UUID:
        """
        Resolve a ById / ByName reference into the canonical chicken type id.

        Raises:
            ChickenTypeNotFoundError: If no chicken type matches.
        """
        if isinstance(ref, ChickenTypeById):
            return self.get_chicken_type(ref.chicken_type_id).id
        found = self.find_chicken_type_by_name(ref.name)
        if found is None:
            raise ChickenTypeNotFoundError(ref.name)
        return found.id

    def get_supplier(self, supplier_id: UUID) -> SupplierInfo:
        supplier = self.session.get(Supplier, supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(str(supplier_id))
        return SupplierInfo.from_model(supplier)

    def list_suppliers(self) -> list[SupplierInfo]:
        rows = self.session.execute(select(Supplier).order_by(Supplier.name)).scalars().all()
        return [SupplierInfo.from_model(row) for row in rows]

    def get_employee(self, employee_id: UUID) -> EmployeeInfo:
        employee = self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))
        return EmployeeInfo.from_model(employee)

    def list_employees(self) -> list[EmployeeInfo]:
        rows = self.session.execute(select(Employee).order_by(Employee.name)).scalars().all()
        return [EmployeeInfo.from_model(row) for row in rows]
