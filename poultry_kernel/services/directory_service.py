"""
Service layer for directory entities.

Creates customers, suppliers, employees and chicken types, maintains the
chicken-type price and signed stock counter, and provides the locked
existence checks the ledgers use before touching related rows.

Returns DTOs from poultry_kernel.domain.dtos instead of ORM entities,
except for the ``require_*`` helpers, which hand the ORM row to sibling
services inside the same transaction.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from poultry_kernel.db.base import Base
from poultry_kernel.domain.dtos import (
    ChickenTypeInfo,
    CustomerInfo,
    EmployeeInfo,
    SupplierInfo,
)
from poultry_kernel.domain.values import (
    optional_text,
    require_non_negative,
    required_text,
)
from poultry_kernel.exceptions import (
    ChickenTypeNotFoundError,
    CustomerNotFoundError,
    DuplicateChickenTypeError,
    EmployeeNotFoundError,
    InvalidInputError,
    SupplierNotFoundError,
)
from poultry_kernel.logging_config import get_logger
from poultry_kernel.models.chicken_type import ChickenType
from poultry_kernel.models.customer import Customer
from poultry_kernel.models.employee import Employee, EmployeeRole
from poultry_kernel.models.supplier import Supplier
from poultry_kernel.services.base import BaseService

logger = get_logger("services.directory")


class DirectoryService(BaseService[Base]):
    """
    Write-side of the customer, supplier, employee and chicken type directories.

    Flush-only: the caller commits.
    """

    # ------------------------------------------------------------------
    # Existence checks (ORM rows, same transaction)
    # ------------------------------------------------------------------

    def require_customer(self, customer_id: UUID) -> Customer:
        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        return customer

    def require_supplier(self, supplier_id: UUID) -> Supplier:
        supplier = self.session.get(Supplier, supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(str(supplier_id))
        return supplier

    def require_employee(self, employee_id: UUID, for_update: bool = False) -> Employee:
        if for_update:
            stmt = (
                select(Employee)
                .where(Employee.id == employee_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            employee = self.session.execute(stmt).scalar_one_or_none()
        else:
            employee = self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(str(employee_id))
        return employee

    def require_chicken_type(self, chicken_type_id: UUID, for_update: bool = False) -> ChickenType:
        if for_update:
            stmt = (
                select(ChickenType)
                .where(ChickenType.id == chicken_type_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            chicken_type = self.session.execute(stmt).scalar_one_or_none()
        else:
            chicken_type = self.session.get(ChickenType, chicken_type_id)
        if chicken_type is None:
            raise ChickenTypeNotFoundError(str(chicken_type_id))
        return chicken_type

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_customer(
        self,
        name: str,
        actor_id: UUID,
        phone: str | None = None,
        address: str | None = None,
    ) -> CustomerInfo:
        customer = Customer(
            name=required_text(name, "name", 100),
            phone=optional_text(phone, "phone", 20),
            address=optional_text(address, "address", 200),
            outstanding_debts=Decimal("0"),
            created_by_id=actor_id,
        )
        self.session.add(customer)
        self.session.flush()
        logger.info("customer_created", extra={"customer_id": str(customer.id)})
        return CustomerInfo.from_model(customer)

    def create_supplier(
        self,
        name: str,
        actor_id: UUID,
        phone: str | None = None,
        address: str | None = None,
    ) -> SupplierInfo:
        supplier = Supplier(
            name=required_text(name, "name", 100),
            phone=optional_text(phone, "phone", 20),
            address=optional_text(address, "address", 200),
            created_by_id=actor_id,
        )
        self.session.add(supplier)
        self.session.flush()
        logger.info("supplier_created", extra={"supplier_id": str(supplier.id)})
        return SupplierInfo.from_model(supplier)

    def create_employee(
        self,
        name: str,
        actor_id: UUID,
        role: str = EmployeeRole.EMPLOYEE.value,
    ) -> EmployeeInfo:
        try:
            employee_role = EmployeeRole(role)
        except ValueError as exc:
            raise InvalidInputError("role", f"unknown role {role!r}") from exc
        employee = Employee(
            name=required_text(name, "name", 100),
            role=employee_role.value,
            created_by_id=actor_id,
        )
        self.session.add(employee)
        self.session.flush()
        logger.info("employee_created", extra={"employee_id": str(employee.id)})
        return EmployeeInfo.from_model(employee)

    def create_chicken_type(
        self,
        name: str,
        price: Decimal,
        actor_id: UUID,
        stock: int = 0,
    ) -> ChickenTypeInfo:
        """
        Create a chicken type.

        Raises:
            DuplicateChickenTypeError: If the name is taken (case-insensitive).
        """
        clean_name = required_text(name, "name", 100)
        existing = self.session.execute(
            select(ChickenType.id).where(func.lower(ChickenType.name) == clean_name.lower())
        ).first()
        if existing is not None:
            raise DuplicateChickenTypeError(clean_name)

        chicken_type = ChickenType(
            name=clean_name,
            price=require_non_negative(price, "price"),
            stock=int(stock),
            created_by_id=actor_id,
        )
        self.session.add(chicken_type)
        self.session.flush()
        logger.info(
            "chicken_type_created",
            extra={"chicken_type_id": str(chicken_type.id), "chicken_type_name": clean_name},
        )
        return ChickenTypeInfo.from_model(chicken_type)

    # ------------------------------------------------------------------
    # Chicken type maintenance
    # ------------------------------------------------------------------

    def update_chicken_type_price(
        self,
        chicken_type_id: UUID,
        price: Decimal,
        actor_id: UUID,
    ) -> ChickenTypeInfo:
        chicken_type = self.require_chicken_type(chicken_type_id, for_update=True)
        previous = chicken_type.price
        chicken_type.price = require_non_negative(price, "price")
        chicken_type.updated_by_id = actor_id
        self.session.flush()
        logger.info(
            "chicken_type_price_updated",
            extra={
                "chicken_type_id": str(chicken_type_id),
                "previous_price": str(previous),
                "new_price": str(chicken_type.price),
            },
        )
        return ChickenTypeInfo.from_model(chicken_type)

    def adjust_chicken_type_stock(
        self,
        chicken_type_id: UUID,
        delta: int,
        actor_id: UUID,
    ) -> int:
        """
        Add ``delta`` to the signed stock counter.

        Loadings consume stock (negative delta); loading deletes restore it.
        The counter may go negative and is never clamped.

        Returns:
            The new stock value.
        """
        chicken_type = self.require_chicken_type(chicken_type_id, for_update=True)
        if delta == 0:
            return chicken_type.stock
        chicken_type.stock = chicken_type.stock + delta
        chicken_type.updated_by_id = actor_id
        self.session.flush()
        logger.debug(
            "chicken_type_stock_adjusted",
            extra={
                "chicken_type_id": str(chicken_type_id),
                "delta": delta,
                "stock": chicken_type.stock,
            },
        )
        return chicken_type.stock
