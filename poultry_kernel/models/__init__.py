"""Kernel ORM models: the directory entities every ledger references."""

from poultry_kernel.models.chicken_type import ChickenType
from poultry_kernel.models.customer import Customer
from poultry_kernel.models.employee import Employee, EmployeeRole
from poultry_kernel.models.supplier import Supplier

__all__ = [
    "ChickenType",
    "Customer",
    "Employee",
    "EmployeeRole",
    "Supplier",
]
