"""Kernel write services (flush-only; callers own the transaction)."""

from poultry_kernel.services.base import BaseService, owned_transaction
from poultry_kernel.services.debt_account_service import CustomerDebtAccount
from poultry_kernel.services.directory_service import DirectoryService

__all__ = ["BaseService", "CustomerDebtAccount", "DirectoryService", "owned_transaction"]
