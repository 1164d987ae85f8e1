"""Staff cash transfers and per-employee cash positions."""

from poultry_modules.transfers.models import CashPosition, Transfer, TransferSummary

__all__ = ["CashPosition", "Transfer", "TransferSummary"]
