"""
Transfer Domain Models (``poultry_modules.transfers.models``).

Staff hand collected cash to each other (typically to an admin).  An
employee's available cash is what they collected from customers, minus
their expenses, plus transfers received, minus transfers sent.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

MINIMUM_TRANSFER_AMOUNT = Decimal("0.01")


@dataclass(frozen=True)
class Transfer:
    id: UUID
    from_employee_id: UUID
    to_employee_id: UUID
    amount: Decimal
    transfer_date: date
    note: str | None = None
    recorded_at: datetime | None = None


@dataclass(frozen=True)
class TransferSummary:
    employee_id: UUID
    total_in: Decimal
    total_out: Decimal
    count_in: int
    count_out: int


@dataclass(frozen=True)
class CashPosition:
    """
    Cash an employee holds.

    ``available == collected - expenses + transfers_in - transfers_out``
    """

    employee_id: UUID
    collected: Decimal
    expenses: Decimal
    transfers_in: Decimal
    transfers_out: Decimal

    @property
    def available(self) -> Decimal:
        return self.collected - self.expenses + self.transfers_in - self.transfers_out
