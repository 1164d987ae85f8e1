"""
Payment Domain Models (``poultry_modules.payment.models``).

A payment re-states a customer's balance: ``total_price`` is what the
customer owed at the time, ``paid_amount`` and ``discount`` what was
settled, and ``remaining_amount`` becomes the customer's outstanding debt.

Invariants
----------
- ``remaining_amount == max(0, total_price - paid_amount - discount)``
- ``status == COMPLETED`` iff ``remaining_amount == 0``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class PaymentStatus(str, Enum):
    PARTIAL = "partial"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    CASH = "cash"


@dataclass(frozen=True)
class Payment:
    id: UUID
    customer_id: UUID
    total_price: Decimal
    paid_amount: Decimal
    discount: Decimal
    remaining_amount: Decimal
    status: PaymentStatus
    payment_method: PaymentMethod
    payment_date: date
    collected_by_id: UUID | None = None
    notes: str | None = None
    recorded_at: datetime | None = None
    recorded_by_id: UUID | None = None


@dataclass(frozen=True)
class EmployeeCollection:
    """Cash collected by one employee across all payments."""

    employee_id: UUID
    employee_name: str
    total_paid: Decimal
    payment_count: int
