"""
Payment Pure Functions (``poultry_modules.payment.helpers``).

Stateless settlement arithmetic.  No I/O.
"""

from __future__ import annotations

from decimal import Decimal

from poultry_kernel.domain.values import ZERO, require_non_negative
from poultry_modules.payment.models import PaymentStatus


def compute_settlement(total_price, paid_amount, discount=ZERO) -> tuple[Decimal, Decimal, Decimal, Decimal, PaymentStatus]:
    """
    Validate the inputs and derive the remaining amount and status.

    Returns:
        (total_price, paid_amount, discount, remaining_amount, status)

    Raises:
        InvalidInputError: on negative or non-numeric inputs.
    """
    total = require_non_negative(total_price, "total_price")
    paid = require_non_negative(paid_amount, "paid_amount")
    disc = require_non_negative(ZERO if discount is None else discount, "discount")
    remaining = max(ZERO, total - paid - disc)
    status = PaymentStatus.COMPLETED if remaining == 0 else PaymentStatus.PARTIAL
    return total, paid, disc, remaining, status
