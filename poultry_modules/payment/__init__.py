"""
Payment Module (``poultry_modules.payment``).

Payments settle customer balances.  Each payment re-states the customer's
whole balance: its remaining amount overwrites the customer's outstanding
debt on create and update, and deleting it falls back to the most recent
remaining payment (or zero).
"""

from poultry_modules.payment.models import (
    EmployeeCollection,
    Payment,
    PaymentMethod,
    PaymentStatus,
)

__all__ = ["EmployeeCollection", "Payment", "PaymentMethod", "PaymentStatus"]
