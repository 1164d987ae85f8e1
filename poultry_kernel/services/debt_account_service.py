"""
CustomerDebtAccount -- the single writer of Customer.outstanding_debts.

Responsibility:
    Both ledgers that move a customer's balance go through this class:
    distributions apply a signed delta (create adds the amount, update adds
    the difference, delete subtracts it) and payments overwrite the balance
    with the payment's remaining amount.

Architecture position:
    Kernel > Services.  Flush-only; the calling module service owns the
    transaction.

Invariants enforced:
    - The balance is never written negative: every write clamps at zero.
    - Every write locks the customer row (SELECT ... FOR UPDATE) and bumps
      the version column, so concurrent writers serialize on PostgreSQL and
      a lost update is detected everywhere.

Failure modes:
    - CustomerNotFoundError if the customer does not exist.
    - OptimisticLockError if the row changed under us.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from poultry_kernel.domain.values import ZERO
from poultry_kernel.exceptions import CustomerNotFoundError
from poultry_kernel.logging_config import get_logger
from poultry_kernel.models.customer import Customer
from poultry_kernel.services.base import BaseService

logger = get_logger("services.debt_account")


class CustomerDebtAccount(BaseService[Customer]):
    """Running outstanding-debt balance per customer."""

    def lock(self, customer_id: UUID) -> Customer:
        """Load the customer row under a write lock with fresh values."""
        stmt = (
            select(Customer)
            .where(Customer.id == customer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        customer = self.session.execute(stmt).scalar_one_or_none()
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        return customer

    def balance(self, customer_id: UUID) -> Decimal:
        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        return customer.outstanding_debts

    def apply_delta(
        self,
        customer_id: UUID,
        delta: Decimal,
        actor_id: UUID,
        reason: str,
    ) -> Decimal:
        """
        Add ``delta`` (may be negative) to the balance, clamped at zero.

        Returns:
            The new balance.
        """
        customer = self.lock(customer_id)
        previous = customer.outstanding_debts
        return self._write(customer, max(ZERO, previous + delta), actor_id, reason, delta=delta)

    def set_balance(
        self,
        customer_id: UUID,
        balance: Decimal,
        actor_id: UUID,
        reason: str,
    ) -> Decimal:
        """Overwrite the balance (payment semantics), clamped at zero."""
        customer = self.lock(customer_id)
        return self._write(customer, max(ZERO, balance), actor_id, reason)

    def _write(
        self,
        customer: Customer,
        new_balance: Decimal,
        actor_id: UUID,
        reason: str,
        delta: Decimal | None = None,
    ) -> Decimal:
        previous = customer.outstanding_debts
        customer.outstanding_debts = new_balance
        customer.updated_by_id = actor_id
        self._flush_versioned("Customer", customer.id)

        logger.info(
            "customer_debt_updated",
            extra={
                "customer_id": str(customer.id),
                "reason": reason,
                "previous_balance": str(previous),
                "new_balance": str(new_balance),
                "delta": str(delta) if delta is not None else None,
            },
        )
        return new_balance
