"""
Payment Module Service (``poultry_modules.payment.service``).

Responsibility
--------------
Records payments against customers and keeps the customer's outstanding
debt equal to the remaining amount of the payment just written.

Invariants
----------
- Each public write method owns its transaction boundary: commit on
  success, rollback and re-raise on failure.
- The customer row is locked before anything else, so concurrent payments
  for one customer are serialized and "most recent payment" is read
  consistently.
- Create and update overwrite the debt with the payment's remaining
  amount; delete falls back to the most recent remaining payment's
  remaining amount, or zero.  "Most recent" means latest payment_date,
  then latest recorded_at.

Failure Modes
-------------
- ``CustomerNotFoundError`` / ``EmployeeNotFoundError`` /
  ``PaymentNotFoundError`` for missing references.
- ``InvalidInputError`` on negative amounts or an unknown payment method.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from poultry_kernel.domain.calendar import BusinessCalendar
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.values import ZERO, optional_text, to_date
from poultry_kernel.exceptions import InvalidInputError, PaymentNotFoundError
from poultry_kernel.logging_config import get_logger
from poultry_kernel.models.employee import Employee
from poultry_kernel.services.base import owned_transaction
from poultry_kernel.services.debt_account_service import CustomerDebtAccount
from poultry_kernel.services.directory_service import DirectoryService
from poultry_modules.payment.helpers import compute_settlement
from poultry_modules.payment.models import EmployeeCollection, Payment, PaymentMethod
from poultry_modules.payment.orm import PaymentModel

logger = get_logger("modules.payment.service")


def _payment_method(value) -> str:
    try:
        return PaymentMethod(value).value
    except ValueError as exc:
        raise InvalidInputError("payment_method", f"unsupported method {value!r}") from exc


class PaymentService:
    """
    Payment ledger.

    Transaction boundary: this service commits on success, rolls back on
    failure.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        calendar: BusinessCalendar | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._calendar = calendar or BusinessCalendar()
        self._directory = DirectoryService(session)
        self._debts = CustomerDebtAccount(session)

    def create_payment(
        self,
        customer_id: UUID,
        total_price: Decimal,
        paid_amount: Decimal,
        actor_id: UUID,
        discount: Decimal = ZERO,
        payment_date: date | None = None,
        collected_by_id: UUID | None = None,
        payment_method: str = PaymentMethod.CASH.value,
        notes: str | None = None,
    ) -> Payment:
        """
        Record a payment and overwrite the customer's debt with its remainder.

        Example:
            total 1200, paid 1000, discount 0 -> remaining 200, partial;
            the customer's debt becomes 200.
        """
        total, paid, disc, remaining, status = compute_settlement(total_price, paid_amount, discount)
        day = to_date(payment_date, "payment_date") if payment_date is not None else self._calendar.today(self._clock)
        method = _payment_method(payment_method)
        clean_notes = optional_text(notes, "notes", 500)

        with owned_transaction(self._session, "Payment"):
            self._debts.lock(customer_id)
            if collected_by_id is not None:
                self._directory.require_employee(collected_by_id)

            payment = PaymentModel(
                customer_id=customer_id,
                total_price=total,
                paid_amount=paid,
                discount=disc,
                remaining_amount=remaining,
                status=status.value,
                payment_method=method,
                payment_date=day,
                collected_by_id=collected_by_id,
                notes=clean_notes,
                recorded_at=self._clock.now(),
                created_by_id=actor_id,
            )
            self._session.add(payment)
            self._session.flush()

            self._debts.set_balance(customer_id, remaining, actor_id, reason="payment_created")

            logger.info("payment_created", extra={
                "payment_id": str(payment.id),
                "customer_id": str(customer_id),
                "paid_amount": str(paid),
                "discount": str(disc),
                "remaining_amount": str(remaining),
                "status": status.value,
            })
            dto = payment.to_dto()
        return dto

    def update_payment(
        self,
        payment_id: UUID,
        actor_id: UUID,
        *,
        total_price: Decimal | None = None,
        paid_amount: Decimal | None = None,
        discount: Decimal | None = None,
        payment_date: date | None = None,
        collected_by_id: UUID | None = None,
        notes: str | None = None,
    ) -> Payment:
        """Merge the provided fields, recompute, and overwrite the debt again."""
        with owned_transaction(self._session, "Payment", payment_id):
            payment = self._get(payment_id)
            self._debts.lock(payment.customer_id)

            total, paid, disc, remaining, status = compute_settlement(
                total_price if total_price is not None else payment.total_price,
                paid_amount if paid_amount is not None else payment.paid_amount,
                discount if discount is not None else payment.discount,
            )
            if collected_by_id is not None:
                self._directory.require_employee(collected_by_id)
                payment.collected_by_id = collected_by_id
            if payment_date is not None:
                payment.payment_date = to_date(payment_date, "payment_date")
            if notes is not None:
                payment.notes = optional_text(notes, "notes", 500)

            payment.total_price = total
            payment.paid_amount = paid
            payment.discount = disc
            payment.remaining_amount = remaining
            payment.status = status.value
            payment.updated_by_id = actor_id
            self._session.flush()

            self._debts.set_balance(payment.customer_id, remaining, actor_id, reason="payment_updated")

            logger.info("payment_updated", extra={
                "payment_id": str(payment_id),
                "remaining_amount": str(remaining),
                "status": status.value,
            })
            dto = payment.to_dto()
        return dto

    def delete_payment(self, payment_id: UUID, actor_id: UUID) -> Payment:
        """
        Delete a payment and restate the debt from the previous payment.

        Postconditions:
            - The customer's debt equals the remaining amount of the most
              recent payment still on file, or 0 if there is none.
        """
        with owned_transaction(self._session, "Payment", payment_id):
            payment = self._get(payment_id)
            customer_id = payment.customer_id
            self._debts.lock(customer_id)

            dto = payment.to_dto()
            self._session.delete(payment)
            self._session.flush()

            latest = self._latest_payment(customer_id)
            balance = latest.remaining_amount if latest is not None else ZERO
            self._debts.set_balance(customer_id, balance, actor_id, reason="payment_deleted")

            logger.info("payment_deleted", extra={
                "payment_id": str(payment_id),
                "customer_id": str(customer_id),
                "fallback_payment_id": str(latest.id) if latest is not None else None,
                "restated_balance": str(balance),
            })
        return dto

    # =========================================================================
    # Reads
    # =========================================================================

    def get_payment(self, payment_id: UUID) -> Payment:
        return self._get(payment_id).to_dto()

    def list_payments(self, customer_id: UUID | None = None) -> list[Payment]:
        """Payments, most recent first."""
        stmt = select(PaymentModel)
        if customer_id is not None:
            stmt = stmt.where(PaymentModel.customer_id == customer_id)
        stmt = stmt.order_by(PaymentModel.payment_date.desc(), PaymentModel.recorded_at.desc())
        return [row.to_dto() for row in self._session.execute(stmt).scalars()]

    def employee_collection_summary(self) -> list[EmployeeCollection]:
        """Cash collected per employee, largest total first."""
        total = func.coalesce(func.sum(PaymentModel.paid_amount), ZERO)
        stmt = (
            select(Employee.id, Employee.name, total, func.count(PaymentModel.id))
            .join(PaymentModel, PaymentModel.collected_by_id == Employee.id)
            .group_by(Employee.id, Employee.name)
        )
        rows = [
            EmployeeCollection(
                employee_id=employee_id,
                employee_name=name,
                total_paid=Decimal(str(paid or 0)),
                payment_count=int(count),
            )
            for employee_id, name, paid, count in self._session.execute(stmt)
        ]
        return sorted(rows, key=lambda r: (-r.total_paid, r.employee_name))

    # =========================================================================
    # Internals
    # =========================================================================

    def _get(self, payment_id: UUID) -> PaymentModel:
        payment = self._session.get(PaymentModel, payment_id)
        if payment is None:
            raise PaymentNotFoundError(str(payment_id))
        return payment

    def _latest_payment(self, customer_id: UUID) -> PaymentModel | None:
        stmt = (
            select(PaymentModel)
            .where(PaymentModel.customer_id == customer_id)
            .order_by(
                PaymentModel.payment_date.desc(),
                PaymentModel.recorded_at.desc(),
                PaymentModel.id.desc(),
            )
            .limit(1)
        )
        return self._session.execute(stmt).scalar_one_or_none()
