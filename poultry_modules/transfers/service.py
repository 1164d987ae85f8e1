"""
Transfer Module Service (``poultry_modules.transfers.service``).

Responsibility
--------------
Moves cash between employees after checking that the sender holds it,
and reports transfer totals and cash positions.

Invariants
----------
- ``create_transfer`` owns its transaction boundary.
- The sender's Employee row is locked (and its version bumped) for the
  whole check-and-insert, so two transfers from one employee cannot both
  spend the same cash.

Failure Modes
-------------
- ``SameEmployeeTransferError`` when sender and receiver are the same.
- ``InvalidInputError`` when the amount is below 0.01.
- ``InsufficientFundsError`` when the sender's available cash is short.
- ``EmployeeNotFoundError`` for unknown employees.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from poultry_kernel.domain.calendar import BusinessCalendar
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.values import ZERO, optional_text, to_date, to_decimal
from poultry_kernel.exceptions import (
    InsufficientFundsError,
    InvalidInputError,
    SameEmployeeTransferError,
)
from poultry_kernel.logging_config import get_logger
from poultry_kernel.services.base import owned_transaction
from poultry_kernel.services.directory_service import DirectoryService
from poultry_modules.expenses.orm import EmployeeExpenseModel
from poultry_modules.payment.orm import PaymentModel
from poultry_modules.transfers.models import (
    MINIMUM_TRANSFER_AMOUNT,
    CashPosition,
    Transfer,
    TransferSummary,
)
from poultry_modules.transfers.orm import TransferModel

logger = get_logger("modules.transfers.service")


class TransferService:

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

    def create_transfer(
        self,
        from_employee_id: UUID,
        to_employee_id: UUID,
        amount: Decimal,
        actor_id: UUID,
        note: str | None = None,
        transfer_date: date | None = None,
    ) -> Transfer:
        if from_employee_id == to_employee_id:
            raise SameEmployeeTransferError(str(from_employee_id))
        value = to_decimal(amount, "amount")
        if value < MINIMUM_TRANSFER_AMOUNT:
            raise InvalidInputError("amount", f"must be >= {MINIMUM_TRANSFER_AMOUNT}, got {value}")
        day = to_date(transfer_date, "transfer_date") if transfer_date is not None else self._calendar.today(self._clock)
        clean_note = optional_text(note, "note", 500)

        with owned_transaction(self._session, "Employee", from_employee_id):
            sender = self._directory.require_employee(from_employee_id, for_update=True)
            self._directory.require_employee(to_employee_id)

            position = self.cash_position(from_employee_id)
            if position.available < value:
                raise InsufficientFundsError(
                    str(from_employee_id), str(value), str(position.available),
                )

            transfer = TransferModel(
                from_employee_id=from_employee_id,
                to_employee_id=to_employee_id,
                amount=value,
                transfer_date=day,
                note=clean_note,
                recorded_at=self._clock.now(),
                created_by_id=actor_id,
            )
            self._session.add(transfer)

            # Bump the sender's version so a concurrent transfer loses
            sender.updated_by_id = actor_id
            flag_modified(sender, "updated_by_id")
            self._session.flush()

            logger.info("transfer_created", extra={
                "transfer_id": str(transfer.id),
                "from_employee_id": str(from_employee_id),
                "to_employee_id": str(to_employee_id),
                "amount": str(value),
                "available_before": str(position.available),
            })
            dto = transfer.to_dto()
        return dto

    def list_transfers(self, employee_id: UUID | None = None) -> list[Transfer]:
        """Transfers sent or received by ``employee_id`` (all if None), newest first."""
        stmt = select(TransferModel)
        if employee_id is not None:
            stmt = stmt.where(or_(
                TransferModel.from_employee_id == employee_id,
                TransferModel.to_employee_id == employee_id,
            ))
        stmt = stmt.order_by(TransferModel.transfer_date.desc(), TransferModel.recorded_at.desc())
        return [row.to_dto() for row in self._session.execute(stmt).scalars()]

    def transfer_summary(self, employee_id: UUID) -> TransferSummary:
        self._directory.require_employee(employee_id)
        total_in, count_in = self._sum_and_count(TransferModel.to_employee_id == employee_id)
        total_out, count_out = self._sum_and_count(TransferModel.from_employee_id == employee_id)
        return TransferSummary(
            employee_id=employee_id,
            total_in=total_in,
            total_out=total_out,
            count_in=count_in,
            count_out=count_out,
        )

    def cash_position(self, employee_id: UUID) -> CashPosition:
        collected = self._scalar_sum(
            select(func.coalesce(func.sum(PaymentModel.paid_amount), ZERO))
            .where(PaymentModel.collected_by_id == employee_id)
        )
        expenses = self._scalar_sum(
            select(func.coalesce(func.sum(EmployeeExpenseModel.value), ZERO))
            .where(EmployeeExpenseModel.employee_id == employee_id)
        )
        transfers_in, _ = self._sum_and_count(TransferModel.to_employee_id == employee_id)
        transfers_out, _ = self._sum_and_count(TransferModel.from_employee_id == employee_id)
        return CashPosition(
            employee_id=employee_id,
            collected=collected,
            expenses=expenses,
            transfers_in=transfers_in,
            transfers_out=transfers_out,
        )

    def _sum_and_count(self, condition) -> tuple[Decimal, int]:
        total, count = self._session.execute(
            select(
                func.coalesce(func.sum(TransferModel.amount), ZERO),
                func.count(TransferModel.id),
            ).where(condition)
        ).one()
        return Decimal(str(total or 0)), int(count or 0)

    def _scalar_sum(self, stmt) -> Decimal:
        return Decimal(str(self._session.execute(stmt).scalar_one() or 0))
