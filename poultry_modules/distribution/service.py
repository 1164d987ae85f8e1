"""
Distribution Module Service (``poultry_modules.distribution.service``).

Responsibility
--------------
The settlement engine: creates, updates and deletes distributions while
keeping loading-batch counters, customer debt and the waste ledger
consistent.

Architecture
------------
Layer: **Modules** -- stateful orchestration wrapper.

1. ``compute_distribution_values`` derives empty / net weight and amount.
2. ``plan_allocation`` / ``resize_portions`` decide what the source batch
   gives and what is shortage.
3. ``CustomerDebtAccount`` applies the amount delta to the customer.
4. ``WasteLedger`` books shortage inside a SAVEPOINT (best-effort).

Invariants
----------
- Each public write method is one transaction: batch counters, customer
  debt and the record itself commit together or not at all.
- Loading batches and the customer are read under SELECT ... FOR UPDATE
  and carry version columns; a lost update raises OptimisticLockError.
- A waste-ledger failure is logged and rolled back to its savepoint; it
  never aborts the distribution.

Failure Modes
-------------
- ``CustomerNotFoundError`` / ``ChickenTypeNotFoundError`` /
  ``DistributionNotFoundError`` for missing references.
- ``InsufficientInventoryError`` when an update asks more of the source
  batch than it still holds.
- ``InvalidInputError`` for bad numbers, or a date before the source
  batch was loaded.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from poultry_kernel.domain.calendar import BusinessCalendar, DateRange
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.values import ZERO, to_date
from poultry_kernel.domain.weights import PACKAGING_WEIGHT_PER_UNIT, compute_distribution_values
from poultry_kernel.exceptions import (
    DistributionNotFoundError,
    InvalidInputError,
    LoadingNotFoundError,
)
from poultry_kernel.logging_config import get_logger
from poultry_kernel.services.base import owned_transaction
from poultry_kernel.services.debt_account_service import CustomerDebtAccount
from poultry_kernel.services.directory_service import DirectoryService
from poultry_modules.distribution.helpers import (
    BatchAvailability,
    plan_allocation,
    resize_portions,
)
from poultry_modules.distribution.models import DailyNetWeight, Distribution
from poultry_modules.distribution.orm import DistributionModel
from poultry_modules.loading.orm import LoadingBatchModel
from poultry_modules.waste.ledger import WasteLedger

logger = get_logger("modules.distribution.service")


class DistributionService:
    """
    Distribution settlement.

    Transaction boundary: this service commits on success, rolls back on
    failure.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        packaging_weight_per_unit: Decimal = PACKAGING_WEIGHT_PER_UNIT,
        calendar: BusinessCalendar | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._packaging_weight = packaging_weight_per_unit
        self._calendar = calendar or BusinessCalendar()
        self._directory = DirectoryService(session)
        self._debts = CustomerDebtAccount(session)
        self._waste = WasteLedger(session)

    # =========================================================================
    # Create
    # =========================================================================

    def create_distribution(
        self,
        customer_id: UUID,
        chicken_type_id: UUID,
        quantity: int,
        gross_weight: Decimal,
        price: Decimal,
        actor_id: UUID,
        distribution_date: date | None = None,
    ) -> Distribution:
        """
        Record a distribution against the eligible loading pool.

        Preconditions:
            - ``quantity`` >= 1; ``gross_weight`` and ``price`` >= 0.

        Postconditions:
            - The source batch's distributed counters grew by the allocated
              portion; its remaining counters are still >= 0.
            - The customer's debt grew by ``total_amount``.
            - Any shortage is booked as over-distribution waste for
              (day, chicken type), unless the waste write failed.
        """
        values = compute_distribution_values(
            quantity, gross_weight, price, self._packaging_weight,
        )
        day = self._day(distribution_date)

        with owned_transaction(self._session, "Distribution"):
            self._directory.require_customer(customer_id)
            self._directory.require_chicken_type(chicken_type_id)

            batches = self._eligible_batches(chicken_type_id, day)
            plan = plan_allocation(
                values.quantity,
                values.net_weight,
                [_availability(b) for b in batches],
            )

            record = DistributionModel(
                customer_id=customer_id,
                chicken_type_id=chicken_type_id,
                source_loading_id=plan.source_loading_id,
                distribution_date=day,
                quantity=values.quantity,
                gross_weight=values.gross_weight,
                empty_weight=values.empty_weight,
                net_weight=values.net_weight,
                price=values.unit_price,
                total_amount=values.total_amount,
                allocated_quantity=plan.allocated_quantity,
                allocated_net_weight=plan.allocated_net_weight,
                shortage_quantity=plan.shortage_quantity,
                shortage_net_weight=plan.shortage_net_weight,
                recorded_at=self._clock.now(),
                created_by_id=actor_id,
            )
            self._session.add(record)

            if plan.source_loading_id is not None:
                source = next(b for b in batches if b.id == plan.source_loading_id)
                _consume(source, plan.allocated_quantity, plan.allocated_net_weight, actor_id)

            self._session.flush()
            self._debts.apply_delta(
                customer_id, values.total_amount, actor_id, reason="distribution_created",
            )

            if plan.has_shortage:
                logger.info("distribution_shortage_detected", extra={
                    "distribution_id": str(record.id),
                    "requested_quantity": values.quantity,
                    "available_quantity": plan.available_quantity,
                    "shortage_quantity": plan.shortage_quantity,
                    "shortage_net_weight": str(plan.shortage_net_weight),
                })
                self._book_waste(
                    record.id, day, chicken_type_id,
                    plan.shortage_quantity, plan.shortage_net_weight, actor_id,
                )

            logger.info("distribution_created", extra={
                "distribution_id": str(record.id),
                "customer_id": str(customer_id),
                "source_loading_id": str(plan.source_loading_id) if plan.source_loading_id else None,
                "quantity": values.quantity,
                "net_weight": str(values.net_weight),
                "total_amount": str(values.total_amount),
                "allocated_quantity": plan.allocated_quantity,
            })
            dto = record.to_dto()
        return dto

    # =========================================================================
    # Update
    # =========================================================================

    def update_distribution(
        self,
        distribution_id: UUID,
        actor_id: UUID,
        *,
        quantity: int | None = None,
        gross_weight: Decimal | None = None,
        price: Decimal | None = None,
        distribution_date: date | None = None,
    ) -> Distribution:
        """
        Merge the provided fields, recompute, and apply the deltas.

        Decreases release shortage before allocation; increases draw only
        from the source batch.  A date change moves the booked shortage to
        the new day.

        Raises:
            DistributionNotFoundError: If the record does not exist.
            InsufficientInventoryError: If the source batch cannot cover an
                increase.
        """
        with owned_transaction(self._session, "Distribution", distribution_id):
            record = self._lock_record(distribution_id)

            values = compute_distribution_values(
                quantity if quantity is not None else record.quantity,
                gross_weight if gross_weight is not None else record.gross_weight,
                price if price is not None else record.price,
                self._packaging_weight,
            )
            new_day = to_date(distribution_date, "distribution_date") if distribution_date is not None else record.distribution_date

            source = self._lock_batch(record.source_loading_id) if record.source_loading_id else None
            if source is not None and distribution_date is not None and new_day < source.loading_date:
                raise InvalidInputError(
                    "distribution_date",
                    f"{new_day} is before the source loading date {source.loading_date}",
                )

            new_alloc_q, new_short_q = resize_portions(
                measure="quantity",
                loading_id=record.source_loading_id,
                old_requested=record.quantity,
                new_requested=values.quantity,
                allocated=record.allocated_quantity,
                shortage=record.shortage_quantity,
                headroom=source.remaining_quantity if source is not None else 0,
            )
            new_alloc_w, new_short_w = resize_portions(
                measure="net_weight",
                loading_id=record.source_loading_id,
                old_requested=record.net_weight,
                new_requested=values.net_weight,
                allocated=record.allocated_net_weight,
                shortage=record.shortage_net_weight,
                headroom=source.remaining_net_weight if source is not None else ZERO,
            )

            if source is not None:
                _consume(
                    source,
                    new_alloc_q - record.allocated_quantity,
                    new_alloc_w - record.allocated_net_weight,
                    actor_id,
                )

            amount_delta = values.total_amount - record.total_amount
            old_day = record.distribution_date
            old_short_q, old_short_w = record.shortage_quantity, record.shortage_net_weight

            record.quantity = values.quantity
            record.gross_weight = values.gross_weight
            record.empty_weight = values.empty_weight
            record.net_weight = values.net_weight
            record.price = values.unit_price
            record.total_amount = values.total_amount
            record.distribution_date = new_day
            record.allocated_quantity = new_alloc_q
            record.allocated_net_weight = new_alloc_w
            record.shortage_quantity = new_short_q
            record.shortage_net_weight = new_short_w
            record.updated_by_id = actor_id
            self._session.flush()

            if amount_delta != 0:
                self._debts.apply_delta(
                    record.customer_id, amount_delta, actor_id, reason="distribution_updated",
                )

            self._move_waste(
                record.id, record.chicken_type_id,
                old_day, old_short_q, old_short_w,
                new_day, new_short_q, new_short_w,
                actor_id,
            )

            logger.info("distribution_updated", extra={
                "distribution_id": str(distribution_id),
                "quantity": values.quantity,
                "net_weight": str(values.net_weight),
                "amount_delta": str(amount_delta),
                "allocated_quantity": new_alloc_q,
                "shortage_quantity": new_short_q,
            })
            dto = record.to_dto()
        return dto

    # =========================================================================
    # Delete
    # =========================================================================

    def delete_distribution(self, distribution_id: UUID, actor_id: UUID) -> Distribution:
        """
        Fully reverse a distribution in one transaction.

        Restores the source batch counters by the allocated portion (floored
        at zero), takes the amount off the customer's debt (floored at zero),
        deletes the record, and releases any booked shortage.
        """
        with owned_transaction(self._session, "Distribution", distribution_id):
            record = self._lock_record(distribution_id)
            dto = record.to_dto()

            if record.source_loading_id is not None:
                source = self._session.execute(
                    _batch_for_update(record.source_loading_id)
                ).scalar_one_or_none()
                if source is not None:
                    _consume(source, -record.allocated_quantity, -record.allocated_net_weight, actor_id)
                else:
                    logger.warning("distribution_source_missing", extra={
                        "distribution_id": str(distribution_id),
                        "source_loading_id": str(record.source_loading_id),
                    })

            self._debts.apply_delta(
                record.customer_id, -record.total_amount, actor_id, reason="distribution_deleted",
            )
            self._session.delete(record)
            self._session.flush()

            if dto.has_shortage:
                self._release_waste(
                    dto.id, dto.distribution_date, dto.chicken_type_id,
                    dto.shortage_quantity, dto.shortage_net_weight, actor_id,
                )

            logger.info("distribution_deleted", extra={
                "distribution_id": str(distribution_id),
                "restored_quantity": dto.allocated_quantity,
                "restored_net_weight": str(dto.allocated_net_weight),
                "debt_reversed": str(dto.total_amount),
            })
        return dto

    # =========================================================================
    # Reads
    # =========================================================================

    def get_distribution(self, distribution_id: UUID) -> Distribution:
        record = self._session.get(DistributionModel, distribution_id)
        if record is None:
            raise DistributionNotFoundError(str(distribution_id))
        return record.to_dto()

    def list_distributions(
        self,
        customer_id: UUID | None = None,
        chicken_type_id: UUID | None = None,
        window: DateRange | None = None,
    ) -> list[Distribution]:
        """Distributions matching the filters, newest first."""
        stmt = select(DistributionModel)
        if customer_id is not None:
            stmt = stmt.where(DistributionModel.customer_id == customer_id)
        if chicken_type_id is not None:
            stmt = stmt.where(DistributionModel.chicken_type_id == chicken_type_id)
        if window is not None and window.start is not None:
            stmt = stmt.where(DistributionModel.distribution_date >= window.start)
        if window is not None and window.end is not None:
            stmt = stmt.where(DistributionModel.distribution_date <= window.end)
        stmt = stmt.order_by(
            DistributionModel.distribution_date.desc(),
            DistributionModel.recorded_at.desc(),
        )
        return [row.to_dto() for row in self._session.execute(stmt).scalars()]

    def daily_net_weight(self, day: date) -> DailyNetWeight:
        target = to_date(day, "day")
        total, count = self._session.execute(
            select(
                func.coalesce(func.sum(DistributionModel.net_weight), ZERO),
                func.count(DistributionModel.id),
            ).where(DistributionModel.distribution_date == target)
        ).one()
        return DailyNetWeight(
            distribution_date=target,
            total_net_weight=Decimal(str(total or 0)),
            distribution_count=int(count or 0),
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _day(self, value) -> date:
        if value is None:
            return self._calendar.today(self._clock)
        return to_date(value, "distribution_date")

    def _eligible_batches(self, chicken_type_id: UUID, day: date) -> list[LoadingBatchModel]:
        """Batches of the type loaded on or before ``day`` with stock left, locked."""
        stmt = (
            select(LoadingBatchModel)
            .where(
                LoadingBatchModel.chicken_type_id == chicken_type_id,
                LoadingBatchModel.loading_date <= day,
                LoadingBatchModel.remaining_quantity > 0,
            )
            .order_by(LoadingBatchModel.loading_date, LoadingBatchModel.recorded_at)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self._session.execute(stmt).scalars())

    def _lock_record(self, distribution_id: UUID) -> DistributionModel:
        stmt = (
            select(DistributionModel)
            .where(DistributionModel.id == distribution_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        record = self._session.execute(stmt).scalar_one_or_none()
        if record is None:
            raise DistributionNotFoundError(str(distribution_id))
        return record

    def _lock_batch(self, loading_id: UUID) -> LoadingBatchModel:
        batch = self._session.execute(_batch_for_update(loading_id)).scalar_one_or_none()
        if batch is None:
            raise LoadingNotFoundError(str(loading_id))
        return batch

    def _book_waste(self, distribution_id, day, chicken_type_id, quantity, net_weight, actor_id) -> None:
        try:
            with self._session.begin_nested():
                self._waste.record_over_distribution(day, chicken_type_id, quantity, net_weight, actor_id)
        except Exception:
            logger.warning("waste_record_failed", extra={
                "distribution_id": str(distribution_id),
                "waste_date": day,
                "chicken_type_id": str(chicken_type_id),
                "quantity": quantity,
                "net_weight": str(net_weight),
            }, exc_info=True)

    def _release_waste(self, distribution_id, day, chicken_type_id, quantity, net_weight, actor_id) -> None:
        try:
            with self._session.begin_nested():
                self._waste.release_over_distribution(day, chicken_type_id, quantity, net_weight, actor_id)
        except Exception:
            logger.warning("waste_release_failed", extra={
                "distribution_id": str(distribution_id),
                "waste_date": day,
                "chicken_type_id": str(chicken_type_id),
                "quantity": quantity,
                "net_weight": str(net_weight),
            }, exc_info=True)

    def _move_waste(
        self,
        distribution_id,
        chicken_type_id,
        old_day, old_quantity, old_weight,
        new_day, new_quantity, new_weight,
        actor_id,
    ) -> None:
        """Bring the booked shortage in line with the record's new shortage."""
        if old_day == new_day:
            dq = new_quantity - old_quantity
            dw = new_weight - old_weight
            if dq < 0 or dw < 0:
                self._release_waste(
                    distribution_id, old_day, chicken_type_id,
                    max(0, -dq), max(ZERO, -dw), actor_id,
                )
            if dq > 0 or dw > 0:
                self._book_waste(
                    distribution_id, new_day, chicken_type_id,
                    max(0, dq), max(ZERO, dw), actor_id,
                )
            return
        if old_quantity > 0 or old_weight > 0:
            self._release_waste(distribution_id, old_day, chicken_type_id, old_quantity, old_weight, actor_id)
        if new_quantity > 0 or new_weight > 0:
            self._book_waste(distribution_id, new_day, chicken_type_id, new_quantity, new_weight, actor_id)


def _batch_for_update(loading_id: UUID):
    return (
        select(LoadingBatchModel)
        .where(LoadingBatchModel.id == loading_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def _availability(batch: LoadingBatchModel) -> BatchAvailability:
    return BatchAvailability(
        loading_id=batch.id,
        loading_date=batch.loading_date,
        recorded_at=batch.recorded_at,
        remaining_quantity=batch.remaining_quantity,
        remaining_net_weight=batch.remaining_net_weight,
    )


def _consume(batch: LoadingBatchModel, quantity: int, net_weight: Decimal, actor_id: UUID) -> None:
    """Move a batch's distributed counters by a signed amount, floored at zero."""
    if quantity == 0 and net_weight == 0:
        return
    batch.distributed_quantity = max(0, batch.distributed_quantity + quantity)
    batch.distributed_net_weight = max(ZERO, batch.distributed_net_weight + net_weight)
    batch.refresh_remaining()
    batch.updated_by_id = actor_id
