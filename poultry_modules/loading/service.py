"""
Loading Module Service (``poultry_modules.loading.service``).

Responsibility
--------------
Owns loading batches: create, partial update with derived fields and
counters recomputed, delete with chicken-type stock restored, and the
read-side listings and statistics.

Architecture
------------
Layer: **Modules** -- stateful orchestration wrapper.

1. Calls the pure calculator (``compute_loading_values``) for derived fields.
2. Calls ``DirectoryService`` for existence checks and the signed
   chicken-type stock counter.
3. Persists ``LoadingBatchModel`` rows.

Invariants
----------
- Each public write method owns its transaction boundary: commit on
  success, rollback and re-raise on failure.
- A batch is never shrunk below what distributions already drew from it
  (``InsufficientInventoryError``).
- A batch referenced by any distribution cannot be deleted or moved to
  another chicken type (``LoadingInUseError``).

Failure Modes
-------------
- ``ChickenTypeNotFoundError`` / ``SupplierNotFoundError`` /
  ``LoadingNotFoundError`` for missing references.
- ``InvalidInputError`` for bad numbers.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from poultry_kernel.domain.calendar import BusinessCalendar, DateRange
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.values import ZERO, optional_text, to_date
from poultry_kernel.domain.weights import PACKAGING_WEIGHT_PER_UNIT, compute_loading_values
from poultry_kernel.exceptions import (
    InsufficientInventoryError,
    InvalidInputError,
    LoadingInUseError,
    LoadingNotFoundError,
)
from poultry_kernel.logging_config import get_logger
from poultry_kernel.services.base import owned_transaction
from poultry_kernel.services.directory_service import DirectoryService
from poultry_modules.distribution.orm import DistributionModel
from poultry_modules.loading.models import LoadingBatch, LoadingStatistics, QualityGrade
from poultry_modules.loading.orm import LoadingBatchModel

logger = get_logger("modules.loading.service")


def _quality_grade(value) -> str:
    try:
        return QualityGrade(value).value
    except ValueError as exc:
        raise InvalidInputError("quality_grade", f"must be one of A, B, C, got {value!r}") from exc


class LoadingService:
    """
    Loading ledger.

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

    # =========================================================================
    # Writes
    # =========================================================================

    def create_loading(
        self,
        chicken_type_id: UUID,
        supplier_id: UUID,
        quantity: int,
        loading_price: Decimal,
        actor_id: UUID,
        net_weight: Decimal | None = None,
        gross_weight: Decimal | None = None,
        loading_date: date | None = None,
        quality_grade: str = QualityGrade.A.value,
        notes: str | None = None,
        batch_number: str | None = None,
        vehicle_number: str | None = None,
        driver_name: str | None = None,
    ) -> LoadingBatch:
        """
        Record an intake.

        Postconditions:
            - distributed counters are zero; remaining equals the batch.
            - The chicken type's stock counter is decremented by quantity.
        """
        values = compute_loading_values(
            quantity,
            loading_price,
            net_weight=net_weight,
            gross_weight=gross_weight,
            packaging_weight_per_unit=self._packaging_weight,
        )
        day = to_date(loading_date, "loading_date") if loading_date is not None else self._calendar.today(self._clock)

        with owned_transaction(self._session, "LoadingBatch"):
            self._directory.require_chicken_type(chicken_type_id)
            self._directory.require_supplier(supplier_id)

            batch = LoadingBatchModel(
                chicken_type_id=chicken_type_id,
                supplier_id=supplier_id,
                loading_date=day,
                quantity=values.quantity,
                gross_weight=values.gross_weight,
                empty_weight=values.empty_weight,
                net_weight=values.net_weight,
                loading_price=values.unit_price,
                total_loading=values.total_amount,
                distributed_quantity=0,
                distributed_net_weight=ZERO,
                quality_grade=_quality_grade(quality_grade),
                notes=optional_text(notes, "notes", 500),
                batch_number=optional_text(batch_number, "batch_number", 50),
                vehicle_number=optional_text(vehicle_number, "vehicle_number", 50),
                driver_name=optional_text(driver_name, "driver_name", 100),
                recorded_at=self._clock.now(),
                created_by_id=actor_id,
            )
            batch.refresh_remaining()
            self._session.add(batch)
            self._session.flush()

            self._directory.adjust_chicken_type_stock(chicken_type_id, -values.quantity, actor_id)

            logger.info("loading_created", extra={
                "loading_id": str(batch.id),
                "chicken_type_id": str(chicken_type_id),
                "quantity": values.quantity,
                "net_weight": str(values.net_weight),
                "total_loading": str(values.total_amount),
            })
            dto = batch.to_dto()
        return dto

    def update_loading(
        self,
        loading_id: UUID,
        actor_id: UUID,
        *,
        chicken_type_id: UUID | None = None,
        supplier_id: UUID | None = None,
        quantity: int | None = None,
        net_weight: Decimal | None = None,
        gross_weight: Decimal | None = None,
        loading_price: Decimal | None = None,
        loading_date: date | None = None,
        quality_grade: str | None = None,
        notes: str | None = None,
        batch_number: str | None = None,
        vehicle_number: str | None = None,
        driver_name: str | None = None,
    ) -> LoadingBatch:
        """
        Merge the provided fields over the batch and recompute.

        Weight mode follows the input: a new gross weight derives net from
        it, a new net weight is taken as entered, and with neither the batch
        keeps whichever mode it was created in (re-deriving net from the
        stored gross weight if the quantity changed).

        Raises:
            LoadingNotFoundError, ChickenTypeNotFoundError, SupplierNotFoundError
            InsufficientInventoryError: shrinking below what was distributed.
            LoadingInUseError: changing the chicken type of a batch in use.
            InvalidInputError: moving the loading date past a distribution
                that draws from the batch.
        """
        if net_weight is not None and gross_weight is not None:
            raise InvalidInputError("net_weight", "provide at most one of net_weight or gross_weight")

        with owned_transaction(self._session, "LoadingBatch", loading_id):
            batch = self._lock(loading_id)
            old_type_id = batch.chicken_type_id
            old_quantity = batch.quantity

            new_type_id = chicken_type_id or old_type_id
            if new_type_id != old_type_id:
                self._directory.require_chicken_type(new_type_id)
                count = self._distribution_count(loading_id)
                if count or batch.distributed_quantity > 0:
                    raise LoadingInUseError(str(loading_id), batch.distributed_quantity, count)
            new_loading_date = to_date(loading_date, "loading_date") if loading_date is not None else None
            if new_loading_date is not None:
                earliest = self._earliest_distribution_date(loading_id)
                if earliest is not None and new_loading_date > earliest:
                    raise InvalidInputError(
                        "loading_date",
                        f"{new_loading_date} is after distribution date {earliest} drawing from this batch",
                    )
            if supplier_id is not None:
                self._directory.require_supplier(supplier_id)
                batch.supplier_id = supplier_id

            effective_quantity = quantity if quantity is not None else batch.quantity
            effective_price = loading_price if loading_price is not None else batch.loading_price
            if gross_weight is not None:
                weights = {"gross_weight": gross_weight}
            elif net_weight is not None:
                weights = {"net_weight": net_weight}
            elif batch.gross_weight is not None:
                weights = {"gross_weight": batch.gross_weight}
            else:
                weights = {"net_weight": batch.net_weight}
            values = compute_loading_values(
                effective_quantity,
                effective_price,
                packaging_weight_per_unit=self._packaging_weight,
                **weights,
            )

            if values.quantity < batch.distributed_quantity:
                raise InsufficientInventoryError(
                    str(loading_id), "quantity",
                    str(batch.distributed_quantity), str(values.quantity),
                )
            if values.net_weight < batch.distributed_net_weight:
                raise InsufficientInventoryError(
                    str(loading_id), "net_weight",
                    str(batch.distributed_net_weight), str(values.net_weight),
                )

            batch.chicken_type_id = new_type_id
            batch.quantity = values.quantity
            batch.gross_weight = values.gross_weight
            batch.empty_weight = values.empty_weight
            batch.net_weight = values.net_weight
            batch.loading_price = values.unit_price
            batch.total_loading = values.total_amount
            batch.refresh_remaining()
            if new_loading_date is not None:
                batch.loading_date = new_loading_date
            if quality_grade is not None:
                batch.quality_grade = _quality_grade(quality_grade)
            if notes is not None:
                batch.notes = optional_text(notes, "notes", 500)
            if batch_number is not None:
                batch.batch_number = optional_text(batch_number, "batch_number", 50)
            if vehicle_number is not None:
                batch.vehicle_number = optional_text(vehicle_number, "vehicle_number", 50)
            if driver_name is not None:
                batch.driver_name = optional_text(driver_name, "driver_name", 100)
            batch.updated_by_id = actor_id

            # Stock bookkeeping: migrate between types, or apply the delta
            if new_type_id != old_type_id:
                self._directory.adjust_chicken_type_stock(old_type_id, old_quantity, actor_id)
                self._directory.adjust_chicken_type_stock(new_type_id, -values.quantity, actor_id)
            else:
                self._directory.adjust_chicken_type_stock(
                    old_type_id, old_quantity - values.quantity, actor_id,
                )
            self._session.flush()

            logger.info("loading_updated", extra={
                "loading_id": str(loading_id),
                "chicken_type_changed": new_type_id != old_type_id,
                "quantity": values.quantity,
                "net_weight": str(values.net_weight),
            })
            dto = batch.to_dto()
        return dto

    def delete_loading(self, loading_id: UUID, actor_id: UUID) -> LoadingBatch:
        """
        Delete a batch and restore its chicken type's stock counter.

        Raises:
            LoadingNotFoundError: If the batch does not exist.
            LoadingInUseError: While any distribution still references it.
        """
        with owned_transaction(self._session, "LoadingBatch", loading_id):
            batch = self._lock(loading_id)
            count = self._distribution_count(loading_id)
            if count or batch.distributed_quantity > 0:
                raise LoadingInUseError(str(loading_id), batch.distributed_quantity, count)

            dto = batch.to_dto()
            self._directory.adjust_chicken_type_stock(batch.chicken_type_id, batch.quantity, actor_id)
            self._session.delete(batch)
            self._session.flush()

            logger.info("loading_deleted", extra={
                "loading_id": str(loading_id),
                "restored_quantity": dto.quantity,
            })
        return dto

    # =========================================================================
    # Reads
    # =========================================================================

    def get_loading(self, loading_id: UUID) -> LoadingBatch:
        batch = self._session.get(LoadingBatchModel, loading_id)
        if batch is None:
            raise LoadingNotFoundError(str(loading_id))
        return batch.to_dto()

    def list_loadings(
        self,
        chicken_type_id: UUID | None = None,
        supplier_id: UUID | None = None,
        window: DateRange | None = None,
    ) -> list[LoadingBatch]:
        """Loadings matching the filters, newest first."""
        stmt = select(LoadingBatchModel)
        if chicken_type_id is not None:
            stmt = stmt.where(LoadingBatchModel.chicken_type_id == chicken_type_id)
        if supplier_id is not None:
            stmt = stmt.where(LoadingBatchModel.supplier_id == supplier_id)
        stmt = _within(stmt, window)
        stmt = stmt.order_by(
            LoadingBatchModel.loading_date.desc(),
            LoadingBatchModel.recorded_at.desc(),
        )
        return [row.to_dto() for row in self._session.execute(stmt).scalars()]

    def loading_statistics(self, window: DateRange | None = None) -> LoadingStatistics:
        stmt = select(
            func.count(LoadingBatchModel.id),
            func.coalesce(func.sum(LoadingBatchModel.quantity), 0),
            func.coalesce(func.sum(LoadingBatchModel.net_weight), ZERO),
            func.coalesce(func.sum(LoadingBatchModel.total_loading), ZERO),
            func.coalesce(func.sum(LoadingBatchModel.loading_price), ZERO),
        )
        stmt = _within(stmt, window)
        count, quantity, weight, cost, price_sum = self._session.execute(stmt).one()
        count = int(count or 0)
        return LoadingStatistics(
            loading_count=count,
            total_quantity=int(quantity or 0),
            total_net_weight=Decimal(str(weight or 0)),
            total_loading_cost=Decimal(str(cost or 0)),
            average_loading_price=(Decimal(str(price_sum)) / count) if count else ZERO,
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _lock(self, loading_id: UUID) -> LoadingBatchModel:
        stmt = (
            select(LoadingBatchModel)
            .where(LoadingBatchModel.id == loading_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        batch = self._session.execute(stmt).scalar_one_or_none()
        if batch is None:
            raise LoadingNotFoundError(str(loading_id))
        return batch

    def _distribution_count(self, loading_id: UUID) -> int:
        stmt = select(func.count(DistributionModel.id)).where(
            DistributionModel.source_loading_id == loading_id
        )
        return int(self._session.execute(stmt).scalar_one())

    def _earliest_distribution_date(self, loading_id: UUID) -> date | None:
        stmt = select(func.min(DistributionModel.distribution_date)).where(
            DistributionModel.source_loading_id == loading_id
        )
        return self._session.execute(stmt).scalar_one()


def _within(stmt, window: DateRange | None):
    if window is None:
        return stmt
    if window.start is not None:
        stmt = stmt.where(LoadingBatchModel.loading_date >= window.start)
    if window.end is not None:
        stmt = stmt.where(LoadingBatchModel.loading_date <= window.end)
    return stmt
