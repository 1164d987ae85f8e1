"""
WasteLedger -- flush-only writer of the daily waste ledger.

Responsibility:
    Adds and releases over-distribution on the (day, chicken type) row and
    applies the operator's manual waste entries.  Used by the distribution
    ledger inside its own transaction and by WasteService, which owns the
    commit for manual entries.

Invariants enforced:
    - Totals are recomputed on every write.
    - Releasing floors the over-distribution counters at zero.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from poultry_kernel.domain.values import ZERO
from poultry_kernel.logging_config import get_logger
from poultry_kernel.services.base import BaseService
from poultry_modules.waste.orm import DailyWasteModel

logger = get_logger("modules.waste.ledger")


class WasteLedger(BaseService[DailyWasteModel]):

    def find(self, waste_date: date, chicken_type_id: UUID, for_update: bool = False) -> DailyWasteModel | None:
        stmt = select(DailyWasteModel).where(
            DailyWasteModel.waste_date == waste_date,
            DailyWasteModel.chicken_type_id == chicken_type_id,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.session.execute(stmt).scalar_one_or_none()

    def _get_or_create(self, waste_date: date, chicken_type_id: UUID, actor_id: UUID) -> DailyWasteModel:
        row = self.find(waste_date, chicken_type_id, for_update=True)
        if row is None:
            row = DailyWasteModel(
                waste_date=waste_date,
                chicken_type_id=chicken_type_id,
                over_distribution_quantity=0,
                over_distribution_net_weight=ZERO,
                other_waste_quantity=0,
                other_waste_net_weight=ZERO,
                created_by_id=actor_id,
            )
            self.session.add(row)
        return row

    def record_over_distribution(
        self,
        waste_date: date,
        chicken_type_id: UUID,
        quantity: int,
        net_weight: Decimal,
        actor_id: UUID,
    ) -> DailyWasteModel:
        """Add a shortage to the day's over-distribution counters."""
        row = self._get_or_create(waste_date, chicken_type_id, actor_id)
        row.over_distribution_quantity += quantity
        row.over_distribution_net_weight += net_weight
        row.recompute_totals()
        row.updated_by_id = actor_id
        self.session.flush()
        logger.info("over_distribution_recorded", extra={
            "waste_date": waste_date,
            "chicken_type_id": str(chicken_type_id),
            "quantity": quantity,
            "net_weight": str(net_weight),
        })
        return row

    def release_over_distribution(
        self,
        waste_date: date,
        chicken_type_id: UUID,
        quantity: int,
        net_weight: Decimal,
        actor_id: UUID,
    ) -> DailyWasteModel | None:
        """Take back a previously booked shortage (floored at zero)."""
        row = self.find(waste_date, chicken_type_id, for_update=True)
        if row is None:
            logger.warning("over_distribution_release_missing_row", extra={
                "waste_date": waste_date,
                "chicken_type_id": str(chicken_type_id),
            })
            return None
        row.over_distribution_quantity = max(0, row.over_distribution_quantity - quantity)
        row.over_distribution_net_weight = max(ZERO, row.over_distribution_net_weight - net_weight)
        row.recompute_totals()
        row.updated_by_id = actor_id
        self.session.flush()
        logger.info("over_distribution_released", extra={
            "waste_date": waste_date,
            "chicken_type_id": str(chicken_type_id),
            "quantity": quantity,
            "net_weight": str(net_weight),
        })
        return row

    def replace(
        self,
        waste_date: date,
        chicken_type_id: UUID,
        over_distribution_quantity: int,
        over_distribution_net_weight: Decimal,
        other_waste_quantity: int,
        other_waste_net_weight: Decimal,
        notes: str | None,
        actor_id: UUID,
    ) -> DailyWasteModel:
        """Overwrite all four inputs and the notes of the day's row."""
        row = self._get_or_create(waste_date, chicken_type_id, actor_id)
        row.over_distribution_quantity = over_distribution_quantity
        row.over_distribution_net_weight = over_distribution_net_weight
        row.other_waste_quantity = other_waste_quantity
        row.other_waste_net_weight = other_waste_net_weight
        row.notes = notes
        row.recompute_totals()
        row.updated_by_id = actor_id
        self.session.flush()
        return row
