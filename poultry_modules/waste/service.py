"""
Waste Module Service (``poultry_modules.waste.service``).

Responsibility
--------------
Operator-facing side of the waste ledger: manual upsert of a day's waste
for one chicken type, and the per-day and windowed waste reports.
Over-distribution itself is booked by the distribution ledger through
``WasteLedger``.

Invariants
----------
- ``upsert_waste`` owns its transaction: commit on success, rollback and
  re-raise on failure.
- Upserting replaces the four inputs and the notes; it never adds.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from poultry_kernel.domain.calendar import DateRange
from poultry_kernel.domain.values import ZERO, optional_text, require_count, require_non_negative, to_date
from poultry_kernel.logging_config import get_logger
from poultry_kernel.models.chicken_type import ChickenType
from poultry_kernel.services.base import owned_transaction
from poultry_kernel.services.directory_service import DirectoryService
from poultry_modules.waste.ledger import WasteLedger
from poultry_modules.waste.models import (
    ChickenTypeWaste,
    DailyWaste,
    WasteDayEntry,
    WasteDayReport,
    WasteSummary,
)
from poultry_modules.waste.orm import DailyWasteModel

logger = get_logger("modules.waste.service")


class WasteService:
    """Manual waste entries and waste reports."""

    def __init__(self, session: Session):
        self._session = session
        self._ledger = WasteLedger(session)
        self._directory = DirectoryService(session)

    def upsert_waste(
        self,
        waste_date: date,
        chicken_type_id: UUID,
        actor_id: UUID,
        over_distribution_quantity: int = 0,
        over_distribution_net_weight: Decimal = ZERO,
        other_waste_quantity: int = 0,
        other_waste_net_weight: Decimal = ZERO,
        notes: str | None = None,
    ) -> DailyWaste:
        """
        Create or replace the waste row for (day, chicken type).

        Raises:
            ChickenTypeNotFoundError: If the chicken type does not exist.
            InvalidInputError: On negative or non-numeric values.
        """
        day = to_date(waste_date, "waste_date")
        over_q = require_count(over_distribution_quantity, "over_distribution_quantity", minimum=0)
        over_w = require_non_negative(over_distribution_net_weight, "over_distribution_net_weight")
        other_q = require_count(other_waste_quantity, "other_waste_quantity", minimum=0)
        other_w = require_non_negative(other_waste_net_weight, "other_waste_net_weight")
        clean_notes = optional_text(notes, "notes", 500)

        with owned_transaction(self._session, "DailyWaste"):
            self._directory.require_chicken_type(chicken_type_id)
            row = self._ledger.replace(
                day, chicken_type_id, over_q, over_w, other_q, other_w, clean_notes, actor_id,
            )
            logger.info("waste_upserted", extra={
                "waste_date": day,
                "chicken_type_id": str(chicken_type_id),
                "total_waste_quantity": row.total_waste_quantity,
                "total_waste_net_weight": str(row.total_waste_net_weight),
            })
            dto = row.to_dto()
        return dto

    def get_waste(self, waste_date: date, chicken_type_id: UUID) -> DailyWaste | None:
        row = self._ledger.find(to_date(waste_date, "waste_date"), chicken_type_id)
        return row.to_dto() if row else None

    def waste_by_date(self, waste_date: date) -> WasteDayReport:
        day = to_date(waste_date, "waste_date")
        rows = self._session.execute(
            select(DailyWasteModel)
            .where(DailyWasteModel.waste_date == day)
            .order_by(DailyWasteModel.created_at)
        ).scalars().all()
        entries = tuple(row.to_dto() for row in rows)
        return WasteDayReport(
            waste_date=day,
            entries=entries,
            total_quantity=sum(e.total_waste_quantity for e in entries),
            total_net_weight=sum((e.total_waste_net_weight for e in entries), ZERO),
        )

    def waste_summary(self, window: DateRange | None = None) -> WasteSummary:
        stmt = select(DailyWasteModel, ChickenType.name).join(
            ChickenType, ChickenType.id == DailyWasteModel.chicken_type_id
        )
        if window is not None and window.start is not None:
            stmt = stmt.where(DailyWasteModel.waste_date >= window.start)
        if window is not None and window.end is not None:
            stmt = stmt.where(DailyWasteModel.waste_date <= window.end)
        stmt = stmt.order_by(DailyWasteModel.waste_date)

        per_type: dict[UUID, list[WasteDayEntry]] = defaultdict(list)
        type_names: dict[UUID, str] = {}
        per_day_qty: dict[date, int] = defaultdict(int)
        per_day_weight: dict[date, Decimal] = defaultdict(lambda: ZERO)

        for row, type_name in self._session.execute(stmt):
            type_names[row.chicken_type_id] = type_name
            per_type[row.chicken_type_id].append(
                WasteDayEntry(row.waste_date, row.total_waste_quantity, row.total_waste_net_weight)
            )
            per_day_qty[row.waste_date] += row.total_waste_quantity
            per_day_weight[row.waste_date] += row.total_waste_net_weight

        by_type = tuple(
            ChickenTypeWaste(
                chicken_type_id=type_id,
                chicken_type_name=type_names[type_id],
                total_quantity=sum(e.quantity for e in entries),
                total_net_weight=sum((e.net_weight for e in entries), ZERO),
                days=tuple(entries),
            )
            for type_id, entries in sorted(per_type.items(), key=lambda kv: type_names[kv[0]])
        )
        by_day = tuple(
            WasteDayEntry(day, per_day_qty[day], per_day_weight[day])
            for day in sorted(per_day_qty, reverse=True)
        )
        return WasteSummary(
            by_chicken_type=by_type,
            by_day=by_day,
            total_quantity=sum(e.quantity for e in by_day),
            total_net_weight=sum((e.net_weight for e in by_day), ZERO),
        )
