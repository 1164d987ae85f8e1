"""
Reporting Module Service (``poultry_modules.reporting.service``).

Responsibility
--------------
Daily stock snapshots and profit reports.

- ``get_stock_snapshot`` is read-only: it recomputes both weight sums for
  the day and applies the persisted adjustment (zero if none).
- ``upsert_stock_snapshot`` recomputes the sums fresh and stores the
  operator's adjustment, replacing any previous one.  It owns its
  transaction boundary.
- ``get_daily_profit`` / ``get_total_profit_history`` apply the profit
  formula to a single day, a range, or all time.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from poultry_kernel.domain.calendar import DateRange, week_bounds
from poultry_kernel.domain.values import ZERO, optional_text, to_date, to_decimal
from poultry_kernel.logging_config import get_logger
from poultry_kernel.services.base import owned_transaction
from poultry_modules.reporting.helpers import profit, stock_result
from poultry_modules.reporting.models import CustomerStatement, ProfitReport, StockSnapshot
from poultry_modules.reporting.orm import DailyStockModel
from poultry_modules.reporting.selectors import ReportingSelector

logger = get_logger("modules.reporting.service")


class ReportingService:

    def __init__(self, session: Session):
        self._session = session
        self._selector = ReportingSelector(session)

    # =========================================================================
    # Stock snapshots
    # =========================================================================

    def get_stock_snapshot(self, stock_date: date) -> StockSnapshot:
        day = to_date(stock_date, "stock_date")
        window = DateRange.single_day(day)
        loaded = self._selector.net_loading_weight(window)
        distributed = self._selector.net_distribution_weight(window)

        stored = self._find(day)
        adjustment = stored.admin_adjustment if stored is not None else ZERO
        return StockSnapshot(
            stock_date=day,
            net_loading_weight=loaded,
            net_distribution_weight=distributed,
            admin_adjustment=adjustment,
            result=stock_result(loaded, distributed, adjustment),
            notes=stored.notes if stored is not None else None,
            persisted=stored is not None,
        )

    def upsert_stock_snapshot(
        self,
        stock_date: date,
        admin_adjustment: Decimal,
        actor_id: UUID,
        notes: str | None = None,
    ) -> StockSnapshot:
        day = to_date(stock_date, "stock_date")
        adjustment = to_decimal(ZERO if admin_adjustment is None else admin_adjustment, "admin_adjustment")
        clean_notes = optional_text(notes, "notes", 500)

        with owned_transaction(self._session, "DailyStock"):
            window = DateRange.single_day(day)
            loaded = self._selector.net_loading_weight(window)
            distributed = self._selector.net_distribution_weight(window)

            row = self._find(day, for_update=True)
            if row is None:
                row = DailyStockModel(stock_date=day, created_by_id=actor_id)
                self._session.add(row)
            row.net_loading_weight = loaded
            row.net_distribution_weight = distributed
            row.admin_adjustment = adjustment
            row.result = stock_result(loaded, distributed, adjustment)
            row.notes = clean_notes
            row.updated_by_id = actor_id
            self._session.flush()

            logger.info("stock_snapshot_upserted", extra={
                "stock_date": day,
                "net_loading_weight": str(loaded),
                "net_distribution_weight": str(distributed),
                "admin_adjustment": str(adjustment),
                "result": str(row.result),
            })
            dto = row.to_dto()
        return dto

    def list_week_snapshots(self, reference_day: date) -> list[StockSnapshot]:
        """Persisted snapshots of the Sunday-started week containing the day."""
        first, last = week_bounds(to_date(reference_day, "reference_day"))
        rows = self._session.execute(
            select(DailyStockModel)
            .where(DailyStockModel.stock_date >= first, DailyStockModel.stock_date <= last)
            .order_by(DailyStockModel.stock_date)
        ).scalars()
        return [row.to_dto() for row in rows]

    # =========================================================================
    # Profit
    # =========================================================================

    def get_daily_profit(self, day: date) -> ProfitReport:
        return self._profit(DateRange.single_day(to_date(day, "day")))

    def get_total_profit_history(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> ProfitReport:
        """Profit over [start, end]; either bound may be open, both open is all time."""
        window = DateRange(
            start=to_date(start, "start") if start is not None else None,
            end=to_date(end, "end") if end is not None else None,
        )
        return self._profit(window)

    def customer_statement(self, customer_id: UUID) -> CustomerStatement:
        return self._selector.customer_statement(customer_id)

    # =========================================================================
    # Internals
    # =========================================================================

    def _profit(self, window: DateRange) -> ProfitReport:
        distributions = self._selector.distributions_total(window)
        loadings = self._selector.loadings_total(window)
        expenses = self._selector.expenses_total(window)
        discounts = self._selector.discounts_total(window)
        waste = self._selector.waste_cost(window)
        return ProfitReport(
            start=window.start,
            end=window.end,
            distributions_total=distributions,
            loadings_total=loadings,
            expenses_total=expenses,
            discounts_total=discounts,
            waste_cost=waste,
            profit=profit(distributions, loadings, expenses, discounts, waste),
        )

    def _find(self, day: date, for_update: bool = False) -> DailyStockModel | None:
        stmt = select(DailyStockModel).where(DailyStockModel.stock_date == day)
        if for_update:
            stmt = stmt.with_for_update()
        return self._session.execute(stmt).scalar_one_or_none()
