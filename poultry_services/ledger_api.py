"""
LedgerAPI -- the caller-facing boundary of the poultry ledger.

Responsibility:
    Accept loose caller values (string ids, numbers, ISO dates, chicken
    type id-or-name), resolve them once into canonical ids, open one unit
    of work per call, run the module service, and hand back a
    ``LedgerResult``.  No exception escapes this class.

Architecture position:
    Services -- composes poultry_modules services over a kernel session.
    Nothing below this layer imports from it.

Invariants enforced:
    - One ``session_scope`` per call; module services own their commit
      inside it, so a failed call leaves nothing behind.
    - LogContext carries correlation_id, actor_id, operation and entity_id
      for every log line a call emits.
    - Typed ledger errors map to stable statuses; anything else is logged
      at ERROR with its traceback and reported as "Internal error" with no
      further detail.

Audit relevance:
    Every call logs ``ledger_call_rejected`` or ``ledger_call_failed``
    on the error paths; the module services log the successful writes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from poultry_config import get_active_config
from poultry_config.schema import PoultryLedgerConfig
from poultry_kernel.db.engine import init_engine_from_url, session_scope
from poultry_kernel.domain.calendar import BusinessCalendar, DateRange
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.references import chicken_type_ref
from poultry_kernel.domain.values import to_date, to_uuid
from poultry_kernel.exceptions import ErrorKind, PoultryLedgerError
from poultry_kernel.logging_config import LogContext, configure_logging, get_logger
from poultry_kernel.selectors.directory_selector import DirectorySelector
from poultry_kernel.services.directory_service import DirectoryService
from poultry_modules.distribution.service import DistributionService
from poultry_modules.expenses.service import ExpenseService
from poultry_modules.loading.service import LoadingService
from poultry_modules.payment.service import PaymentService
from poultry_modules.reporting.service import ReportingService
from poultry_modules.transfers.service import TransferService
from poultry_modules.waste.service import WasteService

logger = get_logger("services.ledger_api")

HTTP_STATUS_BY_KIND: dict[str, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INSUFFICIENT_INVENTORY: 409,
    ErrorKind.INSUFFICIENT_FUNDS: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAVAILABLE: 503,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.INTERNAL: 500,
}

INTERNAL_ERROR_MESSAGE = "Internal error"


@dataclass(frozen=True)
class LedgerResult:
    """Stable result type for external callers.

    status is "ok" or "error".  On error, error_code is the exception's
    machine-readable code and error_kind one of the ErrorKind values.
    """

    status: str
    value: Any = None
    error_code: str | None = None
    error_kind: str | None = None
    message: str | None = None
    http_status: int = 200
    retryable: bool = False

    @classmethod
    def ok(cls, value: Any = None) -> LedgerResult:
        return cls(status="ok", value=value)

    @classmethod
    def from_error(cls, exc: PoultryLedgerError) -> LedgerResult:
        kind = exc.error_kind
        return cls(
            status="error",
            error_code=exc.code,
            error_kind=kind,
            message=str(exc),
            http_status=HTTP_STATUS_BY_KIND.get(kind, 500),
            retryable=exc.retryable,
        )

    @classmethod
    def internal(cls) -> LedgerResult:
        return cls(
            status="error",
            error_code="INTERNAL_ERROR",
            error_kind=ErrorKind.INTERNAL,
            message=INTERNAL_ERROR_MESSAGE,
            http_status=500,
        )

    @property
    def is_success(self) -> bool:
        return self.status == "ok"


def bootstrap(config: PoultryLedgerConfig | None = None) -> PoultryLedgerConfig:
    """Configure logging and the process-wide engine from configuration."""
    config = config or get_active_config()
    configure_logging(level=logging.getLevelNamesMapping()[config.logging.level])
    db = config.database
    init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout_seconds,
        statement_timeout_ms=db.statement_timeout_ms,
    )
    return config


def _window(start, end) -> DateRange:
    return DateRange(
        start=to_date(start, "start") if start is not None else None,
        end=to_date(end, "end") if end is not None else None,
    )


def _optional_uuid(value, field: str) -> UUID | None:
    return to_uuid(value, field) if value is not None else None


class LedgerAPI:
    """
    Entry point for every ledger operation.

    Args:
        clock: Time source for recording timestamps and "today".
        config: Ledger configuration; defaults to ``get_active_config()``.
        session_factory: Overrides the process-wide session factory.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config: PoultryLedgerConfig | None = None,
        session_factory: Callable[[], Session] | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._session_factory = session_factory
        self._calendar = BusinessCalendar(self._config.ledger.utc_offset_minutes)
        self._packaging_weight = self._config.ledger.packaging_weight_per_unit

    # =========================================================================
    # Call plumbing
    # =========================================================================

    def _call(
        self,
        operation: str,
        work: Callable[[Session], Any],
        actor_id=None,
        entity_id=None,
    ) -> LedgerResult:
        with LogContext.bind(
            correlation_id=str(uuid4()),
            actor_id=str(actor_id) if actor_id is not None else None,
            operation=operation,
            entity_id=str(entity_id) if entity_id is not None else None,
        ):
            try:
                with session_scope(operation, self._session_factory) as session:
                    value = work(session)
            except PoultryLedgerError as exc:
                logger.info("ledger_call_rejected", extra={
                    "error_code": exc.code,
                    "error_kind": exc.error_kind,
                    "retryable": exc.retryable,
                })
                return LedgerResult.from_error(exc)
            except Exception:
                logger.error("ledger_call_failed", exc_info=True)
                return LedgerResult.internal()
        return LedgerResult.ok(value)

    def _actor(self, actor_id) -> UUID:
        return to_uuid(actor_id, "actor_id")

    def _chicken_type_id(self, session: Session, value) -> UUID:
        return DirectorySelector(session).resolve_chicken_type(chicken_type_ref(value))

    def _loadings(self, session: Session) -> LoadingService:
        return LoadingService(session, self._clock, self._packaging_weight, self._calendar)

    def _distributions(self, session: Session) -> DistributionService:
        return DistributionService(session, self._clock, self._packaging_weight, self._calendar)

    def _payments(self, session: Session) -> PaymentService:
        return PaymentService(session, self._clock, self._calendar)

    # =========================================================================
    # Directory
    # =========================================================================

    def create_customer(self, name, actor_id, phone=None, address=None) -> LedgerResult:
        return self._call(
            "create_customer",
            lambda s: DirectoryService(s).create_customer(name, self._actor(actor_id), phone, address),
            actor_id,
        )

    def get_customer(self, customer_id) -> LedgerResult:
        return self._call(
            "get_customer",
            lambda s: DirectorySelector(s).get_customer(to_uuid(customer_id, "customer_id")),
            entity_id=customer_id,
        )

    def list_customers(self) -> LedgerResult:
        return self._call("list_customers", lambda s: DirectorySelector(s).list_customers())

    def create_supplier(self, name, actor_id, phone=None, address=None) -> LedgerResult:
        return self._call(
            "create_supplier",
            lambda s: DirectoryService(s).create_supplier(name, self._actor(actor_id), phone, address),
            actor_id,
        )

    def list_suppliers(self) -> LedgerResult:
        return self._call("list_suppliers", lambda s: DirectorySelector(s).list_suppliers())

    def create_employee(self, name, actor_id, role="employee") -> LedgerResult:
        return self._call(
            "create_employee",
            lambda s: DirectoryService(s).create_employee(name, self._actor(actor_id), role),
            actor_id,
        )

    def list_employees(self) -> LedgerResult:
        return self._call("list_employees", lambda s: DirectorySelector(s).list_employees())

    def create_chicken_type(self, name, price, actor_id, stock=0) -> LedgerResult:
        return self._call(
            "create_chicken_type",
            lambda s: DirectoryService(s).create_chicken_type(name, price, self._actor(actor_id), stock),
            actor_id,
        )

    def get_chicken_type(self, chicken_type) -> LedgerResult:
        """Look up a chicken type by id or by name."""
        def work(s):
            return DirectorySelector(s).get_chicken_type(self._chicken_type_id(s, chicken_type))
        return self._call("get_chicken_type", work, entity_id=chicken_type)

    def list_chicken_types(self) -> LedgerResult:
        return self._call("list_chicken_types", lambda s: DirectorySelector(s).list_chicken_types())

    def update_chicken_type_price(self, chicken_type, price, actor_id) -> LedgerResult:
        def work(s):
            return DirectoryService(s).update_chicken_type_price(
                self._chicken_type_id(s, chicken_type), price, self._actor(actor_id),
            )
        return self._call("update_chicken_type_price", work, actor_id, chicken_type)

    # =========================================================================
    # Loadings
    # =========================================================================

    def create_loading(
        self,
        chicken_type,
        supplier_id,
        quantity,
        loading_price,
        actor_id,
        net_weight=None,
        gross_weight=None,
        loading_date=None,
        **extras,
    ) -> LedgerResult:
        """
        Record a loading batch.

        ``extras`` are the optional descriptive fields: quality_grade,
        notes, batch_number, vehicle_number, driver_name.
        """
        def work(s):
            return self._loadings(s).create_loading(
                chicken_type_id=self._chicken_type_id(s, chicken_type),
                supplier_id=to_uuid(supplier_id, "supplier_id"),
                quantity=quantity,
                loading_price=loading_price,
                actor_id=self._actor(actor_id),
                net_weight=net_weight,
                gross_weight=gross_weight,
                loading_date=loading_date,
                **extras,
            )
        return self._call("create_loading", work, actor_id)

    def get_loading(self, loading_id) -> LedgerResult:
        return self._call(
            "get_loading",
            lambda s: self._loadings(s).get_loading(to_uuid(loading_id, "loading_id")),
            entity_id=loading_id,
        )

    def update_loading(self, loading_id, actor_id, **changes) -> LedgerResult:
        """Partial update; ``chicken_type`` and ``supplier_id`` are resolved here."""
        def work(s):
            fields = dict(changes)
            if fields.get("chicken_type") is not None:
                fields["chicken_type_id"] = self._chicken_type_id(s, fields.pop("chicken_type"))
            else:
                fields.pop("chicken_type", None)
            if fields.get("supplier_id") is not None:
                fields["supplier_id"] = to_uuid(fields["supplier_id"], "supplier_id")
            return self._loadings(s).update_loading(
                to_uuid(loading_id, "loading_id"), self._actor(actor_id), **fields,
            )
        return self._call("update_loading", work, actor_id, loading_id)

    def delete_loading(self, loading_id, actor_id) -> LedgerResult:
        return self._call(
            "delete_loading",
            lambda s: self._loadings(s).delete_loading(to_uuid(loading_id, "loading_id"), self._actor(actor_id)),
            actor_id,
            loading_id,
        )

    def list_loadings(self, chicken_type=None, supplier_id=None, start=None, end=None) -> LedgerResult:
        def work(s):
            return self._loadings(s).list_loadings(
                chicken_type_id=self._chicken_type_id(s, chicken_type) if chicken_type is not None else None,
                supplier_id=_optional_uuid(supplier_id, "supplier_id"),
                window=_window(start, end),
            )
        return self._call("list_loadings", work)

    def loading_statistics(self, start=None, end=None) -> LedgerResult:
        return self._call(
            "loading_statistics",
            lambda s: self._loadings(s).loading_statistics(_window(start, end)),
        )

    # =========================================================================
    # Distributions
    # =========================================================================

    def create_distribution(
        self,
        customer_id,
        chicken_type,
        quantity,
        gross_weight,
        price,
        actor_id,
        distribution_date=None,
    ) -> LedgerResult:
        def work(s):
            return self._distributions(s).create_distribution(
                customer_id=to_uuid(customer_id, "customer_id"),
                chicken_type_id=self._chicken_type_id(s, chicken_type),
                quantity=quantity,
                gross_weight=gross_weight,
                price=price,
                actor_id=self._actor(actor_id),
                distribution_date=distribution_date,
            )
        return self._call("create_distribution", work, actor_id)

    def get_distribution(self, distribution_id) -> LedgerResult:
        return self._call(
            "get_distribution",
            lambda s: self._distributions(s).get_distribution(to_uuid(distribution_id, "distribution_id")),
            entity_id=distribution_id,
        )

    def update_distribution(
        self,
        distribution_id,
        actor_id,
        quantity=None,
        gross_weight=None,
        price=None,
        distribution_date=None,
    ) -> LedgerResult:
        def work(s):
            return self._distributions(s).update_distribution(
                to_uuid(distribution_id, "distribution_id"),
                self._actor(actor_id),
                quantity=quantity,
                gross_weight=gross_weight,
                price=price,
                distribution_date=distribution_date,
            )
        return self._call("update_distribution", work, actor_id, distribution_id)

    def delete_distribution(self, distribution_id, actor_id) -> LedgerResult:
        def work(s):
            return self._distributions(s).delete_distribution(
                to_uuid(distribution_id, "distribution_id"), self._actor(actor_id),
            )
        return self._call("delete_distribution", work, actor_id, distribution_id)

    def list_distributions(self, customer_id=None, chicken_type=None, start=None, end=None) -> LedgerResult:
        def work(s):
            return self._distributions(s).list_distributions(
                customer_id=_optional_uuid(customer_id, "customer_id"),
                chicken_type_id=self._chicken_type_id(s, chicken_type) if chicken_type is not None else None,
                window=_window(start, end),
            )
        return self._call("list_distributions", work)

    def daily_net_weight(self, day) -> LedgerResult:
        return self._call(
            "daily_net_weight",
            lambda s: self._distributions(s).daily_net_weight(to_date(day, "day")),
        )

    # =========================================================================
    # Payments
    # =========================================================================

    def create_payment(
        self,
        customer_id,
        total_price,
        paid_amount,
        actor_id,
        discount=0,
        payment_date=None,
        collected_by_id=None,
        payment_method="cash",
        notes=None,
    ) -> LedgerResult:
        def work(s):
            return self._payments(s).create_payment(
                customer_id=to_uuid(customer_id, "customer_id"),
                total_price=total_price,
                paid_amount=paid_amount,
                actor_id=self._actor(actor_id),
                discount=discount,
                payment_date=payment_date,
                collected_by_id=_optional_uuid(collected_by_id, "collected_by_id"),
                payment_method=payment_method,
                notes=notes,
            )
        return self._call("create_payment", work, actor_id)

    def get_payment(self, payment_id) -> LedgerResult:
        return self._call(
            "get_payment",
            lambda s: self._payments(s).get_payment(to_uuid(payment_id, "payment_id")),
            entity_id=payment_id,
        )

    def update_payment(self, payment_id, actor_id, **changes) -> LedgerResult:
        def work(s):
            fields = dict(changes)
            if fields.get("collected_by_id") is not None:
                fields["collected_by_id"] = to_uuid(fields["collected_by_id"], "collected_by_id")
            return self._payments(s).update_payment(
                to_uuid(payment_id, "payment_id"), self._actor(actor_id), **fields,
            )
        return self._call("update_payment", work, actor_id, payment_id)

    def delete_payment(self, payment_id, actor_id) -> LedgerResult:
        return self._call(
            "delete_payment",
            lambda s: self._payments(s).delete_payment(to_uuid(payment_id, "payment_id"), self._actor(actor_id)),
            actor_id,
            payment_id,
        )

    def list_payments(self, customer_id=None) -> LedgerResult:
        return self._call(
            "list_payments",
            lambda s: self._payments(s).list_payments(_optional_uuid(customer_id, "customer_id")),
        )

    def employee_collection_summary(self) -> LedgerResult:
        return self._call(
            "employee_collection_summary",
            lambda s: self._payments(s).employee_collection_summary(),
        )

    # =========================================================================
    # Waste
    # =========================================================================

    def upsert_waste(self, waste_date, chicken_type, actor_id, **amounts) -> LedgerResult:
        """Replace the day's waste inputs for one chicken type."""
        def work(s):
            return WasteService(s).upsert_waste(
                to_date(waste_date, "waste_date"),
                self._chicken_type_id(s, chicken_type),
                self._actor(actor_id),
                **amounts,
            )
        return self._call("upsert_waste", work, actor_id)

    def waste_by_date(self, waste_date) -> LedgerResult:
        return self._call(
            "waste_by_date",
            lambda s: WasteService(s).waste_by_date(to_date(waste_date, "waste_date")),
        )

    def waste_summary(self, start=None, end=None) -> LedgerResult:
        return self._call(
            "waste_summary",
            lambda s: WasteService(s).waste_summary(_window(start, end)),
        )

    # =========================================================================
    # Expenses and transfers
    # =========================================================================

    def create_expense(self, employee_id, name, value, actor_id, expense_date=None) -> LedgerResult:
        def work(s):
            return ExpenseService(s, self._clock, self._calendar).create_expense(
                to_uuid(employee_id, "employee_id"), name, value, self._actor(actor_id), expense_date,
            )
        return self._call("create_expense", work, actor_id)

    def delete_expense(self, expense_id, actor_id) -> LedgerResult:
        def work(s):
            return ExpenseService(s, self._clock, self._calendar).delete_expense(
                to_uuid(expense_id, "expense_id"), self._actor(actor_id),
            )
        return self._call("delete_expense", work, actor_id, expense_id)

    def list_expenses(self, employee_id=None, start=None, end=None) -> LedgerResult:
        def work(s):
            return ExpenseService(s, self._clock, self._calendar).list_expenses(
                _optional_uuid(employee_id, "employee_id"), _window(start, end),
            )
        return self._call("list_expenses", work)

    def create_transfer(self, from_employee_id, to_employee_id, amount, actor_id, note=None) -> LedgerResult:
        def work(s):
            return TransferService(s, self._clock, self._calendar).create_transfer(
                to_uuid(from_employee_id, "from_employee_id"),
                to_uuid(to_employee_id, "to_employee_id"),
                amount,
                self._actor(actor_id),
                note,
            )
        return self._call("create_transfer", work, actor_id, from_employee_id)

    def list_transfers(self, employee_id=None) -> LedgerResult:
        return self._call(
            "list_transfers",
            lambda s: TransferService(s, self._clock, self._calendar).list_transfers(
                _optional_uuid(employee_id, "employee_id"),
            ),
        )

    def transfer_summary(self, employee_id) -> LedgerResult:
        return self._call(
            "transfer_summary",
            lambda s: TransferService(s, self._clock, self._calendar).transfer_summary(
                to_uuid(employee_id, "employee_id"),
            ),
            entity_id=employee_id,
        )

    def cash_position(self, employee_id) -> LedgerResult:
        return self._call(
            "cash_position",
            lambda s: TransferService(s, self._clock, self._calendar).cash_position(
                to_uuid(employee_id, "employee_id"),
            ),
            entity_id=employee_id,
        )

    # =========================================================================
    # Reporting
    # =========================================================================

    def get_stock_snapshot(self, stock_date) -> LedgerResult:
        return self._call(
            "get_stock_snapshot",
            lambda s: ReportingService(s).get_stock_snapshot(to_date(stock_date, "stock_date")),
        )

    def upsert_stock_snapshot(self, stock_date, admin_adjustment, actor_id, notes=None) -> LedgerResult:
        def work(s):
            return ReportingService(s).upsert_stock_snapshot(
                to_date(stock_date, "stock_date"), admin_adjustment, self._actor(actor_id), notes,
            )
        return self._call("upsert_stock_snapshot", work, actor_id)

    def list_week_snapshots(self, reference_day=None) -> LedgerResult:
        def work(s):
            day = to_date(reference_day, "reference_day") if reference_day is not None else self._calendar.today(self._clock)
            return ReportingService(s).list_week_snapshots(day)
        return self._call("list_week_snapshots", work)

    def get_daily_profit(self, day=None) -> LedgerResult:
        def work(s):
            target = to_date(day, "day") if day is not None else self._calendar.today(self._clock)
            return ReportingService(s).get_daily_profit(target)
        return self._call("get_daily_profit", work)

    def get_total_profit_history(self, start=None, end=None) -> LedgerResult:
        return self._call(
            "get_total_profit_history",
            lambda s: ReportingService(s).get_total_profit_history(start, end),
        )

    def customer_statement(self, customer_id) -> LedgerResult:
        return self._call(
            "customer_statement",
            lambda s: ReportingService(s).customer_statement(to_uuid(customer_id, "customer_id")),
            entity_id=customer_id,
        )
