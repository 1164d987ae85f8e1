"""
Module: poultry_modules.reporting.selectors
Responsibility: Read-only aggregation queries behind the reports.  Every
    figure is summed from the ledger records for a window of days; there
    are no stored totals.
Architecture position: Modules > Reporting.  Extends the kernel's
    BaseSelector and never mutates the session.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from poultry_kernel.db.base import Base
from poultry_kernel.domain.calendar import DateRange
from poultry_kernel.domain.values import ZERO
from poultry_kernel.exceptions import CustomerNotFoundError
from poultry_kernel.models.chicken_type import ChickenType
from poultry_kernel.models.customer import Customer
from poultry_kernel.selectors.base import BaseSelector
from poultry_modules.distribution.orm import DistributionModel
from poultry_modules.expenses.orm import EmployeeExpenseModel
from poultry_modules.loading.orm import LoadingBatchModel
from poultry_modules.payment.orm import PaymentModel
from poultry_modules.reporting.models import CustomerStatement
from poultry_modules.waste.orm import DailyWasteModel


def _in_window(stmt, column, window: DateRange | None):
    if window is None:
        return stmt
    if window.start is not None:
        stmt = stmt.where(column >= window.start)
    if window.end is not None:
        stmt = stmt.where(column <= window.end)
    return stmt


class ReportingSelector(BaseSelector[Base]):
    """Window sums over loadings, distributions, payments, expenses and waste."""

    def _sum(self, column, date_column, window: DateRange | None) -> Decimal:
        stmt = _in_window(select(func.coalesce(func.sum(column), ZERO)), date_column, window)
        return Decimal(str(self.session.execute(stmt).scalar_one() or 0))

    def net_loading_weight(self, window: DateRange | None) -> Decimal:
        return self._sum(LoadingBatchModel.net_weight, LoadingBatchModel.loading_date, window)

    def net_distribution_weight(self, window: DateRange | None) -> Decimal:
        return self._sum(DistributionModel.net_weight, DistributionModel.distribution_date, window)

    def distributions_total(self, window: DateRange | None) -> Decimal:
        return self._sum(DistributionModel.total_amount, DistributionModel.distribution_date, window)

    def loadings_total(self, window: DateRange | None) -> Decimal:
        return self._sum(LoadingBatchModel.total_loading, LoadingBatchModel.loading_date, window)

    def expenses_total(self, window: DateRange | None) -> Decimal:
        return self._sum(EmployeeExpenseModel.value, EmployeeExpenseModel.expense_date, window)

    def discounts_total(self, window: DateRange | None) -> Decimal:
        return self._sum(PaymentModel.discount, PaymentModel.payment_date, window)

    def waste_cost(self, window: DateRange | None) -> Decimal:
        """Sum of total waste net weight valued at each chicken type's current price."""
        stmt = (
            select(DailyWasteModel.total_waste_net_weight, ChickenType.price)
            .join(ChickenType, ChickenType.id == DailyWasteModel.chicken_type_id)
        )
        stmt = _in_window(stmt, DailyWasteModel.waste_date, window)
        return sum(
            (Decimal(str(weight)) * Decimal(str(price)) for weight, price in self.session.execute(stmt)),
            ZERO,
        )

    def customer_statement(self, customer_id: UUID) -> CustomerStatement:
        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))

        dist_total, dist_count = self.session.execute(
            select(
                func.coalesce(func.sum(DistributionModel.total_amount), ZERO),
                func.count(DistributionModel.id),
            ).where(DistributionModel.customer_id == customer_id)
        ).one()
        paid_total, discount_total, payment_count = self.session.execute(
            select(
                func.coalesce(func.sum(PaymentModel.paid_amount), ZERO),
                func.coalesce(func.sum(PaymentModel.discount), ZERO),
                func.count(PaymentModel.id),
            ).where(PaymentModel.customer_id == customer_id)
        ).one()

        return CustomerStatement(
            customer_id=customer.id,
            customer_name=customer.name,
            outstanding_debts=customer.outstanding_debts,
            distributions_total=Decimal(str(dist_total or 0)),
            distribution_count=int(dist_count or 0),
            paid_total=Decimal(str(paid_total or 0)),
            discounts_total=Decimal(str(discount_total or 0)),
            payment_count=int(payment_count or 0),
        )
