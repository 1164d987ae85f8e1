"""Stock snapshots, profit reports and customer statements."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from poultry_kernel.exceptions import CustomerNotFoundError, InvalidInputError
from tests.conftest import TODAY


@pytest.fixture
def trading_day(create_loading, create_distribution, expense_service, payment_service,
                waste_service, customer, chicken_type, employee, test_actor_id):
    """One day of trade.

    loaded 500 kg for 5000, distributed 60 kg for 1200, expenses 50,
    discounts 100, waste 4 kg at the type price of 25.
    """
    create_loading()
    create_distribution()
    expense_service.create_expense(employee.id, "Fuel", Decimal("50"), test_actor_id, TODAY)
    payment_service.create_payment(
        customer.id, Decimal("1200"), Decimal("1000"), test_actor_id,
        discount=Decimal("100"), payment_date=TODAY,
    )
    waste_service.upsert_waste(
        TODAY, chicken_type.id, test_actor_id,
        other_waste_quantity=1, other_waste_net_weight=Decimal("4"),
    )


class TestStockSnapshot:

    def test_unpersisted_snapshot_has_no_adjustment(self, reporting_service, trading_day):
        snapshot = reporting_service.get_stock_snapshot(TODAY)

        assert snapshot.net_loading_weight == Decimal("500")
        assert snapshot.net_distribution_weight == Decimal("60")
        assert snapshot.admin_adjustment == Decimal("0")
        assert snapshot.result == Decimal("440")
        assert snapshot.persisted is False

    def test_upsert_replaces_adjustment(self, reporting_service, trading_day, test_actor_id):
        reporting_service.upsert_stock_snapshot(TODAY, Decimal("10"), test_actor_id)
        stored = reporting_service.upsert_stock_snapshot(TODAY, Decimal("15"), test_actor_id, notes="scale drift")

        assert stored.result == Decimal("425")
        assert stored.notes == "scale drift"

        read = reporting_service.get_stock_snapshot(TODAY)
        assert read.persisted is True
        assert read.admin_adjustment == Decimal("15")
        assert read.result == Decimal("425")

    def test_upsert_recomputes_sums(self, reporting_service, create_loading, test_actor_id):
        reporting_service.upsert_stock_snapshot(TODAY, Decimal("0"), test_actor_id)
        create_loading(net_weight=Decimal("200"))

        stored = reporting_service.upsert_stock_snapshot(TODAY, Decimal("0"), test_actor_id)
        assert stored.net_loading_weight == Decimal("200")

    def test_week_runs_sunday_to_saturday(self, reporting_service, test_actor_id):
        for day in (date(2023, 12, 30), date(2023, 12, 31), date(2024, 1, 6), date(2024, 1, 7)):
            reporting_service.upsert_stock_snapshot(day, Decimal("0"), test_actor_id)

        week = reporting_service.list_week_snapshots(TODAY)
        assert [s.stock_date for s in week] == [date(2023, 12, 31), date(2024, 1, 6)]


class TestProfit:

    def test_daily_profit_includes_every_term(self, reporting_service, trading_day):
        report = reporting_service.get_daily_profit(TODAY)

        assert report.distributions_total == Decimal("1200")
        assert report.loadings_total == Decimal("5000")
        assert report.expenses_total == Decimal("50")
        assert report.discounts_total == Decimal("100")
        assert report.waste_cost == Decimal("100")
        assert report.profit == Decimal("-4050")

    def test_waste_cost_uses_current_price(self, reporting_service, directory, session,
                                           trading_day, chicken_type, test_actor_id):
        directory.update_chicken_type_price(chicken_type.id, Decimal("30"), test_actor_id)
        session.commit()
        assert reporting_service.get_daily_profit(TODAY).waste_cost == Decimal("120")

    def test_other_days_are_empty(self, reporting_service, trading_day):
        report = reporting_service.get_daily_profit(date(2024, 1, 2))
        assert report.profit == Decimal("0")

    def test_history_all_time_and_ranged(self, reporting_service, trading_day, create_distribution):
        create_distribution(distribution_date=date(2024, 1, 3))  # +1200

        assert reporting_service.get_total_profit_history().distributions_total == Decimal("2400")
        ranged = reporting_service.get_total_profit_history(start=date(2024, 1, 2))
        assert ranged.profit == Decimal("1200")
        assert ranged.end is None

    def test_reversed_range_rejected(self, reporting_service):
        with pytest.raises(InvalidInputError):
            reporting_service.get_total_profit_history(date(2024, 1, 5), date(2024, 1, 1))


class TestCustomerStatement:

    def test_statement_totals(self, reporting_service, trading_day, customer):
        statement = reporting_service.customer_statement(customer.id)

        assert statement.customer_name == "Al Noor Restaurant"
        assert statement.distribution_count == 1
        assert statement.distributions_total == Decimal("1200")
        assert statement.payment_count == 1
        assert statement.paid_total == Decimal("1000")
        assert statement.discounts_total == Decimal("100")
        assert statement.outstanding_debts == Decimal("100")

    def test_unknown_customer(self, reporting_service):
        with pytest.raises(CustomerNotFoundError):
            reporting_service.customer_statement(uuid4())
