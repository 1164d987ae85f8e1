"""Employee expenses and staff cash transfers."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from poultry_kernel.domain.calendar import DateRange
from poultry_kernel.exceptions import (
    EmployeeNotFoundError,
    ExpenseNotFoundError,
    InsufficientFundsError,
    InvalidInputError,
    SameEmployeeTransferError,
)
from tests.conftest import TODAY


@pytest.fixture
def collect(payment_service, customer, test_actor_id, deterministic_clock):
    """Record cash collected by an employee."""
    def _collect(employee_id, amount):
        deterministic_clock.advance(1)
        return payment_service.create_payment(
            customer.id, Decimal(amount), Decimal(amount), test_actor_id, collected_by_id=employee_id,
        )
    return _collect


class TestExpenses:

    def test_create_list_delete(self, expense_service, employee, test_actor_id):
        fuel = expense_service.create_expense(employee.id, "Fuel", Decimal("45.5"), test_actor_id)
        old = expense_service.create_expense(employee.id, "Ice", Decimal("10"), test_actor_id, date(2023, 12, 20))

        assert fuel.expense_date == TODAY
        assert {e.id for e in expense_service.list_expenses(employee.id)} == {fuel.id, old.id}
        window = DateRange(start=date(2024, 1, 1))
        assert [e.id for e in expense_service.list_expenses(window=window)] == [fuel.id]

        expense_service.delete_expense(old.id, test_actor_id)
        assert [e.id for e in expense_service.list_expenses(employee.id)] == [fuel.id]

    def test_validation(self, expense_service, employee, test_actor_id):
        with pytest.raises(InvalidInputError):
            expense_service.create_expense(employee.id, "Fuel", Decimal("-1"), test_actor_id)
        with pytest.raises(InvalidInputError):
            expense_service.create_expense(employee.id, "  ", Decimal("1"), test_actor_id)
        with pytest.raises(EmployeeNotFoundError):
            expense_service.create_expense(uuid4(), "Fuel", Decimal("1"), test_actor_id)
        with pytest.raises(ExpenseNotFoundError):
            expense_service.delete_expense(uuid4(), test_actor_id)


class TestTransfers:

    def test_cash_position(self, transfer_service, expense_service, collect, employee, test_actor_id):
        collect(employee.id, "500")
        expense_service.create_expense(employee.id, "Fuel", Decimal("50"), test_actor_id)

        position = transfer_service.cash_position(employee.id)

        assert position.collected == Decimal("500")
        assert position.expenses == Decimal("50")
        assert position.available == Decimal("450")

    def test_transfer_moves_available_cash(self, transfer_service, collect, create_employee, test_actor_id):
        sami, rana = create_employee("Sami"), create_employee("Rana")
        collect(sami.id, "300")

        transfer = transfer_service.create_transfer(sami.id, rana.id, Decimal("120"), test_actor_id, note="float")

        assert transfer.amount == Decimal("120")
        assert transfer.transfer_date == TODAY
        assert transfer_service.cash_position(sami.id).available == Decimal("180")
        assert transfer_service.cash_position(rana.id).available == Decimal("120")

        summary = transfer_service.transfer_summary(sami.id)
        assert (summary.total_out, summary.count_out, summary.total_in) == (Decimal("120"), 1, Decimal("0"))
        assert [t.id for t in transfer_service.list_transfers(rana.id)] == [transfer.id]

    def test_insufficient_funds(self, transfer_service, collect, create_employee, test_actor_id):
        sami, rana = create_employee("Sami"), create_employee("Rana")
        collect(sami.id, "100")

        with pytest.raises(InsufficientFundsError) as exc_info:
            transfer_service.create_transfer(sami.id, rana.id, Decimal("100.01"), test_actor_id)
        assert Decimal(exc_info.value.available) == Decimal("100")
        assert transfer_service.list_transfers() == []

    def test_same_employee_rejected(self, transfer_service, employee, test_actor_id):
        with pytest.raises(SameEmployeeTransferError):
            transfer_service.create_transfer(employee.id, employee.id, Decimal("1"), test_actor_id)

    def test_minimum_amount(self, transfer_service, create_employee, test_actor_id):
        sami, rana = create_employee("Sami"), create_employee("Rana")
        with pytest.raises(InvalidInputError):
            transfer_service.create_transfer(sami.id, rana.id, Decimal("0.001"), test_actor_id)

    def test_unknown_receiver(self, transfer_service, collect, employee, test_actor_id):
        collect(employee.id, "10")
        with pytest.raises(EmployeeNotFoundError):
            transfer_service.create_transfer(employee.id, uuid4(), Decimal("1"), test_actor_id)
