"""Payment ledger and the absolute debt overwrite."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from poultry_kernel.exceptions import (
    CustomerNotFoundError,
    EmployeeNotFoundError,
    InvalidInputError,
    PaymentNotFoundError,
)
from poultry_modules.payment.models import PaymentMethod, PaymentStatus
from tests.conftest import TODAY


@pytest.fixture
def pay(payment_service, customer, test_actor_id, deterministic_clock):
    def _pay(total, paid, discount="0", payment_date=TODAY, **kwargs):
        deterministic_clock.advance(1)
        return payment_service.create_payment(
            customer.id, Decimal(total), Decimal(paid), test_actor_id,
            discount=Decimal(discount), payment_date=payment_date, **kwargs,
        )
    return _pay


class TestCreatePayment:

    def test_partial_payment_overwrites_debt(self, create_distribution, pay, customer, customer_debt):
        create_distribution()  # debt 1200
        payment = pay("1200", "1000")

        assert payment.remaining_amount == Decimal("200")
        assert payment.status is PaymentStatus.PARTIAL
        assert payment.payment_method is PaymentMethod.CASH
        # Absolute overwrite, not 1200 - 1000 applied to a running total
        assert customer_debt(customer.id) == Decimal("200")

    def test_overwrite_ignores_unrelated_prior_debt(self, create_distribution, pay, customer, customer_debt):
        create_distribution()
        create_distribution()  # debt 2400
        pay("1200", "1000")
        assert customer_debt(customer.id) == Decimal("200")

    def test_discount_completes(self, pay):
        payment = pay("1200", "1150", discount="50")
        assert payment.status is PaymentStatus.COMPLETED
        assert payment.remaining_amount == Decimal("0")

    def test_collector_must_exist(self, pay):
        with pytest.raises(EmployeeNotFoundError):
            pay("10", "10", collected_by_id=uuid4())

    def test_unknown_customer(self, payment_service, test_actor_id):
        with pytest.raises(CustomerNotFoundError):
            payment_service.create_payment(uuid4(), Decimal("1"), Decimal("1"), test_actor_id)

    def test_only_cash_supported(self, pay):
        with pytest.raises(InvalidInputError) as exc_info:
            pay("10", "10", payment_method="card")
        assert exc_info.value.field == "payment_method"

    def test_negative_paid_rejected(self, pay):
        with pytest.raises(InvalidInputError):
            pay("10", "-1")


class TestUpdatePayment:

    def test_update_recomputes_and_overwrites(self, pay, payment_service, customer, customer_debt, test_actor_id):
        payment = pay("1200", "1000")
        updated = payment_service.update_payment(payment.id, test_actor_id, paid_amount=Decimal("1200"))

        assert updated.remaining_amount == Decimal("0")
        assert updated.status is PaymentStatus.COMPLETED
        assert customer_debt(customer.id) == Decimal("0")

    def test_missing(self, payment_service, test_actor_id):
        with pytest.raises(PaymentNotFoundError):
            payment_service.update_payment(uuid4(), test_actor_id, paid_amount=Decimal("1"))


class TestDeletePayment:

    def test_falls_back_to_previous_payment(self, pay, payment_service, customer, customer_debt, test_actor_id):
        pay("1500", "1000", payment_date=date(2023, 12, 30))  # remaining 500
        latest = pay("1200", "1000")  # remaining 200

        payment_service.delete_payment(latest.id, test_actor_id)
        assert customer_debt(customer.id) == Decimal("500")

    def test_falls_back_to_zero(self, create_distribution, pay, payment_service, customer, customer_debt, test_actor_id):
        create_distribution()
        payment = pay("1200", "1000")

        payment_service.delete_payment(payment.id, test_actor_id)
        assert customer_debt(customer.id) == Decimal("0")

    def test_most_recent_uses_recording_time_on_same_day(self, pay, payment_service, customer, customer_debt, test_actor_id):
        pay("100", "70")  # remaining 30
        pay("100", "60")  # remaining 40, recorded later
        third = pay("100", "90")

        payment_service.delete_payment(third.id, test_actor_id)
        assert customer_debt(customer.id) == Decimal("40")

    def test_missing(self, payment_service, test_actor_id):
        with pytest.raises(PaymentNotFoundError):
            payment_service.delete_payment(uuid4(), test_actor_id)


class TestPaymentReads:

    def test_list_most_recent_first(self, pay, payment_service, customer):
        older = pay("10", "5", payment_date=date(2023, 12, 31))
        newer = pay("10", "5")
        assert [p.id for p in payment_service.list_payments(customer.id)] == [newer.id, older.id]

    def test_employee_collection_summary(self, pay, payment_service, create_employee):
        sami = create_employee("Sami")
        rana = create_employee("Rana")
        pay("100", "100", collected_by_id=sami.id)
        pay("300", "250", collected_by_id=rana.id)
        pay("50", "50", collected_by_id=sami.id)

        summary = payment_service.employee_collection_summary()

        assert [(s.employee_name, s.total_paid, s.payment_count) for s in summary] == [
            ("Rana", Decimal("250"), 1),
            ("Sami", Decimal("150"), 2),
        ]
