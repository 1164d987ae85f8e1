"""Payment settlement, stock result and profit formulas."""

from decimal import Decimal

import pytest

from poultry_kernel.exceptions import InvalidInputError
from poultry_modules.payment.helpers import compute_settlement
from poultry_modules.payment.models import PaymentStatus
from poultry_modules.reporting.helpers import profit, stock_result


class TestComputeSettlement:

    def test_partial_payment(self):
        total, paid, disc, remaining, status = compute_settlement(
            Decimal("1200"), Decimal("1000"), Decimal("0"),
        )
        assert remaining == Decimal("200")
        assert status is PaymentStatus.PARTIAL

    def test_discount_completes_payment(self):
        *_, remaining, status = compute_settlement(Decimal("1200"), Decimal("1100"), Decimal("100"))
        assert remaining == Decimal("0")
        assert status is PaymentStatus.COMPLETED

    def test_overpayment_floors_at_zero(self):
        *_, remaining, status = compute_settlement(Decimal("100"), Decimal("150"))
        assert remaining == Decimal("0")
        assert status is PaymentStatus.COMPLETED

    def test_none_discount_is_zero(self):
        _, _, disc, remaining, _ = compute_settlement(Decimal("100"), Decimal("40"), None)
        assert disc == Decimal("0")
        assert remaining == Decimal("60")

    @pytest.mark.parametrize("field,args", [
        ("total_price", ("-1", "0", "0")),
        ("paid_amount", ("10", "-1", "0")),
        ("discount", ("10", "0", "-1")),
    ])
    def test_negative_inputs_rejected(self, field, args):
        with pytest.raises(InvalidInputError) as exc_info:
            compute_settlement(*args)
        assert exc_info.value.field == field


def test_stock_result_without_adjustment():
    assert stock_result(Decimal("500"), Decimal("60"), Decimal("0")) == Decimal("440")


def test_stock_result_subtracts_adjustment():
    assert stock_result(Decimal("500"), Decimal("60"), Decimal("15.5")) == Decimal("424.5")


def test_profit_formula():
    result = profit(
        distributions_total=Decimal("1200"),
        loadings_total=Decimal("500"),
        expenses_total=Decimal("50"),
        discounts_total=Decimal("20"),
        waste_cost=Decimal("30"),
    )
    assert result == Decimal("600")
