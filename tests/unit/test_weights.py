"""Quantity / weight calculator."""

from decimal import Decimal

import pytest

from poultry_kernel.domain.weights import (
    compute_distribution_values,
    compute_loading_values,
    net_from_gross,
)
from poultry_kernel.exceptions import InvalidInputError


class TestDistributionValues:

    def test_worked_example(self):
        values = compute_distribution_values(30, Decimal("300"), Decimal("20"))

        assert values.empty_weight == Decimal("240")
        assert values.net_weight == Decimal("60")
        assert values.total_amount == Decimal("1200")

    def test_net_weight_floors_at_zero(self):
        values = compute_distribution_values(10, Decimal("50"), Decimal("20"))

        assert values.empty_weight == Decimal("80")
        assert values.net_weight == Decimal("0")
        assert values.total_amount == Decimal("0")

    def test_fractional_weights_are_exact(self):
        values = compute_distribution_values(3, Decimal("30.75"), Decimal("19.99"))

        assert values.net_weight == Decimal("6.75")
        assert values.total_amount == Decimal("6.75") * Decimal("19.99")

    def test_configurable_packaging_weight(self):
        values = compute_distribution_values(10, Decimal("100"), Decimal("1"), Decimal("5"))
        assert values.net_weight == Decimal("50")

    def test_string_and_int_inputs_accepted(self):
        values = compute_distribution_values("30", "300", 20)
        assert values.total_amount == Decimal("1200")

    @pytest.mark.parametrize("quantity", [0, -1, "1.5", None, True])
    def test_invalid_quantity(self, quantity):
        with pytest.raises(InvalidInputError) as exc_info:
            compute_distribution_values(quantity, Decimal("300"), Decimal("20"))
        assert exc_info.value.field == "quantity"

    @pytest.mark.parametrize("gross", ["-1", "NaN", "Infinity", "heavy"])
    def test_invalid_gross_weight(self, gross):
        with pytest.raises(InvalidInputError) as exc_info:
            compute_distribution_values(30, gross, Decimal("20"))
        assert exc_info.value.field == "gross_weight"

    def test_negative_price_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            compute_distribution_values(30, Decimal("300"), Decimal("-5"))
        assert exc_info.value.field == "price"


class TestLoadingValues:

    def test_net_weight_entered_directly(self):
        values = compute_loading_values(100, Decimal("10"), net_weight=Decimal("500"))

        assert values.net_weight == Decimal("500")
        assert values.gross_weight is None
        assert values.total_amount == Decimal("5000")

    def test_net_weight_derived_from_gross(self):
        values = compute_loading_values(100, Decimal("10"), gross_weight=Decimal("1300"))

        assert values.empty_weight == Decimal("800")
        assert values.net_weight == Decimal("500")
        assert values.total_amount == Decimal("5000")

    def test_requires_exactly_one_weight(self):
        with pytest.raises(InvalidInputError):
            compute_loading_values(100, Decimal("10"))
        with pytest.raises(InvalidInputError):
            compute_loading_values(100, Decimal("10"), net_weight=Decimal("1"), gross_weight=Decimal("900"))

    def test_negative_loading_price_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            compute_loading_values(100, Decimal("-10"), net_weight=Decimal("500"))
        assert exc_info.value.field == "loading_price"


def test_net_from_gross_never_negative():
    assert net_from_gross(100, Decimal("10")) == Decimal("0")
