"""Waste ledger: manual entries, daily reports and summaries."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from poultry_kernel.domain.calendar import DateRange
from poultry_kernel.exceptions import ChickenTypeNotFoundError, InvalidInputError
from tests.conftest import TODAY


class TestUpsertWaste:

    def test_creates_row_with_totals(self, waste_service, chicken_type, test_actor_id):
        row = waste_service.upsert_waste(
            TODAY, chicken_type.id, test_actor_id,
            other_waste_quantity=3, other_waste_net_weight=Decimal("7.5"), notes="heat",
        )
        assert row.total_waste_quantity == 3
        assert row.total_waste_net_weight == Decimal("7.5")
        assert row.notes == "heat"

    def test_replaces_everything_including_over_distribution(
        self, create_distribution, waste_service, chicken_type, test_actor_id,
    ):
        create_distribution(quantity=4, gross_weight=Decimal("52"))  # shortage 4 / 20
        row = waste_service.upsert_waste(
            TODAY, chicken_type.id, test_actor_id,
            over_distribution_quantity=1, other_waste_quantity=2,
        )
        assert row.over_distribution_quantity == 1
        assert row.over_distribution_net_weight == Decimal("0")
        assert row.total_waste_quantity == 3

    def test_negative_rejected(self, waste_service, chicken_type, test_actor_id):
        with pytest.raises(InvalidInputError):
            waste_service.upsert_waste(TODAY, chicken_type.id, test_actor_id, other_waste_quantity=-1)

    def test_unknown_chicken_type(self, waste_service, test_actor_id):
        with pytest.raises(ChickenTypeNotFoundError):
            waste_service.upsert_waste(TODAY, uuid4(), test_actor_id, other_waste_quantity=1)


class TestWasteReports:

    def test_by_date_totals(self, waste_service, create_chicken_type, chicken_type, test_actor_id):
        layer = create_chicken_type("Layer", Decimal("18"))
        waste_service.upsert_waste(TODAY, chicken_type.id, test_actor_id, other_waste_quantity=2, other_waste_net_weight=Decimal("4"))
        waste_service.upsert_waste(TODAY, layer.id, test_actor_id, other_waste_quantity=1, other_waste_net_weight=Decimal("1.5"))

        report = waste_service.waste_by_date(TODAY)

        assert len(report.entries) == 2
        assert report.total_quantity == 3
        assert report.total_net_weight == Decimal("5.5")

    def test_summary_per_type_and_per_day(self, waste_service, create_chicken_type, chicken_type, test_actor_id):
        layer = create_chicken_type("Layer", Decimal("18"))
        yesterday = date(2023, 12, 31)
        waste_service.upsert_waste(yesterday, chicken_type.id, test_actor_id, other_waste_quantity=2, other_waste_net_weight=Decimal("4"))
        waste_service.upsert_waste(TODAY, chicken_type.id, test_actor_id, other_waste_quantity=1, other_waste_net_weight=Decimal("2"))
        waste_service.upsert_waste(TODAY, layer.id, test_actor_id, other_waste_quantity=5, other_waste_net_weight=Decimal("6"))

        summary = waste_service.waste_summary()

        assert [t.chicken_type_name for t in summary.by_chicken_type] == ["Broiler", "Layer"]
        broiler = summary.by_chicken_type[0]
        assert broiler.total_quantity == 3
        assert [d.waste_date for d in broiler.days] == [yesterday, TODAY]
        assert [d.waste_date for d in summary.by_day] == [TODAY, yesterday]
        assert summary.by_day[0].quantity == 6
        assert summary.total_net_weight == Decimal("12")

        windowed = waste_service.waste_summary(DateRange.single_day(yesterday))
        assert windowed.total_quantity == 2
