"""Loading ledger: intake batches, their counters and the chicken type stock."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from poultry_kernel.domain.calendar import DateRange
from poultry_kernel.exceptions import (
    ChickenTypeNotFoundError,
    InsufficientInventoryError,
    InvalidInputError,
    LoadingInUseError,
    LoadingNotFoundError,
    SupplierNotFoundError,
)
from poultry_kernel.selectors.directory_selector import DirectorySelector
from poultry_modules.loading.models import QualityGrade
from tests.conftest import TODAY


def _stock(session, chicken_type_id) -> int:
    return DirectorySelector(session).get_chicken_type(chicken_type_id).stock


class TestCreateLoading:

    def test_worked_example(self, create_loading):
        batch = create_loading(quantity=100, net_weight=Decimal("500"), loading_price=Decimal("10"))

        assert batch.total_loading == Decimal("5000")
        assert batch.remaining_quantity == 100
        assert batch.remaining_net_weight == Decimal("500")
        assert batch.distributed_quantity == 0
        assert batch.loading_date == TODAY
        assert batch.quality_grade is QualityGrade.A

    def test_gross_weight_mode(self, create_loading):
        batch = create_loading(quantity=100, net_weight=None, gross_weight=Decimal("1300"))

        assert batch.empty_weight == Decimal("800")
        assert batch.net_weight == Decimal("500")
        assert batch.gross_weight == Decimal("1300")

    def test_decrements_chicken_type_stock(self, session, create_loading, chicken_type):
        create_loading(quantity=100)
        create_loading(quantity=20)
        assert _stock(session, chicken_type.id) == -120

    def test_descriptive_extras_kept(self, create_loading):
        batch = create_loading(
            quality_grade="B", notes="wet crates", batch_number="B-17",
            vehicle_number="TRK 42", driver_name="Hassan",
        )
        assert batch.quality_grade is QualityGrade.B
        assert (batch.notes, batch.batch_number) == ("wet crates", "B-17")
        assert (batch.vehicle_number, batch.driver_name) == ("TRK 42", "Hassan")

    def test_unknown_references(self, loading_service, chicken_type, supplier, test_actor_id):
        with pytest.raises(ChickenTypeNotFoundError):
            loading_service.create_loading(uuid4(), supplier.id, 10, Decimal("1"), test_actor_id, net_weight=Decimal("10"))
        with pytest.raises(SupplierNotFoundError):
            loading_service.create_loading(chicken_type.id, uuid4(), 10, Decimal("1"), test_actor_id, net_weight=Decimal("10"))

    def test_invalid_grade(self, create_loading):
        with pytest.raises(InvalidInputError) as exc_info:
            create_loading(quality_grade="Z")
        assert exc_info.value.field == "quality_grade"

    def test_logs_creation(self, create_loading, captured_logs):
        batch = create_loading()
        records = [r for r in captured_logs() if r["message"] == "loading_created"]
        assert records[0]["loading_id"] == str(batch.id)
        assert records[0]["total_loading"] == "5000"


class TestUpdateLoading:

    def test_quantity_change_applies_stock_delta(self, session, loading_service, create_loading, chicken_type, test_actor_id):
        batch = create_loading(quantity=100)
        updated = loading_service.update_loading(batch.id, test_actor_id, quantity=80)

        assert updated.quantity == 80
        assert updated.remaining_quantity == 80
        assert _stock(session, chicken_type.id) == -80

    def test_price_change_recomputes_total(self, loading_service, create_loading, test_actor_id):
        batch = create_loading()
        updated = loading_service.update_loading(batch.id, test_actor_id, loading_price=Decimal("12"))
        assert updated.total_loading == Decimal("6000")

    def test_gross_mode_rederives_net_on_quantity_change(self, loading_service, create_loading, test_actor_id):
        batch = create_loading(quantity=100, net_weight=None, gross_weight=Decimal("1300"))
        updated = loading_service.update_loading(batch.id, test_actor_id, quantity=90)
        assert updated.net_weight == Decimal("580")

    def test_cannot_shrink_below_distributed(self, loading_service, create_loading, create_distribution, test_actor_id):
        batch = create_loading(quantity=100)
        create_distribution(quantity=30, gross_weight=Decimal("300"))

        with pytest.raises(InsufficientInventoryError) as exc_info:
            loading_service.update_loading(batch.id, test_actor_id, quantity=20)
        assert exc_info.value.measure == "quantity"

    def test_shrink_keeps_remaining_consistent(self, loading_service, create_loading, create_distribution, test_actor_id):
        batch = create_loading(quantity=100)
        create_distribution(quantity=30, gross_weight=Decimal("300"))

        updated = loading_service.update_loading(batch.id, test_actor_id, quantity=50)
        assert updated.distributed_quantity == 30
        assert updated.remaining_quantity == 20

    def test_type_change_migrates_stock(self, session, loading_service, create_loading, create_chicken_type, chicken_type, test_actor_id):
        layer = create_chicken_type("Layer", Decimal("18"))
        batch = create_loading(quantity=100)

        loading_service.update_loading(batch.id, test_actor_id, chicken_type_id=layer.id)

        assert _stock(session, chicken_type.id) == 0
        assert _stock(session, layer.id) == -100

    def test_type_change_refused_while_in_use(self, loading_service, create_loading, create_distribution, create_chicken_type, test_actor_id):
        layer = create_chicken_type("Layer", Decimal("18"))
        batch = create_loading()
        create_distribution()

        with pytest.raises(LoadingInUseError) as exc_info:
            loading_service.update_loading(batch.id, test_actor_id, chicken_type_id=layer.id)
        assert exc_info.value.distribution_count == 1

    def test_loading_date_cannot_pass_a_drawing_distribution(
        self, loading_service, distribution_service, create_loading, create_distribution, test_actor_id,
    ):
        batch = create_loading(loading_date=TODAY)
        distribution = create_distribution(distribution_date=TODAY)

        with pytest.raises(InvalidInputError) as exc_info:
            loading_service.update_loading(batch.id, test_actor_id, loading_date=date(2024, 1, 4))
        assert exc_info.value.field == "loading_date"
        assert loading_service.get_loading(batch.id).loading_date == TODAY

        updated = distribution_service.update_distribution(distribution.id, test_actor_id, price=Decimal("21"))
        assert updated.total_amount == Decimal("1260")

    def test_loading_date_may_move_up_to_earliest_distribution(
        self, loading_service, create_loading, create_distribution, test_actor_id,
    ):
        batch = create_loading(loading_date=date(2023, 12, 28))
        create_distribution(distribution_date=TODAY)
        create_distribution(distribution_date=date(2024, 1, 3))

        moved = loading_service.update_loading(batch.id, test_actor_id, loading_date=TODAY)
        assert moved.loading_date == TODAY

        with pytest.raises(InvalidInputError):
            loading_service.update_loading(batch.id, test_actor_id, loading_date=date(2024, 1, 2))

    def test_both_weights_rejected(self, loading_service, create_loading, test_actor_id):
        batch = create_loading()
        with pytest.raises(InvalidInputError):
            loading_service.update_loading(
                batch.id, test_actor_id, net_weight=Decimal("1"), gross_weight=Decimal("900"),
            )

    def test_missing_batch(self, loading_service, test_actor_id):
        with pytest.raises(LoadingNotFoundError):
            loading_service.update_loading(uuid4(), test_actor_id, quantity=5)


class TestDeleteLoading:

    def test_delete_restores_stock(self, session, loading_service, create_loading, chicken_type, test_actor_id):
        batch = create_loading(quantity=100)
        loading_service.delete_loading(batch.id, test_actor_id)

        assert _stock(session, chicken_type.id) == 0
        with pytest.raises(LoadingNotFoundError):
            loading_service.get_loading(batch.id)

    def test_delete_refused_while_in_use(self, loading_service, create_loading, create_distribution, test_actor_id):
        batch = create_loading()
        create_distribution()

        with pytest.raises(LoadingInUseError) as exc_info:
            loading_service.delete_loading(batch.id, test_actor_id)
        assert exc_info.value.distributed_quantity == 30

        # Refusal rolled back; the batch is untouched
        assert loading_service.get_loading(batch.id).remaining_quantity == 70

    def test_delete_allowed_after_distributions_removed(self, loading_service, distribution_service, create_loading, create_distribution, test_actor_id):
        batch = create_loading()
        distribution = create_distribution()
        distribution_service.delete_distribution(distribution.id, test_actor_id)

        deleted = loading_service.delete_loading(batch.id, test_actor_id)
        assert deleted.id == batch.id


class TestLoadingReads:

    def test_list_newest_first_and_filtered(self, loading_service, create_loading, supplier):
        old = create_loading(loading_date=date(2023, 12, 30))
        new = create_loading(loading_date=date(2024, 1, 1))

        assert [b.id for b in loading_service.list_loadings()] == [new.id, old.id]
        window = DateRange(start=date(2023, 12, 31))
        assert [b.id for b in loading_service.list_loadings(window=window)] == [new.id]
        assert len(loading_service.list_loadings(supplier_id=supplier.id)) == 2
        assert loading_service.list_loadings(supplier_id=uuid4()) == []

    def test_statistics(self, loading_service, create_loading):
        create_loading(quantity=100, net_weight=Decimal("500"), loading_price=Decimal("10"))
        create_loading(quantity=50, net_weight=Decimal("200"), loading_price=Decimal("14"))

        stats = loading_service.loading_statistics()

        assert stats.loading_count == 2
        assert stats.total_quantity == 150
        assert stats.total_net_weight == Decimal("700")
        assert stats.total_loading_cost == Decimal("7800")
        assert stats.average_loading_price == Decimal("12")

    def test_statistics_empty_window(self, loading_service, create_loading):
        create_loading()
        stats = loading_service.loading_statistics(DateRange.single_day(date(2020, 1, 1)))
        assert stats.loading_count == 0
        assert stats.average_loading_price == Decimal("0")
