"""Integration tests for the catalog use cases.

Add / Update / Delete / Set+Clear Maintenance / Show Inventory.
"""

import pytest

from erms.application.add_inventory_item import AddInventoryItemHandler
from erms.application.clear_maintenance import ClearMaintenanceHandler
from erms.application.delete_inventory_item import DeleteInventoryItemHandler
from erms.application.dto import InventoryItemChanges, InventoryItemSpec
from erms.application.set_maintenance import SetMaintenanceHandler
from erms.application.show_inventory import ShowInventoryHandler
from erms.application.update_inventory_item import UpdateInventoryItemHandler
from erms.domain.exceptions import (
    ConstraintViolationError,
    EntityNotFoundError,
    ValidationError,
)
from erms.domain.model.inventory import EquipmentCategory, InventoryStatus
from erms.domain.model.reservation import ReservationStatus
from tests.fakes import (
    FakeInventoryRepository,
    FakeItemLocks,
    FakeReservationRepository,
    day,
    make_item,
    make_reservation,
)


class TestAddInventoryItem:

    def test_defaults_applied(self):
        repo = FakeInventoryRepository()
        handler = AddInventoryItemHandler(repo, id_factory=lambda: "inv-9")

        dto = handler.handle(InventoryItemSpec(
            name="Generator 50kVA", category="generator",
            total_quantity=3, daily_rate="8000",
        ))

        assert dto.inventory_id == "inv-9"
        assert dto.category == "GENERATOR"
        assert dto.status == "AVAILABLE"
        assert dto.available_quantity == 3
        assert dto.daily_rate == "8000.00 LKR"
        assert dto.condition_rating == 5
        assert dto.min_rental_duration_hours == 1
        assert dto.max_rental_duration_days == 365
        assert repo.get_by_id("inv-9") is not None

    def test_generated_ids_are_unique(self):
        repo = FakeInventoryRepository()
        handler = AddInventoryItemHandler(repo)
        spec = InventoryItemSpec(name="Loader", category="LOADER", total_quantity=1, daily_rate="1")
        first = handler.handle(spec).inventory_id
        second = handler.handle(spec).inventory_id
        assert first != second
        assert len(repo.list_all()) == 2

    def test_currency_applies_to_both_rates(self):
        handler = AddInventoryItemHandler(FakeInventoryRepository(), default_currency="USD")
        dto = handler.handle(InventoryItemSpec(
            name="Forklift", category="FORKLIFT", total_quantity=2,
            daily_rate="120", hourly_rate="20",
        ))
        assert dto.daily_rate == "120.00 USD"
        assert dto.hourly_rate == "20.00 USD"

    def test_unknown_category(self):
        handler = AddInventoryItemHandler(FakeInventoryRepository())
        with pytest.raises(ValidationError, match="Unknown equipment category"):
            handler.handle(InventoryItemSpec(
                name="Rocket", category="SPACESHIP", total_quantity=1, daily_rate="1",
            ))

    @pytest.mark.parametrize("field, message", [
        ("condition_rating", "Condition rating"),
        ("min_rental_duration_hours", "Minimum rental duration"),
        ("max_rental_duration_days", "Maximum rental duration"),
    ])
    def test_explicit_zero_is_rejected_not_defaulted(self, field, message):
        repo = FakeInventoryRepository()
        handler = AddInventoryItemHandler(repo)
        with pytest.raises(ValidationError, match=message):
            handler.handle(InventoryItemSpec(
                name="Crane", category="CRANE", total_quantity=1, daily_rate="1",
                **{field: 0},
            ))
        assert repo.list_all() == []

    def test_unsupported_currency(self):
        handler = AddInventoryItemHandler(FakeInventoryRepository())
        with pytest.raises(ValidationError):
            handler.handle(InventoryItemSpec(
                name="Crane", category="CRANE", total_quantity=1,
                daily_rate="1", currency="XYZ",
            ))


class TestUpdateInventoryItem:

    def _handler(self, item):
        repo = FakeInventoryRepository([item])
        return UpdateInventoryItemHandler(repo, FakeItemLocks()), repo

    def test_descriptive_fields(self):
        handler, repo = self._handler(make_item())
        handler.handle("inv-1", InventoryItemChanges(
            name="Excavator CAT 320D", location="Yard 2", tags=["heavy"],
        ))
        item = repo.get_by_id("inv-1")
        assert item.name == "Excavator CAT 320D"
        assert item.location == "Yard 2"
        assert item.tags == ["heavy"]

    def test_grow_pool(self):
        handler, _ = self._handler(make_item(total=5, reserved=3))
        dto = handler.handle("inv-1", InventoryItemChanges(total_quantity=8))
        assert dto.total_quantity == 8
        assert dto.available_quantity == 5

    def test_shrink_below_reserved_rejected(self):
        handler, repo = self._handler(make_item(total=5, reserved=3))
        with pytest.raises(ConstraintViolationError, match="3 units are currently reserved"):
            handler.handle("inv-1", InventoryItemChanges(total_quantity=2))
        assert repo.get_by_id("inv-1").total_quantity == 5

    def test_currency_change_reprices(self):
        handler, _ = self._handler(make_item())
        dto = handler.handle("inv-1", InventoryItemChanges(currency="EUR", daily_rate="90"))
        assert dto.daily_rate == "90.00 EUR"

    def test_invalid_setting_rejected(self):
        handler, repo = self._handler(make_item())
        with pytest.raises(ValidationError, match="Condition rating"):
            handler.handle("inv-1", InventoryItemChanges(condition_rating=0))
        assert repo.get_by_id("inv-1").condition_rating == 5

    def test_force_retired(self):
        handler, _ = self._handler(make_item(total=5, reserved=2))
        dto = handler.handle("inv-1", InventoryItemChanges(status="retired"))
        assert dto.status == "RETIRED"
        assert dto.available_quantity == 0

    def test_derived_status_lifts_force(self):
        item = make_item(total=5)
        item.enter_maintenance()
        handler, _ = self._handler(item)
        dto = handler.handle("inv-1", InventoryItemChanges(status="AVAILABLE"))
        assert dto.status == "AVAILABLE"

    def test_derived_status_must_match_counters(self):
        item = make_item(total=5, reserved=5)
        item.retire()
        handler, repo = self._handler(item)

        with pytest.raises(ValidationError, match="the item is UNAVAILABLE"):
            handler.handle("inv-1", InventoryItemChanges(status="AVAILABLE"))

        assert repo.get_by_id("inv-1").status == InventoryStatus.RETIRED

    def test_matching_derived_status_returns_item_to_service(self):
        item = make_item(total=5, reserved=2)
        item.retire()
        handler, _ = self._handler(item)
        dto = handler.handle("inv-1", InventoryItemChanges(status="PARTIALLY_AVAILABLE"))
        assert dto.status == "PARTIALLY_AVAILABLE"

    def test_unknown_item(self):
        handler, _ = self._handler(make_item())
        with pytest.raises(EntityNotFoundError):
            handler.handle("missing", InventoryItemChanges(name="x"))


class TestDeleteInventoryItem:

    def test_soft_delete_hides_item(self):
        inventory_repo = FakeInventoryRepository([make_item()])
        handler = DeleteInventoryItemHandler(
            inventory_repo, FakeReservationRepository(), FakeItemLocks()
        )

        handler.handle("inv-1")

        assert inventory_repo.get_by_id("inv-1") is None
        assert inventory_repo.list_all() == []
        assert inventory_repo.get_including_deleted("inv-1").is_deleted

    def test_active_reservations_block_delete(self):
        inventory_repo = FakeInventoryRepository([make_item(reserved=2)])
        reservation_repo = FakeReservationRepository([
            make_reservation("res-1", 2, day(1), day(3)),
        ])
        handler = DeleteInventoryItemHandler(inventory_repo, reservation_repo, FakeItemLocks())

        with pytest.raises(ConstraintViolationError, match="1 active reservation"):
            handler.handle("inv-1")
        assert inventory_repo.get_by_id("inv-1") is not None

    def test_history_does_not_block_delete(self):
        inventory_repo = FakeInventoryRepository([make_item()])
        reservation_repo = FakeReservationRepository([
            make_reservation("res-1", 2, day(1), day(3), status=ReservationStatus.COMPLETED),
        ])
        DeleteInventoryItemHandler(inventory_repo, reservation_repo, FakeItemLocks()).handle("inv-1")
        assert inventory_repo.get_by_id("inv-1") is None

    def test_unknown_item(self):
        handler = DeleteInventoryItemHandler(
            FakeInventoryRepository(), FakeReservationRepository(), FakeItemLocks()
        )
        with pytest.raises(EntityNotFoundError):
            handler.handle("missing")


class TestMaintenance:

    def test_fully_reserved_item_cannot_enter_maintenance(self):
        repo = FakeInventoryRepository([make_item(total=5, reserved=5)])
        with pytest.raises(ConstraintViolationError, match="5 units are reserved"):
            SetMaintenanceHandler(repo, FakeItemLocks()).handle("inv-1")
        assert repo.get_by_id("inv-1").status == InventoryStatus.UNAVAILABLE

    def test_set_and_clear(self):
        inventory_repo = FakeInventoryRepository([make_item(total=5)])
        reservation_repo = FakeReservationRepository()
        locks = FakeItemLocks()

        dto = SetMaintenanceHandler(inventory_repo, locks).handle("inv-1", "2030-01-02")
        assert dto.status == "MAINTENANCE"
        assert dto.available_quantity == 0
        assert dto.last_maintenance_date == "2030-01-02"

        dto = ClearMaintenanceHandler(inventory_repo, reservation_repo, locks).handle("inv-1")
        assert dto.status == "AVAILABLE"
        assert dto.available_quantity == 5

    def test_clear_recomputes_counters(self):
        item = make_item(total=5, reserved=0)
        item.retire()
        inventory_repo = FakeInventoryRepository([item])
        reservation_repo = FakeReservationRepository([
            make_reservation("res-1", 2, day(1), day(3)),
        ])

        dto = ClearMaintenanceHandler(inventory_repo, reservation_repo, FakeItemLocks()).handle("inv-1")

        assert dto.reserved_quantity == 2
        assert dto.status == "PARTIALLY_AVAILABLE"

    def test_clear_on_item_in_service(self):
        handler = ClearMaintenanceHandler(
            FakeInventoryRepository([make_item()]), FakeReservationRepository(), FakeItemLocks()
        )
        with pytest.raises(ValidationError, match="is not under maintenance"):
            handler.handle("inv-1")


class TestShowInventory:

    @pytest.fixture
    def handler(self):
        crane = make_item(
            "inv-2", total=2, reserved=2, name="Tower Crane",
            category=EquipmentCategory.CRANE, tags=["lifting"],
        )
        mixer = make_item(
            "inv-3", total=4, name="Concrete Mixer",
            category=EquipmentCategory.CONCRETE_MIXER,
            description="Drum mixer for small sites",
        )
        retired = make_item("inv-4", total=1, name="Old Loader", category=EquipmentCategory.LOADER)
        retired.retire()
        return ShowInventoryHandler(
            FakeInventoryRepository([make_item(total=5), crane, mixer, retired])
        )

    def test_get(self, handler):
        assert handler.get("inv-2").name == "Tower Crane"

    def test_get_missing(self, handler):
        with pytest.raises(EntityNotFoundError):
            handler.get("nope")

    def test_list_all(self, handler):
        assert len(handler.list_all()) == 4

    def test_by_category(self, handler):
        assert [i.inventory_id for i in handler.by_category("crane")] == ["inv-2"]

    def test_by_status(self, handler):
        assert [i.inventory_id for i in handler.by_status("UNAVAILABLE")] == ["inv-2"]
        assert [i.inventory_id for i in handler.by_status("RETIRED")] == ["inv-4"]

    def test_available_excludes_full_and_forced(self, handler):
        assert sorted(i.inventory_id for i in handler.available()) == ["inv-1", "inv-3"]

    @pytest.mark.parametrize("term, expected", [
        ("crane", ["inv-2"]),
        ("LIFT", ["inv-2"]),
        ("small sites", ["inv-3"]),
        ("zz", []),
    ])
    def test_search(self, handler, term, expected):
        assert [i.inventory_id for i in handler.search(term)] == expected

    def test_search_term_too_short(self, handler):
        with pytest.raises(ValidationError, match="at least 2 characters"):
            handler.search(" a ")

    def test_categories(self):
        categories = ShowInventoryHandler.categories()
        assert "EXCAVATOR" in categories
        assert len(categories) == len(EquipmentCategory)
