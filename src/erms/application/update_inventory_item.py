"""Application service: Update Inventory Item use case.

Resizing the unit pool and forcing a status are the two catalog edits
that interact with outstanding reservations, so the whole update runs
under the item lock.
"""

from __future__ import annotations

import logging

from erms.application.dto import InventoryItemChanges, InventoryItemDTO, to_item_dto
from erms.domain.exceptions import EntityNotFoundError, ValidationError
from erms.domain.model.inventory import (
    EquipmentCategory,
    InventoryItem,
    InventoryStatus,
)
from erms.domain.model.value_objects import Money
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider

logger = logging.getLogger(__name__)

# Plain attributes copied verbatim when present.
_SIMPLE_FIELDS = (
    "description",
    "model",
    "serial_number",
    "location",
    "supplier_id",
    "condition_rating",
    "last_maintenance_date",
    "next_maintenance_date",
    "specifications",
    "images",
    "tags",
    "min_rental_duration_hours",
    "max_rental_duration_days",
)


class UpdateInventoryItemHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        locks: ItemLockProvider,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._locks = locks

    def handle(self, inventory_id: str, changes: InventoryItemChanges) -> InventoryItemDTO:
        with self._locks.hold(inventory_id):
            item = self._inventory_repo.get_by_id(inventory_id)
            if item is None:
                raise EntityNotFoundError(
                    f"Inventory item with ID '{inventory_id}' not found"
                )

            self._apply_descriptive(item, changes)

            if changes.total_quantity is not None:
                item.resize(changes.total_quantity)

            if changes.status is not None:
                self._apply_status(item, InventoryStatus.parse(changes.status))

            item.validate_settings()
            item.touch()
            self._inventory_repo.save(item)

        logger.info(
            "Inventory item %s updated (total=%d, status=%s)",
            item.inventory_id, item.total_quantity, item.status.value,
        )
        return to_item_dto(item)

    @staticmethod
    def _apply_descriptive(item: InventoryItem, changes: InventoryItemChanges) -> None:
        if changes.name is not None:
            item.name = changes.name.strip() or item.name
        if changes.category is not None:
            item.category = EquipmentCategory.parse(changes.category)
        for name in _SIMPLE_FIELDS:
            value = getattr(changes, name)
            if value is not None:
                setattr(item, name, value)

        currency = (changes.currency or item.daily_rate.currency).upper()
        daily = changes.daily_rate if changes.daily_rate is not None else item.daily_rate.amount
        item.daily_rate = Money.of(daily, currency)
        if changes.hourly_rate is not None:
            item.hourly_rate = Money.of(changes.hourly_rate, currency)
        elif item.hourly_rate is not None:
            item.hourly_rate = Money.of(item.hourly_rate.amount, currency)

    @staticmethod
    def _apply_status(item: InventoryItem, status: InventoryStatus) -> None:
        """Forced statuses are set explicitly; a derived one lifts the force.

        A derived status must agree with the counters once the force is
        lifted, otherwise the request is refused.
        """
        if status is InventoryStatus.MAINTENANCE:
            item.enter_maintenance()
        elif status is InventoryStatus.RETIRED:
            item.retire()
        else:
            item.clear_forced_status()
            if item.status is not status:
                raise ValidationError(
                    f"Status {status.value} cannot be set directly: with "
                    f"{item.reserved_quantity} of {item.total_quantity} units "
                    f"reserved the item is {item.status.value}"
                )
