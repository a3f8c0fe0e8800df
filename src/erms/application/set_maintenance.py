"""Application service: Set Maintenance use case.

Maintenance forces the item's status; reservation re-sync keeps
updating the counters but never lifts the forced status.
"""

from __future__ import annotations

import logging

from erms.application.dto import InventoryItemDTO, to_item_dto
from erms.domain.exceptions import EntityNotFoundError
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider

logger = logging.getLogger(__name__)


class SetMaintenanceHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        locks: ItemLockProvider,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._locks = locks

    def handle(self, inventory_id: str, maintenance_date: str | None = None) -> InventoryItemDTO:
        with self._locks.hold(inventory_id):
            item = self._inventory_repo.get_by_id(inventory_id)
            if item is None:
                raise EntityNotFoundError(
                    f"Inventory item with ID '{inventory_id}' not found"
                )
            item.enter_maintenance(maintenance_date)
            self._inventory_repo.save(item)

        logger.info("Inventory item %s set to maintenance", inventory_id)
        return to_item_dto(item)
