"""Application service: Clear Maintenance use case.

Lifts a forced MAINTENANCE/RETIRED status so the item's status is derived
from its counters again.
"""

from __future__ import annotations

import logging

from erms.application.dto import InventoryItemDTO, to_item_dto
from erms.domain.exceptions import EntityNotFoundError, ValidationError
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider
from erms.domain.repository.reservation_repository import ReservationRepository
from erms.domain.service.inventory_sync_service import InventorySyncService

logger = logging.getLogger(__name__)


class ClearMaintenanceHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        locks: ItemLockProvider,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._locks = locks
        self._sync = InventorySyncService(inventory_repo, reservation_repo)

    def handle(self, inventory_id: str) -> InventoryItemDTO:
        with self._locks.hold(inventory_id):
            item = self._inventory_repo.get_by_id(inventory_id)
            if item is None:
                raise EntityNotFoundError(
                    f"Inventory item with ID '{inventory_id}' not found"
                )
            if not item.is_forced:
                raise ValidationError(
                    f"Inventory item {item.name} is not under maintenance"
                )
            item.clear_forced_status()
            self._inventory_repo.save(item)
            item = self._sync.resync(inventory_id)

        logger.info(
            "Inventory item %s back in service (status=%s)",
            inventory_id, item.status.value,
        )
        return to_item_dto(item)
