"""Application service: Delete Inventory Item use case (soft delete)."""

from __future__ import annotations

import logging

from erms.domain.exceptions import ConstraintViolationError, EntityNotFoundError
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider
from erms.domain.repository.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)


class DeleteInventoryItemHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        locks: ItemLockProvider,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._reservation_repo = reservation_repo
        self._locks = locks

    def handle(self, inventory_id: str) -> None:
        """Flag the item deleted.  Refused while any reservation holds units."""
        with self._locks.hold(inventory_id):
            item = self._inventory_repo.get_by_id(inventory_id)
            if item is None:
                raise EntityNotFoundError(
                    f"Inventory item with ID '{inventory_id}' not found"
                )

            active = self._reservation_repo.list_active(inventory_id)
            if active:
                raise ConstraintViolationError(
                    f"Cannot delete inventory item with "
                    f"{len(active)} active reservation(s)"
                )

            item.mark_deleted()
            self._inventory_repo.save(item)

        logger.info("Inventory item %s deleted", inventory_id)
