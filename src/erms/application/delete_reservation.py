"""Application service: Delete Reservation use case.

Administrative correction only: normal flow cancels or completes
reservations and keeps them as history.  The item's counters are
re-synced afterwards so a removed active reservation frees its units.
"""

from __future__ import annotations

import logging

from erms.domain.exceptions import EntityNotFoundError
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider
from erms.domain.repository.reservation_repository import ReservationRepository
from erms.domain.service.inventory_sync_service import InventorySyncService

logger = logging.getLogger(__name__)


class DeleteReservationHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        locks: ItemLockProvider,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._locks = locks
        self._sync = InventorySyncService(inventory_repo, reservation_repo)

    def handle(self, inventory_id: str, reservation_id: str) -> None:
        with self._locks.hold(inventory_id):
            reservation = self._reservation_repo.get(inventory_id, reservation_id)
            if reservation is None:
                raise EntityNotFoundError(
                    f"Reservation with ID '{reservation_id}' not found"
                )
            self._reservation_repo.delete(inventory_id, reservation_id)
            self._sync.resync(inventory_id)

        logger.warning(
            "Reservation %s on %s hard-deleted (was %s, %d units)",
            reservation_id, inventory_id,
            reservation.status.value, reservation.quantity.value,
        )
