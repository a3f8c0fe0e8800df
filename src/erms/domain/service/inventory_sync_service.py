"""Domain service: Inventory Sync.

Re-derives an item's ``reserved_quantity`` from the reservations that
currently hold capacity and writes it back.  This is the only code path
that writes the reservation counters; the item's derived status and
available quantity follow from them.

Callers must hold the item lock: the read of the reservation set and the
write of the counters form one check-then-act sequence.
"""

from __future__ import annotations

from erms.domain.model.inventory import InventoryItem
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.reservation_repository import ReservationRepository


class InventorySyncService:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._reservation_repo = reservation_repo

    def resync(self, inventory_id: str) -> InventoryItem | None:
        """Recompute and persist counters; returns the refreshed item.

        A missing (or soft-deleted) item is left alone and None is
        returned.  Running this twice with no reservation change in
        between leaves the counters identical.
        """
        item = self._inventory_repo.get_by_id(inventory_id)
        if item is None:
            return None

        active = self._reservation_repo.list_active(inventory_id)
        reserved = sum(r.quantity.value for r in active)

        item.apply_reservation_counts(reserved)
        self._inventory_repo.save(item)
        return item
