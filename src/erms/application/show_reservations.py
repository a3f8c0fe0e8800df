"""Application service: Show Reservations use case (query)."""

from __future__ import annotations

from erms.application.dto import ReservationDTO, to_reservation_dto
from erms.domain.exceptions import EntityNotFoundError
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.reservation_repository import ReservationRepository


class ShowReservationsHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._reservation_repo = reservation_repo

    def get(self, inventory_id: str, reservation_id: str) -> ReservationDTO:
        reservation = self._reservation_repo.get(inventory_id, reservation_id)
        if reservation is None:
            raise EntityNotFoundError(
                f"Reservation with ID '{reservation_id}' not found"
            )
        return to_reservation_dto(reservation)

    def for_item(self, inventory_id: str) -> list[ReservationDTO]:
        """Full booking history of an item, earliest window first."""
        if self._inventory_repo.get_by_id(inventory_id) is None:
            raise EntityNotFoundError(
                f"Inventory item with ID '{inventory_id}' not found"
            )
        reservations = sorted(
            self._reservation_repo.list_by_inventory_id(inventory_id),
            key=lambda r: (r.period.start, r.period.end),
        )
        return [to_reservation_dto(r) for r in reservations]
