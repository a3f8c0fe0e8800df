"""Application services: Confirm / Start / End / Cancel Reservation.

Each use case loads the reservation, asks the aggregate to make the
transition (which raises InvalidTransitionError from a state that does
not permit it), persists it and re-syncs the item's counters.
"""

from __future__ import annotations

import logging

from erms.application.dto import ReservationDTO, to_reservation_dto
from erms.domain.exceptions import EntityNotFoundError
from erms.domain.model.reservation import Reservation
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider
from erms.domain.repository.reservation_repository import ReservationRepository
from erms.domain.service.inventory_sync_service import InventorySyncService

logger = logging.getLogger(__name__)


class _ReservationTransitionHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        locks: ItemLockProvider,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._locks = locks
        self._sync = InventorySyncService(inventory_repo, reservation_repo)

    def handle(self, inventory_id: str, reservation_id: str) -> ReservationDTO:
        with self._locks.hold(inventory_id):
            reservation = self._reservation_repo.get(inventory_id, reservation_id)
            if reservation is None:
                raise EntityNotFoundError(
                    f"Reservation with ID '{reservation_id}' not found"
                )

            previous = reservation.status
            self._apply(reservation)
            self._reservation_repo.save(reservation)
            self._sync.resync(inventory_id)

        logger.info(
            "Reservation %s on %s: %s -> %s",
            reservation_id, inventory_id, previous.value, reservation.status.value,
        )
        return to_reservation_dto(reservation)

    def _apply(self, reservation: Reservation) -> None:
        raise NotImplementedError


class ConfirmReservationHandler(_ReservationTransitionHandler):
    """PENDING -> CONFIRMED."""

    def _apply(self, reservation: Reservation) -> None:
        reservation.confirm()


class StartRentalHandler(_ReservationTransitionHandler):
    """CONFIRMED -> ACTIVE, when the equipment is picked up."""

    def _apply(self, reservation: Reservation) -> None:
        reservation.start()


class EndRentalHandler(_ReservationTransitionHandler):
    """ACTIVE -> COMPLETED, when the equipment is returned.  Releases units."""

    def _apply(self, reservation: Reservation) -> None:
        reservation.complete()


class CancelReservationHandler(_ReservationTransitionHandler):
    """PENDING|CONFIRMED|ACTIVE -> CANCELLED.  Releases units."""

    def _apply(self, reservation: Reservation) -> None:
        reservation.cancel()
