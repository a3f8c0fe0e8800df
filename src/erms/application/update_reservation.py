"""Application service: Update Reservation use case.

Changing dates or quantity re-runs the capacity check against the new
values, leaving the reservation being edited out of the conflict set.
Status is never changed here; the lifecycle handlers own it.
"""

from __future__ import annotations

import logging

from erms.application.check_availability import (
    CheckAvailabilityHandler,
    Clock,
    utc_now,
)
from erms.application.create_reservation import validate_duration
from erms.application.dto import ReservationChanges, ReservationDTO, to_reservation_dto
from erms.domain.exceptions import CapacityConflictError, EntityNotFoundError
from erms.domain.model.value_objects import Quantity, RentalPeriod
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider
from erms.domain.repository.reservation_repository import ReservationRepository
from erms.domain.service.availability_calculator import OverlapPolicy
from erms.domain.service.inventory_sync_service import InventorySyncService

logger = logging.getLogger(__name__)


class UpdateReservationHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        locks: ItemLockProvider,
        policy: OverlapPolicy = "sum",
        clock: Clock = utc_now,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._reservation_repo = reservation_repo
        self._locks = locks
        self._availability = CheckAvailabilityHandler(
            inventory_repo, reservation_repo, policy=policy, clock=clock
        )
        self._sync = InventorySyncService(inventory_repo, reservation_repo)

    def handle(
        self,
        inventory_id: str,
        reservation_id: str,
        changes: ReservationChanges,
    ) -> ReservationDTO:
        with self._locks.hold(inventory_id):
            reservation = self._reservation_repo.get(inventory_id, reservation_id)
            if reservation is None:
                raise EntityNotFoundError(
                    f"Reservation with ID '{reservation_id}' not found"
                )

            if changes.reschedules:
                reservation.ensure_reschedulable()
                period = RentalPeriod(
                    changes.start_date or reservation.period.start,
                    changes.end_date or reservation.period.end,
                )
                quantity = (
                    Quantity(changes.quantity)
                    if changes.quantity is not None
                    else reservation.quantity
                )
                self._check_capacity(inventory_id, reservation_id, period, quantity)
                reservation.reschedule(period, quantity)

            if changes.rental_id is not None:
                reservation.rental_id = changes.rental_id
            if changes.notes is not None:
                reservation.notes = changes.notes
            reservation.touch()

            self._reservation_repo.save(reservation)
            self._sync.resync(inventory_id)

        logger.info(
            "Reservation %s on %s updated (%d units, %s)",
            reservation_id, inventory_id, reservation.quantity.value, reservation.period,
        )
        return to_reservation_dto(reservation)

    def _check_capacity(
        self,
        inventory_id: str,
        reservation_id: str,
        period: RentalPeriod,
        quantity: Quantity,
    ) -> None:
        item = self._inventory_repo.get_by_id(inventory_id)
        if item is None:
            raise EntityNotFoundError(
                f"Inventory item with ID '{inventory_id}' not found"
            )
        validate_duration(item, period)

        # An in-flight rental may legitimately have started already.
        availability = self._availability.evaluate(
            inventory_id,
            period,
            quantity.value,
            exclude_reservation_id=reservation_id,
            reject_past=False,
        )
        if not availability.available:
            logger.warning(
                "Capacity conflict updating %s on %s: requested %d, %d available",
                reservation_id, inventory_id, quantity.value,
                availability.available_quantity,
            )
            raise CapacityConflictError(
                f"Requested changes conflict with existing reservations: only "
                f"{availability.available_quantity} units available, "
                f"requested {quantity.value}",
                available_quantity=availability.available_quantity,
                requested_quantity=quantity.value,
                conflicts=availability.conflicts,
            )
