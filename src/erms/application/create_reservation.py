"""Application service: Create Reservation use case.

This is the double-booking gate: the only path that adds demand against
an item's capacity.  Steps, all under the item lock:

1. Validate window, quantity and the item's rental-duration bounds.
2. Re-read reservations and run the availability calculator.
3. Persist a PENDING reservation.
4. Re-sync the item's counters from the reservation set.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from erms.application.check_availability import (
    CheckAvailabilityHandler,
    Clock,
    utc_now,
)
from erms.application.dto import ReservationDTO, ReservationRequest, to_reservation_dto
from erms.domain.exceptions import (
    CapacityConflictError,
    EntityNotFoundError,
    ValidationError,
)
from erms.domain.model.inventory import InventoryItem
from erms.domain.model.reservation import Reservation
from erms.domain.model.value_objects import Quantity, RentalPeriod
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.item_lock import ItemLockProvider
from erms.domain.repository.reservation_repository import ReservationRepository
from erms.domain.service.availability_calculator import OverlapPolicy
from erms.domain.service.inventory_sync_service import InventorySyncService

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def validate_duration(item: InventoryItem, period: RentalPeriod) -> None:
    """Both bounds are compared in hours."""
    hours = period.duration_hours
    if hours < item.min_rental_duration_hours:
        raise ValidationError(
            f"Minimum rental duration is {item.min_rental_duration_hours} hours"
        )
    if hours > item.max_rental_duration_days * 24:
        raise ValidationError(
            f"Maximum rental duration is {item.max_rental_duration_days} days"
        )


class CreateReservationHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        locks: ItemLockProvider,
        policy: OverlapPolicy = "sum",
        clock: Clock = utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._reservation_repo = reservation_repo
        self._locks = locks
        self._availability = CheckAvailabilityHandler(
            inventory_repo, reservation_repo, policy=policy, clock=clock
        )
        self._sync = InventorySyncService(inventory_repo, reservation_repo)
        self._id_factory = id_factory

    def handle(self, request: ReservationRequest) -> ReservationDTO:
        period = RentalPeriod(request.start_date, request.end_date)
        quantity = Quantity(request.quantity)

        with self._locks.hold(request.inventory_id):
            item = self._inventory_repo.get_by_id(request.inventory_id)
            if item is None:
                raise EntityNotFoundError(
                    f"Inventory item with ID '{request.inventory_id}' not found"
                )
            validate_duration(item, period)

            availability = self._availability.evaluate(
                request.inventory_id, period, quantity.value
            )
            if not availability.available:
                logger.warning(
                    "Capacity conflict on %s: requested %d, %d available over %s",
                    request.inventory_id, quantity.value,
                    availability.available_quantity, period,
                )
                raise CapacityConflictError(
                    f"Only {availability.available_quantity} units available "
                    f"for the requested period. Requested: {quantity.value}",
                    available_quantity=availability.available_quantity,
                    requested_quantity=quantity.value,
                    conflicts=availability.conflicts,
                )

            reservation = Reservation.create(
                reservation_id=self._id_factory(),
                inventory_id=request.inventory_id,
                user_id=request.user_id,
                quantity=quantity,
                period=period,
                rental_id=request.rental_id,
                notes=request.notes,
            )
            self._reservation_repo.save(reservation)
            item = self._sync.resync(request.inventory_id)

        logger.info(
            "Reservation %s created on %s (%d units, %s); reserved=%d",
            reservation.reservation_id, request.inventory_id, quantity.value,
            period, item.reserved_quantity if item else 0,
        )
        return to_reservation_dto(reservation)
