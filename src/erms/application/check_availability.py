"""Application service: Check Availability use case (query).

Also used by the create and update handlers, inside their item lock, as
the capacity gate.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from erms.application.dto import AvailabilityDTO, to_availability_dto
from erms.domain.exceptions import EntityNotFoundError, ValidationError
from erms.domain.model.value_objects import Quantity, RentalPeriod
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.domain.repository.reservation_repository import ReservationRepository
from erms.domain.service.availability_calculator import (
    Availability,
    OverlapPolicy,
    check_availability,
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckAvailabilityHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        reservation_repo: ReservationRepository,
        policy: OverlapPolicy = "sum",
        clock: Clock = utc_now,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._reservation_repo = reservation_repo
        self._policy = policy
        self._clock = clock

    def handle(
        self,
        inventory_id: str,
        start_date: datetime,
        end_date: datetime,
        quantity: int,
    ) -> AvailabilityDTO:
        period = RentalPeriod(start_date, end_date)
        availability = self.evaluate(inventory_id, period, Quantity(quantity).value)
        return to_availability_dto(availability)

    def evaluate(
        self,
        inventory_id: str,
        period: RentalPeriod,
        quantity: int,
        exclude_reservation_id: str | None = None,
        reject_past: bool = True,
    ) -> Availability:
        """Run the calculator against freshly read item and reservations."""
        item = self._inventory_repo.get_by_id(inventory_id)
        if item is None:
            raise EntityNotFoundError(
                f"Inventory item with ID '{inventory_id}' not found"
            )

        if reject_past and period.start < self._clock():
            raise ValidationError("Start date cannot be in the past")

        reservations = self._reservation_repo.list_active(inventory_id)
        return check_availability(
            item,
            reservations,
            period,
            quantity,
            policy=self._policy,
            exclude_reservation_id=exclude_reservation_id,
        )
