"""Reservation aggregate — a claim on N units of an item over a time window.

All lifecycle rules live here.  Handlers call the transition methods and
then ask the sync service to re-derive the item's counters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from erms.domain.exceptions import InvalidTransitionError, ValidationError
from erms.domain.model.value_objects import Quantity, RentalPeriod


class ReservationStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def holds_capacity(self) -> bool:
        return self in ACTIVE_STATUSES


# Statuses that count against the item's capacity.
ACTIVE_STATUSES = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.ACTIVE}
)

_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.ACTIVE, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.ACTIVE: frozenset(
        {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Reservation:
    """Aggregate root for an equipment booking.

    Use ``Reservation.create()`` for new reservations; they always start
    PENDING.
    """

    reservation_id: str
    inventory_id: str
    user_id: str
    quantity: Quantity
    period: RentalPeriod
    status: ReservationStatus = ReservationStatus.PENDING
    rental_id: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @staticmethod
    def create(
        reservation_id: str,
        inventory_id: str,
        user_id: str,
        quantity: Quantity,
        period: RentalPeriod,
        rental_id: str | None = None,
        notes: str | None = None,
    ) -> Reservation:
        if not user_id or not user_id.strip():
            raise ValidationError("User ID is required")
        return Reservation(
            reservation_id=reservation_id,
            inventory_id=inventory_id,
            user_id=user_id.strip(),
            quantity=quantity,
            period=period,
            rental_id=rental_id,
            notes=notes,
        )

    @property
    def is_active(self) -> bool:
        return self.status.holds_capacity

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        """PENDING -> CONFIRMED."""
        self._transition(ReservationStatus.CONFIRMED, "confirm")

    def start(self) -> None:
        """CONFIRMED -> ACTIVE (equipment picked up)."""
        self._transition(ReservationStatus.ACTIVE, "start rental for")

    def complete(self) -> None:
        """ACTIVE -> COMPLETED (equipment returned)."""
        self._transition(ReservationStatus.COMPLETED, "end rental for")

    def cancel(self) -> None:
        """PENDING|CONFIRMED|ACTIVE -> CANCELLED."""
        self._transition(ReservationStatus.CANCELLED, "cancel")

    def can_transition_to(self, target: ReservationStatus) -> bool:
        return target in _TRANSITIONS[self.status]

    def _transition(self, target: ReservationStatus, verb: str) -> None:
        if not self.can_transition_to(target):
            raise InvalidTransitionError(
                f"Cannot {verb} reservation {self.reservation_id} "
                f"with status {self.status.value}",
                current_status=self.status,
                target_status=target,
            )
        self.status = target
        self.touch()

    # --- Edits ----------------------------------------------------------------

    def reschedule(self, period: RentalPeriod, quantity: Quantity) -> None:
        """Replace window and quantity.  Capacity is checked by the caller."""
        self.ensure_reschedulable()
        self.period = period
        self.quantity = quantity
        self.touch()

    def ensure_reschedulable(self) -> None:
        if not self.is_active:
            raise InvalidTransitionError(
                f"Cannot change dates or quantity of reservation "
                f"{self.reservation_id} with status {self.status.value}",
                current_status=self.status,
                target_status=self.status,
            )

    def touch(self) -> None:
        self.updated_at = _now()
