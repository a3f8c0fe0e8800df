"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from erms.domain.model.reservation import Reservation, ReservationStatus


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input is malformed: bad interval, non-positive quantity, out-of-bounds duration."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or has been soft-deleted)."""


class ConstraintViolationError(DomainException):
    """An inventory mutation would break an invariant on outstanding reservations."""


class CapacityConflictError(DomainException):
    """Not enough free units for the requested window."""

    def __init__(
        self,
        message: str,
        available_quantity: int,
        requested_quantity: int,
        conflicts: list[Reservation] | None = None,
    ) -> None:
        super().__init__(message)
        self.available_quantity = available_quantity
        self.requested_quantity = requested_quantity
        self.conflicts = list(conflicts or [])


class InvalidTransitionError(DomainException):
    """A lifecycle operation was attempted from a state that does not allow it."""

    def __init__(
        self,
        message: str,
        current_status: ReservationStatus,
        target_status: ReservationStatus,
    ) -> None:
        super().__init__(message)
        self.current_status = current_status
        self.target_status = target_status


class ResourceBusyError(DomainException):
    """The per-item lock could not be acquired in time."""

    def __init__(self, inventory_id: str) -> None:
        super().__init__(
            f"Inventory item '{inventory_id}' is busy, re-read and try again"
        )
        self.inventory_id = inventory_id
