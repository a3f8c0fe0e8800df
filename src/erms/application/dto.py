"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from erms.domain.model.inventory import InventoryItem
from erms.domain.model.reservation import Reservation
from erms.domain.service.availability_calculator import Availability


# --- Input --------------------------------------------------------------------


@dataclass(frozen=True)
class InventoryItemSpec:
    """Input: a new piece of equipment for the catalog."""

    name: str
    category: str
    total_quantity: int
    daily_rate: str
    description: str = ""
    model: str = ""
    serial_number: str = ""
    location: str = ""
    hourly_rate: str | None = None
    currency: str | None = None
    supplier_id: str | None = None
    condition_rating: int | None = None
    next_maintenance_date: str | None = None
    specifications: dict[str, Any] = field(default_factory=dict)
    images: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    min_rental_duration_hours: int | None = None
    max_rental_duration_days: int | None = None


@dataclass(frozen=True)
class InventoryItemChanges:
    """Input: partial update of a catalog item.  ``None`` means unchanged."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    model: str | None = None
    serial_number: str | None = None
    location: str | None = None
    total_quantity: int | None = None
    daily_rate: str | None = None
    hourly_rate: str | None = None
    currency: str | None = None
    supplier_id: str | None = None
    condition_rating: int | None = None
    last_maintenance_date: str | None = None
    next_maintenance_date: str | None = None
    specifications: dict[str, Any] | None = None
    images: list[str] | None = None
    tags: list[str] | None = None
    min_rental_duration_hours: int | None = None
    max_rental_duration_days: int | None = None
    status: str | None = None


@dataclass(frozen=True)
class ReservationRequest:
    """Input: who wants how many units of which item, and when."""

    inventory_id: str
    user_id: str
    quantity: int
    start_date: datetime
    end_date: datetime
    rental_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ReservationChanges:
    """Input: partial update of a reservation.  ``None`` means unchanged."""

    quantity: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    rental_id: str | None = None
    notes: str | None = None

    @property
    def reschedules(self) -> bool:
        return (
            self.quantity is not None
            or self.start_date is not None
            or self.end_date is not None
        )


# --- Output -------------------------------------------------------------------


@dataclass(frozen=True)
class InventoryItemDTO:
    inventory_id: str
    name: str
    category: str
    status: str
    total_quantity: int
    reserved_quantity: int
    available_quantity: int
    daily_rate: str  # formatted, e.g. "15000.00 LKR"
    hourly_rate: str | None
    location: str
    condition_rating: int
    min_rental_duration_hours: int
    max_rental_duration_days: int
    last_maintenance_date: str | None
    tags: list[str]


@dataclass(frozen=True)
class ReservationDTO:
    reservation_id: str
    inventory_id: str
    user_id: str
    quantity: int
    start_date: str
    end_date: str
    status: str
    rental_id: str | None
    notes: str | None
    created_at: str


@dataclass(frozen=True)
class AvailabilityDTO:
    available: bool
    available_quantity: int
    requested_quantity: int
    conflicts: list[ReservationDTO]


# --- Mapping ------------------------------------------------------------------


def to_item_dto(item: InventoryItem) -> InventoryItemDTO:
    return InventoryItemDTO(
        inventory_id=item.inventory_id,
        name=item.name,
        category=item.category.value,
        status=item.status.value,
        total_quantity=item.total_quantity,
        reserved_quantity=item.reserved_quantity,
        available_quantity=item.available_quantity,
        daily_rate=str(item.daily_rate),
        hourly_rate=str(item.hourly_rate) if item.hourly_rate else None,
        location=item.location,
        condition_rating=item.condition_rating,
        min_rental_duration_hours=item.min_rental_duration_hours,
        max_rental_duration_days=item.max_rental_duration_days,
        last_maintenance_date=item.last_maintenance_date,
        tags=list(item.tags),
    )


def to_reservation_dto(reservation: Reservation) -> ReservationDTO:
    return ReservationDTO(
        reservation_id=reservation.reservation_id,
        inventory_id=reservation.inventory_id,
        user_id=reservation.user_id,
        quantity=reservation.quantity.value,
        start_date=reservation.period.start.isoformat(),
        end_date=reservation.period.end.isoformat(),
        status=reservation.status.value,
        rental_id=reservation.rental_id,
        notes=reservation.notes,
        created_at=reservation.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def to_availability_dto(availability: Availability) -> AvailabilityDTO:
    return AvailabilityDTO(
        available=availability.available,
        available_quantity=availability.available_quantity,
        requested_quantity=availability.requested_quantity,
        conflicts=[to_reservation_dto(r) for r in availability.conflicts],
    )
