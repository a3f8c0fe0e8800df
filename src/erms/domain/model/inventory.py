"""InventoryItem aggregate — one equipment SKU and its shared unit pool.

The item knows how many physical units exist (``total_quantity``) and how
many are promised to active reservations (``reserved_quantity``).  The
reserved counter is a materialized view over the reservation set: it is
written only through ``apply_reservation_counts`` by the sync service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from erms.domain.exceptions import ConstraintViolationError, ValidationError
from erms.domain.model.value_objects import Money


class EquipmentCategory(Enum):
    EXCAVATOR = "EXCAVATOR"
    CRANE = "CRANE"
    LOADER = "LOADER"
    BULLDOZER = "BULLDOZER"
    FORKLIFT = "FORKLIFT"
    COMPACTOR = "COMPACTOR"
    GENERATOR = "GENERATOR"
    SCAFFOLDING = "SCAFFOLDING"
    CONCRETE_MIXER = "CONCRETE_MIXER"
    DUMP_TRUCK = "DUMP_TRUCK"
    OTHER = "OTHER"

    @staticmethod
    def parse(raw: str) -> EquipmentCategory:
        try:
            return EquipmentCategory(raw.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown equipment category: {raw!r}") from exc


class InventoryStatus(Enum):
    AVAILABLE = "AVAILABLE"
    PARTIALLY_AVAILABLE = "PARTIALLY_AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    MAINTENANCE = "MAINTENANCE"
    RETIRED = "RETIRED"

    @property
    def is_forced(self) -> bool:
        return self in FORCED_STATUSES

    @staticmethod
    def parse(raw: str) -> InventoryStatus:
        try:
            return InventoryStatus(raw.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown inventory status: {raw!r}") from exc


FORCED_STATUSES = frozenset({InventoryStatus.MAINTENANCE, InventoryStatus.RETIRED})

DEFAULT_CONDITION_RATING = 5
DEFAULT_MIN_RENTAL_HOURS = 1
DEFAULT_MAX_RENTAL_DAYS = 365


def derive_status(available: int, total: int) -> InventoryStatus:
    if available <= 0:
        return InventoryStatus.UNAVAILABLE
    if available == total:
        return InventoryStatus.AVAILABLE
    return InventoryStatus.PARTIALLY_AVAILABLE


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class InventoryItem:
    """Aggregate root for an equipment SKU.

    Invariants:
    - ``reserved_quantity`` equals the summed quantity of the item's
      active reservations (across all windows, so it can exceed
      ``total_quantity`` when bookings do not overlap in time)
    - ``status`` is either forced (MAINTENANCE / RETIRED) or derived from
      the counters; the counters never overwrite a forced status
    - ``available_quantity`` is 0 while forced

    Use ``InventoryItem.create()`` for new items.  ``__init__`` stays plain
    so repositories can reconstitute persisted records.
    """

    inventory_id: str
    name: str
    category: EquipmentCategory
    total_quantity: int
    daily_rate: Money
    reserved_quantity: int = 0
    description: str = ""
    model: str = ""
    serial_number: str = ""
    location: str = ""
    hourly_rate: Money | None = None
    supplier_id: str | None = None
    condition_rating: int = DEFAULT_CONDITION_RATING
    last_maintenance_date: str | None = None
    next_maintenance_date: str | None = None
    specifications: dict[str, Any] = field(default_factory=dict)
    images: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    min_rental_duration_hours: int = DEFAULT_MIN_RENTAL_HOURS
    max_rental_duration_days: int = DEFAULT_MAX_RENTAL_DAYS
    forced_status: InventoryStatus | None = None
    is_deleted: bool = False
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        inventory_id: str,
        name: str,
        category: EquipmentCategory,
        total_quantity: int,
        daily_rate: Money,
        **optional: Any,
    ) -> InventoryItem:
        """Create a new item with every unit available."""
        if not name or not name.strip():
            raise ValidationError("Equipment name is required")
        if isinstance(total_quantity, bool) or not isinstance(total_quantity, int):
            raise ValidationError("Total quantity must be an integer")
        if total_quantity < 0:
            raise ValidationError("Total quantity cannot be negative")

        item = InventoryItem(
            inventory_id=inventory_id,
            name=name.strip(),
            category=category,
            total_quantity=total_quantity,
            daily_rate=daily_rate,
            **optional,
        )
        item.validate_settings()
        return item

    def validate_settings(self) -> None:
        if self.daily_rate.amount <= 0:
            raise ValidationError("Daily rate must be greater than zero")
        if not 1 <= self.condition_rating <= 5:
            raise ValidationError("Condition rating must be between 1 and 5")
        if self.min_rental_duration_hours < 1:
            raise ValidationError("Minimum rental duration must be at least 1 hour")
        if self.max_rental_duration_days < 1:
            raise ValidationError("Maximum rental duration must be at least 1 day")
        if self.hourly_rate is not None and self.hourly_rate.amount <= 0:
            raise ValidationError("Hourly rate must be greater than zero")

    # --- Derived state --------------------------------------------------------

    @property
    def unreserved_quantity(self) -> int:
        """Arithmetic free units, ignoring any forced status."""
        return self.total_quantity - self.reserved_quantity

    @property
    def available_quantity(self) -> int:
        if self.forced_status is not None:
            return 0
        return max(self.unreserved_quantity, 0)

    @property
    def status(self) -> InventoryStatus:
        if self.forced_status is not None:
            return self.forced_status
        return derive_status(self.unreserved_quantity, self.total_quantity)

    @property
    def is_forced(self) -> bool:
        return self.forced_status is not None

    # --- Counter sync (reservation lifecycle only) ----------------------------

    def apply_reservation_counts(self, reserved_quantity: int) -> None:
        """Overwrite the reserved counter with a freshly summed value.

        Forced status is left untouched.
        """
        if reserved_quantity < 0:
            raise ValidationError("Reserved quantity cannot be negative")
        self.reserved_quantity = reserved_quantity
        self.touch()

    # --- Catalog mutations (item manager only) --------------------------------

    def resize(self, new_total: int) -> None:
        """Change the number of physical units.

        ``new_available = old_available + (new_total - old_total)`` must stay
        non-negative, i.e. the pool cannot shrink below what is reserved.
        """
        if isinstance(new_total, bool) or not isinstance(new_total, int):
            raise ValidationError("Total quantity must be an integer")
        if new_total < 0:
            raise ValidationError("Total quantity cannot be negative")
        new_available = self.unreserved_quantity + (new_total - self.total_quantity)
        if new_available < 0:
            raise ConstraintViolationError(
                f"Cannot reduce total quantity of {self.name} to {new_total}: "
                f"{self.reserved_quantity} units are currently reserved"
            )
        self.total_quantity = new_total
        self.touch()

    def enter_maintenance(self, maintenance_date: str | None = None) -> None:
        if self.reserved_quantity > 0:
            raise ConstraintViolationError(
                f"Cannot set {self.name} to maintenance while "
                f"{self.reserved_quantity} units are reserved"
            )
        self.forced_status = InventoryStatus.MAINTENANCE
        if maintenance_date:
            self.last_maintenance_date = maintenance_date
        self.touch()

    def retire(self) -> None:
        self.forced_status = InventoryStatus.RETIRED
        self.touch()

    def clear_forced_status(self) -> None:
        self.forced_status = None
        self.touch()

    def mark_deleted(self) -> None:
        self.is_deleted = True
        self.touch()

    def touch(self) -> None:
        self.updated_at = _now()
