"""Abstract repository for the InventoryItem aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Soft-deleted items are invisible through this port.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from erms.domain.model.inventory import (
    EquipmentCategory,
    InventoryItem,
    InventoryStatus,
)


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, inventory_id: str) -> InventoryItem | None:
        """Return a live item by ID, or None if missing or soft-deleted."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every live item, newest first."""

    @abstractmethod
    def list_by_category(self, category: EquipmentCategory) -> list[InventoryItem]:
        """Return live items of one equipment category."""

    @abstractmethod
    def list_by_status(self, status: InventoryStatus) -> list[InventoryItem]:
        """Return live items whose current status matches."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Persist a new or updated item (including soft-deleted ones)."""
