"""Application service: Show Inventory use cases (queries)."""

from __future__ import annotations

from erms.application.dto import InventoryItemDTO, to_item_dto
from erms.domain.exceptions import EntityNotFoundError, ValidationError
from erms.domain.model.inventory import EquipmentCategory, InventoryStatus
from erms.domain.repository.inventory_repository import InventoryRepository

MIN_SEARCH_LENGTH = 2


class ShowInventoryHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def get(self, inventory_id: str) -> InventoryItemDTO:
        item = self._inventory_repo.get_by_id(inventory_id)
        if item is None:
            raise EntityNotFoundError(
                f"Inventory item with ID '{inventory_id}' not found"
            )
        return to_item_dto(item)

    def list_all(self) -> list[InventoryItemDTO]:
        return [to_item_dto(i) for i in self._inventory_repo.list_all()]

    def by_category(self, category: str) -> list[InventoryItemDTO]:
        parsed = EquipmentCategory.parse(category)
        return [to_item_dto(i) for i in self._inventory_repo.list_by_category(parsed)]

    def by_status(self, status: str) -> list[InventoryItemDTO]:
        parsed = InventoryStatus.parse(status)
        return [to_item_dto(i) for i in self._inventory_repo.list_by_status(parsed)]

    def available(self) -> list[InventoryItemDTO]:
        """Items with at least one unit free right now."""
        return [
            to_item_dto(i)
            for i in self._inventory_repo.list_all()
            if i.available_quantity > 0
        ]

    def search(self, term: str) -> list[InventoryItemDTO]:
        """Case-insensitive match on name, description or tags."""
        term = (term or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise ValidationError(
                f"Search term must be at least {MIN_SEARCH_LENGTH} characters"
            )
        needle = term.lower()
        return [
            to_item_dto(i)
            for i in self._inventory_repo.list_all()
            if needle in i.name.lower()
            or needle in i.description.lower()
            or any(needle in tag.lower() for tag in i.tags)
        ]

    @staticmethod
    def categories() -> list[str]:
        return [c.value for c in EquipmentCategory]
