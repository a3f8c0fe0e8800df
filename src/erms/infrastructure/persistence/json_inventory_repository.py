"""JSON-file-backed implementation of InventoryRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from erms.domain.model.inventory import (
    EquipmentCategory,
    InventoryItem,
    InventoryStatus,
)
from erms.domain.model.value_objects import Money
from erms.domain.repository.inventory_repository import InventoryRepository
from erms.infrastructure.persistence.json_file import (
    ensure_file,
    load_records,
    updating_records,
)


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        ensure_file(self._file_path)

    # --- InventoryRepository interface ----------------------------------------

    def get_by_id(self, inventory_id: str) -> InventoryItem | None:
        for raw in load_records(self._file_path):
            if raw["inventory_id"] == inventory_id and not raw.get("is_deleted"):
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryItem]:
        items = [
            self._to_domain(raw)
            for raw in load_records(self._file_path)
            if not raw.get("is_deleted")
        ]
        return sorted(items, key=lambda i: i.created_at, reverse=True)

    def list_by_category(self, category: EquipmentCategory) -> list[InventoryItem]:
        return [i for i in self.list_all() if i.category is category]

    def list_by_status(self, status: InventoryStatus) -> list[InventoryItem]:
        return [i for i in self.list_all() if i.status is status]

    def save(self, item: InventoryItem) -> None:
        with updating_records(self._file_path) as records:
            for i, raw in enumerate(records):
                if raw["inventory_id"] == item.inventory_id:
                    records[i] = self._to_raw(item)
                    break
            else:
                records.append(self._to_raw(item))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: InventoryItem) -> dict:
        return {
            "inventory_id": item.inventory_id,
            "name": item.name,
            "description": item.description,
            "category": item.category.value,
            "model": item.model,
            "serial_number": item.serial_number,
            "location": item.location,
            "total_quantity": item.total_quantity,
            "reserved_quantity": item.reserved_quantity,
            "available_quantity": item.available_quantity,
            "status": item.status.value,  # denormalised for readers of the file
            "forced_status": item.forced_status.value if item.forced_status else None,
            "daily_rate": str(item.daily_rate.amount),
            "hourly_rate": str(item.hourly_rate.amount) if item.hourly_rate else None,
            "currency": item.daily_rate.currency,
            "supplier_id": item.supplier_id,
            "condition_rating": item.condition_rating,
            "last_maintenance_date": item.last_maintenance_date,
            "next_maintenance_date": item.next_maintenance_date,
            "specifications": item.specifications,
            "images": item.images,
            "tags": item.tags,
            "min_rental_duration_hours": item.min_rental_duration_hours,
            "max_rental_duration_days": item.max_rental_duration_days,
            "is_deleted": item.is_deleted,
            "created_at": item.created_at.isoformat(),
            "updated_at": item.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryItem:
        currency = raw.get("currency", "LKR")
        forced = raw.get("forced_status")
        hourly = raw.get("hourly_rate")
        return InventoryItem(
            inventory_id=raw["inventory_id"],
            name=raw["name"],
            description=raw.get("description", ""),
            category=EquipmentCategory(raw["category"]),
            model=raw.get("model", ""),
            serial_number=raw.get("serial_number", ""),
            location=raw.get("location", ""),
            total_quantity=raw["total_quantity"],
            reserved_quantity=raw.get("reserved_quantity", 0),
            forced_status=InventoryStatus(forced) if forced else None,
            daily_rate=Money(Decimal(raw["daily_rate"]), currency),
            hourly_rate=Money(Decimal(hourly), currency) if hourly else None,
            supplier_id=raw.get("supplier_id"),
            condition_rating=raw.get("condition_rating", 5),
            last_maintenance_date=raw.get("last_maintenance_date"),
            next_maintenance_date=raw.get("next_maintenance_date"),
            specifications=raw.get("specifications") or {},
            images=raw.get("images") or [],
            tags=raw.get("tags") or [],
            min_rental_duration_hours=raw.get("min_rental_duration_hours", 1),
            max_rental_duration_days=raw.get("max_rental_duration_days", 365),
            is_deleted=raw.get("is_deleted", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
