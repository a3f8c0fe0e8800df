"""Application service: Add Inventory Item use case."""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from erms.application.dto import InventoryItemDTO, InventoryItemSpec, to_item_dto
from erms.domain.model.inventory import (
    DEFAULT_CONDITION_RATING,
    DEFAULT_MAX_RENTAL_DAYS,
    DEFAULT_MIN_RENTAL_HOURS,
    EquipmentCategory,
    InventoryItem,
)
from erms.domain.model.value_objects import DEFAULT_CURRENCY, Money
from erms.domain.repository.inventory_repository import InventoryRepository

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _or_default(value: int | None, default: int) -> int:
    """Only an omitted value falls back; an explicit 0 is validated."""
    return default if value is None else value


class AddInventoryItemHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        default_currency: str = DEFAULT_CURRENCY,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._default_currency = default_currency
        self._id_factory = id_factory

    def handle(self, spec: InventoryItemSpec) -> InventoryItemDTO:
        """Register new equipment with every unit available."""
        currency = (spec.currency or self._default_currency).upper()

        item = InventoryItem.create(
            inventory_id=self._id_factory(),
            name=spec.name,
            category=EquipmentCategory.parse(spec.category),
            total_quantity=spec.total_quantity,
            daily_rate=Money.of(spec.daily_rate, currency),
            description=spec.description,
            model=spec.model,
            serial_number=spec.serial_number,
            location=spec.location,
            hourly_rate=(
                Money.of(spec.hourly_rate, currency)
                if spec.hourly_rate is not None
                else None
            ),
            supplier_id=spec.supplier_id,
            condition_rating=_or_default(spec.condition_rating, DEFAULT_CONDITION_RATING),
            next_maintenance_date=spec.next_maintenance_date,
            specifications=dict(spec.specifications),
            images=list(spec.images),
            tags=list(spec.tags),
            min_rental_duration_hours=_or_default(
                spec.min_rental_duration_hours, DEFAULT_MIN_RENTAL_HOURS
            ),
            max_rental_duration_days=_or_default(
                spec.max_rental_duration_days, DEFAULT_MAX_RENTAL_DAYS
            ),
        )
        self._inventory_repo.save(item)

        logger.info(
            "Inventory item %s created (%s, %d units)",
            item.inventory_id, item.name, item.total_quantity,
        )
        return to_item_dto(item)
