"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging

from erms.infrastructure.config import Settings
from erms.infrastructure.locking import FileItemLocks
from erms.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from erms.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)


def settings() -> Settings:
    return Settings()


def configure_logging() -> None:
    logging.basicConfig(
        level=settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def inventory_repository() -> JsonInventoryRepository:
    return JsonInventoryRepository(settings().data_dir / "inventory.json")


def reservation_repository() -> JsonReservationRepository:
    return JsonReservationRepository(settings().data_dir / "reservations.json")


def item_locks() -> FileItemLocks:
    config = settings()
    return FileItemLocks(config.data_dir / "locks", timeout=config.lock_timeout_seconds)
