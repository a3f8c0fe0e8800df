"""Abstract repository for the Reservation aggregate.

Reservations are keyed by ``(inventory_id, reservation_id)`` with a
secondary lookup by ``inventory_id``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from erms.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def get(self, inventory_id: str, reservation_id: str) -> Reservation | None:
        """Return a reservation by its composite key, or None."""

    @abstractmethod
    def list_by_inventory_id(self, inventory_id: str) -> list[Reservation]:
        """Return every reservation for an item, whatever its status."""

    @abstractmethod
    def list_active(self, inventory_id: str) -> list[Reservation]:
        """Return PENDING, CONFIRMED and ACTIVE reservations for an item."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a new or updated reservation."""

    @abstractmethod
    def delete(self, inventory_id: str, reservation_id: str) -> None:
        """Physically remove a reservation (administrative correction only)."""
