"""JSON-file-backed implementation of ReservationRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from erms.domain.model.reservation import Reservation, ReservationStatus
from erms.domain.model.value_objects import Quantity, RentalPeriod
from erms.domain.repository.reservation_repository import ReservationRepository
from erms.infrastructure.persistence.json_file import (
    ensure_file,
    load_records,
    updating_records,
)


def _matches(raw: dict, inventory_id: str, reservation_id: str) -> bool:
    return raw["inventory_id"] == inventory_id and raw["reservation_id"] == reservation_id


class JsonReservationRepository(ReservationRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        ensure_file(self._file_path)

    # --- ReservationRepository interface --------------------------------------

    def get(self, inventory_id: str, reservation_id: str) -> Reservation | None:
        for raw in load_records(self._file_path):
            if _matches(raw, inventory_id, reservation_id):
                return self._to_domain(raw)
        return None

    def list_by_inventory_id(self, inventory_id: str) -> list[Reservation]:
        return [
            self._to_domain(raw)
            for raw in load_records(self._file_path)
            if raw["inventory_id"] == inventory_id
        ]

    def list_active(self, inventory_id: str) -> list[Reservation]:
        return [r for r in self.list_by_inventory_id(inventory_id) if r.is_active]

    def save(self, reservation: Reservation) -> None:
        with updating_records(self._file_path) as records:
            for i, raw in enumerate(records):
                if _matches(raw, reservation.inventory_id, reservation.reservation_id):
                    records[i] = self._to_raw(reservation)
                    break
            else:
                records.append(self._to_raw(reservation))

    def delete(self, inventory_id: str, reservation_id: str) -> None:
        with updating_records(self._file_path) as records:
            records[:] = [
                raw for raw in records
                if not _matches(raw, inventory_id, reservation_id)
            ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "reservation_id": reservation.reservation_id,
            "inventory_id": reservation.inventory_id,
            "user_id": reservation.user_id,
            "quantity": reservation.quantity.value,
            "start_date": reservation.period.start.isoformat(),
            "end_date": reservation.period.end.isoformat(),
            "status": reservation.status.value,
            "rental_id": reservation.rental_id,
            "notes": reservation.notes,
            "created_at": reservation.created_at.isoformat(),
            "updated_at": reservation.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        return Reservation(
            reservation_id=raw["reservation_id"],
            inventory_id=raw["inventory_id"],
            user_id=raw["user_id"],
            quantity=Quantity(raw["quantity"]),
            period=RentalPeriod(
                datetime.fromisoformat(raw["start_date"]),
                datetime.fromisoformat(raw["end_date"]),
            ),
            status=ReservationStatus(raw["status"]),
            rental_id=raw.get("rental_id"),
            notes=raw.get("notes"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
