"""Domain service: Availability Calculator.

Pure functions — no repository access.  Given an item, the reservations
recorded against it and a requested window, decide whether the requested
number of units is free.

Two ways to measure how much of the item is already committed in the
window are supported:

``sum``
    Add up the quantity of every overlapping reservation.  Conservative:
    three bookings that overlap the window but never all at once are
    still counted together, so some feasible requests are rejected.

``peak``
    Sweep the window and take the highest concurrent demand.  Exact.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal

from erms.domain.model.inventory import InventoryItem
from erms.domain.model.reservation import Reservation
from erms.domain.model.value_objects import RentalPeriod

OverlapPolicy = Literal["sum", "peak"]


@dataclass(frozen=True)
class Availability:
    available: bool
    available_quantity: int
    requested_quantity: int
    conflicts: list[Reservation] = field(default_factory=list)


def overlapping(
    reservations: Iterable[Reservation],
    period: RentalPeriod,
    exclude_reservation_id: str | None = None,
) -> list[Reservation]:
    """Active reservations whose window intersects *period*."""
    return [
        r
        for r in reservations
        if r.is_active
        and r.reservation_id != exclude_reservation_id
        and r.period.overlaps(period)
    ]


def peak_demand(reservations: Iterable[Reservation], period: RentalPeriod) -> int:
    """Highest number of units simultaneously held inside *period*."""
    events: list[tuple] = []
    for r in reservations:
        start = max(r.period.start, period.start)
        end = min(r.period.end, period.end)
        if start >= end:
            continue
        events.append((start, r.quantity.value))
        events.append((end, -r.quantity.value))

    # Releases sort before claims at the same instant (half-open windows).
    events.sort(key=lambda e: (e[0], e[1]))

    running = peak = 0
    for _, delta in events:
        running += delta
        peak = max(peak, running)
    return peak


def committed_quantity(
    conflicts: list[Reservation],
    period: RentalPeriod,
    policy: OverlapPolicy = "sum",
) -> int:
    if policy == "peak":
        return peak_demand(conflicts, period)
    if policy == "sum":
        return sum(r.quantity.value for r in conflicts)
    raise ValueError(f"Unknown overlap policy: {policy!r}")


def check_availability(
    item: InventoryItem,
    reservations: Iterable[Reservation],
    period: RentalPeriod,
    quantity: int,
    policy: OverlapPolicy = "sum",
    exclude_reservation_id: str | None = None,
) -> Availability:
    """Decide whether *quantity* units of *item* are free over *period*.

    Items forced into MAINTENANCE or RETIRED are never available.
    """
    if item.is_forced:
        return Availability(
            available=False,
            available_quantity=0,
            requested_quantity=quantity,
        )

    conflicts = overlapping(reservations, period, exclude_reservation_id)
    free = item.total_quantity - committed_quantity(conflicts, period, policy)

    return Availability(
        available=free >= quantity,
        available_quantity=max(free, 0),
        requested_quantity=quantity,
        conflicts=conflicts,
    )
