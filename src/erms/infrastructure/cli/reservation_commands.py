"""CLI commands for the Reservation aggregate."""

from __future__ import annotations

import click

from erms.application.check_availability import CheckAvailabilityHandler
from erms.application.create_reservation import CreateReservationHandler
from erms.application.delete_reservation import DeleteReservationHandler
from erms.application.dto import (
    ReservationChanges,
    ReservationDTO,
    ReservationRequest,
)
from erms.application.reservation_transitions import (
    CancelReservationHandler,
    ConfirmReservationHandler,
    EndRentalHandler,
    StartRentalHandler,
)
from erms.application.show_reservations import ShowReservationsHandler
from erms.application.update_reservation import UpdateReservationHandler
from erms.domain.exceptions import CapacityConflictError, DomainException
from erms.infrastructure.bootstrap import (
    inventory_repository,
    item_locks,
    reservation_repository,
    settings,
)

# Naive values are interpreted as UTC by the domain.
DATE = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"])


def _fail(exc: DomainException) -> click.ClickException:
    if isinstance(exc, CapacityConflictError) and exc.conflicts:
        held = ", ".join(
            f"{r.reservation_id} ({r.quantity.value})" for r in exc.conflicts
        )
        return click.ClickException(f"{exc}\nConflicting reservations: {held}")
    return click.ClickException(str(exc))


def _display_reservation(dto: ReservationDTO) -> None:
    click.echo(f"Reservation {dto.reservation_id}  (status={dto.status})")
    click.echo(f"  Item:     {dto.inventory_id}")
    click.echo(f"  User:     {dto.user_id}")
    click.echo(f"  Units:    {dto.quantity}")
    click.echo(f"  Window:   {dto.start_date} -> {dto.end_date}")
    if dto.rental_id:
        click.echo(f"  Rental:   {dto.rental_id}")
    if dto.notes:
        click.echo(f"  Notes:    {dto.notes}")


@click.command("check")
@click.argument("inventory_id")
@click.option("--start", "start_date", required=True, type=DATE)
@click.option("--end", "end_date", required=True, type=DATE)
@click.option("--quantity", required=True, type=int)
def reservation_check(inventory_id, start_date, end_date, quantity: int) -> None:
    """Check whether units are free over a window."""
    handler = CheckAvailabilityHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        policy=settings().overlap_policy,
    )

    try:
        dto = handler.handle(inventory_id, start_date, end_date, quantity)
    except DomainException as exc:
        raise _fail(exc)

    verdict = "available" if dto.available else "NOT available"
    click.echo(
        f"{dto.requested_quantity} unit(s) {verdict}  "
        f"({dto.available_quantity} free in window)"
    )
    for conflict in dto.conflicts:
        click.echo(
            f"  {conflict.reservation_id}  {conflict.status:<10} {conflict.quantity:>4}  "
            f"{conflict.start_date} -> {conflict.end_date}"
        )


@click.command("create")
@click.argument("inventory_id")
@click.option("--user", "user_id", required=True, help="Owning user ID.")
@click.option("--quantity", required=True, type=int)
@click.option("--start", "start_date", required=True, type=DATE)
@click.option("--end", "end_date", required=True, type=DATE)
@click.option("--rental", "rental_id", default=None, help="Linked rental ID.")
@click.option("--notes", default=None)
def reservation_create(inventory_id: str, **fields) -> None:
    """Book units of an item."""
    handler = CreateReservationHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        locks=item_locks(),
        policy=settings().overlap_policy,
    )

    try:
        dto = handler.handle(ReservationRequest(inventory_id=inventory_id, **fields))
    except DomainException as exc:
        raise _fail(exc)

    _display_reservation(dto)


@click.command("show")
@click.argument("inventory_id")
@click.argument("reservation_id")
def reservation_show(inventory_id: str, reservation_id: str) -> None:
    """Show one reservation."""
    handler = ShowReservationsHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
    )

    try:
        dto = handler.get(inventory_id, reservation_id)
    except DomainException as exc:
        raise _fail(exc)

    _display_reservation(dto)


@click.command("list")
@click.argument("inventory_id")
def reservation_list(inventory_id: str) -> None:
    """List every reservation of an item."""
    handler = ShowReservationsHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
    )

    try:
        rows = handler.for_item(inventory_id)
    except DomainException as exc:
        raise _fail(exc)

    if not rows:
        click.echo("No reservations found.")
        return

    click.echo(f"{'ID':<36}  {'Status':<10} {'Qty':>4}  {'Start':<25} {'End':<25} User")
    click.echo("-" * 120)
    for row in rows:
        click.echo(
            f"{row.reservation_id:<36}  {row.status:<10} {row.quantity:>4}  "
            f"{row.start_date:<25} {row.end_date:<25} {row.user_id}"
        )


@click.command("update")
@click.argument("inventory_id")
@click.argument("reservation_id")
@click.option("--quantity", default=None, type=int)
@click.option("--start", "start_date", default=None, type=DATE)
@click.option("--end", "end_date", default=None, type=DATE)
@click.option("--rental", "rental_id", default=None)
@click.option("--notes", default=None)
def reservation_update(inventory_id: str, reservation_id: str, **fields) -> None:
    """Change a reservation's window, quantity or notes."""
    handler = UpdateReservationHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        locks=item_locks(),
        policy=settings().overlap_policy,
    )

    try:
        dto = handler.handle(inventory_id, reservation_id, ReservationChanges(**fields))
    except DomainException as exc:
        raise _fail(exc)

    _display_reservation(dto)


def _transition_command(name: str, handler_cls, summary: str) -> click.Command:
    @click.command(name, help=summary)
    @click.argument("inventory_id")
    @click.argument("reservation_id")
    def command(inventory_id: str, reservation_id: str) -> None:
        handler = handler_cls(
            inventory_repo=inventory_repository(),
            reservation_repo=reservation_repository(),
            locks=item_locks(),
        )
        try:
            dto = handler.handle(inventory_id, reservation_id)
        except DomainException as exc:
            raise _fail(exc)
        click.echo(f"Reservation {dto.reservation_id} is now {dto.status}")

    return command


reservation_confirm = _transition_command(
    "confirm", ConfirmReservationHandler, "Confirm a pending reservation."
)
reservation_start = _transition_command(
    "start", StartRentalHandler, "Hand over equipment (CONFIRMED -> ACTIVE)."
)
reservation_end = _transition_command(
    "end", EndRentalHandler, "Take equipment back (ACTIVE -> COMPLETED)."
)
reservation_cancel = _transition_command(
    "cancel", CancelReservationHandler, "Cancel a reservation."
)


@click.command("delete")
@click.argument("inventory_id")
@click.argument("reservation_id")
@click.confirmation_option(prompt="Hard-delete this reservation record?")
def reservation_delete(inventory_id: str, reservation_id: str) -> None:
    """Remove a reservation record (administrative correction)."""
    handler = DeleteReservationHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        locks=item_locks(),
    )

    try:
        handler.handle(inventory_id, reservation_id)
    except DomainException as exc:
        raise _fail(exc)

    click.echo(f"Reservation {reservation_id} deleted")
