import click

from erms.infrastructure.bootstrap import configure_logging
from erms.infrastructure.cli.inventory_commands import (
    inventory_add,
    inventory_categories,
    inventory_clear_maintenance,
    inventory_delete,
    inventory_list,
    inventory_maintenance,
    inventory_search,
    inventory_show,
    inventory_update,
)
from erms.infrastructure.cli.reservation_commands import (
    reservation_cancel,
    reservation_check,
    reservation_confirm,
    reservation_create,
    reservation_delete,
    reservation_end,
    reservation_list,
    reservation_show,
    reservation_start,
    reservation_update,
)


@click.group()
def cli() -> None:
    """ERMS — Equipment Rental Management System"""
    configure_logging()


@cli.group()
def inventory() -> None:
    """Manage the equipment catalog."""


@cli.group()
def reservation() -> None:
    """Book equipment and move bookings through their lifecycle."""


# Register subcommands
inventory.add_command(inventory_add)
inventory.add_command(inventory_categories)
inventory.add_command(inventory_clear_maintenance)
inventory.add_command(inventory_delete)
inventory.add_command(inventory_list)
inventory.add_command(inventory_maintenance)
inventory.add_command(inventory_search)
inventory.add_command(inventory_show)
inventory.add_command(inventory_update)
reservation.add_command(reservation_cancel)
reservation.add_command(reservation_check)
reservation.add_command(reservation_confirm)
reservation.add_command(reservation_create)
reservation.add_command(reservation_delete)
reservation.add_command(reservation_end)
reservation.add_command(reservation_list)
reservation.add_command(reservation_show)
reservation.add_command(reservation_start)
reservation.add_command(reservation_update)
