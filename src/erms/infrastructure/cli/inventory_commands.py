"""CLI commands for the equipment catalog."""

from __future__ import annotations

import click

from erms.application.add_inventory_item import AddInventoryItemHandler
from erms.application.clear_maintenance import ClearMaintenanceHandler
from erms.application.delete_inventory_item import DeleteInventoryItemHandler
from erms.application.dto import (
    InventoryItemChanges,
    InventoryItemDTO,
    InventoryItemSpec,
)
from erms.application.set_maintenance import SetMaintenanceHandler
from erms.application.show_inventory import ShowInventoryHandler
from erms.application.update_inventory_item import UpdateInventoryItemHandler
from erms.domain.exceptions import DomainException
from erms.infrastructure.bootstrap import (
    inventory_repository,
    item_locks,
    reservation_repository,
    settings,
)


def _parse_specs(raw: tuple[str, ...]) -> dict[str, str]:
    """Parse ('engine=C7', 'weight=20t') into a dict."""
    specs: dict[str, str] = {}
    for pair in raw:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid specification '{pair}'. Expected 'key=value'."
            )
        key, value = pair.split("=", 1)
        specs[key.strip()] = value.strip()
    return specs


def _display_items(items: list[InventoryItemDTO]) -> None:
    if not items:
        click.echo("No inventory items found.")
        return

    click.echo(
        f"{'ID':<36}  {'Name':<24} {'Category':<14} {'Status':<20} "
        f"{'Total':>6} {'Reserved':>9} {'Available':>10}"
    )
    click.echo("-" * 125)
    for item in items:
        click.echo(
            f"{item.inventory_id:<36}  {item.name[:24]:<24} {item.category:<14} "
            f"{item.status:<20} {item.total_quantity:>6} "
            f"{item.reserved_quantity:>9} {item.available_quantity:>10}"
        )


def _display_item(item: InventoryItemDTO) -> None:
    click.echo(f"Item {item.inventory_id}")
    click.echo(f"  Name:       {item.name}")
    click.echo(f"  Category:   {item.category}")
    click.echo(f"  Status:     {item.status}")
    click.echo(
        f"  Units:      {item.total_quantity} total, "
        f"{item.reserved_quantity} reserved, {item.available_quantity} available"
    )
    click.echo(f"  Daily rate: {item.daily_rate}")
    if item.hourly_rate:
        click.echo(f"  Hourly:     {item.hourly_rate}")
    click.echo(f"  Location:   {item.location or '-'}")
    click.echo(
        f"  Rental:     {item.min_rental_duration_hours}h min, "
        f"{item.max_rental_duration_days}d max"
    )
    if item.last_maintenance_date:
        click.echo(f"  Maintained: {item.last_maintenance_date}")
    if item.tags:
        click.echo(f"  Tags:       {', '.join(item.tags)}")


@click.command("add")
@click.option("--name", required=True, help="Equipment name.")
@click.option("--category", required=True, help="Equipment category, e.g. EXCAVATOR.")
@click.option("--quantity", "total_quantity", required=True, type=int, help="Units owned.")
@click.option("--daily-rate", required=True, help="Daily rental rate.")
@click.option("--hourly-rate", default=None, help="Hourly rental rate.")
@click.option("--currency", default=None, help="LKR, USD or EUR.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--model", default="", help="Model or SKU.")
@click.option("--serial", "serial_number", default="", help="Serial number.")
@click.option("--location", default="", help="Warehouse / yard.")
@click.option("--supplier", "supplier_id", default=None, help="Supplier ID.")
@click.option("--condition", "condition_rating", default=None, type=int, help="Rating 1-5.")
@click.option("--min-hours", "min_rental_duration_hours", default=None, type=int)
@click.option("--max-days", "max_rental_duration_days", default=None, type=int)
@click.option("--tag", "tags", multiple=True, help="Search tag (repeatable).")
@click.option("--spec", "specs", multiple=True, help="Specification 'key=value' (repeatable).")
def inventory_add(specs: tuple[str, ...], tags: tuple[str, ...], **fields) -> None:
    """Add equipment to the catalog."""
    spec = InventoryItemSpec(
        specifications=_parse_specs(specs),
        tags=list(tags),
        **fields,
    )
    handler = AddInventoryItemHandler(
        inventory_repo=inventory_repository(),
        default_currency=settings().default_currency,
    )

    try:
        dto = handler.handle(spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory item {dto.inventory_id} created  (status={dto.status})")
    _display_item(dto)


@click.command("update")
@click.argument("inventory_id")
@click.option("--name", default=None)
@click.option("--category", default=None)
@click.option("--quantity", "total_quantity", default=None, type=int, help="New total units.")
@click.option("--daily-rate", default=None)
@click.option("--hourly-rate", default=None)
@click.option("--currency", default=None)
@click.option("--description", default=None)
@click.option("--location", default=None)
@click.option("--condition", "condition_rating", default=None, type=int)
@click.option("--min-hours", "min_rental_duration_hours", default=None, type=int)
@click.option("--max-days", "max_rental_duration_days", default=None, type=int)
@click.option(
    "--status",
    default=None,
    help="MAINTENANCE or RETIRED take the item out of service; a derived "
    "status (e.g. AVAILABLE) only returns it to service and must match its units.",
)
def inventory_update(inventory_id: str, **fields) -> None:
    """Update a catalog item."""
    handler = UpdateInventoryItemHandler(
        inventory_repo=inventory_repository(),
        locks=item_locks(),
    )

    try:
        dto = handler.handle(inventory_id, InventoryItemChanges(**fields))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory item {dto.inventory_id} updated")
    _display_item(dto)


@click.command("show")
@click.argument("inventory_id")
def inventory_show(inventory_id: str) -> None:
    """Show one catalog item."""
    handler = ShowInventoryHandler(inventory_repo=inventory_repository())

    try:
        dto = handler.get(inventory_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item(dto)


@click.command("list")
@click.option("--category", default=None, help="Only this category.")
@click.option("--status", default=None, help="Only this status.")
@click.option("--available", "only_available", is_flag=True, help="Only items with free units.")
def inventory_list(category: str | None, status: str | None, only_available: bool) -> None:
    """List catalog items."""
    handler = ShowInventoryHandler(inventory_repo=inventory_repository())

    try:
        if category:
            items = handler.by_category(category)
        elif status:
            items = handler.by_status(status)
        elif only_available:
            items = handler.available()
        else:
            items = handler.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_items(items)


@click.command("search")
@click.argument("term")
def inventory_search(term: str) -> None:
    """Search items by name, description or tag."""
    handler = ShowInventoryHandler(inventory_repo=inventory_repository())

    try:
        items = handler.search(term)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_items(items)


@click.command("categories")
def inventory_categories() -> None:
    """List the equipment categories."""
    for category in ShowInventoryHandler.categories():
        click.echo(category)


@click.command("delete")
@click.argument("inventory_id")
def inventory_delete(inventory_id: str) -> None:
    """Soft-delete a catalog item."""
    handler = DeleteInventoryItemHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        locks=item_locks(),
    )

    try:
        handler.handle(inventory_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory item {inventory_id} deleted")


@click.command("maintenance")
@click.argument("inventory_id")
@click.option("--date", "maintenance_date", default=None, help="Maintenance date (ISO).")
def inventory_maintenance(inventory_id: str, maintenance_date: str | None) -> None:
    """Take an item out of service for maintenance."""
    handler = SetMaintenanceHandler(
        inventory_repo=inventory_repository(),
        locks=item_locks(),
    )

    try:
        dto = handler.handle(inventory_id, maintenance_date)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory item {dto.inventory_id} is now {dto.status}")


@click.command("clear-maintenance")
@click.argument("inventory_id")
def inventory_clear_maintenance(inventory_id: str) -> None:
    """Put an item back into service."""
    handler = ClearMaintenanceHandler(
        inventory_repo=inventory_repository(),
        reservation_repo=reservation_repository(),
        locks=item_locks(),
    )

    try:
        dto = handler.handle(inventory_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory item {dto.inventory_id} is now {dto.status}")
