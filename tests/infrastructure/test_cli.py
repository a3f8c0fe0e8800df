"""End-to-end tests of the click CLI against a temporary data directory."""

import re

import pytest
from click.testing import CliRunner

from erms.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("ERMS_DATA_DIR", str(tmp_path))
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args))

    return invoke


def _add_excavator(run, quantity="5"):
    result = run(
        "inventory", "add",
        "--name", "Excavator CAT 320",
        "--category", "excavator",
        "--quantity", quantity,
        "--daily-rate", "15000",
        "--tag", "heavy",
        "--spec", "engine=C7",
    )
    assert result.exit_code == 0, result.output
    return re.search(r"Inventory item (\S+) created", result.output).group(1)


def _reserve(run, inventory_id, quantity, start, end):
    return run(
        "reservation", "create", inventory_id,
        "--user", "user-1",
        "--quantity", str(quantity),
        "--start", start,
        "--end", end,
    )


def _reservation_id(result):
    return re.search(r"Reservation (\S+)\s+\(status=", result.output).group(1)


class TestInventoryCommands:

    def test_add_and_show(self, run):
        inventory_id = _add_excavator(run)

        result = run("inventory", "show", inventory_id)

        assert result.exit_code == 0
        assert "Excavator CAT 320" in result.output
        assert "15000.00 LKR" in result.output
        assert "5 total, 0 reserved, 5 available" in result.output

    def test_list_and_search(self, run):
        inventory_id = _add_excavator(run)

        assert inventory_id in run("inventory", "list").output
        assert inventory_id in run("inventory", "list", "--category", "EXCAVATOR").output
        assert "No inventory items found." in run("inventory", "list", "--category", "CRANE").output
        assert inventory_id in run("inventory", "search", "heavy").output

    def test_search_term_too_short(self, run):
        result = run("inventory", "search", "x")
        assert result.exit_code != 0
        assert "at least 2 characters" in result.output

    def test_categories(self, run):
        result = run("inventory", "categories")
        assert "DUMP_TRUCK" in result.output.splitlines()

    def test_invalid_spec_pair(self, run):
        result = run(
            "inventory", "add", "--name", "Crane", "--category", "CRANE",
            "--quantity", "1", "--daily-rate", "1", "--spec", "nonsense",
        )
        assert result.exit_code != 0
        assert "Expected 'key=value'" in result.output

    def test_maintenance_cycle(self, run):
        inventory_id = _add_excavator(run)

        result = run("inventory", "maintenance", inventory_id, "--date", "2099-01-01")
        assert "is now MAINTENANCE" in result.output

        result = run("inventory", "clear-maintenance", inventory_id)
        assert "is now AVAILABLE" in result.output

    def test_update_and_delete(self, run):
        inventory_id = _add_excavator(run)

        result = run("inventory", "update", inventory_id, "--quantity", "8", "--location", "Yard 2")
        assert result.exit_code == 0, result.output
        assert "8 total" in result.output

        assert run("inventory", "delete", inventory_id).exit_code == 0
        result = run("inventory", "show", inventory_id)
        assert result.exit_code != 0
        assert "not found" in result.output


class TestReservationCommands:

    def test_double_booking_is_refused(self, run):
        inventory_id = _add_excavator(run)

        first = _reserve(run, inventory_id, 3, "2099-01-01", "2099-01-05")
        assert first.exit_code == 0, first.output
        assert "status=PENDING" in first.output

        second = _reserve(run, inventory_id, 3, "2099-01-02", "2099-01-04")
        assert second.exit_code != 0
        assert "Only 2 units available" in second.output
        assert "Conflicting reservations:" in second.output

        check = run(
            "reservation", "check", inventory_id,
            "--start", "2099-01-02", "--end", "2099-01-04", "--quantity", "2",
        )
        assert "2 unit(s) available" in check.output

    def test_lifecycle(self, run):
        inventory_id = _add_excavator(run)
        reservation_id = _reservation_id(
            _reserve(run, inventory_id, 2, "2099-02-01", "2099-02-03")
        )

        result = run("reservation", "start", inventory_id, reservation_id)
        assert result.exit_code != 0
        assert "with status PENDING" in result.output

        for command, status in [("confirm", "CONFIRMED"), ("start", "ACTIVE"), ("end", "COMPLETED")]:
            result = run("reservation", command, inventory_id, reservation_id)
            assert result.exit_code == 0, result.output
            assert f"is now {status}" in result.output

        assert "5 available" in run("inventory", "show", inventory_id).output

    def test_update_list_and_delete(self, run):
        inventory_id = _add_excavator(run)
        reservation_id = _reservation_id(
            _reserve(run, inventory_id, 1, "2099-03-01", "2099-03-02")
        )

        result = run(
            "reservation", "update", inventory_id, reservation_id,
            "--quantity", "2", "--notes", "bring fuel",
        )
        assert result.exit_code == 0, result.output
        assert "Units:    2" in result.output
        assert "bring fuel" in result.output

        assert reservation_id in run("reservation", "list", inventory_id).output

        result = run("reservation", "delete", inventory_id, reservation_id, "--yes")
        assert result.exit_code == 0, result.output
        assert "No reservations found." in run("reservation", "list", inventory_id).output

    def test_cannot_delete_item_with_active_booking(self, run):
        inventory_id = _add_excavator(run)
        _reserve(run, inventory_id, 1, "2099-04-01", "2099-04-02")

        result = run("inventory", "delete", inventory_id)

        assert result.exit_code != 0
        assert "1 active reservation(s)" in result.output
