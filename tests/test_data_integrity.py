import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shift_grid.data_manager import DataManager
from shift_grid.errors import DataValidationError
from shift_grid.models import DEFAULT_TEAMS, ForbiddenInterval, SchedulingContext
from shift_grid.time_model import parse_slot, to_index


@pytest.fixture
def data_manager():
    """Fixture for a clean, isolated DataManager instance for each test."""
    dm = DataManager()
    # Add a standard set of employees for consistent testing
    dm.add_employee("Alice", teams=["Service"], expected_hours=4)
    dm.add_employee("Bob", teams=["Kitchen", "Service"], expected_hours=2)
    return dm


def test_defaults(data_manager):
    assert len(data_manager.get_locations()) == 10
    assert data_manager.teams == DEFAULT_TEAMS
    assert data_manager.get_setting("planningDays") == 3
    assert data_manager.day_labels() == ["1", "2", "3"]


def test_employee_ids_are_sequential(data_manager):
    assert [emp.id for emp in data_manager.get_employees()] == ["1", "2"]
    carol = data_manager.add_employee("  Carol  ")
    assert carol.id == "3"
    assert carol.name == "Carol"


def test_employee_name_is_required(data_manager):
    with pytest.raises(DataValidationError):
        data_manager.add_employee("   ")


def test_duplicate_employee_id_is_rejected(data_manager):
    with pytest.raises(DataValidationError):
        data_manager.add_employee("Zed", emp_id="1")


def test_deleting_employee_removes_assignments(data_manager):
    """
    Why this is important: hours and grid cells are derived from the store,
    so a deleted employee must not leave assignments behind.
    """
    data_manager.store.add("1", "1", parse_slot("09:00"), "Kitchen")
    data_manager.store.add("1", "2", parse_slot("09:00"), "Kitchen")

    assert data_manager.delete_employee("1")
    assert data_manager.get_employee("1") is None
    assert len(data_manager.store) == 0
    assert not data_manager.delete_employee("1")


def test_update_employee(data_manager):
    assert data_manager.update_employee("2", name="Robert", expected_hours=6)
    bob = data_manager.get_employee("2")
    assert bob.name == "Robert" and bob.expected_hours == 6
    assert data_manager.get_employee_by_name("Robert") is bob
    assert not data_manager.update_employee("99", name="Nobody")


def test_add_forbidden_interval(data_manager):
    interval = ForbiddenInterval("1", to_index("09:00"), to_index("10:00"), "Doctor")
    assert data_manager.add_forbidden_interval("1", interval)
    assert data_manager.get_employee("1").forbidden_hours == [interval]
    assert not data_manager.add_forbidden_interval("99", interval)


def test_employee_teams_for_filter_menu(data_manager):
    assert data_manager.employee_teams() == ["Kitchen", "Service"]


def test_add_location_trims_and_extends_teams(data_manager):
    location = data_manager.add_location("  Rooftop Bar ", ["Drinks", "Service"])

    assert location.name == "Rooftop Bar"
    assert data_manager.location_names()[-1] == "Rooftop Bar"
    assert data_manager.teams[-1] == "Drinks"
    assert data_manager.teams.count("Service") == 1


def test_add_location_validation(data_manager):
    with pytest.raises(DataValidationError, match="Please enter a location name"):
        data_manager.add_location("   ")
    with pytest.raises(DataValidationError, match="already exists"):
        data_manager.add_location("kitchen")


def test_set_location_teams_recomputes_vocabulary(data_manager):
    assert data_manager.set_location_teams("Break Room", ["Everyone"])
    assert "Everyone" in data_manager.teams
    assert "All Teams" not in data_manager.teams
    assert not data_manager.set_location_teams("Nowhere", ["X"])


def test_context_transitions():
    context = SchedulingContext.create()
    assert context.team_filter == frozenset()
    assert context.active_day == "1"

    context = context.toggle_team("Kitchen").toggle_team("Service").with_day("2")
    assert context.team_filter == {"Kitchen", "Service"}
    assert context.active_day == "2"

    context = context.toggle_team("Kitchen")
    assert context.team_filter == {"Service"}
    assert context.clear_teams().team_filter == frozenset()


def test_non_ascii_digit_ids_do_not_break_id_assignment(data_manager):
    data_manager.import_payload({"employees": [
        {"id": "1", "name": "Alice"},
        {"id": "²", "name": "Squared"},
    ]})

    dan = data_manager.add_employee("Dan")
    assert dan.id == "2"
