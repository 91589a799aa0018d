"""
Tests for forbidden hours and team eligibility.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shift_grid.assignment_store import AssignmentStore
from shift_grid.conflicts import forbidden_slots, is_forbidden, reason_for
from shift_grid.eligibility import is_eligible, visible_employees, visible_locations
from shift_grid.errors import InvalidIntervalError
from shift_grid.models import DEFAULT_LOCATIONS, Employee, ForbiddenInterval, Location
from shift_grid.time_model import parse_slot, to_index


def interval(day, start, end, reason=None):
    return ForbiddenInterval(day, to_index(start), to_index(end), reason)


@pytest.fixture
def locations():
    return [Location.from_dict(item) for item in DEFAULT_LOCATIONS]


@pytest.fixture
def alice():
    return Employee(
        id="1",
        name="Alice",
        teams=["Sales"],
        expected_hours=4,
        forbidden_hours=[interval("1", "12:00", "13:00", "Lunch")]
    )


def test_interval_is_half_open(alice):
    """Start is forbidden, end is not."""
    assert not is_forbidden(alice, "1", parse_slot("11:30"))
    assert is_forbidden(alice, "1", parse_slot("12:00"))
    assert is_forbidden(alice, "1", parse_slot("12:30"))
    assert not is_forbidden(alice, "1", parse_slot("13:00"))


def test_interval_only_applies_to_its_day(alice):
    assert not is_forbidden(alice, "2", parse_slot("12:00"))


def test_interval_must_start_before_end():
    with pytest.raises(InvalidIntervalError):
        interval("1", "13:00", "12:00")
    with pytest.raises(InvalidIntervalError):
        interval("1", "12:00", "12:00")


def test_interval_from_exchange_format():
    parsed = ForbiddenInterval.from_dict({"day": 2, "startTime": "09:00", "endTime": "10:30"})
    assert parsed.day == "2"
    assert parsed.start == 540 and parsed.end == 630
    assert parsed.reason is None
    assert "reason" not in parsed.to_dict()


def test_reason_of_overlapping_intervals(alice):
    alice.forbidden_hours.append(interval("1", "12:30", "14:00", "Appointment"))
    assert reason_for(alice, "1", parse_slot("12:30")) == "Lunch"
    assert reason_for(alice, "1", parse_slot("13:30")) == "Appointment"
    assert reason_for(alice, "1", parse_slot("15:00")) is None


def test_forbidden_slots_lists_covered_slots(alice):
    assert [slot.label for slot in forbidden_slots(alice, "1")] == ["12:00", "12:30"]
    assert forbidden_slots(alice, "3") == []


def test_empty_filter_makes_everyone_eligible(alice, locations):
    for location in locations:
        assert is_eligible(alice, location, frozenset())


def test_employee_team_matches_filter(alice, locations):
    kitchen = next(loc for loc in locations if loc.name == "Kitchen")
    assert is_eligible(alice, kitchen, frozenset({"Sales"}))


def test_break_room_takes_employees_outside_filtered_teams(alice, locations):
    """A shared location tagged with the filtered team accepts anyone."""
    break_room = next(loc for loc in locations if loc.name == "Break Room")
    conference = next(loc for loc in locations if loc.name == "Conference Room A")
    team_filter = frozenset({"Service"})

    assert is_eligible(alice, break_room, team_filter)
    assert not is_eligible(alice, conference, team_filter)


def test_all_teams_location_meets_any_filter(alice, locations):
    """Two non-Kitchen employees both stay eligible for the Break Room under a Kitchen filter."""
    ben = Employee(id="2", name="Ben", teams=["Reception"])
    break_room = next(loc for loc in locations if loc.name == "Break Room")
    main_hall = next(loc for loc in locations if loc.name == "Main Hall")
    team_filter = frozenset({"Kitchen"})

    assert is_eligible(alice, break_room, team_filter)
    assert is_eligible(ben, break_room, team_filter)
    assert not is_eligible(alice, main_hall, team_filter)
    assert not is_eligible(ben, main_hall, team_filter)


def test_unknown_location_contributes_no_teams(alice):
    assert not is_eligible(alice, None, frozenset({"Service"}))
    assert is_eligible(alice, None, frozenset({"Sales"}))


def test_visible_locations_follow_filter(locations):
    names = [loc.name for loc in visible_locations(locations, frozenset({"Logistics"}))]
    assert names == ["Warehouse", "Storage Room", "Break Room", "Loading Dock"]
    assert len(visible_locations(locations, frozenset())) == len(locations)


def test_visible_employees_include_those_working_filtered_locations(alice, locations):
    bob = Employee(id="2", name="Bob", teams=["Kitchen"])
    carol = Employee(id="3", name="Carol", teams=["Reception"])
    store = AssignmentStore()
    store.add("2", "1", parse_slot("09:00"), "Warehouse")

    shown = visible_employees([alice, bob, carol], store, locations, frozenset({"Sales", "Logistics"}))
    assert [emp.name for emp in shown] == ["Alice", "Bob"]
