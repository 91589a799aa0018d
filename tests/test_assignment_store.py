import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shift_grid.assignment_store import Assignment, AssignmentStore
from shift_grid.errors import SlotOccupiedError
from shift_grid.time_model import parse_slot


@pytest.fixture
def store():
    """Store with Alice in the Kitchen at 09:00 on day 1."""
    store = AssignmentStore()
    store.add("1", "1", parse_slot("09:00"), "Kitchen")
    return store


def test_add_and_query(store):
    nine = parse_slot("09:00")
    assert store.location_at("1", "1", nine) == "Kitchen"
    assert store.is_scheduled("1", "1", nine)
    assert store.is_scheduled("1", "1", nine, "Kitchen")
    assert not store.is_scheduled("1", "1", nine, "Main Hall")
    assert not store.is_scheduled("1", "2", nine)
    assert len(store) == 1


def test_adding_same_assignment_twice_is_a_no_op(store):
    assert store.add("1", "1", parse_slot("09:00"), "Kitchen") is False
    assert len(store) == 1


def test_second_location_in_same_slot_is_rejected(store):
    before = store.snapshot()
    with pytest.raises(SlotOccupiedError) as exc_info:
        store.add("1", "1", parse_slot("09:00"), "Main Hall")

    assert exc_info.value.existing_location == "Kitchen"
    assert exc_info.value.requested_location == "Main Hall"
    assert store.snapshot() == before


def test_same_slot_on_another_day_is_allowed(store):
    assert store.add("1", "2", parse_slot("09:00"), "Main Hall")
    assert len(store.assignments_for("1")) == 2
    assert len(store.assignments_for("1", day="2")) == 1


def test_cells_hold_many_employees(store):
    store.add("2", "1", parse_slot("09:00"), "Kitchen")
    assert store.occupants_of("1", parse_slot("09:00"), "Kitchen") == {"1", "2"}
    assert store.occupants_of("1", parse_slot("09:30"), "Kitchen") == set()


def test_remove_requires_exact_match(store):
    nine = parse_slot("09:00")
    assert store.remove("1", "1", nine, "Main Hall") is False
    assert store.remove("1", "1", nine, "Kitchen") is True
    assert store.remove("1", "1", nine, "Kitchen") is False
    assert store.occupants_of("1", nine, "Kitchen") == set()
    assert len(store) == 0


def test_remove_employee_drops_all_their_assignments(store):
    store.add("1", "2", parse_slot("10:00"), "Kitchen")
    store.add("2", "1", parse_slot("09:00"), "Kitchen")

    assert store.remove_employee("1") == 2
    assert store.assignments_for("1") == set()
    assert store.occupants_of("1", parse_slot("09:00"), "Kitchen") == {"2"}


def test_iteration_and_membership(store):
    assignment = Assignment("1", "1", parse_slot("09:00"), "Kitchen")
    assert assignment in store
    assert Assignment("1", "1", parse_slot("09:00"), "Main Hall") not in store
    assert list(store) == [assignment]

    store.clear()
    assert len(store) == 0
