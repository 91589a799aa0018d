"""
Assignment Store for the Shift Grid engine

Single source of truth for which employee works which location in which
slot. The store never holds two assignments for the same employee, day and
slot.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, Optional, Set, Tuple

from .errors import SlotOccupiedError
from .time_model import Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Assignment:
    """One employee working one location during one slot on one day"""
    employee_id: str
    day: str
    slot: Slot
    location: str


class AssignmentStore:
    """Mapping of (employee, day, slot) to the location being worked"""

    def __init__(self):
        self._locations: Dict[Tuple[str, str, Slot], str] = {}
        # (day, slot, location) -> employee ids, kept in step with _locations
        self._occupants: Dict[Tuple[str, Slot, str], Set[str]] = {}

    def add(self, employee_id: str, day: str, slot: Slot, location: str) -> bool:
        """Insert an assignment.

        Returns True if the assignment was inserted and False if the identical
        assignment already existed. Raises SlotOccupiedError, leaving the
        store unchanged, if the employee already works a different location
        in that slot.
        """
        key = (employee_id, day, slot)
        existing = self._locations.get(key)
        if existing is not None:
            if existing == location:
                return False
            raise SlotOccupiedError(employee_id, day, slot, existing, location)

        self._locations[key] = location
        self._occupants.setdefault((day, slot, location), set()).add(employee_id)
        logger.debug(f"Assigned {employee_id} to {location} on day {day} at {slot}")
        return True

    def remove(self, employee_id: str, day: str, slot: Slot, location: str) -> bool:
        """Remove an assignment if it matches exactly; returns False when absent"""
        key = (employee_id, day, slot)
        if self._locations.get(key) != location:
            return False

        del self._locations[key]
        cell_key = (day, slot, location)
        occupants = self._occupants[cell_key]
        occupants.discard(employee_id)
        if not occupants:
            del self._occupants[cell_key]
        logger.debug(f"Removed {employee_id} from {location} on day {day} at {slot}")
        return True

    def location_at(self, employee_id: str, day: str, slot: Slot) -> Optional[str]:
        """Location the employee works in the slot, or None"""
        return self._locations.get((employee_id, day, slot))

    def is_scheduled(self, employee_id: str, day: str, slot: Slot,
                     location: Optional[str] = None) -> bool:
        """Check if the employee works the slot (at the given location, if any)"""
        existing = self.location_at(employee_id, day, slot)
        if location is None:
            return existing is not None
        return existing == location

    def assignments_for(self, employee_id: str, day: Optional[str] = None) -> Set[Assignment]:
        """Assignments of one employee, on one day or across all days"""
        return {
            Assignment(emp_id, assigned_day, slot, location)
            for (emp_id, assigned_day, slot), location in self._locations.items()
            if emp_id == employee_id and (day is None or assigned_day == day)
        }

    def occupants_of(self, day: str, slot: Slot, location: str) -> Set[str]:
        """Employee ids scheduled at a grid cell"""
        return set(self._occupants.get((day, slot, location), ()))

    def remove_employee(self, employee_id: str) -> int:
        """Drop every assignment of an employee; returns the number removed"""
        removed = 0
        for assignment in sorted(self.assignments_for(employee_id)):
            if self.remove(assignment.employee_id, assignment.day, assignment.slot, assignment.location):
                removed += 1
        return removed

    def clear(self):
        self._locations.clear()
        self._occupants.clear()

    def snapshot(self) -> FrozenSet[Assignment]:
        """Immutable copy of every assignment, for comparison and export"""
        return frozenset(self)

    def __iter__(self) -> Iterator[Assignment]:
        for (employee_id, day, slot), location in list(self._locations.items()):
            yield Assignment(employee_id, day, slot, location)

    def __len__(self) -> int:
        return len(self._locations)

    def __contains__(self, assignment: object) -> bool:
        if not isinstance(assignment, Assignment):
            return False
        return self.is_scheduled(assignment.employee_id, assignment.day,
                                 assignment.slot, assignment.location)
