"""
Hours Aggregator

Derives assigned hours from the assignment store. Hours are never stored
on the employee, so they cannot drift from the slots actually held.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .assignment_store import AssignmentStore
from .models import Employee
from .time_model import SLOT_MINUTES

HOURS_PER_SLOT = SLOT_MINUTES / 60


@dataclass
class HoursStatus:
    """Assigned versus expected hours for one employee"""
    employee_id: str
    assigned_hours: float
    expected_hours: float

    @property
    def deviation(self) -> float:
        return self.assigned_hours - self.expected_hours

    @property
    def needs_more_hours(self) -> bool:
        return self.assigned_hours < self.expected_hours

    @property
    def label(self) -> Optional[str]:
        """User facing description of the gap, None when the target is met exactly"""
        if self.deviation > 0:
            return f"Overwork {format_hours(self.deviation)} more hours"
        if self.deviation < 0:
            return f"Needs {format_hours(-self.deviation)} more hours"
        return None


def format_hours(hours: float) -> str:
    """Format hours without a trailing ".0" for whole numbers"""
    if float(hours).is_integer():
        return str(int(hours))
    return f"{hours:.1f}"


def assigned_hours(store: AssignmentStore, employee_id: str) -> float:
    """Total assigned hours across all days (each slot is half an hour)"""
    return len(store.assignments_for(employee_id)) * HOURS_PER_SLOT


def needs_more_hours(store: AssignmentStore, employee: Employee) -> bool:
    return assigned_hours(store, employee.id) < employee.expected_hours


def hours_status(store: AssignmentStore, employee: Employee) -> HoursStatus:
    return HoursStatus(
        employee_id=employee.id,
        assigned_hours=assigned_hours(store, employee.id),
        expected_hours=employee.expected_hours
    )


def categorize(store: AssignmentStore,
               employees: Iterable[Employee]) -> Tuple[List[Employee], List[Employee]]:
    """Split employees into (fully scheduled, needs more hours), order preserved"""
    fully_scheduled, needs_hours = [], []
    for employee in employees:
        if needs_more_hours(store, employee):
            needs_hours.append(employee)
        else:
            fully_scheduled.append(employee)
    return fully_scheduled, needs_hours
