"""
Interval Conflict Checker

Tests slots against an employee's forbidden intervals. Intervals may
overlap; a slot is forbidden if any interval for that day covers it.
"""

from typing import List, Optional

from .models import Employee
from .time_model import Slot, slots_in_domain


def is_forbidden(employee: Employee, day: str, slot: Slot) -> bool:
    """Check if the slot lies in [start, end) of any forbidden interval for the day"""
    return any(interval.covers(day, slot) for interval in employee.forbidden_hours)


def reason_for(employee: Employee, day: str, slot: Slot) -> Optional[str]:
    """Reason text of a forbidden interval covering the slot, if any.

    When several intervals cover the slot, the reason of the first one in the
    employee's interval list is returned. No priority between overlapping
    intervals is defined.
    """
    for interval in employee.forbidden_hours:
        if interval.covers(day, slot):
            return interval.reason
    return None


def forbidden_slots(employee: Employee, day: str) -> List[Slot]:
    """All slots of the planning day the employee may not work on the given day"""
    return [slot for slot in slots_in_domain() if is_forbidden(employee, day, slot)]
