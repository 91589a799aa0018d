"""
Scheduler Logic for the Shift Grid engine

Coordinates the legality checks (forbidden hours, team eligibility,
same-time conflicts) for candidate assignments and exposes the read views
the presentation layer renders from.
"""

import logging
from typing import Any, Dict, List, Optional

from .batch_applier import RangeApplier
from .conflicts import is_forbidden, reason_for
from .data_manager import DataManager
from .eligibility import is_eligible, visible_employees, visible_locations
from .hours import assigned_hours, categorize, hours_status
from .models import Employee, Location, SchedulingContext
from .time_model import Slot

logger = logging.getLogger(__name__)


class ConstraintViolation:
    """Types of constraint violations"""
    UNKNOWN_EMPLOYEE = "Employee not found"
    FORBIDDEN_HOURS = "Employee is not available at this time"
    INELIGIBLE_LOCATION = "Location is not open to the employee under the selected teams"
    SLOT_OCCUPIED = "Employee already has a shift at this time"


class ShiftScheduler:
    """Legality checks and read views over a DataManager"""

    def __init__(self, data_manager: DataManager):
        self.data_manager = data_manager

    @property
    def store(self):
        return self.data_manager.store

    def is_forbidden(self, emp_id: str, day: str, slot: Slot) -> bool:
        employee = self.data_manager.get_employee(emp_id)
        return employee is not None and is_forbidden(employee, day, slot)

    def forbidden_reason(self, emp_id: str, day: str, slot: Slot) -> Optional[str]:
        employee = self.data_manager.get_employee(emp_id)
        if employee is None:
            return None
        return reason_for(employee, day, slot)

    def is_eligible(self, emp_id: str, location_name: str, context: SchedulingContext) -> bool:
        employee = self.data_manager.get_employee(emp_id)
        if employee is None:
            return False
        return is_eligible(employee, self.data_manager.get_location(location_name), context.team_filter)

    def conflict_message(self, employee: Employee, day: str, slot: Slot) -> Optional[str]:
        """Message naming the location already holding the slot, if any"""
        existing = self.store.location_at(employee.id, day, slot)
        if existing is None:
            return None
        return f"{employee.name} already has a shift at {slot.label} in {existing}"

    def validate_assignment(self, emp_id: str, slot: Slot, location_name: str,
                            context: SchedulingContext) -> List[str]:
        """
        Validate a candidate assignment on the context's active day.
        Returns list of constraint violations (empty if valid).
        """
        violations = []
        employee = self.data_manager.get_employee(emp_id)

        if not employee:
            violations.append(ConstraintViolation.UNKNOWN_EMPLOYEE)
            return violations

        day = context.active_day

        # 1. Check inherent properties of the candidate cell
        if is_forbidden(employee, day, slot):
            reason = reason_for(employee, day, slot)
            if reason:
                violations.append(f"{ConstraintViolation.FORBIDDEN_HOURS} ({reason})")
            else:
                violations.append(ConstraintViolation.FORBIDDEN_HOURS)

        location = self.data_manager.get_location(location_name)
        if not is_eligible(employee, location, context.team_filter):
            violations.append(ConstraintViolation.INELIGIBLE_LOCATION)

        # If basic eligibility fails, no need to check relational constraints
        if violations:
            return violations

        # 2. Check the employee's other shifts in the same slot
        message = self.conflict_message(employee, day, slot)
        if message:
            violations.append(f"{ConstraintViolation.SLOT_OCCUPIED}: {message}")

        return violations

    def start_gesture(self, emp_id: str, context: SchedulingContext) -> RangeApplier:
        """Create the drag gesture applier for the selected employee"""
        return RangeApplier(self, emp_id, context)

    def assigned_hours(self, emp_id: str) -> float:
        return assigned_hours(self.store, emp_id)

    def working_employees(self, day: str, slot: Slot, location_name: str) -> List[Employee]:
        """Employees scheduled at a cell, in roster order"""
        occupants = self.store.occupants_of(day, slot, location_name)
        return [emp for emp in self.data_manager.get_employees() if emp.id in occupants]

    def visible_locations(self, context: SchedulingContext) -> List[Location]:
        return visible_locations(self.data_manager.get_locations(), context.team_filter)

    def visible_employees(self, context: SchedulingContext) -> List[Employee]:
        return visible_employees(
            self.data_manager.get_employees(),
            self.store,
            self.data_manager.get_locations(),
            context.team_filter
        )

    def get_hours_statistics(self, employees: Optional[List[Employee]] = None) -> Dict[str, Any]:
        """Calculate assigned-hours statistics for the given (default: all) employees"""
        if employees is None:
            employees = self.data_manager.get_employees()

        fully_scheduled, needs_hours = categorize(self.store, employees)
        stats = {
            "total_employees": len(employees),
            "fully_scheduled": [emp.id for emp in fully_scheduled],
            "needs_hours": [emp.id for emp in needs_hours],
            "total_assigned_hours": 0.0,
            "total_expected_hours": 0.0,
            "employee_stats": {}
        }

        for employee in employees:
            status = hours_status(self.store, employee)
            stats["total_assigned_hours"] += status.assigned_hours
            stats["total_expected_hours"] += status.expected_hours
            stats["employee_stats"][employee.id] = {
                "name": employee.name,
                "assigned_hours": status.assigned_hours,
                "expected_hours": status.expected_hours,
                "deviation": status.deviation,
                "label": status.label
            }

        return stats
