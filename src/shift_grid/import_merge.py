"""
Import/Merge Validator

Reconciles an externally supplied employee/location/assignment payload into
the engine state. The payload is validated and fully parsed before anything
is mutated; once validated, the merge is applied eagerly.

Merge policy:
- employee records are shallow-merged over the existing record with the
  same id (incoming fields win, absent fields keep their prior values);
  the roster becomes exactly the imported list
- each imported employee's assignments are replaced by the record's shifts
- a location list, when present, replaces the whole location set and the
  team vocabulary is recomputed from it

Imported assignments are trusted and committed, but every import returns an
ImportReport listing double-bookings, forbidden-hour assignments and
assignments at unknown locations. A strict import rejects the payload
instead when the report is not clean.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from .conflicts import is_forbidden
from .errors import ImportValidationError, SchemaError, ShiftGridError
from .models import Employee, Location
from .time_model import Slot, parse_slot

if TYPE_CHECKING:
    from .data_manager import DataManager

logger = logging.getLogger(__name__)

# Derived or replaced fields that never take part in the record merge
_NON_MERGED_FIELDS = ("shifts", "assignedHours")


class ImportIssueType(Enum):
    """Types of problems found in imported assignments"""

    DOUBLE_BOOKING = "double_booking"
    FORBIDDEN_HOURS = "forbidden_hours"
    UNKNOWN_LOCATION = "unknown_location"


@dataclass
class ImportIssue:
    """A single problem found in an imported assignment"""

    issue_type: ImportIssueType
    message: str
    employee_id: str
    day: str
    slot: Slot
    location: str

    @property
    def is_error(self) -> bool:
        """Errors are not committed; warnings are committed as imported"""
        return self.issue_type == ImportIssueType.DOUBLE_BOOKING

    def __str__(self) -> str:
        return f"[{self.issue_type.value}] Employee {self.employee_id}: {self.message}"


@dataclass
class ImportReport:
    """Outcome of an import"""

    employees_imported: int = 0
    locations_imported: int = 0
    assignments_imported: int = 0
    issues: List[ImportIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ImportIssue]:
        return [issue for issue in self.issues if issue.is_error]

    @property
    def warnings(self) -> List[ImportIssue]:
        return [issue for issue in self.issues if not issue.is_error]

    @property
    def is_clean(self) -> bool:
        return not self.issues

    def summary(self) -> str:
        text = (f"Successfully imported {self.employees_imported} employees "
                f"and {self.locations_imported} locations")
        if self.issues:
            text += f" ({len(self.errors)} error(s), {len(self.warnings)} warning(s))"
        return text


@dataclass
class _ParsedShift:
    day: str
    slot: Slot
    location: str


class ImportMergeValidator:
    """Validates an exchange payload and merges it into a DataManager"""

    def __init__(self, data_manager: 'DataManager'):
        self.data_manager = data_manager

    def merge(self, payload: Any, strict: bool = False) -> ImportReport:
        """Validate, check and commit a payload.

        Raises SchemaError when the payload shape is wrong and
        ImportValidationError for a strict import with issues; in both cases
        nothing has been changed.
        """
        employees_data, locations_data = self._validate_schema(payload)

        employees, shifts = self._parse_employees(employees_data)
        locations = self._parse_locations(locations_data) if locations_data is not None else None

        known_locations = {
            loc.name for loc in (locations if locations is not None else self.data_manager.locations)
        }
        accepted, report = self._check_shifts(employees, shifts, known_locations)
        report.employees_imported = len(employees)
        report.locations_imported = len(locations) if locations is not None else 0

        if strict and not report.is_clean:
            logger.warning(f"Strict import rejected: {len(report.issues)} issue(s)")
            raise ImportValidationError(report)

        self._commit(employees, accepted, locations)
        report.assignments_imported = sum(len(items) for items in accepted.values())

        for issue in report.issues:
            logger.warning(f"Import issue: {issue}")
        logger.info(report.summary())
        return report

    def _validate_schema(self, payload: Any) -> Tuple[List[Any], Optional[List[Any]]]:
        """Check the top level shape of the payload"""
        if not isinstance(payload, dict):
            raise SchemaError("Invalid import file format: payload must be an object")

        employees_data = payload.get("employees")
        if not isinstance(employees_data, list):
            raise SchemaError("Invalid import file format: 'employees' must be a list")

        locations_data = payload.get("locations")
        if locations_data is not None and not isinstance(locations_data, list):
            logger.warning("Ignoring 'locations' in import payload: not a list")
            locations_data = None

        return employees_data, locations_data

    def _parse_employees(self, employees_data: List[Any]) -> Tuple[List[Employee], Dict[str, List[_ParsedShift]]]:
        employees = []
        shifts: Dict[str, List[_ParsedShift]] = {}

        for index, incoming in enumerate(employees_data):
            if not isinstance(incoming, dict) or "id" not in incoming:
                raise SchemaError(f"Employee record {index} must be an object with an 'id'")

            emp_id = str(incoming["id"])
            if emp_id in shifts:
                raise SchemaError(f"Duplicate employee id {emp_id} in import payload")

            existing = self.data_manager.get_employee(emp_id)
            merged = existing.to_dict() if existing else {}
            merged.update({key: value for key, value in incoming.items() if key not in _NON_MERGED_FIELDS})

            try:
                employee = Employee.from_dict(merged)
                shifts[emp_id] = [self._parse_shift(item) for item in incoming.get("shifts") or []]
            except (KeyError, TypeError, ValueError, AttributeError, ShiftGridError) as e:
                raise SchemaError(f"Employee record {index} ({emp_id}) is invalid: {e}") from e

            employees.append(employee)

        return employees, shifts

    @staticmethod
    def _parse_shift(data: Dict[str, Any]) -> _ParsedShift:
        return _ParsedShift(
            day=str(data["day"]),
            slot=parse_slot(data["startTime"]),
            location=str(data["location"])
        )

    @staticmethod
    def _parse_locations(locations_data: List[Any]) -> List[Location]:
        locations = []
        for index, item in enumerate(locations_data):
            try:
                locations.append(Location.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise SchemaError(f"Location record {index} is invalid: {e}") from e
        return locations

    def _check_shifts(self, employees: List[Employee], shifts: Dict[str, List[_ParsedShift]],
                      known_locations: set) -> Tuple[Dict[str, List[_ParsedShift]], ImportReport]:
        """Run the legality checks over the imported shifts"""
        report = ImportReport()
        accepted: Dict[str, List[_ParsedShift]] = {}

        for employee in employees:
            held: Dict[Tuple[str, Slot], str] = {}
            accepted[employee.id] = []

            for shift in shifts[employee.id]:
                key = (shift.day, shift.slot)
                if key in held:
                    if held[key] != shift.location:
                        report.issues.append(ImportIssue(
                            issue_type=ImportIssueType.DOUBLE_BOOKING,
                            message=(f"{employee.name} already has a shift at {shift.slot} "
                                     f"in {held[key]} on day {shift.day}; "
                                     f"{shift.location} was not imported"),
                            employee_id=employee.id,
                            day=shift.day,
                            slot=shift.slot,
                            location=shift.location
                        ))
                    continue

                held[key] = shift.location
                accepted[employee.id].append(shift)

                if is_forbidden(employee, shift.day, shift.slot):
                    report.issues.append(ImportIssue(
                        issue_type=ImportIssueType.FORBIDDEN_HOURS,
                        message=f"Shift at {shift.slot} on day {shift.day} falls in forbidden hours",
                        employee_id=employee.id,
                        day=shift.day,
                        slot=shift.slot,
                        location=shift.location
                    ))
                if shift.location not in known_locations:
                    report.issues.append(ImportIssue(
                        issue_type=ImportIssueType.UNKNOWN_LOCATION,
                        message=f"Shift at {shift.slot} on day {shift.day} uses unknown location {shift.location}",
                        employee_id=employee.id,
                        day=shift.day,
                        slot=shift.slot,
                        location=shift.location
                    ))

        return accepted, report

    def _commit(self, employees: List[Employee], accepted: Dict[str, List[_ParsedShift]],
                locations: Optional[List[Location]]):
        dm = self.data_manager
        dm.replace_roster(employees)

        for employee in employees:
            dm.store.remove_employee(employee.id)
            for shift in accepted[employee.id]:
                dm.store.add(employee.id, shift.day, shift.slot, shift.location)

        if locations is not None:
            dm.replace_locations(locations)
