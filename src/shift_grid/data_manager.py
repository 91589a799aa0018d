"""
Data Manager for the Shift Grid engine

Owns the employee roster, the location set, the team vocabulary, settings
and the assignment store. Handles the JSON exchange payload and the
employee and location CRUD operations.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .assignment_store import AssignmentStore
from .errors import (
    DataFileCorruptedError,
    DataFileNotFoundError,
    DataSaveError,
    DataValidationError,
)
from .hours import assigned_hours
from .import_merge import ImportMergeValidator, ImportReport
from .models import (
    DEFAULT_LOCATIONS,
    DEFAULT_TEAMS,
    Employee,
    EmployeeDetails,
    ForbiddenInterval,
    Location,
)
from .time_model import DEFAULT_PLANNING_DAYS, planning_days

logger = logging.getLogger(__name__)


class DataManager:
    """Manages the scheduling state and its JSON exchange format"""

    def __init__(self, data_file: Optional[str] = None):
        self.data_file = Path(data_file) if data_file else None
        self.store = AssignmentStore()
        self.employees: Dict[str, Employee] = {}
        self.locations: List[Location] = [Location.from_dict(loc) for loc in DEFAULT_LOCATIONS]
        self.teams: List[str] = list(DEFAULT_TEAMS)
        self.settings: Dict[str, Any] = self._create_default_settings()

        if self.data_file is not None and self.data_file.exists():
            self.import_from_file(self.data_file)

    def _create_default_settings(self) -> Dict[str, Any]:
        return {
            "appVersion": __version__,
            "planningDays": DEFAULT_PLANNING_DAYS,
            "lastExport": None
        }

    # Settings Management
    def get_setting(self, key: str, default=None):
        """Get application setting"""
        return self.settings.get(key, default)

    def set_setting(self, key: str, value):
        """Set application setting"""
        self.settings[key] = value

    def day_labels(self) -> List[str]:
        """Labels of the configured planning days"""
        return planning_days(int(self.get_setting("planningDays", DEFAULT_PLANNING_DAYS)))

    # Employee Management
    def get_employees(self) -> List[Employee]:
        """Get list of employees in roster order"""
        return list(self.employees.values())

    def get_employee(self, emp_id: str) -> Optional[Employee]:
        """Get employee by ID"""
        return self.employees.get(emp_id)

    def get_employee_by_name(self, name: str) -> Optional[Employee]:
        """Get employee by name"""
        for employee in self.employees.values():
            if employee.name == name:
                return employee
        return None

    def add_employee(self, name: str, teams: Optional[List[str]] = None, expected_hours: float = 0,
                     forbidden_hours: Optional[List[ForbiddenInterval]] = None,
                     details: Optional[EmployeeDetails] = None,
                     emp_id: Optional[str] = None) -> Employee:
        """Add new employee"""
        if not name or not name.strip():
            raise DataValidationError("Employee name is required")

        if emp_id is None:
            # Next numeric ID after the highest numeric one in use
            numeric_ids = [int(existing) for existing in self.employees
                           if existing.isascii() and existing.isdigit()]
            emp_id = str(max(numeric_ids, default=0) + 1)
        elif emp_id in self.employees:
            raise DataValidationError(f"An employee with ID {emp_id} already exists")

        employee = Employee(
            id=emp_id,
            name=name.strip(),
            teams=list(teams or []),
            expected_hours=expected_hours,
            forbidden_hours=list(forbidden_hours or []),
            details=details or EmployeeDetails()
        )
        self.employees[emp_id] = employee
        logger.info(f"Added employee {employee.name} ({emp_id})")
        return employee

    def update_employee(self, emp_id: str, name: str = None, teams: List[str] = None,
                        expected_hours: float = None,
                        forbidden_hours: List[ForbiddenInterval] = None,
                        details: EmployeeDetails = None) -> bool:
        """Update employee information"""
        employee = self.employees.get(emp_id)
        if employee is None:
            return False

        if name is not None:
            employee.name = name
        if teams is not None:
            employee.teams = list(teams)
        if expected_hours is not None:
            employee.expected_hours = expected_hours
        if forbidden_hours is not None:
            employee.forbidden_hours = list(forbidden_hours)
        if details is not None:
            employee.details = details
        return True

    def delete_employee(self, emp_id: str) -> bool:
        """Delete employee together with all of their assignments"""
        if emp_id not in self.employees:
            return False
        del self.employees[emp_id]
        removed = self.store.remove_employee(emp_id)
        logger.info(f"Deleted employee {emp_id} and {removed} assignment(s)")
        return True

    def add_forbidden_interval(self, emp_id: str, interval: ForbiddenInterval) -> bool:
        """Add a forbidden interval to an employee"""
        employee = self.employees.get(emp_id)
        if employee is None:
            return False
        employee.forbidden_hours.append(interval)
        return True

    def replace_roster(self, employees: List[Employee]):
        """Replace the roster, dropping assignments of employees no longer present"""
        incoming_ids = {employee.id for employee in employees}
        for emp_id in list(self.employees):
            if emp_id not in incoming_ids:
                self.store.remove_employee(emp_id)
        self.employees = {employee.id: employee for employee in employees}

    def employee_teams(self) -> List[str]:
        """Sorted union of the teams employees belong to"""
        return sorted({team for employee in self.employees.values() for team in employee.teams})

    # Location Management
    def get_locations(self) -> List[Location]:
        return list(self.locations)

    def get_location(self, name: str) -> Optional[Location]:
        for location in self.locations:
            if location.name == name:
                return location
        return None

    def location_names(self) -> List[str]:
        return [location.name for location in self.locations]

    def add_location(self, name: str, teams: Optional[List[str]] = None) -> Location:
        """Add a location; names are trimmed and must be unique ignoring case"""
        name = (name or "").strip()
        if not name:
            raise DataValidationError("Please enter a location name")
        if any(loc.name.lower() == name.lower() for loc in self.locations):
            raise DataValidationError("A location with this name already exists")

        location = Location(name=name, teams=list(teams or []))
        self.locations.append(location)
        for team in location.teams:
            if team not in self.teams:
                self.teams.append(team)
        logger.info(f"Added location {name} with teams {location.teams}")
        return location

    def set_location_teams(self, name: str, teams: List[str]) -> bool:
        """Change the teams of a location and recompute the team vocabulary"""
        location = self.get_location(name)
        if location is None:
            return False
        location.teams = list(teams)
        self._recompute_teams()
        return True

    def replace_locations(self, locations: List[Location]):
        """Replace the whole location set; the team vocabulary follows it"""
        self.locations = list(locations)
        self._recompute_teams()

    def _recompute_teams(self):
        teams = []
        for location in self.locations:
            for team in location.teams:
                if team not in teams:
                    teams.append(team)
        self.teams = teams

    # Exchange Payload
    def export_payload(self) -> Dict[str, Any]:
        """Serialize the engine state into the exchange payload"""
        employees = []
        for employee in self.employees.values():
            emp_data = employee.to_dict()
            emp_data["assignedHours"] = assigned_hours(self.store, employee.id)
            emp_data["shifts"] = [
                {
                    "day": assignment.day,
                    "startTime": assignment.slot.label,
                    "location": assignment.location
                }
                for assignment in sorted(self.store.assignments_for(employee.id))
            ]
            employees.append({
                key: emp_data[key]
                for key in ("id", "name", "expectedHours", "assignedHours", "teams",
                            "shifts", "forbiddenHours", "details")
            })

        return {
            "locations": [location.to_dict() for location in self.locations],
            "teams": list(self.teams),
            "employees": employees
        }

    def import_payload(self, payload: Any, strict: bool = False) -> ImportReport:
        """Merge an exchange payload into the engine state"""
        return ImportMergeValidator(self).merge(payload, strict=strict)

    def export_to_file(self, path: Optional[str] = None) -> Path:
        """Write the exchange payload to a JSON file atomically"""
        target = Path(path) if path else self.data_file
        if target is None:
            raise DataSaveError("No export path given")

        temp_file = target.with_suffix(target.suffix + '.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(self.export_payload(), f, indent=2, ensure_ascii=False)
            temp_file.replace(target)
        except (IOError, OSError) as e:
            logger.error(f"I/O error during export to {target}: {e}", exc_info=True)
            raise DataSaveError(f"Failed to export data due to I/O error: {e}")
        finally:
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError as cleanup_e:
                    logger.error(f"Failed to clean up temporary file {temp_file}: {cleanup_e}")

        self.set_setting("lastExport", datetime.now().isoformat())
        logger.info(f"Exported {len(self.employees)} employees and {len(self.locations)} locations to {target}")
        return target

    def import_from_file(self, path: Optional[str] = None, strict: bool = False) -> ImportReport:
        """Read an exchange payload from a JSON file and merge it"""
        source = Path(path) if path else self.data_file
        if source is None or not source.exists():
            raise DataFileNotFoundError(f"Data file {source} does not exist")

        try:
            with open(source, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, IOError) as e:
            logger.error(f"Error loading data file {source}: {e}")
            raise DataFileCorruptedError(f"Data file {source} could not be read: {e}")

        return self.import_payload(payload, strict=strict)
