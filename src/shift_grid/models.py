"""
Data model for the Shift Grid engine

Employees, locations, forbidden intervals and the scheduling context,
with conversion to and from the camelCase exchange format.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from .errors import InvalidIntervalError
from .time_model import Slot, format_time, to_index, day_label


def _string_list(value: Any) -> List[str]:
    """Normalize a details/teams value into a list of strings"""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


@dataclass(frozen=True)
class ForbiddenInterval:
    """Half-open range [start, end) of minutes during which an employee must not work"""
    day: str
    start: int
    end: int
    reason: Optional[str] = None

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidIntervalError(
                f"Forbidden interval on day {self.day} must start before it ends "
                f"({format_time(self.start)} - {format_time(self.end)})"
            )

    def covers(self, day: str, slot: Slot) -> bool:
        return self.day == day and self.start <= slot.index < self.end

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "day": self.day,
            "startTime": format_time(self.start),
            "endTime": format_time(self.end),
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ForbiddenInterval':
        return cls(
            day=str(data["day"]),
            start=to_index(data["startTime"]),
            end=to_index(data["endTime"]),
            reason=data.get("reason")
        )


@dataclass
class EmployeeDetails:
    """Free-form profile attributes, opaque to the engine"""
    department: List[str] = field(default_factory=list)
    role: List[str] = field(default_factory=list)
    contact_info: List[str] = field(default_factory=list)
    preferences: List[str] = field(default_factory=list)
    other: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "department": list(self.department),
            "role": list(self.role),
            "contactInfo": list(self.contact_info),
            "preferences": list(self.preferences),
            "other": list(self.other)
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'EmployeeDetails':
        data = data or {}
        return cls(
            department=_string_list(data.get("department")),
            role=_string_list(data.get("role")),
            contact_info=_string_list(data.get("contactInfo")),
            preferences=_string_list(data.get("preferences")),
            other=_string_list(data.get("other"))
        )


@dataclass
class Employee:
    """Employee identity, team membership, hours target and forbidden intervals.

    Assigned hours are not stored here; they are always derived from the
    assignment store (see ``shift_grid.hours``).
    """
    id: str
    name: str
    teams: List[str] = field(default_factory=list)
    expected_hours: float = 0
    forbidden_hours: List[ForbiddenInterval] = field(default_factory=list)
    details: EmployeeDetails = field(default_factory=EmployeeDetails)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "expectedHours": self.expected_hours,
            "teams": list(self.teams),
            "forbiddenHours": [interval.to_dict() for interval in self.forbidden_hours],
            "details": self.details.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Employee':
        expected = data.get("expectedHours", 0)
        if isinstance(expected, bool) or not isinstance(expected, (int, float)):
            raise TypeError(f"expectedHours must be a number, got {expected!r}")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            teams=_string_list(data.get("teams")),
            expected_hours=expected,
            forbidden_hours=[ForbiddenInterval.from_dict(item) for item in data.get("forbiddenHours") or []],
            details=EmployeeDetails.from_dict(data.get("details"))
        )


@dataclass
class Location:
    """A grid column with the team tags allowed to work there"""
    name: str
    teams: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "teams": list(self.teams)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Location':
        return cls(name=str(data["name"]), teams=_string_list(data.get("teams")))


@dataclass(frozen=True)
class SchedulingContext:
    """Session state threaded into engine calls: active team filter and day.

    An empty team filter means no filtering.
    """
    team_filter: FrozenSet[str] = frozenset()
    active_day: str = day_label(0)

    @classmethod
    def create(cls, teams: Iterable[str] = (), day: str = day_label(0)) -> 'SchedulingContext':
        return cls(team_filter=frozenset(teams), active_day=day)

    def with_day(self, day: str) -> 'SchedulingContext':
        return replace(self, active_day=day)

    def toggle_team(self, team: str) -> 'SchedulingContext':
        if team in self.team_filter:
            return replace(self, team_filter=self.team_filter - {team})
        return replace(self, team_filter=self.team_filter | {team})

    def clear_teams(self) -> 'SchedulingContext':
        return replace(self, team_filter=frozenset())


# Reference deployment defaults
DEFAULT_LOCATIONS: List[Dict[str, Any]] = [
    {"name": "Main Hall", "teams": ["Main Hall", "Service"]},
    {"name": "Kitchen", "teams": ["Kitchen", "Service"]},
    {"name": "Reception", "teams": ["Reception", "Management"]},
    {"name": "Warehouse", "teams": ["Warehouse", "Logistics"]},
    {"name": "Conference Room A", "teams": ["Management", "Sales"]},
    {"name": "Conference Room B", "teams": ["Management", "Sales"]},
    {"name": "Outdoor Patio", "teams": ["Service", "Main Hall"]},
    {"name": "Storage Room", "teams": ["Logistics", "Warehouse"]},
    {"name": "Break Room", "teams": ["Service", "All Teams"]},
    {"name": "Loading Dock", "teams": ["Logistics", "Warehouse"]},
]

DEFAULT_TEAMS: List[str] = [
    "Sales",
    "Management",
    "Kitchen",
    "Service",
    "Reception",
    "Warehouse",
    "Logistics",
    "Main Hall",
]
