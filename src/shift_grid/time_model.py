"""
Time Model for the Shift Grid engine

Half-hour slots over the fixed planning day (08:00 - 23:30), time string
parsing and the inclusive slot ranges used by drag selection.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

from .errors import MalformedTimeError

SLOT_MINUTES = 30
DAY_START_MINUTES = 8 * 60
LAST_SLOT_MINUTES = 23 * 60 + 30
DEFAULT_PLANNING_DAYS = 3

_TIME_PATTERN = re.compile(r"^\s*([0-9]{1,2}):([0-9]{2})\s*$")


def to_index(time_string: str) -> int:
    """Parse an "HH:MM" string into minutes since midnight"""
    if not isinstance(time_string, str):
        raise MalformedTimeError(f"Time must be a string, got {type(time_string).__name__}")

    match = _TIME_PATTERN.match(time_string)
    if not match:
        raise MalformedTimeError(f"Unparsable time: {time_string!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise MalformedTimeError(f"Time out of range: {time_string!r}")

    return hours * 60 + minutes


def format_time(index: int) -> str:
    """Format minutes since midnight as a zero padded "HH:MM" string"""
    hours, minutes = divmod(index, 60)
    return f"{hours:02d}:{minutes:02d}"


@dataclass(frozen=True, order=True)
class Slot:
    """A half-hour tick of the planning day, identified by minutes since midnight.

    Construction enforces the domain: the index must be on the 30-minute grid
    between 08:00 and 23:30 inclusive.
    """

    index: int

    def __post_init__(self):
        if not isinstance(self.index, int) or isinstance(self.index, bool):
            raise MalformedTimeError(f"Slot index must be an integer, got {self.index!r}")
        if (self.index < DAY_START_MINUTES or self.index > LAST_SLOT_MINUTES
                or (self.index - DAY_START_MINUTES) % SLOT_MINUTES != 0):
            raise MalformedTimeError(f"Slot index {self.index} is not a slot of the planning day")

    @property
    def label(self) -> str:
        """Zero padded "HH:MM" label of the slot start"""
        return format_time(self.index)

    def __str__(self) -> str:
        return self.label


def parse_slot(time_string: str) -> Slot:
    """Parse an "HH:MM" string into a Slot of the planning day"""
    return Slot(to_index(time_string))


# Produced once and reused by every caller
_DOMAIN: Tuple[Slot, ...] = tuple(
    Slot(minutes) for minutes in range(DAY_START_MINUTES, LAST_SLOT_MINUTES + 1, SLOT_MINUTES)
)


def slots_in_domain() -> Tuple[Slot, ...]:
    """All 32 slots of the planning day in chronological order"""
    return _DOMAIN


def range_between(a: Slot, b: Slot) -> List[Slot]:
    """Inclusive ascending slot range between two slots, in either order"""
    low, high = min(a, b), max(a, b)
    return [slot for slot in _DOMAIN if low <= slot <= high]


def day_label(day_offset: int) -> str:
    """Day label for a zero based offset: 0 -> "1", 1 -> "2", ..."""
    return f"{day_offset + 1}"


def planning_days(count: int = DEFAULT_PLANNING_DAYS) -> List[str]:
    """Labels of the planning days"""
    return [day_label(offset) for offset in range(count)]
