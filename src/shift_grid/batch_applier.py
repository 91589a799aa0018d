"""
Batch Range Applier

Turns a drag gesture over one grid column into single-slot add/remove
operations against the assignment store.

Every slot is committed on its own as soon as the pointer reaches it.
There is no batch atomicity and no rollback: a legal prefix of a drag
stays applied when the pointer moves on into forbidden or conflicting
slots, and releasing the pointer never reverts anything.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from .conflicts import is_forbidden
from .eligibility import is_eligible
from .errors import SlotOccupiedError
from .models import Employee, SchedulingContext
from .time_model import Slot, range_between

if TYPE_CHECKING:
    from .scheduler_logic import ShiftScheduler

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class GestureMode(Enum):
    """Decided when the gesture starts and fixed until it ends"""
    ADD = "add"
    REMOVE = "remove"


class OutcomeKind(Enum):
    APPLIED = "applied"
    FORBIDDEN = "forbidden"
    INELIGIBLE = "ineligible"
    CONFLICT = "conflict"
    NOT_SCHEDULED = "not_scheduled"
    ALREADY_SCHEDULED = "already_scheduled"


@dataclass(frozen=True)
class SlotOutcome:
    """What happened to one slot of a gesture"""
    slot: Slot
    location: str
    mode: GestureMode
    kind: OutcomeKind
    message: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.kind == OutcomeKind.APPLIED


class RangeApplier:
    """Drag gesture state machine for one employee.

    Idle -> Dragging on ``begin``, Dragging -> Dragging on ``move``,
    Dragging -> Idle on ``end``.
    """

    def __init__(self, scheduler: 'ShiftScheduler', employee_id: str, context: SchedulingContext):
        self.scheduler = scheduler
        self.employee_id = employee_id
        self.context = context
        self._reset()

    def _reset(self):
        self.state = DragState.IDLE
        self.origin: Optional[Slot] = None
        self.endpoint: Optional[Slot] = None
        self.location: Optional[str] = None
        self.mode: Optional[GestureMode] = None
        self.conflict_notice: Optional[str] = None
        self._processed: Set[Tuple[Slot, str]] = set()

    @property
    def day(self) -> str:
        return self.context.active_day

    @property
    def store(self):
        return self.scheduler.data_manager.store

    def _employee(self) -> Optional[Employee]:
        return self.scheduler.data_manager.get_employee(self.employee_id)

    def begin(self, slot: Slot, location: str) -> List[SlotOutcome]:
        """Start a gesture on a cell and apply that cell"""
        if self.state is DragState.DRAGGING:
            self.end()

        employee = self._employee()
        if employee is None:
            logger.debug(f"Gesture ignored: employee {self.employee_id} not found")
            return []

        # A gesture cannot start on a forbidden cell
        if is_forbidden(employee, self.day, slot):
            logger.debug(f"Gesture ignored: {slot} is forbidden for {employee.id} on day {self.day}")
            return []

        scheduled = self.store.is_scheduled(employee.id, self.day, slot, location)
        self.mode = GestureMode.REMOVE if scheduled else GestureMode.ADD
        self.state = DragState.DRAGGING
        self.origin = slot
        self.endpoint = slot
        self.location = location

        return [self._process(employee, slot, location)]

    def move(self, slot: Slot, location: str) -> List[SlotOutcome]:
        """Extend the gesture to a new endpoint; the range stays anchored at the origin"""
        if self.state is not DragState.DRAGGING:
            return []

        employee = self._employee()
        if employee is None:
            return []

        self.endpoint = slot
        self.location = location

        slots = range_between(self.origin, slot)
        if slot < self.origin:
            # Traverse in pointer order when dragging upwards
            slots.reverse()

        outcomes = []
        for candidate in slots:
            if (candidate, location) in self._processed:
                continue
            outcomes.append(self._process(employee, candidate, location))
        return outcomes

    def end(self):
        """Release the pointer: clear the gesture, keep every applied change"""
        if self.state is DragState.DRAGGING:
            logger.debug(f"Gesture for {self.employee_id} ended after {len(self._processed)} slot(s)")
        self._reset()

    def _process(self, employee: Employee, slot: Slot, location: str) -> SlotOutcome:
        self._processed.add((slot, location))
        if self.mode is GestureMode.ADD:
            return self._add(employee, slot, location)
        return self._remove(employee, slot, location)

    def _add(self, employee: Employee, slot: Slot, location: str) -> SlotOutcome:
        # Cells already held at this location are passed over without a notice
        if self.store.is_scheduled(employee.id, self.day, slot, location):
            return SlotOutcome(slot, location, GestureMode.ADD, OutcomeKind.ALREADY_SCHEDULED)

        if is_forbidden(employee, self.day, slot):
            return SlotOutcome(slot, location, GestureMode.ADD, OutcomeKind.FORBIDDEN)

        location_obj = self.scheduler.data_manager.get_location(location)
        if not is_eligible(employee, location_obj, self.context.team_filter):
            return SlotOutcome(slot, location, GestureMode.ADD, OutcomeKind.INELIGIBLE)

        message = self.scheduler.conflict_message(employee, self.day, slot)
        if message is None:
            try:
                self.store.add(employee.id, self.day, slot, location)
                return SlotOutcome(slot, location, GestureMode.ADD, OutcomeKind.APPLIED)
            except SlotOccupiedError as e:
                message = (f"{employee.name} already has a shift at {slot.label} "
                           f"in {e.existing_location}")

        # Only the first conflict of a gesture is surfaced
        if self.conflict_notice is None:
            self.conflict_notice = message
        return SlotOutcome(slot, location, GestureMode.ADD, OutcomeKind.CONFLICT, message)

    def _remove(self, employee: Employee, slot: Slot, location: str) -> SlotOutcome:
        if not self.store.remove(employee.id, self.day, slot, location):
            return SlotOutcome(slot, location, GestureMode.REMOVE, OutcomeKind.NOT_SCHEDULED)
        return SlotOutcome(slot, location, GestureMode.REMOVE, OutcomeKind.APPLIED)
