"""
Exception hierarchy for the Shift Grid engine
"""


class ShiftGridError(Exception):
    """Base exception for all engine operations"""
    pass


class MalformedTimeError(ShiftGridError):
    """Raised when a time string cannot be parsed or falls outside the slot domain"""
    pass


class InvalidIntervalError(ShiftGridError):
    """Raised when a forbidden interval does not start before it ends"""
    pass


class SlotOccupiedError(ShiftGridError):
    """Raised when an employee already works a different location in the same slot"""

    def __init__(self, employee_id: str, day: str, slot, existing_location: str,
                 requested_location: str):
        self.employee_id = employee_id
        self.day = day
        self.slot = slot
        self.existing_location = existing_location
        self.requested_location = requested_location
        super().__init__(
            f"Employee {employee_id} already works {existing_location} on day {day} "
            f"at {slot}; cannot also work {requested_location}"
        )


class SchemaError(ShiftGridError):
    """Raised when an import payload does not have the required shape"""
    pass


class ImportValidationError(ShiftGridError):
    """Raised by a strict import when the payload fails legality checks"""

    def __init__(self, report):
        self.report = report
        super().__init__(f"Import rejected with {len(report.issues)} issue(s)")


class DataManagerError(ShiftGridError):
    """Base exception for DataManager operations"""
    pass


class DataFileNotFoundError(DataManagerError):
    """Raised when the data file is not found"""
    pass


class DataFileCorruptedError(DataManagerError):
    """Raised when the data file is corrupted"""
    pass


class DataSaveError(DataManagerError):
    """Raised when saving data fails"""
    pass


class DataValidationError(DataManagerError):
    """Raised when data validation fails"""
    pass
