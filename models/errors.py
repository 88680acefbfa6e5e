"""
Error taxonomy for the Resource Allocation Graph simulator.

All errors are local validation failures. They are raised before any state
is touched, so a rejected operation always leaves the system unchanged.
"""


class AllocationError(Exception):
    """Base class for every rejected allocation-graph operation."""
    kind = "AllocationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Structured form used by the API and the event log."""
        return {"error": self.kind, "message": self.message}


class DuplicateProcess(AllocationError):
    kind = "DuplicateProcess"


class DuplicateResource(AllocationError):
    kind = "DuplicateResource"


class UnknownProcess(AllocationError):
    kind = "UnknownProcess"


class UnknownResource(AllocationError):
    kind = "UnknownResource"


class InvalidCapacity(AllocationError):
    """Resource created with total_units <= 0 (or a non-integer)."""
    kind = "InvalidCapacity"


class InvalidUnits(AllocationError):
    """Requested or released units <= 0 (or a non-integer)."""
    kind = "InvalidUnits"


class InsufficientAllocation(AllocationError):
    """Release of more units than the process currently holds."""
    kind = "InsufficientAllocation"


def is_positive_int(value) -> bool:
    """True for ints > 0. Booleans are rejected even though they subclass int."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
