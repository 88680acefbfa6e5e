"""
Resource model for the Resource Allocation Graph simulator.

Represents a resource with a fixed number of interchangeable units.
"""

from dataclasses import dataclass

from models.errors import InvalidCapacity, is_positive_int


@dataclass(frozen=True)
class Resource:
    """
    Represents a resource in the simulation.

    Attributes:
        rid: Resource identifier
        total_units: Total number of units, fixed at creation

    Invariant:
        total_units > 0
    """
    rid: str
    total_units: int

    def __post_init__(self):
        """Validate capacity."""
        if not is_positive_int(self.total_units):
            raise InvalidCapacity(
                f"Resource {self.rid!r}: total_units must be a positive integer "
                f"(got {self.total_units!r})"
            )
