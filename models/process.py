"""
Process model for the Resource Allocation Graph simulator.

A process is identity only: everything it holds or waits for lives in the
ledger and the request queue, keyed by its pid.
"""

from dataclasses import dataclass
from enum import Enum


class PairState(Enum):
    """State of a single (process, resource) pair."""
    NONE = "NONE"
    PENDING = "PENDING"
    ALLOCATED = "ALLOCATED"
    ALLOCATED_AND_PENDING = "ALLOCATED_AND_PENDING"


@dataclass(frozen=True)
class Process:
    """
    Represents a process in the simulation.

    Attributes:
        pid: Process identifier (unique, permanent for the run)
        order: Creation index, used for deterministic iteration
    """
    pid: str
    order: int = 0

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"Process(pid={self.pid!r})"
