"""
Event Model for the Resource Allocation Graph simulator.

Defines event types for tracking engine outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class EventType(Enum):
    """Types of events in the simulation."""
    PROCESS_CREATED = "process_created"
    RESOURCE_CREATED = "resource_created"
    ALLOCATION = "allocation"
    QUEUED = "queued"
    RELEASE = "release"
    WAIT_GRANTED = "wait_granted"
    DEADLOCK = "deadlock"
    REJECTED = "rejected"


@dataclass
class SimulationEvent:
    """
    Represents a single event in the simulation.

    Attributes:
        seq: Position of the event in its log
        event_type: Type of event
        process_id: Process involved (if applicable)
        resource_id: Resource involved (if applicable)
        units: Units involved (if applicable)
        cycle: Witness cycle for DEADLOCK events
        message: Human-readable description
    """
    seq: int
    event_type: EventType
    process_id: Optional[str] = None
    resource_id: Optional[str] = None
    units: Optional[int] = None
    cycle: List[str] = field(default_factory=list)
    message: str = ""

    def __str__(self) -> str:
        """Format event for logging."""
        if self.event_type == EventType.ALLOCATION:
            return f"Allocated {self.units} units of {self.resource_id} to {self.process_id}"
        elif self.event_type == EventType.QUEUED:
            return (
                f"{self.process_id} waiting for {self.units} units of {self.resource_id}"
                + (f" ({self.message})" if self.message else "")
            )
        elif self.event_type == EventType.RELEASE:
            return f"Released {self.units} units of {self.resource_id} from {self.process_id}"
        elif self.event_type == EventType.WAIT_GRANTED:
            return (
                f"Allocated {self.units} units of {self.resource_id} "
                f"to waiting process {self.process_id}"
            )
        elif self.event_type == EventType.DEADLOCK:
            return f"Deadlock detected! Cycle: {' -> '.join(self.cycle)}"
        elif self.event_type == EventType.PROCESS_CREATED:
            return f"Process {self.process_id} created"
        elif self.event_type == EventType.RESOURCE_CREATED:
            return f"Resource {self.resource_id} with {self.units} units created"
        else:
            return f"{self.event_type.value}: {self.message}"

    def to_dict(self) -> dict:
        return {
            'seq': self.seq,
            'type': self.event_type.value,
            'process': self.process_id,
            'resource': self.resource_id,
            'units': self.units,
            'cycle': list(self.cycle),
            'message': str(self),
        }


@dataclass
class EventLog:
    """Collection of simulation events, trimmed to the most recent max_events."""
    events: list = None
    max_events: Optional[int] = None
    _next_seq: int = 0

    def __post_init__(self):
        if self.events is None:
            self.events = []

    def add(self, event_type: EventType, **fields) -> SimulationEvent:
        """Create an event with the next sequence number and append it."""
        event = SimulationEvent(seq=self._next_seq, event_type=event_type, **fields)
        self._next_seq += 1
        self.events.append(event)
        if self.max_events is not None and len(self.events) > self.max_events:
            del self.events[0]
        return event

    def get_events_by_type(self, event_type: EventType) -> list:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def recent(self, count: int) -> list:
        return self.events[-count:] if count > 0 else []

    def clear(self) -> None:
        self.events.clear()
        self._next_seq = 0
