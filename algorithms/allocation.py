"""
Allocation Engine for the Resource Allocation Graph simulator.

Applies create/request/release operations to a SystemState, grants requests
that fit the available units and re-examines the wait queue whenever units
are released.
"""

import threading
from typing import Dict, List, Optional, Tuple

from algorithms.detection import find_cycle
from analysis.events import EventLog, EventType
from models.errors import AllocationError, InvalidUnits, is_positive_int
from models.system_state import SystemState
from utils.logger import SimulatorLogger


class AllocationEngine:
    """
    Command surface over one SystemState.

    Every public operation holds the engine lock for its whole duration, so
    mutations are serialised and reads never observe a half-applied change.
    Operations validate first and mutate second: a raised AllocationError
    means nothing changed.
    """

    def __init__(
        self,
        system_state: Optional[SystemState] = None,
        event_log: Optional[EventLog] = None,
        logger: Optional[SimulatorLogger] = None
    ):
        self.state = system_state if system_state is not None else SystemState()
        self.events = event_log if event_log is not None else EventLog()
        self.logger = logger
        self._lock = threading.RLock()
        self._last_cycle: Optional[List[str]] = None

    def _log(self, message: str, level: str = "info") -> None:
        if self.logger:
            self.logger.log(message, level)

    def _reject(self, error: AllocationError) -> None:
        self.events.add(EventType.REJECTED, message=f"{error.kind}: {error.message}")
        self._log(f"{error.kind}: {error.message}", "error")
        raise error

    def create_process(self, pid: str) -> None:
        """
        Register a new process.

        Raises:
            DuplicateProcess: If pid already exists
        """
        with self._lock:
            try:
                self.state.add_process(pid)
            except AllocationError as e:
                self._reject(e)
            self.events.add(EventType.PROCESS_CREATED, process_id=pid)
            self._log(f'Process "{pid}" created')

    def create_resource(self, rid: str, total_units: int) -> None:
        """
        Register a new resource with total_units free units.

        Raises:
            DuplicateResource: If rid already exists
            InvalidCapacity: If total_units is not a positive integer
        """
        with self._lock:
            try:
                self.state.ledger.create_resource(rid, total_units)
            except AllocationError as e:
                self._reject(e)
            self.events.add(EventType.RESOURCE_CREATED, resource_id=rid, units=total_units)
            self._log(f'Resource "{rid}" with {total_units} units created')

    def available_units(self, rid: str) -> int:
        """
        Raises:
            UnknownResource: If rid does not exist
        """
        with self._lock:
            return self.state.ledger.available_units(rid)

    def _validate(self, pid: str, rid: str, units: int) -> None:
        self.state.require_process(pid)
        self.state.ledger.get(rid)
        if not is_positive_int(units):
            raise InvalidUnits(f"Units must be a positive integer (got {units!r})")

    def request(self, pid: str, rid: str, units: int) -> bool:
        """
        Ask for units of a resource on behalf of a process.

        All or nothing: if units fit in what is available they are granted
        at once, otherwise the request is recorded as pending, replacing any
        earlier pending amount for the same pair. Never blocks.

        Args:
            pid: Requesting process
            rid: Requested resource
            units: Units wanted

        Returns:
            True if granted immediately, False if queued

        Raises:
            UnknownProcess, UnknownResource, InvalidUnits
        """
        with self._lock:
            try:
                self._validate(pid, rid, units)
            except AllocationError as e:
                self._reject(e)

            available = self.state.ledger.available_units(rid)
            granted = units <= available
            if granted:
                self.state.ledger.allocate(pid, rid, units)
                self.events.add(EventType.ALLOCATION, process_id=pid, resource_id=rid, units=units)
            else:
                self.state.queue.set_pending(pid, rid, units)
                self.events.add(
                    EventType.QUEUED,
                    process_id=pid,
                    resource_id=rid,
                    units=units,
                    message=f"only {available} available",
                )

            if self.logger:
                self.logger.log_request(pid, rid, units, granted, available)
            return granted

    def release(self, pid: str, rid: str, units: int) -> List[str]:
        """
        Give back units of a resource, then serve any waiters that now fit.

        Args:
            pid: Releasing process
            rid: Released resource
            units: Units to give back

        Returns:
            Processes granted by wait-queue resolution, in grant order

        Raises:
            UnknownProcess, UnknownResource, InvalidUnits,
            InsufficientAllocation: If pid holds fewer than units
        """
        with self._lock:
            try:
                self._validate(pid, rid, units)
                self.state.ledger.release(pid, rid, units)
            except AllocationError as e:
                self._reject(e)

            self.events.add(EventType.RELEASE, process_id=pid, resource_id=rid, units=units)
            woken = [waiter for waiter, _ in self._resolve_waiters(rid)]
            if self.logger:
                self.logger.log_release(pid, rid, units, woken)
            return woken

    def _resolve_waiters(self, rid: str) -> List[Tuple[str, int]]:
        """
        Grant pending requests on rid that now fit, first come first served.

        Each pass walks the pending entries for rid in queue order and grants
        any whose amount fits what is left. Passes repeat until one grants
        nothing. This is a greedy sweep: a large early waiter that fits is
        served even if skipping it would let several smaller ones through.
        """
        granted: List[Tuple[str, int]] = []
        changed = True
        while changed:
            changed = False
            for waiter, units in self.state.queue.waiting_on(rid):
                if units <= self.state.ledger.available_units(rid):
                    self.state.ledger.allocate(waiter, rid, units)
                    self.state.queue.clear_pending(waiter, rid)
                    self.events.add(
                        EventType.WAIT_GRANTED,
                        process_id=waiter,
                        resource_id=rid,
                        units=units,
                    )
                    granted.append((waiter, units))
                    changed = True
        return granted

    def detect(self) -> Optional[List[str]]:
        """
        Look for a deadlock in the current state.

        A DEADLOCK event is recorded only when the cycle differs from the
        previous call's result.

        Returns:
            Witness cycle of process ids, or None
        """
        with self._lock:
            cycle = find_cycle(self.state)
            if cycle and cycle != self._last_cycle:
                self.events.add(EventType.DEADLOCK, cycle=list(cycle))
            self._last_cycle = cycle
            if self.logger:
                self.logger.log_deadlock(cycle)
            return cycle

    def snapshot(self) -> Dict:
        with self._lock:
            return self.state.snapshot()

    def reset(self) -> None:
        """Return to an empty simulation."""
        with self._lock:
            self.state.reset()
            self.events.clear()
            self._last_cycle = None
            self._log("System reset")
