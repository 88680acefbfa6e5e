"""
System State model for the Resource Allocation Graph simulator.

Owns everything one simulation knows about: the processes, the resource
ledger and the request queue. Independent simulations each hold their own
SystemState, so nothing here is global.
"""

import numpy as np
from typing import Dict, List

from models.errors import DuplicateProcess, UnknownProcess
from models.ledger import ResourceLedger
from models.process import PairState, Process
from models.request_queue import RequestQueue


class SystemState:
    """
    State snapshot for deadlock analysis.

    Attributes:
        processes: pid -> Process, in creation order
        ledger: Capacity and allocations
        queue: Pending requests

    The numpy views (allocation_matrix, request_matrix, available_vector)
    are rebuilt on every access; rows follow process creation order and
    columns follow resource creation order.
    """

    def __init__(self):
        self.processes: Dict[str, Process] = {}
        self.ledger = ResourceLedger()
        self.queue = RequestQueue()

    @property
    def num_processes(self) -> int:
        """Number of processes in the system."""
        return len(self.processes)

    @property
    def num_resources(self) -> int:
        """Number of resources in the system."""
        return len(self.ledger)

    @property
    def process_ids(self) -> List[str]:
        return list(self.processes.keys())

    @property
    def resource_ids(self) -> List[str]:
        return [r.rid for r in self.ledger.resources()]

    def add_process(self, pid: str) -> Process:
        """
        Register a process with no allocations and no pending requests.

        Raises:
            DuplicateProcess: If pid already exists
        """
        if pid in self.processes:
            raise DuplicateProcess(f"Process {pid!r} already exists")
        process = Process(pid=pid, order=len(self.processes))
        self.processes[pid] = process
        return process

    def has_process(self, pid: str) -> bool:
        return pid in self.processes

    def require_process(self, pid: str) -> Process:
        if pid not in self.processes:
            raise UnknownProcess(f"Process {pid!r} does not exist")
        return self.processes[pid]

    def pair_state(self, pid: str, rid: str) -> PairState:
        """Where a (process, resource) pair currently sits in its lifecycle."""
        held = self.ledger.allocated(pid, rid) > 0
        waiting = self.queue.pending_for(pid, rid) is not None
        if held and waiting:
            return PairState.ALLOCATED_AND_PENDING
        if held:
            return PairState.ALLOCATED
        if waiting:
            return PairState.PENDING
        return PairState.NONE

    @property
    def allocation_matrix(self) -> np.ndarray:
        """Get allocation matrix [P][R]."""
        matrix = np.zeros((self.num_processes, self.num_resources), dtype=int)
        for i, pid in enumerate(self.processes):
            for j, rid in enumerate(self.resource_ids):
                matrix[i][j] = self.ledger.allocated(pid, rid)
        return matrix

    @property
    def request_matrix(self) -> np.ndarray:
        """Get pending request matrix [P][R]."""
        matrix = np.zeros((self.num_processes, self.num_resources), dtype=int)
        for i, pid in enumerate(self.processes):
            for j, rid in enumerate(self.resource_ids):
                matrix[i][j] = self.queue.pending_for(pid, rid) or 0
        return matrix

    @property
    def total_vector(self) -> np.ndarray:
        return np.array([r.total_units for r in self.ledger.resources()], dtype=int)

    @property
    def available_vector(self) -> np.ndarray:
        """Get available units vector [R]."""
        return np.array(
            [self.ledger.available_units(rid) for rid in self.resource_ids],
            dtype=int,
        )

    def reset(self) -> None:
        """Drop every process, resource, allocation and pending request."""
        self.processes.clear()
        self.ledger.clear()
        self.queue.clear()

    def snapshot(self) -> Dict:
        """
        JSON-friendly view of the current state.

        Returns:
            Dictionary with processes (allocations and pending requests per
            process) and resources (total and available units)
        """
        return {
            'processes': [
                {
                    'id': pid,
                    'allocations': self.ledger.allocations_of(pid),
                    'pending': self.queue.requests_of(pid),
                }
                for pid in self.processes
            ],
            'resources': [
                {
                    'id': resource.rid,
                    'totalUnits': resource.total_units,
                    'available': self.ledger.available_units(resource.rid),
                }
                for resource in self.ledger.resources()
            ],
        }

    def display(self) -> str:
        """
        Generate readable string representation of system state.

        Returns:
            Formatted string showing available units and both matrices
        """
        output = []
        output.append("\n" + "="*60)
        output.append("SYSTEM STATE")
        output.append("="*60)

        rids = self.resource_ids
        width = max([len(rid) for rid in rids] + [3])
        pid_width = max([len(pid) for pid in self.processes] + [2])
        header = " " * (pid_width + 4) + " ".join(f"{rid:>{width}}" for rid in rids)

        output.append("\nResources (available/total):")
        available = self.available_vector
        for j, resource in enumerate(self.ledger.resources()):
            output.append(f"  {resource.rid}: {available[j]}/{resource.total_units}")

        allocation = self.allocation_matrix
        output.append("\nAllocation Matrix:")
        output.append(header)
        for i, pid in enumerate(self.processes):
            row = f"  {pid:<{pid_width}}: "
            row += " ".join(f"{allocation[i][j]:>{width}}" for j in range(len(rids)))
            output.append(row)

        requests = self.request_matrix
        output.append("\nRequest Matrix (Pending):")
        output.append(header)
        for i, pid in enumerate(self.processes):
            row = f"  {pid:<{pid_width}}: "
            row += " ".join(f"{requests[i][j]:>{width}}" for j in range(len(rids)))
            output.append(row)

        output.append("\n" + "="*60)
        return "\n".join(output)

    def assert_resource_conservation(self, context=""):
        """Verify allocated + available == total and 0 <= allocated <= total.

        Args:
            context: Description of when this check is being run (for error messages)

        Raises:
            AssertionError: If resource conservation is violated
        """
        if self.num_resources == 0:
            return
        allocated = self.allocation_matrix.sum(axis=0)
        available = self.available_vector
        total = self.total_vector

        for j, rid in enumerate(self.resource_ids):
            assert allocated[j] + available[j] == total[j], (
                f"Resource conservation violated for {rid} {context}\n"
                f"  Allocated: {allocated[j]}, Available: {available[j]}, Total: {total[j]}"
            )
            assert 0 <= allocated[j] <= total[j], (
                f"Allocation out of range for {rid} {context}\n"
                f"  Allocated: {allocated[j]}, Total: {total[j]}"
            )
