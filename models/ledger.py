"""
Resource Ledger for the Resource Allocation Graph simulator.

Pure accounting of capacity and live allocations. The ledger never decides
whether an allocation is allowed; that is the allocation engine's job.
"""

from typing import Dict, Iterator, List

from models.errors import (
    DuplicateResource,
    InsufficientAllocation,
    UnknownResource,
)
from models.resource import Resource


class ResourceLedger:
    """
    Tracks total capacity and allocations per resource.

    Allocations are stored as resource id -> {pid: units}. The inner dicts
    keep grant order, which is the order holders are reported in.

    Invariant:
        0 <= sum(allocations[r].values()) <= resources[r].total_units
    """

    def __init__(self):
        self._resources: Dict[str, Resource] = {}
        self._allocations: Dict[str, Dict[str, int]] = {}

    def __contains__(self, rid: str) -> bool:
        return rid in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def resources(self) -> Iterator[Resource]:
        """Iterate resources in creation order."""
        return iter(self._resources.values())

    def create_resource(self, rid: str, total_units: int) -> Resource:
        """
        Register a new resource with zero allocations.

        Raises:
            DuplicateResource: If rid already exists
            InvalidCapacity: If total_units is not a positive integer
        """
        if rid in self._resources:
            raise DuplicateResource(f"Resource {rid!r} already exists")
        resource = Resource(rid=rid, total_units=total_units)
        self._resources[rid] = resource
        self._allocations[rid] = {}
        return resource

    def get(self, rid: str) -> Resource:
        if rid not in self._resources:
            raise UnknownResource(f"Resource {rid!r} does not exist")
        return self._resources[rid]

    def total_units(self, rid: str) -> int:
        return self.get(rid).total_units

    def allocated_units(self, rid: str) -> int:
        """Sum of units of rid held across all processes."""
        self.get(rid)
        return sum(self._allocations[rid].values())

    def available_units(self, rid: str) -> int:
        """
        Units of rid not held by any process.

        Raises:
            UnknownResource: If rid is absent
        """
        return self.total_units(rid) - self.allocated_units(rid)

    def allocated(self, pid: str, rid: str) -> int:
        """Units of rid currently held by pid (0 if none)."""
        self.get(rid)
        return self._allocations[rid].get(pid, 0)

    def holders(self, rid: str) -> List[str]:
        """Processes holding a nonzero amount of rid, in grant order."""
        self.get(rid)
        return list(self._allocations[rid].keys())

    def allocations_of(self, pid: str) -> Dict[str, int]:
        """All resources held by pid as {rid: units}, in resource creation order."""
        return {
            rid: held[pid]
            for rid, held in self._allocations.items()
            if pid in held
        }

    def allocate(self, pid: str, rid: str, units: int) -> None:
        """
        Add units to the (pid, rid) allocation.

        Bookkeeping only: the caller must already have checked that enough
        units are available.
        """
        held = self._allocations[self.get(rid).rid]
        held[pid] = held.get(pid, 0) + units

    def release(self, pid: str, rid: str, units: int) -> None:
        """
        Remove units from the (pid, rid) allocation.

        The entry is dropped entirely once it reaches zero.

        Raises:
            InsufficientAllocation: If units exceeds what pid holds
        """
        current = self.allocated(pid, rid)
        if units > current:
            raise InsufficientAllocation(
                f"Process {pid!r} cannot release {units} units of {rid!r} - "
                f"only holding {current}"
            )
        remaining = current - units
        if remaining == 0:
            del self._allocations[rid][pid]
        else:
            self._allocations[rid][pid] = remaining

    def clear(self) -> None:
        self._resources.clear()
        self._allocations.clear()
