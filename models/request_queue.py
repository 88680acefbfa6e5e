"""
Request Queue for the Resource Allocation Graph simulator.

Holds requests that could not be satisfied when they were made.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from models.errors import InvalidUnits, is_positive_int


class RequestQueue:
    """
    Pending requests keyed by (pid, rid).

    Traversal follows insertion order of the entries. Overwriting an existing
    entry keeps its position; clearing and re-adding moves it to the back.
    Wait-queue resolution depends on this order to pick who is served first.
    """

    def __init__(self):
        self._pending: Dict[Tuple[str, str], int] = {}

    def __iter__(self) -> Iterator[Tuple[str, str, int]]:
        """Yield (pid, rid, units) in insertion order."""
        for (pid, rid), units in list(self._pending.items()):
            yield pid, rid, units

    def __len__(self) -> int:
        return len(self._pending)

    def set_pending(self, pid: str, rid: str, units: int) -> None:
        """
        Record a pending request, replacing any earlier amount for the pair.

        Replacing, not adding: a second request before the first is granted
        supersedes it.

        Raises:
            InvalidUnits: If units is not a positive integer
        """
        if not is_positive_int(units):
            raise InvalidUnits(f"Pending units must be a positive integer (got {units!r})")
        self._pending[(pid, rid)] = units

    def clear_pending(self, pid: str, rid: str) -> None:
        self._pending.pop((pid, rid), None)

    def pending_for(self, pid: str, rid: str) -> Optional[int]:
        return self._pending.get((pid, rid))

    def waiting_on(self, rid: str) -> List[Tuple[str, int]]:
        """(pid, units) pairs pending on rid, in queue order."""
        return [(p, units) for (p, r), units in self._pending.items() if r == rid]

    def requests_of(self, pid: str) -> Dict[str, int]:
        """All pending requests of pid as {rid: units}, in queue order."""
        return {r: units for (p, r), units in self._pending.items() if p == pid}

    def clear(self) -> None:
        self._pending.clear()
