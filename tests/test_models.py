"""
Core Data Model Tests

Tests Resource, ResourceLedger, RequestQueue and SystemState.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.errors import (
    DuplicateProcess,
    DuplicateResource,
    InsufficientAllocation,
    InvalidCapacity,
    InvalidUnits,
    UnknownProcess,
    UnknownResource,
)
from models.ledger import ResourceLedger
from models.process import PairState
from models.request_queue import RequestQueue
from models.resource import Resource
from models.system_state import SystemState


def test_resource_model():
    """Resource capacity must be a positive integer."""
    resource = Resource(rid="R1", total_units=3)
    assert resource.total_units == 3

    for bad in (0, -2, 1.5, True, "4"):
        try:
            Resource(rid="R1", total_units=bad)
            assert False, f"total_units={bad!r} should be rejected"
        except InvalidCapacity:
            pass


def test_ledger_create_resource():
    print("\n" + "="*60)
    print("TEST: Ledger resource creation")
    print("="*60)

    ledger = ResourceLedger()
    ledger.create_resource("R1", 4)
    assert "R1" in ledger
    assert ledger.available_units("R1") == 4
    assert ledger.holders("R1") == []

    try:
        ledger.create_resource("R1", 2)
        assert False, "Duplicate resource should be rejected"
    except DuplicateResource:
        pass
    assert ledger.total_units("R1") == 4, "Original resource must be untouched"

    try:
        ledger.create_resource("R2", 0)
        assert False, "Zero capacity should be rejected"
    except InvalidCapacity:
        pass
    assert "R2" not in ledger

    try:
        ledger.available_units("missing")
        assert False, "Unknown resource should be rejected"
    except UnknownResource:
        pass
    print("  ✓ Ledger creation and lookup")


def test_ledger_allocate_and_release():
    ledger = ResourceLedger()
    ledger.create_resource("R1", 5)

    ledger.allocate("P1", "R1", 2)
    ledger.allocate("P1", "R1", 1)
    ledger.allocate("P2", "R1", 1)
    assert ledger.allocated("P1", "R1") == 3, "Repeat grants accumulate"
    assert ledger.available_units("R1") == 1
    assert ledger.holders("R1") == ["P1", "P2"]

    ledger.release("P1", "R1", 1)
    assert ledger.allocated("P1", "R1") == 2
    assert ledger.available_units("R1") == 2

    try:
        ledger.release("P1", "R1", 3)
        assert False, "Over-release should be rejected"
    except InsufficientAllocation:
        pass
    assert ledger.allocated("P1", "R1") == 2, "Rejected release must not change state"

    ledger.release("P1", "R1", 2)
    assert ledger.allocated("P1", "R1") == 0
    assert ledger.holders("R1") == ["P2"], "Fully released entry is removed"
    assert ledger.allocations_of("P1") == {}
    assert ledger.allocations_of("P2") == {"R1": 1}


def test_ledger_does_not_check_capacity():
    """The ledger only keeps books; capacity checks are the engine's job."""
    ledger = ResourceLedger()
    ledger.create_resource("R1", 1)
    ledger.allocate("P1", "R1", 3)
    assert ledger.available_units("R1") == -2


def test_request_queue_overwrites():
    print("\n" + "="*60)
    print("TEST: Request queue overwrite semantics")
    print("="*60)

    queue = RequestQueue()
    queue.set_pending("P1", "R1", 3)
    queue.set_pending("P2", "R1", 1)
    queue.set_pending("P1", "R1", 2)

    assert queue.pending_for("P1", "R1") == 2, "Second request replaces, never adds"
    assert queue.waiting_on("R1") == [("P1", 2), ("P2", 1)], "Overwrite keeps position"
    assert len(queue) == 2

    queue.clear_pending("P1", "R1")
    queue.clear_pending("P1", "R1")  # no-op
    assert queue.pending_for("P1", "R1") is None

    queue.set_pending("P1", "R1", 4)
    assert list(queue) == [("P2", "R1", 1), ("P1", "R1", 4)], "Re-added entry goes to the back"

    try:
        queue.set_pending("P3", "R1", 0)
        assert False, "Zero pending units should be rejected"
    except InvalidUnits:
        pass
    assert queue.pending_for("P3", "R1") is None
    print("  ✓ Overwrite, clear and ordering")


def test_request_queue_per_process_view():
    queue = RequestQueue()
    queue.set_pending("P1", "R2", 1)
    queue.set_pending("P2", "R1", 1)
    queue.set_pending("P1", "R1", 2)
    assert queue.requests_of("P1") == {"R2": 1, "R1": 2}
    assert list(queue.requests_of("P1")) == ["R2", "R1"]


def test_system_state():
    print("\n" + "="*60)
    print("TEST: System State Matrices")
    print("="*60)

    state = SystemState()
    state.add_process("P1")
    state.add_process("P2")
    state.ledger.create_resource("R1", 3)
    state.ledger.create_resource("R2", 2)

    try:
        state.add_process("P1")
        assert False, "Duplicate process should be rejected"
    except DuplicateProcess:
        pass
    assert state.process_ids == ["P1", "P2"]

    try:
        state.require_process("P9")
        assert False, "Unknown process should be rejected"
    except UnknownProcess:
        pass

    state.ledger.allocate("P1", "R1", 2)
    state.ledger.allocate("P2", "R2", 2)
    state.queue.set_pending("P1", "R2", 1)

    alloc = state.allocation_matrix
    assert alloc.shape == (2, 2)
    assert alloc[0][0] == 2 and alloc[1][1] == 2
    assert state.request_matrix[0][1] == 1
    assert list(state.available_vector) == [1, 0]
    assert list(state.total_vector) == [3, 2]

    assert state.pair_state("P1", "R1") == PairState.ALLOCATED
    assert state.pair_state("P1", "R2") == PairState.PENDING
    assert state.pair_state("P2", "R1") == PairState.NONE

    state.assert_resource_conservation("in test")

    display = state.display()
    assert "Allocation Matrix" in display
    assert "R1: 1/3" in display
    print(display)

    snapshot = state.snapshot()
    assert snapshot['processes'][0] == {'id': 'P1', 'allocations': {'R1': 2}, 'pending': {'R2': 1}}
    assert snapshot['resources'][1] == {'id': 'R2', 'totalUnits': 2, 'available': 0}
    print("  ✓ Matrices, pair states, snapshot")


def test_pair_can_hold_and_wait():
    """A pair may be allocated and pending at the same time."""
    state = SystemState()
    state.add_process("P1")
    state.ledger.create_resource("R1", 2)
    state.ledger.allocate("P1", "R1", 2)
    state.queue.set_pending("P1", "R1", 1)
    assert state.pair_state("P1", "R1") == PairState.ALLOCATED_AND_PENDING


def test_conservation_check_catches_violation():
    state = SystemState()
    state.add_process("P1")
    state.ledger.create_resource("R1", 1)
    state.ledger.allocate("P1", "R1", 2)
    try:
        state.assert_resource_conservation("over-allocated")
        assert False, "Over-allocation should trip the conservation check"
    except AssertionError as e:
        assert "R1" in str(e)


def main():
    """Run all model tests."""
    test_resource_model()
    test_ledger_create_resource()
    test_ledger_allocate_and_release()
    test_ledger_does_not_check_capacity()
    test_request_queue_overwrites()
    test_request_queue_per_process_view()
    test_system_state()
    test_pair_can_hold_and_wait()
    test_conservation_check_catches_violation()
    print("\n✅ Model Tests PASSED")
    return 0


if __name__ == '__main__':
    sys.exit(main())
