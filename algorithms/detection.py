"""
Deadlock Detection for the Resource Allocation Graph simulator.

Builds the wait-for graph induced by the current allocations and pending
requests, then looks for a cycle with a depth-first search.
"""

from typing import Dict, List, Optional, Set, Tuple

from models.system_state import SystemState


def build_wait_for_graph(system_state: SystemState) -> Dict[str, List[str]]:
    """
    Build the wait-for graph.

    Edge P -> Q exists when P has a pending request for some resource R and
    Q holds a nonzero allocation of R. Q may be P itself: a process that
    holds units of R and waits for more of it gets an edge to itself, and
    with no other holder to free units it is reported as a one-process cycle.

    Edge order: P's pending requests in queue order, then holders of each
    resource in process creation order. Duplicate edges are collapsed.

    Args:
        system_state: Current system state (read only)

    Returns:
        Adjacency list for every process, in process creation order
    """
    order = {pid: p.order for pid, p in system_state.processes.items()}
    graph: Dict[str, List[str]] = {pid: [] for pid in system_state.processes}

    for pid, rid, _units in system_state.queue:
        if pid not in graph:
            continue
        holders = sorted(
            (h for h in system_state.ledger.holders(rid) if h in order),
            key=lambda h: order[h],
        )
        for holder in holders:
            if holder not in graph[pid]:
                graph[pid].append(holder)

    return graph


def find_cycle(system_state: SystemState) -> Optional[List[str]]:
    """
    Find a cycle in the wait-for graph.

    Depth-first search from every process not yet visited, in creation
    order. The first time an edge reaches a process that is still on the
    recursion stack, the search stops and returns the stack in discovery
    order. That is a witness, not a canonical cycle: it is not rotated or
    minimised, and when the search entered the cycle through other
    processes those lead the list.

    Args:
        system_state: Current system state (read only)

    Returns:
        List of process ids, or None if there is no cycle
    """
    graph = build_wait_for_graph(system_state)
    visited: Set[str] = set()

    for start in graph:
        if start in visited:
            continue

        # Iterative DFS: each frame is (node, index of next neighbour)
        stack: List[Tuple[str, int]] = [(start, 0)]
        path: List[str] = [start]
        on_stack: Set[str] = {start}
        visited.add(start)

        while stack:
            node, index = stack[-1]
            neighbours = graph[node]
            if index >= len(neighbours):
                stack.pop()
                path.pop()
                on_stack.discard(node)
                continue

            stack[-1] = (node, index + 1)
            neighbour = neighbours[index]
            if neighbour in on_stack:
                return list(path)
            if neighbour not in visited:
                visited.add(neighbour)
                on_stack.add(neighbour)
                path.append(neighbour)
                stack.append((neighbour, 0))

    return None


def detect_deadlock(system_state: SystemState) -> Tuple[bool, List[str]]:
    """
    Detect deadlock as a cycle in the wait-for graph.

    Args:
        system_state: Current system state (read only)

    Returns:
        Tuple of (deadlock_exists, witness cycle or empty list)
    """
    cycle = find_cycle(system_state)
    if cycle is None:
        return False, []
    return True, cycle
