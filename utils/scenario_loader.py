"""
Scenario Loader for the Resource Allocation Graph simulator.

Loads and validates JSON scenario files: resources, processes and an ordered
list of operations to replay against an AllocationEngine.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


OPERATIONS = ('request', 'release', 'detect')


@dataclass
class Scenario:
    """
    A parsed scenario.

    Attributes:
        resources: List of (resource id, total units) in declaration order
        processes: Process ids in declaration order
        operations: Operation dicts in replay order
        description: Free-text description from the file
    """
    resources: List[tuple] = field(default_factory=list)
    processes: List[str] = field(default_factory=list)
    operations: List[Dict[str, Any]] = field(default_factory=list)
    description: str = ""


def load_scenario(file_path: str) -> Scenario:
    """
    Load scenario from JSON file.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Parsed Scenario

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")

    return parse_scenario(data)


def parse_scenario(data: Dict) -> Scenario:
    """
    Validate an already decoded scenario document.

    Only the shape of the file is checked here. Whether an operation succeeds
    (for example an over-release) is decided by the engine during replay.
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")
    if 'processes' not in data:
        raise ScenarioLoadError("Scenario missing 'processes' field")
    if 'resources' not in data:
        raise ScenarioLoadError("Scenario missing 'resources' field")

    resources = _load_resources(data['resources'])
    processes = _load_processes(data['processes'])
    operations = _load_operations(
        data.get('operations', []),
        set(processes),
        {rid for rid, _ in resources},
    )

    return Scenario(
        resources=resources,
        processes=processes,
        operations=operations,
        description=data.get('description', ''),
    )


def _load_resources(resource_data: List[Dict]) -> List[tuple]:
    """
    Load resource definitions from scenario data.

    Args:
        resource_data: List of resource dictionaries

    Returns:
        List of (rid, total_units) tuples
    """
    if not isinstance(resource_data, list):
        raise ScenarioLoadError("'resources' must be a list")

    resources = []
    seen = set()
    for res in resource_data:
        if not isinstance(res, dict) or 'id' not in res:
            raise ScenarioLoadError("Resource missing 'id' field")
        if 'total_units' not in res:
            raise ScenarioLoadError(f"Resource {res['id']} missing 'total_units'")
        if res['id'] in seen:
            raise ScenarioLoadError(f"Duplicate resource id: {res['id']}")
        seen.add(res['id'])
        resources.append((str(res['id']), res['total_units']))

    return resources


def _load_processes(process_data: List[Any]) -> List[str]:
    """
    Accept either plain ids or {"id": ...} objects.
    """
    if not isinstance(process_data, list):
        raise ScenarioLoadError("'processes' must be a list")

    processes = []
    for proc in process_data:
        pid = proc.get('id') if isinstance(proc, dict) else proc
        if pid is None or str(pid).strip() == "":
            raise ScenarioLoadError("Process missing 'id'")
        pid = str(pid)
        if pid in processes:
            raise ScenarioLoadError(f"Duplicate process id: {pid}")
        processes.append(pid)

    return processes


def _load_operations(
    operation_data: List[Dict],
    process_ids: set,
    resource_ids: set
) -> List[Dict]:
    """
    Load and validate the operation list.

    Args:
        operation_data: Raw operation dictionaries
        process_ids: Declared process ids
        resource_ids: Declared resource ids

    Returns:
        List of operation dictionaries
    """
    if not isinstance(operation_data, list):
        raise ScenarioLoadError("'operations' must be a list")

    operations = []
    for index, op in enumerate(operation_data):
        _validate_operation(index, op, process_ids, resource_ids)
        operations.append(dict(op))
    return operations


def _validate_operation(
    index: int,
    op: Dict,
    process_ids: set,
    resource_ids: set
) -> None:
    """
    Validate an operation.

    Raises:
        ScenarioLoadError: If operation is invalid
    """
    if not isinstance(op, dict) or 'op' not in op:
        raise ScenarioLoadError(f"Operation {index}: missing 'op' field")

    kind = op['op']
    if kind not in OPERATIONS:
        raise ScenarioLoadError(f"Operation {index}: unknown op '{kind}'")

    if kind == 'detect':
        return

    for key in ('process', 'resource', 'units'):
        if key not in op:
            raise ScenarioLoadError(f"Operation {index}: {kind} missing '{key}'")

    if op['process'] not in process_ids:
        raise ScenarioLoadError(f"Operation {index}: unknown process '{op['process']}'")
    if op['resource'] not in resource_ids:
        raise ScenarioLoadError(f"Operation {index}: unknown resource '{op['resource']}'")


def get_scenario_description(file_path: str) -> Optional[str]:
    """
    Get description from scenario file without full validation.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Description string ('' if absent), or None if the file is unreadable
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    return data.get('description', '') if isinstance(data, dict) else ''
