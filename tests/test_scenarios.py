"""
Scenario Loader and Simulator Tests

Loads the JSON scenarios, checks validation errors and replays them through
the command-line entry point.
"""

import os
import sys
import tempfile
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from analysis.events import EventType
from simulator import EXIT_DEADLOCK, EXIT_LOAD_ERROR, EXIT_OK, main, run_scenario
from utils.logger import SimulatorLogger
from utils.scenario_loader import (
    ScenarioLoadError,
    get_scenario_description,
    load_scenario,
    parse_scenario,
)


# Test scenarios directory
SCENARIOS_DIR = project_root / "tests" / "scenarios"


def _quiet_logger():
    return SimulatorLogger(quiet=True, timestamps=False)


def test_load_scenario():
    print("\n" + "="*60)
    print("TEST: Scenario Loader")
    print("="*60)

    scenario = load_scenario(str(SCENARIOS_DIR / "guaranteed_deadlock.json"))
    assert scenario.resources == [("R1", 1), ("R2", 1)]
    assert scenario.processes == ["P1", "P2"]
    assert len(scenario.operations) == 5
    assert scenario.operations[-1] == {"op": "detect"}
    assert "single-unit" in scenario.description
    print("  ✓ Scenario loaded")


def test_process_objects_accepted():
    scenario = load_scenario(str(SCENARIOS_DIR / "bad_release.json"))
    assert scenario.processes == ["P1"]


def test_invalid_scenarios_rejected():
    base = {
        "resources": [{"id": "R1", "total_units": 1}],
        "processes": ["P1"],
        "operations": [],
    }
    broken = [
        {k: v for k, v in base.items() if k != "resources"},
        {k: v for k, v in base.items() if k != "processes"},
        {**base, "resources": [{"total_units": 1}]},
        {**base, "resources": [{"id": "R1"}]},
        {**base, "resources": [{"id": "R1", "total_units": 1}, {"id": "R1", "total_units": 2}]},
        {**base, "processes": ["P1", "P1"]},
        {**base, "operations": [{"process": "P1"}]},
        {**base, "operations": [{"op": "preempt"}]},
        {**base, "operations": [{"op": "request", "process": "P1", "resource": "R1"}]},
        {**base, "operations": [{"op": "request", "process": "P9", "resource": "R1", "units": 1}]},
        {**base, "operations": [{"op": "release", "process": "P1", "resource": "R9", "units": 1}]},
        [],
    ]
    for data in broken:
        try:
            parse_scenario(data)
            assert False, f"Should reject {data}"
        except ScenarioLoadError:
            pass


def test_missing_and_malformed_files():
    try:
        load_scenario(str(SCENARIOS_DIR / "does_not_exist.json"))
        assert False, "Missing file should be rejected"
    except ScenarioLoadError as e:
        assert "not found" in str(e)

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "broken.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write("{not json")
        try:
            load_scenario(path)
            assert False, "Malformed JSON should be rejected"
        except ScenarioLoadError as e:
            assert "Invalid JSON" in str(e)
        assert get_scenario_description(path) is None


def test_scenario_description():
    assert "R2 back" in get_scenario_description(str(SCENARIOS_DIR / "no_deadlock.json"))


def test_replay_deadlock_scenario():
    scenario = load_scenario(str(SCENARIOS_DIR / "guaranteed_deadlock.json"))
    engine = run_scenario(scenario, _quiet_logger())
    assert engine.detect() == ["P1", "P2"]
    assert len(engine.events.get_events_by_type(EventType.QUEUED)) == 2


def test_replay_continues_after_rejected_operation():
    scenario = load_scenario(str(SCENARIOS_DIR / "bad_release.json"))
    engine = run_scenario(scenario, _quiet_logger())

    assert len(engine.events.get_events_by_type(EventType.REJECTED)) == 1
    assert engine.state.ledger.allocated("P1", "R1") == 0
    assert engine.available_units("R1") == 2


def test_cli_exit_codes():
    print("\n" + "="*60)
    print("TEST: Simulator exit codes")
    print("="*60)

    assert main(["run", "--scenario", str(SCENARIOS_DIR / "guaranteed_deadlock.json")]) == EXIT_DEADLOCK
    assert main(["run", "--scenario", str(SCENARIOS_DIR / "no_deadlock.json")]) == EXIT_OK
    assert main(["run", "--scenario", str(SCENARIOS_DIR / "missing.json")]) == EXIT_LOAD_ERROR
    print("  ✓ Exit codes")


def test_cli_log_file():
    with tempfile.TemporaryDirectory() as tmp:
        log_path = os.path.join(tmp, "run.log")
        code = main([
            "run",
            "--scenario", str(SCENARIOS_DIR / "guaranteed_deadlock.json"),
            "--verbose",
            "--log-file", log_path,
        ])
        assert code == EXIT_DEADLOCK
        with open(log_path, encoding="utf-8") as f:
            text = f.read()
    assert text.startswith("Simulation Log")
    assert "DEADLOCK DETECTED - Cycle: P1 -> P2" in text
    assert "P1 requests R2[1] - QUEUED" in text
    assert "[DEBUG]" in text


def test_demo_scenarios_replay():
    """The bundled demo scenarios stay loadable."""
    demo_dir = project_root / "scenarios"
    wait_queue = load_scenario(str(demo_dir / "demo_wait_queue.json"))
    engine = run_scenario(wait_queue, _quiet_logger())
    assert engine.state.ledger.allocated("P2", "DISK") == 3
    assert engine.state.ledger.allocated("P3", "DISK") == 2
    assert engine.available_units("DISK") == 0
    assert engine.detect() is None

    ring = load_scenario(str(demo_dir / "demo_deadlock.json"))
    engine = run_scenario(ring, _quiet_logger())
    assert engine.detect() == ["P1", "P2", "P3"]
    assert len(engine.events.get_events_by_type(EventType.QUEUED)) == 3
    assert len(engine.events.get_events_by_type(EventType.DEADLOCK)) == 1


def main_tests():
    """Run all scenario tests."""
    test_load_scenario()
    test_process_objects_accepted()
    test_invalid_scenarios_rejected()
    test_missing_and_malformed_files()
    test_scenario_description()
    test_replay_deadlock_scenario()
    test_replay_continues_after_rejected_operation()
    test_cli_exit_codes()
    test_cli_log_file()
    test_demo_scenarios_replay()
    print("\n✅ Scenario Tests PASSED")
    return 0


if __name__ == '__main__':
    sys.exit(main_tests())
