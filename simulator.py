#!/usr/bin/env python3
"""
Resource Allocation Graph Simulator
Main entry point: replay a scenario file or serve the HTTP API.
"""

import argparse
import sys
from typing import Optional

from algorithms.allocation import AllocationEngine
from analysis.events import EventLog, EventType
from models.errors import AllocationError
from utils import config
from utils.scenario_loader import Scenario, load_scenario, ScenarioLoadError
from utils.logger import SimulatorLogger

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_DEADLOCK = 2


def run_scenario(scenario: Scenario, logger: SimulatorLogger) -> AllocationEngine:
    """
    Replay a scenario against a fresh engine.

    Creation and operation failures are logged and replay continues; the
    engine has already left its state untouched for a rejected operation.

    Args:
        scenario: Parsed scenario
        logger: Logger instance

    Returns:
        The engine in its final state
    """
    engine = AllocationEngine(logger=logger)

    for rid, total_units in scenario.resources:
        try:
            engine.create_resource(rid, total_units)
        except AllocationError:
            continue  # logged by the engine
    for pid in scenario.processes:
        try:
            engine.create_process(pid)
        except AllocationError:
            continue  # logged by the engine

    for index, op in enumerate(scenario.operations):
        kind = op['op']
        logger.log(f"Operation {index}: {kind}", "debug")
        try:
            if kind == 'request':
                engine.request(op['process'], op['resource'], op['units'])
            elif kind == 'release':
                engine.release(op['process'], op['resource'], op['units'])
            elif kind == 'detect':
                engine.detect()
        except AllocationError:
            # Already logged and recorded by the engine
            continue

        if logger.verbose:
            engine.state.assert_resource_conservation(f"after operation {index}")
            logger.log_system_state(engine.state.display())

    return engine


def run_simulation(
    scenario_path: str,
    verbose: bool = False,
    log_file: Optional[str] = None
) -> int:
    """
    Load and replay a scenario, then report final state and deadlock status.

    Args:
        scenario_path: Path to scenario JSON file
        verbose: Enable verbose logging
        log_file: Optional log file path

    Returns:
        Exit code (0 no deadlock, 2 deadlock, 1 load error)
    """
    logger = SimulatorLogger(verbose=verbose, log_file=log_file)
    try:
        try:
            scenario = load_scenario(scenario_path)
        except ScenarioLoadError as e:
            logger.log(f"Failed to load scenario: {e}", "error")
            return EXIT_LOAD_ERROR

        logger.log(f"{'='*60}")
        logger.log(f"SIMULATION START: {scenario_path}")
        if scenario.description:
            logger.log(scenario.description)
        logger.log(f"{'='*60}")

        engine = run_scenario(scenario, logger)

        logger.log(f"\n{'='*60}")
        logger.log("SIMULATION COMPLETE")
        logger.log(f"{'='*60}")
        logger.log(engine.state.display())

        cycle = engine.detect()
        _display_statistics(engine, logger)
        return EXIT_DEADLOCK if cycle else EXIT_OK
    finally:
        logger.close()


def _display_statistics(engine: AllocationEngine, logger: SimulatorLogger) -> None:
    """Display final simulation statistics."""
    events = engine.events
    logger.log("\nSimulation Statistics:")
    logger.log(f"  Processes: {engine.state.num_processes}")
    logger.log(f"  Resources: {engine.state.num_resources}")
    logger.log(f"  Immediate grants: {len(events.get_events_by_type(EventType.ALLOCATION))}")
    logger.log(f"  Queued requests: {len(events.get_events_by_type(EventType.QUEUED))}")
    logger.log(f"  Grants from wait queue: {len(events.get_events_by_type(EventType.WAIT_GRANTED))}")
    logger.log(f"  Releases: {len(events.get_events_by_type(EventType.RELEASE))}")
    logger.log(f"  Rejected operations: {len(events.get_events_by_type(EventType.REJECTED))}")
    logger.log(f"  Still pending: {len(engine.state.queue)}")


def serve(host: str, port: int, verbose: bool) -> int:
    """Run the HTTP API until interrupted."""
    from api.server import create_app

    logger = SimulatorLogger(verbose=verbose)
    engine = AllocationEngine(
        event_log=EventLog(max_events=config.EVENT_HISTORY),
        logger=logger,
    )
    app = create_app(engine)
    logger.log(f"Resource Allocation Graph API running on http://{host}:{port}")
    app.run(host=host, port=port, debug=False)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Resource Allocation Graph & Deadlock Detection Simulator'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    run_parser = subparsers.add_parser('run', help='Replay a scenario file')
    run_parser.add_argument(
        '--scenario',
        type=str,
        required=True,
        help='Path to scenario JSON file'
    )
    run_parser.add_argument(
        '--verbose',
        action='store_true',
        default=config.VERBOSE,
        help='Enable verbose logging'
    )
    run_parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write the log to this file'
    )

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP API')
    serve_parser.add_argument('--host', type=str, default=config.API_HOST)
    serve_parser.add_argument('--port', type=int, default=config.API_PORT)
    serve_parser.add_argument(
        '--verbose',
        action='store_true',
        default=config.VERBOSE,
        help='Enable verbose logging'
    )
    return parser


def main(argv=None):
    """Main entry point for the simulator."""
    args = build_parser().parse_args(argv)

    if args.command == 'run':
        return run_simulation(args.scenario, args.verbose, args.log_file)
    return serve(args.host, args.port, args.verbose)


if __name__ == '__main__':
    sys.exit(main())
