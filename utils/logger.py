"""
Logger utility for the Resource Allocation Graph simulator.

Provides operation-by-operation logging with verbosity levels.
"""

from typing import List, Optional
from datetime import datetime


class SimulatorLogger:
    """
    Logger for simulation events and decisions.

    Format: "[HH:MM:SS] P1 requests R1[2] - GRANTED/QUEUED (reason)"
    """

    def __init__(
        self,
        verbose: bool = False,
        log_file: Optional[str] = None,
        quiet: bool = False,
        timestamps: bool = True
    ):
        """
        Initialize logger.

        Args:
            verbose: Enable debug output
            log_file: Optional file path for logging
            quiet: Suppress console output (file output still happens)
            timestamps: Prefix each line with the wall-clock time
        """
        self.verbose = verbose
        self.quiet = quiet
        self.timestamps = timestamps
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Simulation Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        if not self.quiet:
            print(formatted)

        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with timestamp and level prefix."""
        if level == "error":
            message = f"[ERROR] {message}"
        elif level == "warning":
            message = f"[WARNING] {message}"
        elif level == "debug":
            message = f"[DEBUG] {message}"
        if self.timestamps:
            return f"[{datetime.now().strftime('%H:%M:%S')}] {message}"
        return message

    def log_request(
        self,
        pid: str,
        rid: str,
        units: int,
        granted: bool,
        available: int
    ) -> None:
        """
        Log a resource request.

        Args:
            pid: Process ID
            rid: Resource ID
            units: Units requested
            granted: Whether request was granted immediately
            available: Units available when the request was made
        """
        if granted:
            self.log(f"{pid} requests {rid}[{units}] - GRANTED")
        else:
            self.log(
                f"{pid} requests {rid}[{units}] - QUEUED "
                f"(only {available} available)"
            )

    def log_release(self, pid: str, rid: str, units: int, woken: List[str]) -> None:
        """
        Log a release and any waiters it unblocked.

        Args:
            pid: Releasing process
            rid: Resource ID
            units: Units released
            woken: Processes granted by wait-queue resolution
        """
        self.log(f"{pid} releases {rid}[{units}]")
        for waiter in woken:
            self.log(f"  {rid} granted to waiting process {waiter}")

    def log_deadlock(self, cycle: Optional[List[str]]) -> None:
        """
        Log the outcome of a deadlock check.

        Args:
            cycle: Witness cycle, or None when there is no deadlock
        """
        if cycle:
            self.log(f"DEADLOCK DETECTED - Cycle: {' -> '.join(cycle)}", "warning")
        else:
            self.log("No deadlock detected")

    def log_system_state(self, state_str: str) -> None:
        """
        Log system state snapshot.

        Args:
            state_str: Formatted system state
        """
        if self.verbose:
            self.log(f"System State:\n{state_str}", "debug")

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
