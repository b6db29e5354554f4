"""
Logger utility for the Banker's Algorithm Safety Checker.

Provides console and optional file logging with verbosity levels.
"""

from typing import List, Optional
from datetime import datetime

from models.safety_result import SafetyResult, SafetyStep


class BankerLogger:
    """
    Logger for safety check results and search steps.

    Format: "Round X: PY admitted (work [...] -> [...])"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger.

        Args:
            verbose: Enable debug output
            log_file: Optional file path for logging
        """
        self.verbose = verbose
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Safety Check Log - {timestamp}\n")
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

        print(formatted)

        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_admission(self, step: SafetyStep) -> None:
        """Log one admission of the safety search (debug level)."""
        self.log(str(step), "debug")

    def log_blocked(self, pid: int, need: List[int], work: List[int]) -> None:
        """
        Log a process the search could not admit.

        Args:
            pid: Process index
            need: Remaining need of the process
            work: Work vector when the search stalled
        """
        self.log(f"P{pid} blocked: need {need} exceeds work {work}", "debug")

    def log_verdict(self, result: SafetyResult) -> None:
        """
        Log the verdict, and the safe sequence when there is one.

        Args:
            result: Outcome of the safety check
        """
        self.log(result.verdict)
        if result.is_safe:
            self.log(f"Safe sequence: {result.format_sequence()}")

    def log_system_state(self, state_str: str) -> None:
        """
        Log system state snapshot.

        Args:
            state_str: Formatted system state
        """
        self.log(state_str)

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
