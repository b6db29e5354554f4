"""
Result model for the Banker's Algorithm Safety Checker.

Defines the outcome of one safety check and the trace of admissions
that produced it.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from config import PROCESS_LABEL, SEQUENCE_SEPARATOR


@dataclass(frozen=True)
class SafetyStep:
    """
    Represents a single admission during the safety search.

    Attributes:
        round: 1-based round in which the process was admitted
        process_id: Index of the admitted process
        work_before: Work vector the process's need was checked against
        work_after: Work vector after the process released its allocation
    """
    round: int
    process_id: int
    work_before: Tuple[int, ...]
    work_after: Tuple[int, ...]

    def __str__(self) -> str:
        """Format step for logging."""
        return (
            f"Round {self.round}: {PROCESS_LABEL}{self.process_id} admitted "
            f"(work {list(self.work_before)} -> {list(self.work_after)})"
        )


@dataclass(frozen=True)
class SafetyResult:
    """
    Outcome of a safety check.

    Unsafe is a regular outcome, not an error: is_safe is False and
    sequence holds whatever partial order was found before the search stalled.

    Attributes:
        is_safe: Whether every process can finish
        sequence: Completion order (full witness when safe, partial otherwise)
        steps: One SafetyStep per admitted process, in admission order
        blocked: Processes left unfinished when the search stalled
    """
    is_safe: bool
    sequence: List[int] = field(default_factory=list)
    steps: List[SafetyStep] = field(default_factory=list)
    blocked: List[int] = field(default_factory=list)

    @property
    def safe_sequence(self):
        """Witness order if safe, else None."""
        return list(self.sequence) if self.is_safe else None

    @property
    def verdict(self) -> str:
        return "Safe" if self.is_safe else "Unsafe"

    def format_sequence(self) -> str:
        """Render the sequence as 'P1 -> P3 -> ...'."""
        return SEQUENCE_SEPARATOR.join(f"{PROCESS_LABEL}{pid}" for pid in self.sequence)

    def display(self) -> str:
        """Format all steps for display."""
        return "\n".join(str(step) for step in self.steps)
