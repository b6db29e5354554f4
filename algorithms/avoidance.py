"""
Deadlock Avoidance Algorithm (Banker's Algorithm) safety check.

Decides whether a static allocation snapshot admits an order in which
every process can finish.
"""

import numpy as np
from typing import List, Sequence, Tuple

from models.safety_result import SafetyResult, SafetyStep
from models.system_state import SystemState


def find_safe_sequence(
    available: np.ndarray,
    allocation: np.ndarray,
    need: np.ndarray
) -> SafetyResult:
    """
    Run the Banker's safety algorithm over prepared matrices.

    Algorithm:
    1. Initialize Work = Available, Finish = [False] * num_processes
    2. Find the lowest-index process i where Finish[i] == False and Need[i] <= Work
    3. If found: Finish[i] = True, Work += Allocation[i], add i to sequence
    4. Repeat step 2 until all processes finish (SAFE) or stuck (UNSAFE)

    Time Complexity: O(P²×R)

    Args:
        available: [R] Available resources vector
        allocation: [P][R] Allocation matrix
        need: [P][R] Need matrix (Max - Allocation)

    Returns:
        SafetyResult with the safe sequence, or the partial sequence and
        blocked processes if the search stalled

    Raises:
        ValueError: If the array shapes disagree

    References:
        Silberschatz, A., Galvin, P. B., & Gagne, G. (2018).
        Operating System Concepts (10th ed.). Chapter 7.5: Deadlock Avoidance.
    """
    available, allocation, need = _as_arrays(available, allocation, need)

    num_processes = allocation.shape[0]

    # Work = copy of Available (caller's vector is never modified)
    work = available.copy()
    finish = np.zeros(num_processes, dtype=bool)
    safe_sequence = []
    steps = []

    while len(safe_sequence) < num_processes:
        admitted = None
        for i in range(num_processes):
            if finish[i]:
                continue
            if np.all(need[i] <= work):
                admitted = i
                break

        if admitted is None:
            break

        work_before = tuple(int(w) for w in work)
        work += allocation[admitted]
        finish[admitted] = True
        safe_sequence.append(admitted)
        steps.append(SafetyStep(
            round=len(safe_sequence),
            process_id=admitted,
            work_before=work_before,
            work_after=tuple(int(w) for w in work)
        ))

    blocked = [i for i in range(num_processes) if not finish[i]]
    return SafetyResult(
        is_safe=not blocked,
        sequence=safe_sequence,
        steps=steps,
        blocked=blocked
    )


def is_safe_state(system_state: SystemState) -> SafetyResult:
    """
    Check if a prepared snapshot is in a safe state using Banker's Algorithm.

    Args:
        system_state: Prepared system state

    Returns:
        SafetyResult (see find_safe_sequence)
    """
    return find_safe_sequence(
        system_state.available_vector,
        system_state.allocation_matrix,
        system_state.need_matrix
    )


def verify_safe_sequence(
    available: np.ndarray,
    allocation: np.ndarray,
    need: np.ndarray,
    sequence: Sequence[int]
) -> bool:
    """
    Replay a completion order and check it is a valid safe sequence.

    The order must name every process exactly once, and each process's
    need must fit in the work accumulated by the processes before it.
    """
    available, allocation, need = _as_arrays(available, allocation, need)

    num_processes = allocation.shape[0]
    if sorted(sequence) != list(range(num_processes)):
        return False

    work = available.copy()
    for pid in sequence:
        if not np.all(need[pid] <= work):
            return False
        work += allocation[pid]
    return True


def _as_arrays(available, allocation, need) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Convert inputs to int64 arrays; an empty process list becomes shape (0, R)."""
    available = np.asarray(available, dtype=np.int64)
    allocation = np.asarray(allocation, dtype=np.int64)
    need = np.asarray(need, dtype=np.int64)

    if available.ndim == 1:
        empty_shape = (0, available.shape[0])
        if allocation.size == 0 and allocation.ndim == 1:
            allocation = allocation.reshape(empty_shape)
        if need.size == 0 and need.ndim == 1:
            need = need.reshape(empty_shape)

    _check_shapes(available, allocation, need)
    return available, allocation, need


def _check_shapes(available: np.ndarray, allocation: np.ndarray, need: np.ndarray) -> None:
    if available.ndim != 1 or allocation.ndim != 2 or allocation.shape != need.shape:
        raise ValueError(
            f"Shape mismatch: available {available.shape}, "
            f"allocation {allocation.shape}, need {need.shape}"
        )
    if allocation.shape[1] != available.shape[0]:
        raise ValueError(
            f"Resource count mismatch: available has {available.shape[0]}, "
            f"allocation has {allocation.shape[1]}"
        )


def blocked_needs(system_state: SystemState, result: SafetyResult) -> List[tuple]:
    """
    Pair each blocked process with its need and the final work vector.

    Used for reporting why an unsafe search stalled.

    Returns:
        List of (pid, need, work) tuples, need and work as plain int lists
    """
    work = system_state.available_vector.copy()
    for pid in result.sequence:
        work += system_state.allocation_matrix[pid]
    final_work = [int(w) for w in work]
    return [
        (pid, [int(n) for n in system_state.need_matrix[pid]], final_work)
        for pid in result.blocked
    ]
