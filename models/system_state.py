"""
System State model for the Banker's Algorithm Safety Checker.

Holds a static allocation snapshot and derives the Available vector and
Need matrix consumed by the safety algorithm.
"""

import numpy as np
from typing import Optional, Sequence
from dataclasses import dataclass


MAX_UNITS = int(np.iinfo(np.int64).max)


class MalformedInputError(Exception):
    """Exception raised when input matrices are missing, misshapen or non-integer."""
    pass


class InvalidStateError(MalformedInputError):
    """Exception raised when a snapshot is well-shaped but internally inconsistent."""
    pass


@dataclass(frozen=True, eq=False)
class SystemState:
    """
    Prepared allocation snapshot.

    Attributes:
        total_resources: [R] Total instances of each resource type
        allocation_matrix: [P][R] Current resources held by each process
        max_demand_matrix: [P][R] Maximum resource need declared by each process

    Derived:
        available_vector: [R] total - column sums of allocation
        need_matrix: [P][R] max_demand - allocation
    """
    total_resources: np.ndarray
    allocation_matrix: np.ndarray
    max_demand_matrix: np.ndarray

    @property
    def num_processes(self) -> int:
        """Number of processes in the snapshot."""
        return self.allocation_matrix.shape[0]

    @property
    def num_resources(self) -> int:
        """Number of resource types in the snapshot."""
        return self.total_resources.shape[0]

    @property
    def available_vector(self) -> np.ndarray:
        """Get available resources vector [R]."""
        return self.total_resources - self.allocation_matrix.sum(axis=0, dtype=np.int64)

    @property
    def need_matrix(self) -> np.ndarray:
        """
        Get need matrix [P][R].
        Computed as: Need = Max - Allocation
        """
        return self.max_demand_matrix - self.allocation_matrix

    def display(self) -> str:
        """
        Generate readable string representation of the snapshot.

        Returns:
            Formatted string showing all matrices and vectors
        """
        header = "     " + " ".join([f"R{j:2}" for j in range(self.num_resources)])

        output = []
        output.append("\n" + "="*60)
        output.append("SYSTEM STATE")
        output.append("="*60)

        output.append("\nTotal Resources:")
        output.append("  " + _format_vector(self.total_resources))

        output.append("\nAvailable Resources:")
        output.append("  " + _format_vector(self.available_vector))

        for title, matrix in (
            ("Allocation Matrix:", self.allocation_matrix),
            ("Max Demand Matrix:", self.max_demand_matrix),
            ("Need Matrix (Max - Allocation):", self.need_matrix),
        ):
            output.append("\n" + title)
            output.append(header)
            for i in range(self.num_processes):
                row = f"  P{i}: "
                row += " ".join([f"{matrix[i][j]:3}" for j in range(self.num_resources)])
                output.append(row)

        output.append("\n" + "="*60)
        return "\n".join(output)


def prepare_system_state(
    num_processes: int,
    num_resources: int,
    total_resources: Sequence[int],
    allocation: Sequence[Sequence[int]],
    requirement: Sequence[Sequence[int]]
) -> SystemState:
    """
    Validate raw input matrices and build a SystemState.

    Args:
        num_processes: Process count (P)
        num_resources: Resource type count (R)
        total_resources: [R] Total instances per resource type
        allocation: [P][R] Units currently held by each process
        requirement: [P][R] Maximum units each process may ever need

    Returns:
        SystemState owning copies of the validated matrices

    Raises:
        MalformedInputError: If counts, shapes or entries are invalid
        InvalidStateError: If a process holds more than its maximum demand,
            or allocations of a resource exceed its total
    """
    for name, count in (("process count", num_processes), ("resource count", num_resources)):
        if not _is_int(count) or count < 0:
            raise MalformedInputError(f"Invalid {name}: {count!r}")

    total = _to_vector(total_resources, num_resources, "total_resources")
    alloc = _to_matrix(allocation, num_processes, num_resources, "allocation")
    max_demand = _to_matrix(requirement, num_processes, num_resources, "requirement")

    # Need = Max - Allocation must be non-negative
    over_demand = np.argwhere(alloc > max_demand)
    if len(over_demand):
        i, j = over_demand[0]
        raise InvalidStateError(
            f"P{i}: allocation[{j}] ({alloc[i][j]}) exceeds max_demand[{j}] ({max_demand[i][j]})"
        )

    # sum(allocation[:,r]) <= total[r] for all r, in Python ints
    for j in range(num_resources):
        allocated = sum(int(a) for a in alloc[:, j])
        if allocated > int(total[j]):
            raise InvalidStateError(
                f"Resource R{j} allocations ({allocated}) exceed total instances ({total[j]})"
            )

    for array in (total, alloc, max_demand):
        array.setflags(write=False)

    return SystemState(
        total_resources=total,
        allocation_matrix=alloc,
        max_demand_matrix=max_demand
    )


def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _to_vector(values: Sequence[int], length: int, name: str, row: Optional[int] = None) -> np.ndarray:
    """Copy a sequence into an int64 vector, checking length and entries."""
    label = name if row is None else f"{name} row {row}"
    try:
        items = list(values)
    except TypeError:
        raise MalformedInputError(f"{label} is not a sequence: {values!r}")

    if len(items) != length:
        raise MalformedInputError(
            f"{label} has {len(items)} entries, expected {length}"
        )
    for j, item in enumerate(items):
        if not _is_int(item):
            raise MalformedInputError(f"{label}[{j}] is not an integer: {item!r}")
        if item < 0:
            raise MalformedInputError(f"{label}[{j}] is negative: {item}")
        if item > MAX_UNITS:
            raise MalformedInputError(f"{label}[{j}] exceeds {MAX_UNITS}: {item}")

    return np.array(items, dtype=np.int64).reshape(length)


def _to_matrix(rows: Sequence[Sequence[int]], num_rows: int, num_cols: int, name: str) -> np.ndarray:
    """Copy nested sequences into an int64 [num_rows][num_cols] matrix."""
    try:
        rows = list(rows)
    except TypeError:
        raise MalformedInputError(f"{name} is not a sequence of rows: {rows!r}")

    if len(rows) != num_rows:
        raise MalformedInputError(f"{name} has {len(rows)} rows, expected {num_rows}")

    matrix = np.zeros((num_rows, num_cols), dtype=np.int64)
    for i, row in enumerate(rows):
        matrix[i] = _to_vector(row, num_cols, name, row=i)
    return matrix


def _format_vector(vector: np.ndarray) -> str:
    return "[" + ", ".join(f"R{j}:{vector[j]:2}" for j in range(len(vector))) + "]"
