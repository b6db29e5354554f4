"""
Safety Algorithm Tests

Tests the Banker's safety search: verdicts, the lowest-index tie-break,
the admission trace and the replay check.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from algorithms.avoidance import (
    blocked_needs,
    find_safe_sequence,
    is_safe_state,
    verify_safe_sequence,
)
from models.system_state import prepare_system_state


ALLOCATION = [[0, 1, 0], [2, 0, 0], [3, 0, 2], [2, 1, 1], [0, 0, 2]]
REQUIREMENT = [[7, 5, 3], [3, 2, 2], [9, 0, 2], [2, 2, 2], [4, 3, 3]]


def make_state(totals, allocation=ALLOCATION, requirement=REQUIREMENT):
    return prepare_system_state(len(allocation), len(totals), totals, allocation, requirement)


def test_textbook_safe_sequence():
    """Classic snapshot is safe; P0 is admitted as soon as P3 has released."""
    result = is_safe_state(make_state([10, 5, 7]))

    assert result.is_safe, "Textbook snapshot should be safe"
    assert result.sequence == [1, 3, 0, 2, 4]
    assert result.safe_sequence == [1, 3, 0, 2, 4]
    assert result.blocked == []
    assert result.format_sequence() == "P1 -> P3 -> P0 -> P2 -> P4"


def test_textbook_unsafe():
    """Totals [7, 2, 6] leave Available [0, 0, 1] and nothing can start."""
    state = make_state([7, 2, 6])
    result = is_safe_state(state)

    assert state.available_vector.tolist() == [0, 0, 1]
    assert not result.is_safe
    assert result.safe_sequence is None
    assert result.sequence == []
    assert result.blocked == [0, 1, 2, 3, 4]
    assert result.verdict == "Unsafe"


def test_partial_progress_then_stall():
    """P0 can finish but what it releases does not unblock P1."""
    state = prepare_system_state(
        2, 2,
        [2, 3],
        [[1, 0], [1, 1]],
        [[1, 1], [3, 3]],
    )
    result = is_safe_state(state)

    assert not result.is_safe
    assert result.sequence == [0]
    assert result.blocked == [1]
    assert blocked_needs(state, result) == [(1, [2, 2], [1, 2])]


def test_no_processes_is_safe():
    state = prepare_system_state(0, 3, [1, 1, 1], [], [])
    result = is_safe_state(state)

    assert result.is_safe
    assert result.sequence == []
    assert result.format_sequence() == ""


def test_no_resources_admits_in_index_order():
    state = prepare_system_state(3, 0, [], [[], [], []], [[], [], []])
    result = is_safe_state(state)

    assert result.is_safe
    assert result.sequence == [0, 1, 2]


def test_zero_need_is_immediately_admissible():
    """A process holding its full maximum runs first even with nothing available."""
    state = prepare_system_state(
        2, 2,
        [2, 2],
        [[1, 1], [1, 1]],
        [[2, 2], [1, 1]],
    )
    result = is_safe_state(state)

    assert result.is_safe
    assert result.sequence == [1, 0]


def test_lowest_index_wins_each_round():
    """After every admission the scan restarts from process 0."""
    # All three are admissible from the start
    state = prepare_system_state(
        3, 1,
        [3],
        [[0], [0], [0]],
        [[1], [1], [1]],
    )
    assert is_safe_state(state).sequence == [0, 1, 2]

    # P2 unblocks P0, which must then be picked before P3
    state = prepare_system_state(
        4, 1,
        [5],
        [[1], [0], [3], [0]],
        [[4], [5], [3], [1]],
    )
    result = is_safe_state(state)
    assert result.sequence == [2, 0, 1, 3]


def test_idempotent():
    state = make_state([10, 5, 7])
    first = is_safe_state(state)
    second = is_safe_state(state)

    assert first.is_safe == second.is_safe
    assert first.sequence == second.sequence
    assert first.steps == second.steps


def test_inputs_not_modified():
    available = np.array([3, 3, 2], dtype=np.int64)
    allocation = np.array(ALLOCATION, dtype=np.int64)
    need = np.array(REQUIREMENT, dtype=np.int64) - allocation

    find_safe_sequence(available, allocation, need)

    assert available.tolist() == [3, 3, 2], "Work must be a copy of Available"


def test_monotonic_in_available():
    """Adding resources never turns a safe snapshot unsafe, and can fix an unsafe one."""
    allocation = np.array(ALLOCATION, dtype=np.int64)
    need = np.array(REQUIREMENT, dtype=np.int64) - allocation

    unsafe_available = np.array([0, 0, 1], dtype=np.int64)
    assert not find_safe_sequence(unsafe_available, allocation, need).is_safe

    was_safe = False
    for extra in range(0, 8):
        available = unsafe_available + extra
        is_safe = find_safe_sequence(available, allocation, need).is_safe
        assert is_safe or not was_safe, f"Became unsafe after adding {extra}"
        was_safe = was_safe or is_safe
    assert was_safe


def test_safe_sequence_replays():
    state = make_state([10, 5, 7])
    result = is_safe_state(state)

    assert verify_safe_sequence(
        state.available_vector, state.allocation_matrix, state.need_matrix, result.sequence
    )


def test_other_valid_orders_replay():
    """The textbook's P1 -> P3 -> P4 -> P0 -> P2 is also a valid safe sequence."""
    state = make_state([10, 5, 7])

    assert verify_safe_sequence(
        state.available_vector, state.allocation_matrix, state.need_matrix, [1, 3, 4, 0, 2]
    )


def test_replay_rejects_bad_orders():
    state = make_state([10, 5, 7])
    args = (state.available_vector, state.allocation_matrix, state.need_matrix)

    # P0 needs [7, 4, 3] but only [3, 3, 2] is available
    assert not verify_safe_sequence(*args, [0, 1, 3, 4, 2])
    # incomplete and duplicated orders
    assert not verify_safe_sequence(*args, [1, 3, 4, 0])
    assert not verify_safe_sequence(*args, [1, 3, 4, 0, 0])


def test_steps_trace_work_vector():
    result = is_safe_state(make_state([10, 5, 7]))

    assert [step.process_id for step in result.steps] == result.sequence
    assert [step.round for step in result.steps] == [1, 2, 3, 4, 5]

    first = result.steps[0]
    assert first.work_before == (3, 3, 2)
    assert first.work_after == (5, 3, 2)
    assert result.steps[-1].work_after == (10, 5, 7), "All resources returned at the end"
    assert str(first) == "Round 1: P1 admitted (work [3, 3, 2] -> [5, 3, 2])"


def test_accepts_plain_lists():
    need = [[r - a for r, a in zip(req, alloc)] for req, alloc in zip(REQUIREMENT, ALLOCATION)]
    result = find_safe_sequence([3, 3, 2], ALLOCATION, need)

    assert result.sequence == [1, 3, 0, 2, 4]


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        find_safe_sequence([3, 3], ALLOCATION, REQUIREMENT)


def test_no_processes_as_plain_lists():
    result = find_safe_sequence([1, 2], [], [])

    assert result.is_safe
    assert result.sequence == []
    assert verify_safe_sequence([1, 2], [], [], [])
