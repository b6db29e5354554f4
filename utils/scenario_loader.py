"""
Scenario Loader for the Banker's Algorithm Safety Checker.

Loads allocation snapshots from the line-oriented matrix format
(bank.dat) or from JSON scenario files, and validates them.
"""

import json
from typing import Dict, List, Any
from pathlib import Path

from models.system_state import MalformedInputError, SystemState, prepare_system_state


def load_scenario(file_path: str) -> SystemState:
    """
    Load scenario from a matrix file or JSON file.

    Files ending in .json are read as JSON scenarios; anything else is
    read as the matrix format.

    Args:
        file_path: Path to scenario file

    Returns:
        Prepared SystemState

    Raises:
        MalformedInputError: If file cannot be loaded or is invalid
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        raise MalformedInputError(f"Scenario file not found: {file_path}")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Cannot read scenario file {file_path}: {e}")

    if path.suffix.lower() == '.json':
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"Invalid JSON in scenario file: {e}")
        return load_json_scenario(data)

    return parse_matrix_text(text)


def parse_matrix_text(text: str) -> SystemState:
    """
    Parse the matrix format.

    Layout:
        R P
        total resources row
        P requirement rows
        P allocation rows

    Rows are comma-separated integers. Trailing blank lines are ignored.

    Args:
        text: File contents

    Returns:
        Prepared SystemState

    Raises:
        MalformedInputError: If the header or any row is invalid
    """
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise MalformedInputError("Scenario is empty: missing 'R P' header line")

    header = lines[0].split()
    if len(header) != 2:
        raise MalformedInputError(
            f"Line 1: expected 'R P' header with two integers, got {lines[0]!r}"
        )
    num_resources = _parse_int(header[0], 1)
    num_processes = _parse_int(header[1], 1)
    if num_resources < 0 or num_processes < 0:
        raise MalformedInputError(f"Line 1: counts must be non-negative, got {lines[0]!r}")

    # With R = 0 every row is blank, so only blanks past the last row are dropped
    # and missing trailing rows are treated as blank
    expected_lines = 2 + 2 * num_processes
    if num_resources == 0:
        lines += [''] * (expected_lines - len(lines))
    while len(lines) > expected_lines and not lines[-1].strip():
        lines.pop()

    if len(lines) < expected_lines:
        raise MalformedInputError(
            f"Expected {expected_lines} lines for R={num_resources}, P={num_processes}, "
            f"found {len(lines)}"
        )
    if len(lines) > expected_lines:
        raise MalformedInputError(
            f"Line {expected_lines + 1}: unexpected content after allocation rows"
        )

    rows = [
        _parse_row(lines[index], index + 1, num_resources)
        for index in range(1, expected_lines)
    ]
    total_resources = rows[0]
    requirement = rows[1:1 + num_processes]
    allocation = rows[1 + num_processes:]

    return prepare_system_state(
        num_processes,
        num_resources,
        total_resources,
        allocation,
        requirement
    )


def load_json_scenario(data: Any) -> SystemState:
    """
    Build a SystemState from decoded JSON scenario data.

    Expected keys: 'total_resources' (list of ints) and 'processes', a list
    of objects with 'max_demand' and optional 'allocation' and 'pid'.

    Raises:
        MalformedInputError: If required fields are missing or invalid
    """
    if not isinstance(data, dict):
        raise MalformedInputError("Scenario root must be a JSON object")
    if 'total_resources' not in data:
        raise MalformedInputError("Scenario missing 'total_resources' field")
    if 'processes' not in data:
        raise MalformedInputError("Scenario missing 'processes' field")

    total_resources = data['total_resources']
    if not isinstance(total_resources, list):
        raise MalformedInputError("'total_resources' must be a list")
    if not isinstance(data['processes'], list):
        raise MalformedInputError("'processes' must be a list")

    num_resources = len(total_resources)
    processes = _order_processes(data['processes'])

    requirement = []
    allocation = []
    for pid, proc_data in enumerate(processes):
        if 'max_demand' not in proc_data:
            raise MalformedInputError(f"Process {pid} missing required field: max_demand")
        requirement.append(proc_data['max_demand'])
        allocation.append(proc_data.get('allocation', [0] * num_resources))

    return prepare_system_state(
        len(processes),
        num_resources,
        total_resources,
        allocation,
        requirement
    )


def _order_processes(proc_list: List[Any]) -> List[Dict]:
    """
    Order process entries by pid.

    Entries without pids keep list order; if any entry has a pid, all must,
    and the pids must be exactly 0..P-1.
    """
    for proc_data in proc_list:
        if not isinstance(proc_data, dict):
            raise MalformedInputError(f"Process entry must be an object, got {proc_data!r}")

    with_pid = [p for p in proc_list if 'pid' in p]
    if not with_pid:
        return proc_list
    if len(with_pid) != len(proc_list):
        raise MalformedInputError("Either every process has a 'pid' or none does")

    pids = [p['pid'] for p in proc_list]
    if not all(isinstance(pid, int) for pid in pids) or sorted(pids) != list(range(len(proc_list))):
        raise MalformedInputError(
            f"Process pids must be 0..{len(proc_list) - 1} without gaps, got {pids}"
        )
    return sorted(proc_list, key=lambda p: p['pid'])


def _parse_row(line: str, line_number: int, num_resources: int) -> List[int]:
    """Parse one comma-separated row, checking its length."""
    if not line.strip():
        values = []
    else:
        values = [_parse_int(token, line_number) for token in line.split(',')]

    if len(values) != num_resources:
        raise MalformedInputError(
            f"Line {line_number}: expected {num_resources} values, got {len(values)}"
        )
    return values


def _parse_int(token: str, line_number: int) -> int:
    try:
        return int(token.strip())
    except ValueError:
        raise MalformedInputError(f"Line {line_number}: not an integer: {token.strip()!r}")


def get_scenario_description(file_path: str) -> str:
    """
    Get description from a JSON scenario file without full loading.

    Args:
        file_path: Path to scenario file

    Returns:
        Description string, or empty string if not present or not JSON
    """
    if Path(file_path).suffix.lower() != '.json':
        return ''
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return ''
    if not isinstance(data, dict):
        return ''
    return data.get('description', '')
