#!/usr/bin/env python3
"""
Banker's Algorithm Safety Checker
Main entry point: load an allocation snapshot and report whether it is safe.
"""

import argparse
import sys
from typing import List, Optional, Tuple

from config import DEFAULT_INPUT_FILE, EXIT_INPUT_ERROR, EXIT_SAFE, EXIT_UNSAFE
from models.safety_result import SafetyResult
from models.system_state import MalformedInputError
from utils.scenario_loader import load_scenario, get_scenario_description
from utils.logger import BankerLogger
from algorithms.avoidance import is_safe_state, blocked_needs


def run_safety_check(
    input_path: str,
    verbose: bool = False,
    show_state: bool = False,
    log_file: Optional[str] = None
) -> Tuple[int, Optional[SafetyResult]]:
    """
    Load a snapshot, run the safety algorithm and report the verdict.

    Args:
        input_path: Path to a matrix (.dat) or JSON scenario file
        verbose: Log each admission and the blocked processes
        show_state: Print the prepared matrices before the verdict
        log_file: Optional file that mirrors all output

    Returns:
        Tuple of (exit_code, result); result is None on input errors
    """
    try:
        logger = BankerLogger(verbose=verbose, log_file=log_file)
    except OSError as e:
        BankerLogger().log(f"Cannot open log file {log_file}: {e}", "error")
        return EXIT_INPUT_ERROR, None

    try:
        try:
            system_state = load_scenario(input_path)
        except MalformedInputError as e:
            logger.log(f"Failed to load scenario: {e}", "error")
            return EXIT_INPUT_ERROR, None

        description = get_scenario_description(input_path)
        if description:
            logger.log(f"Scenario: {description}", "debug")

        if show_state:
            logger.log_system_state(system_state.display())

        result = is_safe_state(system_state)

        for step in result.steps:
            logger.log_admission(step)
        for pid, need, work in blocked_needs(system_state, result):
            logger.log_blocked(pid, need, work)

        logger.log_verdict(result)
        return (EXIT_SAFE if result.is_safe else EXIT_UNSAFE), result
    finally:
        logger.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the safety checker."""
    parser = argparse.ArgumentParser(
        description="Banker's Algorithm safety check over an allocation snapshot"
    )
    parser.add_argument(
        'input',
        nargs='?',
        default=DEFAULT_INPUT_FILE,
        help=f'Path to matrix or JSON scenario file (default: {DEFAULT_INPUT_FILE})'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log every admission and the processes left blocked'
    )
    parser.add_argument(
        '--show-state',
        action='store_true',
        help='Print total, available, allocation, max demand and need matrices'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write output to this file'
    )

    args = parser.parse_args(argv)

    exit_code, _ = run_safety_check(args.input, args.verbose, args.show_state, args.log_file)
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
