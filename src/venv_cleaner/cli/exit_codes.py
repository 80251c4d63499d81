"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (flags, config)
    20-29: Target errors
    40-49: Operation errors
    60-69: Warning states
"""

from __future__ import annotations

from enum import IntEnum

from venv_cleaner.domain import RunStatus, RunSummary


class ExitCode(IntEnum):
    """Exit codes for venv-cleaner CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2  # SIGINT during a run

    # Validation errors (10-19)
    CONFIG_ERROR = 11

    # Target errors (20-29)
    TARGET_NOT_FOUND = 20

    # Operation errors (40-49)
    OPERATION_FAILED = 40

    # Warning states (60-69)
    WARNINGS = 60


RUN_STATUS_EXIT_CODES: dict[RunStatus, ExitCode] = {
    RunStatus.SUCCESS: ExitCode.SUCCESS,
    RunStatus.WARNINGS: ExitCode.WARNINGS,
    RunStatus.FATAL: ExitCode.OPERATION_FAILED,
}


def exit_code_for_summary(summary: RunSummary) -> ExitCode:
    """Map a finished run to the process exit code.

    An interrupted run exits with INTERRUPTED regardless of what was
    completed before the interrupt.
    """
    if summary.interrupted:
        return ExitCode.INTERRUPTED
    return RUN_STATUS_EXIT_CODES[summary.status]
