"""Pipeline composition: orchestration of a scan and result ordering."""

from venv_cleaner.pipeline.orchestrator import (
    ConfirmCallback,
    PipelineOrchestrator,
    PipelineProgressCallback,
    parse_confirmation,
)
from venv_cleaner.pipeline.sorting import sort_entries

__all__ = [
    "ConfirmCallback",
    "PipelineOrchestrator",
    "PipelineProgressCallback",
    "parse_confirmation",
    "sort_entries",
]
