"""Pipeline orchestrator that composes walker, classifier and deletion gate.

The orchestrator owns the run's state machine. It never prints; front ends
observe a run through PipelineProgressCallback and the returned
PipelineResult.
"""

from __future__ import annotations

import logging
import signal
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Protocol

from venv_cleaner.classification import classify
from venv_cleaner.domain import (
    ClassificationTier,
    DeletionOutcome,
    DeletionStatus,
    PipelineResult,
    PipelineState,
    ReportEntry,
    RunSummary,
    ScanConfig,
    ScanMode,
    TargetRecord,
    TraversalError,
    validate_start_path,
)
from venv_cleaner.executor import DeletionGate
from venv_cleaner.logging import set_pipeline_state, target_context
from venv_cleaner.scanner import DirectoryWalker

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[TargetRecord, ClassificationTier], bool]

_AFFIRMATIVE_ANSWERS = frozenset({"y", "yes"})


def parse_confirmation(answer: str | None) -> bool:
    """Interpret a user's answer to a deletion prompt.

    Only ``y`` or ``yes`` (case-insensitive, surrounding whitespace ignored)
    count as yes. Anything else, including empty input, means no.
    """
    if answer is None:
        return False
    return answer.strip().casefold() in _AFFIRMATIVE_ANSWERS


class PipelineProgressCallback(Protocol):
    """Protocol for pipeline progress callbacks.

    Implementations may define any subset of these methods.
    """

    def on_state_change(self, state: PipelineState) -> None:
        """Called when the pipeline enters a new state."""
        ...

    def on_target_found(self, record: TargetRecord) -> None:
        """Called for each target as the walker yields it."""
        ...

    def on_entry(self, entry: ReportEntry) -> None:
        """Called when a report entry is final (with its outcome, if any)."""
        ...


class PipelineOrchestrator:
    """Runs one scan in the mode chosen by a ScanConfig.

    Mode state machines:
        query:       SCANNING -> CLASSIFYING -> REPORTING -> DONE
        dry_run:     SCANNING -> CLASSIFYING -> REPORTING -> ACTING -> DONE
        force:       SCANNING -> CLASSIFYING -> ACTING -> DONE
        interactive: per streamed record, CLASSIFYING -> REPORTING ->
                     AWAITING_CONFIRMATION -> ACTING, then DONE
    """

    def __init__(
        self,
        config: ScanConfig,
        *,
        walker: DirectoryWalker | None = None,
        gate: DeletionGate | None = None,
        confirm: ConfirmCallback | None = None,
        progress: PipelineProgressCallback | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Validated run parameters.
            walker: Directory walker (a default one is created if None).
            gate: Deletion gate (a default one is created if None).
            confirm: Callback asked before each deletion in interactive mode.
            progress: Optional progress callback.
            clock: Returns "now" for classification, read once per
                classified target (UTC wall clock if None).

        Raises:
            ValueError: If the mode is interactive and no confirm callback
                is given.
        """
        if config.mode is ScanMode.INTERACTIVE and confirm is None:
            raise ValueError("Interactive mode requires a confirm callback")

        self.config = config
        self.walker = walker or DirectoryWalker()
        self.gate = gate or DeletionGate()
        self.state = PipelineState.IDLE
        self._confirm = confirm
        self._progress = progress
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._interrupt_event = threading.Event()

    def run(self) -> PipelineResult:
        """Execute the pipeline.

        Returns:
            PipelineResult with report entries in traversal order and the
            run summary. Partial results are returned when the run is
            interrupted or the walk fails.

        Raises:
            InvalidStartPathError: If the start path is no longer valid.
        """
        config = self.config
        validate_start_path(config.start_path)

        self._interrupt_event.clear()
        summary = RunSummary(mode=config.mode, start_path=config.start_path)
        entries: list[ReportEntry] = []
        start_time = time.monotonic()

        logger.info(
            "Starting %s run in %s (recursive=%s)",
            config.mode.value,
            config.start_path,
            config.recursive,
        )

        try:
            if config.mode is ScanMode.INTERACTIVE:
                self._run_interactive(entries, summary)
            else:
                self._run_batch(entries, summary)
        except KeyboardInterrupt:
            logger.warning("Run interrupted, returning partial results")
            summary.interrupted = True
        finally:
            summary.walk_warnings = list(self.walker.warnings)
            summary.elapsed_seconds = time.monotonic() - start_time
            self._set_state(PipelineState.DONE)

        logger.info(
            "Run finished: %d target(s), status %s",
            summary.targets_found,
            summary.status.value,
        )
        set_pipeline_state(None)
        return PipelineResult(entries=entries, summary=summary)

    def _run_batch(self, entries: list[ReportEntry], summary: RunSummary) -> None:
        mode = self.config.mode

        self._set_state(PipelineState.SCANNING)
        records: list[TargetRecord] = []
        try:
            for record in self.walker.walk(
                self.config.start_path, self.config.recursive
            ):
                self._found(record, summary)
                records.append(record)
        except TraversalError as e:
            self._walk_failed(e, summary)
        finally:
            # Targets found before a Ctrl+C are still reported
            self._set_state(PipelineState.CLASSIFYING)
            for record in records:
                tier = self._classify(record, summary)
                entries.append(ReportEntry(record=record, tier=tier))

        if mode in (ScanMode.QUERY, ScanMode.DRY_RUN):
            self._set_state(PipelineState.REPORTING)
            if mode is ScanMode.QUERY:
                for entry in entries:
                    self._notify("on_entry", entry)
                return

        if summary.fatal_error:
            logger.warning("Not acting on targets because the walk failed")
            for entry in entries:
                self._notify("on_entry", entry)
            return

        self._set_state(PipelineState.ACTING)
        for index, entry in enumerate(entries):
            with target_context(entry.record.path):
                outcome = self._act(entry.record)
            summary.record_outcome(outcome)
            entries[index] = ReportEntry(
                record=entry.record, tier=entry.tier, outcome=outcome
            )
            self._notify("on_entry", entries[index])
            if self._interrupt_event.is_set():
                summary.interrupted = True
                break

    def _run_interactive(
        self, entries: list[ReportEntry], summary: RunSummary
    ) -> None:
        confirm = self._confirm
        if confirm is None:
            raise ValueError("Interactive mode requires a confirm callback")

        self._set_state(PipelineState.SCANNING)
        try:
            for record in self.walker.walk(
                self.config.start_path, self.config.recursive
            ):
                self._found(record, summary)
                with target_context(record.path):
                    self._set_state(PipelineState.CLASSIFYING)
                    tier = self._classify(record, summary)

                    self._set_state(PipelineState.REPORTING)
                    self._set_state(PipelineState.AWAITING_CONFIRMATION)
                    if confirm(record, tier):
                        self._set_state(PipelineState.ACTING)
                        outcome = self._act(record)
                    else:
                        logger.info("Skipped by user: %s", record.path)
                        outcome = DeletionOutcome(
                            path=record.path,
                            status=DeletionStatus.DECLINED,
                            message="skipped",
                        )

                summary.record_outcome(outcome)
                entry = ReportEntry(record=record, tier=tier, outcome=outcome)
                entries.append(entry)
                self._notify("on_entry", entry)

                if self._interrupt_event.is_set():
                    summary.interrupted = True
                    break
                self._set_state(PipelineState.SCANNING)
        except TraversalError as e:
            self._walk_failed(e, summary)

    def _found(self, record: TargetRecord, summary: RunSummary) -> None:
        summary.targets_found += 1
        summary.total_bytes += record.size_bytes
        self._notify("on_target_found", record)

    def _classify(
        self, record: TargetRecord, summary: RunSummary
    ) -> ClassificationTier:
        tier = classify(record, self._clock())
        if tier.recommend_cleanup:
            summary.recommended += 1
        return tier

    def _walk_failed(self, error: TraversalError, summary: RunSummary) -> None:
        logger.error("Walk aborted: %s", error)
        summary.fatal_error = str(error)

    def _act(self, record: TargetRecord) -> DeletionOutcome:
        """Offer one target to the deletion gate with Ctrl+C deferred."""
        with self._deferred_interrupts():
            return self.gate.delete(record, self.config.mode)

    @contextmanager
    def _deferred_interrupts(self) -> Iterator[None]:
        """Defer SIGINT until the enclosed block finishes.

        Signal handlers can only be installed from the main thread; elsewhere
        the block runs unprotected.
        """
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        def handler(signum: int, frame: object) -> None:
            logger.info("Interrupt received, stopping after current target...")
            self._interrupt_event.set()

        old_handler = signal.signal(signal.SIGINT, handler)
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, old_handler)

    def _set_state(self, state: PipelineState) -> None:
        if state is self.state:
            return
        logger.debug("Pipeline state: %s -> %s", self.state.value, state.value)
        self.state = state
        set_pipeline_state(state.value)
        self._notify("on_state_change", state)

    def _notify(self, method_name: str, *args: object) -> None:
        if self._progress is None:
            return
        method = getattr(self._progress, method_name, None)
        if method is None:
            return
        try:
            method(*args)
        except Exception as e:
            logger.warning("Progress callback raised exception: %s", e)
