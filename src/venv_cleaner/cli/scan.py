"""Scan command: find, report and optionally delete .venv directories."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from venv_cleaner.cli.exit_codes import ExitCode, exit_code_for_summary
from venv_cleaner.cli.formatting import (
    format_deletion_status,
    style_recency,
    style_size,
)
from venv_cleaner.cli.logging_setup import LogOptions, setup_logging
from venv_cleaner.cli.output import error_exit, warning_output
from venv_cleaner.config import CleanerConfig
from venv_cleaner.core import (
    format_age,
    format_file_size,
    format_path_for_display,
    format_timestamp,
)
from venv_cleaner.domain import (
    ClassificationTier,
    InvalidConfigurationError,
    InvalidStartPathError,
    PipelineResult,
    PipelineState,
    RecencyTier,
    ReportEntry,
    RunSummary,
    ScanConfig,
    ScanMode,
    SizeTier,
    SortKey,
    TargetRecord,
)
from venv_cleaner.pipeline import (
    PipelineOrchestrator,
    parse_confirmation,
    sort_entries,
)
from venv_cleaner.scanner import VENV_DIR_NAME, DirectoryWalker

logger = logging.getLogger(__name__)

# Warnings listed before "use --verbose to see all"
MAX_WARNINGS_SHOWN = 5

LOCATION_WIDTH = 60


class ProgressDisplay:
    """Display progress for scan operations.

    Shows a directory counter that updates in place using carriage return
    while the walker runs, and per-target outcome lines once deletions
    start. The counter is only active when output is a TTY and not JSON
    mode.
    """

    def __init__(self, *, enabled: bool = True, show_outcomes: bool = True):
        """Initialize the progress display.

        Args:
            enabled: Whether to show the directory counter.
            show_outcomes: Whether to echo a line per deletion outcome.
        """
        self._enabled = enabled and sys.stdout.isatty()
        self._show_outcomes = show_outcomes
        self._has_output = False

    def _write(self, text: str) -> None:
        """Write text to stdout, clearing previous line."""
        if not self._enabled:
            return
        # \r moves to start of line, \033[K clears to end of line
        sys.stdout.write(f"\r\033[K{text}")
        sys.stdout.flush()
        self._has_output = True

    def _finish_line(self) -> None:
        """Finish current line with newline."""
        if self._enabled and self._has_output:
            sys.stdout.write("\n")
            sys.stdout.flush()
            self._has_output = False

    def on_directory(self, directories_visited: int) -> None:
        """Called by the walker for every directory it reads."""
        self._write(f"Searching... {directories_visited:,} directories")

    def on_state_change(self, state: PipelineState) -> None:
        """Close the counter line when the walk phase ends."""
        if state is not PipelineState.SCANNING:
            self._finish_line()

    def on_entry(self, entry: ReportEntry) -> None:
        """Echo the outcome of a deletion attempt."""
        if not self._show_outcomes or entry.outcome is None:
            return
        self._finish_line()
        outcome = entry.outcome
        line = f"{format_deletion_status(outcome.status)}: {entry.record.location}"
        if outcome.is_issue and outcome.message:
            line += f" ({outcome.message})"
        click.echo(line)

    def finish(self) -> None:
        """Finish all progress display."""
        self._finish_line()


def _confirm_deletion(record: TargetRecord, tier: ClassificationTier) -> bool:
    """Show a target and ask whether to delete it.

    Raises:
        KeyboardInterrupt: If the prompt is aborted (Ctrl+C or end of input).
    """
    click.echo("")
    click.echo(click.style("-" * LOCATION_WIDTH, dim=True))
    click.echo(click.style(str(record.location), fg="cyan"))
    click.echo(
        f"  Size: {style_size(format_file_size(record.size_bytes), tier.size_tier)}"
    )
    last_used = format_timestamp(record.last_used_at)
    click.echo(
        f"  Last used: {style_recency(last_used, tier.recency_tier)}"
        f" ({format_age(tier.age_days)})"
    )
    if tier.recency_tier is RecencyTier.ABANDONED:
        click.echo(
            click.style(
                "  This .venv hasn't been used in over 90 days", fg="yellow"
            )
        )
    elif tier.recency_tier is RecencyTier.RECENT:
        click.echo(click.style("  This .venv was used recently", fg="green"))
    if tier.size_tier is SizeTier.LARGE:
        click.echo(click.style("  This .venv is larger than 1 GB", fg="yellow"))

    try:
        answer = click.prompt(
            "Delete this .venv directory? (y/N)",
            default="",
            show_default=False,
        )
    except click.Abort:
        raise KeyboardInterrupt from None
    return parse_confirmation(answer)


def _entry_to_dict(entry: ReportEntry) -> dict[str, Any]:
    record = entry.record
    tier = entry.tier
    data: dict[str, Any] = {
        "path": str(record.path),
        "location": str(record.location),
        "project_name": record.project_name,
        "size_bytes": record.size_bytes,
        "size": format_file_size(record.size_bytes),
        "created_at": record.created_at.isoformat(),
        "created_is_approximate": record.created_is_approximate,
        "last_used_at": record.last_used_at.isoformat(),
        "age_days": tier.age_days,
        "size_tier": tier.size_tier.value,
        "recency_tier": tier.recency_tier.value,
        "recommend_cleanup": tier.recommend_cleanup,
        "unreadable_entries": record.unreadable_entries,
        "outcome": None,
    }
    if entry.outcome is not None:
        data["outcome"] = {
            "status": entry.outcome.status.value,
            "message": entry.outcome.message,
            "bytes_reclaimed": entry.outcome.bytes_reclaimed,
        }
    return data


def _summary_to_dict(summary: RunSummary) -> dict[str, Any]:
    return {
        "targets_found": summary.targets_found,
        "total_bytes": summary.total_bytes,
        "recommended": summary.recommended,
        "deleted": summary.deleted,
        "simulated": summary.simulated,
        "declined": summary.declined,
        "permission_denied": summary.permission_denied,
        "vanished": summary.vanished,
        "partial": summary.partial,
        "failed": summary.failed,
        "bytes_reclaimed": summary.bytes_reclaimed,
        "bytes_simulated": summary.bytes_simulated,
        "warnings": [
            {"path": path, "message": message}
            for path, message in summary.walk_warnings
        ],
        "issues": [
            {
                "path": str(outcome.path),
                "status": outcome.status.value,
                "message": outcome.message,
            }
            for outcome in summary.issues
        ],
        "fatal_error": summary.fatal_error,
        "interrupted": summary.interrupted,
        "elapsed_seconds": round(summary.elapsed_seconds, 2),
    }


def output_json(
    result: PipelineResult, sort_key: SortKey, reverse: bool
) -> None:
    """Output scan results in JSON format."""
    summary = result.summary
    data = {
        "status": summary.status.value,
        "mode": summary.mode.value,
        "start_path": str(summary.start_path),
        "targets": [
            _entry_to_dict(entry)
            for entry in sort_entries(result.entries, sort_key, reverse)
        ],
        "summary": _summary_to_dict(summary),
    }
    click.echo(json.dumps(data, indent=2))


def _print_header(config: ScanConfig) -> None:
    click.echo(click.style("venv-cleaner", bold=True, fg="green"))
    click.echo(f"Searching in: {click.style(str(config.start_path), fg='cyan')}")
    if config.recursive:
        click.echo(f"Mode: {click.style('Recursive search', fg='yellow')}")
    else:
        click.echo("Mode: Current directory only")

    banners = {
        ScanMode.DRY_RUN: ("DRY RUN MODE - No files will be deleted", "yellow"),
        ScanMode.FORCE: ("FORCE MODE - Will delete without prompting", "red"),
        ScanMode.QUERY: ("QUERY MODE - Will only display information", "blue"),
    }
    if config.mode in banners:
        text, color = banners[config.mode]
        click.echo(click.style(text, fg=color, bold=True))


def _print_query_table(
    entries: list[ReportEntry], sort_key: SortKey, reverse: bool, verbose: bool
) -> None:
    header = (
        f"{'Location':<{LOCATION_WIDTH}} {'Size':<12} "
        f"{'Created':<20} {'Last Used':<20}"
    )
    if verbose:
        header += " Tier"
    click.echo(click.style(header, bold=True))
    click.echo(click.style("-" * len(header), dim=True))

    for entry in sort_entries(entries, sort_key, reverse):
        record = entry.record
        tier = entry.tier
        location = format_path_for_display(
            str(record.location), LOCATION_WIDTH - 2
        )
        size = format_file_size(record.size_bytes)
        created = format_timestamp(record.created_at)
        if record.created_is_approximate:
            created += "*"
        last_used = format_timestamp(record.last_used_at)
        line = (
            f"{location:<{LOCATION_WIDTH}} "
            f"{style_size(f'{size:<12}', tier.size_tier)} "
            f"{click.style(f'{created:<20}', dim=True)} "
            f"{style_recency(f'{last_used:<20}', tier.recency_tier)}"
        )
        if verbose:
            line += f" {tier.size_tier.value}/{tier.recency_tier.value}"
        click.echo(line)

    click.echo(click.style("-" * len(header), dim=True))


def _print_recommendations(entries: list[ReportEntry]) -> None:
    abandoned = sum(
        1 for e in entries if e.tier.recency_tier is RecencyTier.ABANDONED
    )
    large = sum(1 for e in entries if e.tier.size_tier is SizeTier.LARGE)
    if not abandoned and not large:
        return

    click.echo("")
    click.echo(click.style("Recommendations:", bold=True, fg="yellow"))
    if abandoned:
        click.echo(
            f"  {abandoned} old .venv directories (>90 days) could be cleaned up"
        )
    if large:
        click.echo(
            f"  {large} large .venv directories (>1 GB) are taking significant space"
        )
    if abandoned:
        click.echo(
            "\nConsider running: "
            + click.style("venv-cleaner scan -r -f", fg="green")
            + " to clean up old directories"
        )


def _print_cleanup_summary(summary: RunSummary) -> None:
    click.echo("")
    click.echo(click.style("Cleanup Summary", bold=True, fg="green"))
    if summary.mode is ScanMode.DRY_RUN:
        click.echo(
            f"  {summary.simulated} directories would be deleted, "
            f"freeing {format_file_size(summary.bytes_simulated)}"
        )
    else:
        click.echo(
            f"  Deleted: {summary.deleted} directories, "
            f"freed {format_file_size(summary.bytes_reclaimed)}"
        )
    if summary.declined:
        click.echo(f"  Skipped: {summary.declined}")

    if summary.issues:
        click.echo(f"\n{len(summary.issues)} target(s) need attention:", err=True)
        for outcome in summary.issues:
            click.echo(
                f"  {outcome.path}: {format_deletion_status(outcome.status)}"
                f" - {outcome.message}",
                err=True,
            )


def _print_walk_warnings(summary: RunSummary, verbose: bool) -> None:
    warnings = summary.walk_warnings
    if not warnings:
        return
    count = len(warnings)
    click.echo(f"\n{count} warning(s) while searching:", err=True)
    shown = warnings if verbose else warnings[:MAX_WARNINGS_SHOWN]
    for path, message in shown:
        click.echo(f"  {path}: {message}", err=True)
    if count > len(shown):
        click.echo(
            f"  ... and {count - len(shown)} more (use --verbose to see all)",
            err=True,
        )


def output_human(
    result: PipelineResult, sort_key: SortKey, reverse: bool, verbose: bool
) -> None:
    """Output scan results in human-readable format."""
    summary = result.summary

    if summary.fatal_error:
        warning_output(f"search stopped early: {summary.fatal_error}")

    if not result.entries and not summary.targets_found:
        click.echo(click.style(f"\nNo {VENV_DIR_NAME} directories found.", fg="yellow"))
    elif summary.mode is ScanMode.QUERY:
        click.echo("")
        _print_query_table(result.entries, sort_key, reverse, verbose)
        click.echo(
            f"\nSummary: {summary.targets_found} .venv directories found, "
            f"total size: {format_file_size(summary.total_bytes)}"
        )
        _print_recommendations(result.entries)
    else:
        _print_cleanup_summary(summary)

    _print_walk_warnings(summary, verbose)

    if summary.interrupted:
        click.echo("\nRun interrupted. Partial results shown.", err=True)


@click.command("scan")
@click.argument(
    "directory",
    required=False,
    type=click.Path(path_type=Path),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    default=False,
    help="Search subdirectories recursively.",
)
@click.option(
    "--no-recursive",
    is_flag=True,
    default=False,
    help="Only check DIRECTORY/.venv, even if the config file enables recursion.",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Delete without asking for confirmation.",
)
@click.option(
    "--query",
    "-q",
    is_flag=True,
    default=False,
    help="Only list .venv directories; never delete.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show what would be deleted without deleting anything.",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Show more detail (repeat for more).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output results in JSON format.",
)
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([key.value for key in SortKey], case_sensitive=False),
    default=None,
    help="Sort order for the report. Default: from config (size).",
)
@click.option(
    "--reverse",
    is_flag=True,
    default=False,
    help="Reverse the sort order.",
)
@click.pass_context
def scan(
    ctx: click.Context,
    directory: Path | None,
    recursive: bool,
    no_recursive: bool,
    force: bool,
    query: bool,
    dry_run: bool,
    verbose: int,
    json_output: bool,
    sort_key: str | None,
    reverse: bool,
) -> None:
    """Find .venv directories and optionally delete them.

    DIRECTORY defaults to the current directory. Without -r only
    DIRECTORY/.venv is considered. By default each directory found is shown
    and you are asked before it is deleted.

    Examples:

        venv-cleaner scan -q -r ~/projects

        venv-cleaner scan --dry-run -r ~/projects

        venv-cleaner scan -r -f --json ~/old-projects
    """
    obj = ctx.obj or {}
    cleaner_config: CleanerConfig = obj.get("config") or CleanerConfig()

    if recursive and no_recursive:
        error_exit(
            "--recursive cannot be combined with --no-recursive",
            ExitCode.CONFIG_ERROR,
            json_output,
        )
    if recursive or no_recursive:
        effective_recursive = recursive
    else:
        effective_recursive = cleaner_config.scan.recursive

    try:
        config = ScanConfig.create(
            directory,
            recursive=effective_recursive,
            query=query,
            force=force,
            dry_run=dry_run,
            verbosity=verbose,
        )
    except InvalidConfigurationError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR, json_output)
    except InvalidStartPathError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)

    if verbose:
        setup_logging(
            cleaner_config.logging,
            obj.get("log_options") or LogOptions(),
            verbosity=verbose,
        )

    if force and dry_run:
        logger.info("--force combined with --dry-run: nothing will be deleted")

    if json_output and config.mode is ScanMode.INTERACTIVE:
        error_exit(
            "--json needs --query, --force or --dry-run "
            "(interactive prompts need a terminal)",
            ExitCode.CONFIG_ERROR,
            json_output,
        )

    resolved_sort = SortKey(sort_key.lower()) if sort_key else cleaner_config.scan.sort
    resolved_reverse = reverse or cleaner_config.scan.reverse

    progress = ProgressDisplay(enabled=not json_output, show_outcomes=not json_output)
    walker = DirectoryWalker(on_directory=progress.on_directory)
    orchestrator = PipelineOrchestrator(
        config,
        walker=walker,
        confirm=_confirm_deletion if config.mode is ScanMode.INTERACTIVE else None,
        progress=progress,
    )

    if not json_output:
        _print_header(config)

    try:
        result = orchestrator.run()
    except InvalidStartPathError as e:
        progress.finish()
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)

    progress.finish()

    if json_output:
        output_json(result, resolved_sort, resolved_reverse)
    else:
        output_human(result, resolved_sort, resolved_reverse, verbose > 0)

    sys.exit(exit_code_for_summary(result.summary))
