#!/usr/bin/env python3
"""
Command-line interface for the README jobs table sync.

Commands:
    run    - Sync verified jobs into the README on GitHub
    local  - Sync verified jobs into a README on disk
    events - Show recent sync events

Usage:
    python scripts/sync_readme.py run --export data/job_postings.json
    python scripts/sync_readme.py run --dry-run
    python scripts/sync_readme.py local ../sg-internships/README.md --export data/job_postings.json
    python scripts/sync_readme.py events -n 20 --type sync_committed
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from readme_sync.contexts.sync import (
    GitHubContentsStore,
    JsonFileJobExporter,
    LocalFileDocumentStore,
    SyncResult,
    load_github_settings,
    load_sync_settings,
    sync_readme_jobs,
)
from readme_sync.contexts.sync.logger import setup_sync_logger
from readme_sync.contexts.table import MissingAnchorsError, ReadmeSyncError
from readme_sync.utils.event_logging import get_recent_events
from readme_sync.utils.text_processing import unified_document_diff

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

# Exit codes
EXIT_FAILURE = 1
EXIT_MISSING_ANCHORS = 2

app = typer.Typer(
    add_completion=False,
    help="Sync verified job postings into the README jobs table.",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _session_log_dir() -> Path:
    return LOGS_PATH / f"sync_{datetime.now().strftime('%Y%m%d_%H%M%S')}"


def _run(exporter, store, settings, dry_run: bool, old_content: Optional[str] = None) -> None:
    setup_sync_logger(_session_log_dir(), store.target, dry_run=dry_run)

    try:
        if dry_run and old_content is None:
            old_content = store.read().content
        result = sync_readme_jobs(exporter, store, settings, dry_run=dry_run)
    except MissingAnchorsError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_MISSING_ANCHORS)
    except ReadmeSyncError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_FAILURE)

    _print_result(result, old_content)


def _print_result(result: SyncResult, old_content: Optional[str]) -> None:
    if not result.did_change:
        typer.echo(f"No changes ({result.exported_count} jobs exported)")
        return

    if result.dry_run:
        diff_lines, num_changed = unified_document_diff(old_content or "", result.next_content)
        typer.echo("\n".join(diff_lines))
        typer.echo(f"\nDry run: {num_changed} lines would change")
        typer.echo(f"Commit message: {result.commit_message}")
        return

    typer.secho(f"✓ {result.commit_message}", fg=typer.colors.GREEN)


@app.command()
def run(
    export: Optional[Path] = typer.Option(
        None, "--export", "-e", help="Job postings JSON (defaults to README_SYNC_JOBS_EXPORT_PATH)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML settings file"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the diff without committing"),
):
    """Sync verified jobs into the README on GitHub."""
    try:
        settings = load_sync_settings(config)
        exporter = JsonFileJobExporter(settings, export)
        store = GitHubContentsStore(load_github_settings(config))
    except ReadmeSyncError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_FAILURE)

    _run(exporter, store, settings, dry_run)


@app.command()
def local(
    readme_path: Path = typer.Argument(..., help="README.md to update in place"),
    export: Optional[Path] = typer.Option(None, "--export", "-e", help="Job postings JSON"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML settings file"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the diff without writing"),
):
    """Sync verified jobs into a README on disk."""
    try:
        settings = load_sync_settings(config)
        exporter = JsonFileJobExporter(settings, export)
    except ReadmeSyncError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_FAILURE)

    store = LocalFileDocumentStore(readme_path)
    _run(exporter, store, settings, dry_run)


@app.command()
def events(
    n: int = typer.Option(10, "-n", help="Number of events to show"),
    event_type: Optional[str] = typer.Option(None, "--type", "-t", help="Filter by event type"),
):
    """Show recent sync events."""
    recent = get_recent_events(n, event_type=event_type)
    if not recent:
        typer.echo("No sync events recorded")
        return

    for event in recent:
        extras = {
            k: v for k, v in event.items() if k not in ("timestamp", "event_type", "target")
        }
        details = ", ".join(f"{k}={v}" for k, v in extras.items())
        typer.echo(f"{event['timestamp']}  {event['event_type']:<15} {event['target']}  {details}")


if __name__ == "__main__":
    app()
