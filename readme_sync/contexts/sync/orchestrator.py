"""
README sync orchestrator.

One sequential run: export records -> render desired rows -> read README ->
merge -> write only if the README changed. Collaborator failures propagate to
the caller untouched; nothing is retried and nothing is partially written.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from readme_sync.contexts.sync.collaborators import DocumentStore, JobExporter
from readme_sync.contexts.sync.config import SyncSettings
from readme_sync.contexts.sync.logger import (
    _log_error,
    _log_info,
    log_sync_result,
    log_sync_start,
)
from readme_sync.contexts.table.logger import log_merge_summary
from readme_sync.contexts.table.merge import merge_jobs_table
from readme_sync.contexts.table.renderer import build_desired_rows
from readme_sync.utils.event_logging import log_sync_event


@dataclass
class SyncResult:
    """
    Outcome of a sync run.

    Attributes:
        did_change: Whether the README content differs from what was exported
        exported_count: Number of export records rendered
        commit_message: Message used (or, on dry runs, that would be used) for the write
        dry_run: True if the write was skipped on purpose
        next_content: Merged README text (dry runs only)
    """

    did_change: bool
    exported_count: int
    commit_message: Optional[str] = None
    dry_run: bool = False
    next_content: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """``{"didChange", "exportedCount"[, "commitMessage"]}`` for API callers."""
        payload: Dict[str, Any] = {
            "didChange": self.did_change,
            "exportedCount": self.exported_count,
        }
        if self.commit_message is not None:
            payload["commitMessage"] = self.commit_message
        return payload


def _record_failure(error: Exception, target: str, events_file: Optional[Path]) -> None:
    """Write the sync_failed event without masking the error being reported."""
    try:
        log_sync_event(
            "sync_failed",
            target,
            events_file=events_file,
            error=str(error),
            error_type=type(error).__name__,
        )
    except OSError as log_error:
        _log_error(f"Could not record sync_failed event: {log_error}")


def sync_readme_jobs(
    exporter: JobExporter,
    store: DocumentStore,
    settings: Optional[SyncSettings] = None,
    dry_run: bool = False,
    events_file: Optional[Path] = None,
) -> SyncResult:
    """
    Sync exported jobs into the README table.

    Args:
        exporter: Source of export records (filtered, newest first)
        store: Where the README lives
        settings: Render and commit settings (defaults if None)
        dry_run: Merge but do not write
        events_file: Override the sync event log location

    Returns:
        SyncResult

    Raises:
        MissingAnchorsError: If the README lacks the table anchors
        StaleChangeTokenError: If the README changed between read and write
        Exception: Anything raised by the exporter or store, unchanged
    """
    settings = settings or SyncSettings()
    start_time = time.time()
    target = store.target

    log_sync_start(target, dry_run)
    log_sync_event("sync_started", target, events_file=events_file, dry_run=dry_run)

    try:
        render_settings = settings.render_settings()
        records = exporter.export()
        desired = build_desired_rows(records, render_settings)
        exported_count = len(records)
        _log_info(f"Rendered {len(desired.rows)} rows from {exported_count} export records")

        snapshot = store.read()
        merge_result = merge_jobs_table(snapshot.content, desired, render_settings)
        log_merge_summary(merge_result)

        if not merge_result.changed:
            result = SyncResult(did_change=False, exported_count=exported_count, dry_run=dry_run)
            log_sync_event("sync_noop", target, events_file=events_file, exported_count=exported_count)
            log_sync_result(result, time.time() - start_time)
            return result

        commit_message = settings.commit_message(exported_count)

        if dry_run:
            result = SyncResult(
                did_change=True,
                exported_count=exported_count,
                commit_message=commit_message,
                dry_run=True,
                next_content=merge_result.next_readme,
            )
            log_sync_result(result, time.time() - start_time)
            return result

        store.write(merge_result.next_readme, snapshot.change_token, commit_message)

    except Exception as e:
        _log_error(f"Sync failed: {type(e).__name__}: {e}")
        _record_failure(e, target, events_file)
        raise

    result = SyncResult(did_change=True, exported_count=exported_count, commit_message=commit_message)
    log_sync_event(
        "sync_committed",
        target,
        events_file=events_file,
        exported_count=exported_count,
        commit_message=commit_message,
    )
    log_sync_result(result, time.time() - start_time)
    return result


def run_sync_action(
    exporter: JobExporter,
    store: DocumentStore,
    settings: Optional[SyncSettings] = None,
    events_file: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Non-raising wrapper for admin-triggered syncs.

    Returns:
        ``{"ok": True, "didChange": ..., "exportedCount": ...[, "commitMessage": ...]}``
        or ``{"ok": False, "error": message}``
    """
    try:
        result = sync_readme_jobs(exporter, store, settings, events_file=events_file)
    except Exception as e:
        return {"ok": False, "error": str(e) or "Unknown error"}

    return {"ok": True, **result.to_dict()}
