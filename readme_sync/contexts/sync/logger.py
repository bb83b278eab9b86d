"""
Sync context logger.

Provides logging interface for the sync context with automatic [sync] prefix.
All sync modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from readme_sync.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[sync]"


def setup_sync_logger(log_dir: Optional[Path], target: str, dry_run: bool = False) -> Optional[Path]:
    """
    Setup logger for a sync session.

    Args:
        log_dir: Directory for this session's log file (console only when None)
        target: Document location, recorded in the provenance header
        dry_run: Whether writes are disabled for this session

    Returns:
        Path to log file, or None
    """
    return _setup_logger(
        context_name="sync",
        log_dir=log_dir,
        extra_provenance={"Target": target, "Dry run": dry_run},
    )


# Wrapper functions with automatic [sync] prefix


def _log_info(message: str) -> None:
    """Log info message with [sync] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [sync] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [sync] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [sync] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level sync helpers


def log_sync_start(target: str, dry_run: bool) -> None:
    _log_info(f"Starting README sync for {target}{' (dry run)' if dry_run else ''}")


def log_sync_result(result, elapsed_time: float) -> None:
    """
    Log the outcome of a sync.

    Args:
        result: SyncResult from sync_readme_jobs()
        elapsed_time: Seconds taken
    """
    if not result.did_change:
        _log_success(
            f"README already up to date ({result.exported_count} jobs, {elapsed_time:.2f}s)"
        )
    elif result.dry_run:
        _log_info(f"Dry run: README would change ({result.exported_count} jobs)")
    else:
        _log_success(f"Committed: {result.commit_message} ({elapsed_time:.2f}s)")
