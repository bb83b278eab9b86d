"""
Table context logger.

Provides logging interface for the table context with automatic [table] prefix.
All table modules should import from this module, not from loguru directly.
"""

from loguru import logger

from readme_sync.contexts.table.row_data_structure import MergeResult
from readme_sync.utils.text_processing import difference_context

CONTEXT_PREFIX = "[table]"


def _log_info(message: str) -> None:
    """Log info message with [table] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [table] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [table] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_first_difference(old: str, new: str) -> None:
    """Log where two README versions first diverge (diagnostic only)."""
    context = difference_context(old, new)
    if context is None:
        _log_debug("README matches expected output")
        return

    index, old_snippet, new_snippet = context
    _log_debug(f"README length {len(old)} -> {len(new)}, first difference at index {index}")
    logger.opt(raw=True).debug(f"  old: {old_snippet!r}\n  new: {new_snippet!r}\n")


def log_merge_summary(result: MergeResult) -> None:
    """Log row counts for a completed merge."""
    _log_info(
        f"Merged {result.machine_rows} exported + {result.community_rows} community rows "
        f"({'changed' if result.changed else 'unchanged'})"
    )
    if result.dropped_machine_rows:
        _log_info(f"Removed {result.dropped_machine_rows} rows no longer in the export")
    if result.invalid_dates:
        _log_warning(f"{result.invalid_dates} community rows have unparsable dates")
    if result.dropped_other_lines:
        _log_warning(
            f"Dropped {result.dropped_other_lines} non-table lines found between the anchors"
        )
