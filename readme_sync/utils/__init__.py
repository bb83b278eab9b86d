"""
Shared utilities for readme_sync.

Common functionality used across contexts:
- Logger setup
- Date parsing and display formatting
- Markdown cell escaping
- Sync event log
"""

from readme_sync.utils.timestamp import format_display_date, now_exact, to_epoch_ms

__all__ = ["format_display_date", "now_exact", "to_epoch_ms"]
