"""
Sync event logging.

Appends one JSON object per sync milestone to readme_sync_events.log so runs can
be audited and filtered without parsing the detailed session logs.

Usage:
    from readme_sync.utils.event_logging import log_sync_event

    log_sync_event(
        event_type="sync_committed",
        target="owner/repo:README.md",
        exported_count=12,
        commit_message="sync(readme): update SG internship tech verified jobs (12)",
    )
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from readme_sync.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
SYNC_EVENTS_FILE = Path(os.getenv("SYNC_EVENTS_FILE", str(LOGS_PATH / "readme_sync_events.log")))

SYNC_EVENT_TYPES = {"sync_started", "sync_noop", "sync_committed", "sync_failed"}


def log_sync_event(
    event_type: str, target: str, events_file: Optional[Path] = None, **extra_fields
) -> dict:
    """
    Append an event to the sync event log (JSON Lines).

    Args:
        event_type: One of SYNC_EVENT_TYPES
        target: Human-readable document location (e.g., "owner/repo:README.md")
        events_file: Override the log location (defaults to SYNC_EVENTS_FILE)
        **extra_fields: Event-specific fields (exported_count, error, ...)

    Returns:
        The event that was written

    Raises:
        ValueError: If event_type is unknown
    """
    if event_type not in SYNC_EVENT_TYPES:
        raise ValueError(f"Unknown sync event type: {event_type}")

    path = events_file or SYNC_EVENTS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "target": target,
        **extra_fields,
    }

    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")

    return event


def get_recent_events(
    n: int = 10, event_type: Optional[str] = None, events_file: Optional[Path] = None
) -> list[dict]:
    """
    Get the last n events from the sync log, optionally filtered by type.

    Returns:
        List of event dicts (most recent last)
    """
    path = events_file or SYNC_EVENTS_FILE
    if not path.exists():
        return []

    events = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if n > 0 else []
