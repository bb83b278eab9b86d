"""Custom exceptions for the table context."""

from typing import Optional


class ReadmeSyncError(Exception):
    """Base class for all readme_sync errors."""

    pass


class MissingAnchorsError(ReadmeSyncError):
    """
    Raised when the README lacks the table anchors or has them out of order.

    This is a configuration fault: the target README must be prepared by hand
    with both anchor literals. Retrying will not help.

    Attributes:
        start_anchor: Expected start marker
        end_anchor: Expected end marker
        reason: "missing_start", "missing_end", "missing_both" or "misordered"
    """

    def __init__(self, start_anchor: str, end_anchor: str, reason: str):
        self.start_anchor = start_anchor
        self.end_anchor = end_anchor
        self.reason = reason

        super().__init__(
            f"README is missing table anchors ({start_anchor} / {end_anchor}): {reason}. "
            "Add them to the sync repo README.md."
        )


class InvalidExportRecordError(ReadmeSyncError, ValueError):
    """
    Raised when an export row cannot be turned into an ExportRecord.

    Attributes:
        field_name: Field that was missing or malformed
        job_posting_id: Id of the offending row, when known
    """

    def __init__(self, message: str, field_name: str, job_posting_id: Optional[str] = None):
        self.field_name = field_name
        self.job_posting_id = job_posting_id

        parts = [message, f"field: {field_name}"]
        if job_posting_id:
            parts.append(f"job_posting_id: {job_posting_id}")

        super().__init__(" | ".join(parts))
