"""
Row data structures for the jobs table.

Export records come from the job data source; desired rows are rendered from
them; existing rows are parsed from the README; merged rows are what the merge
engine sorts and writes back.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from readme_sync.contexts.table.exceptions import InvalidExportRecordError
from readme_sync.utils.timestamp import parse_iso_timestamp, to_epoch_ms

# Accepted spellings for each ExportRecord field, first match wins
_EXPORT_FIELD_ALIASES = {
    "job_posting_id": ("job_posting_id", "jobPostingId", "id"),
    "title": ("title",),
    "created_at": ("created_at", "createdAt"),
    "apply_url": ("apply_url", "applyUrl", "url"),
    "company_id": ("company_id", "companyId"),
    "company_name": ("company_name", "companyName"),
}

_REQUIRED_EXPORT_FIELDS = ("job_posting_id", "title", "created_at", "company_id", "company_name")


class RowKind(Enum):
    """Ownership of a table row."""

    MACHINE = "machine"
    COMMUNITY = "community"


@dataclass(frozen=True)
class ExportRecord:
    """A verified job posting selected for publication in the README."""

    job_posting_id: str
    title: str
    created_at: datetime
    apply_url: Optional[str]
    company_id: str
    company_name: str

    @property
    def sort_timestamp(self) -> int:
        """Creation time in epoch milliseconds."""
        return to_epoch_ms(self.created_at)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExportRecord":
        """
        Build a record from an export row (snake_case or camelCase keys).

        Raises:
            InvalidExportRecordError: If a required field is missing or
                created_at is not an ISO 8601 timestamp
        """
        values = {}
        for name, aliases in _EXPORT_FIELD_ALIASES.items():
            values[name] = next((data[key] for key in aliases if data.get(key) is not None), None)

        job_posting_id = values["job_posting_id"]
        for name in _REQUIRED_EXPORT_FIELDS:
            if values[name] in (None, ""):
                raise InvalidExportRecordError(
                    "Export record is missing a required field", name, job_posting_id
                )

        created_at = values["created_at"]
        if not isinstance(created_at, datetime):
            try:
                created_at = parse_iso_timestamp(str(created_at))
            except ValueError as e:
                raise InvalidExportRecordError(
                    f"Unparsable created_at {created_at!r}", "created_at", job_posting_id
                ) from e

        apply_url = values["apply_url"]
        if apply_url is not None:
            apply_url = str(apply_url).strip() or None

        return cls(
            job_posting_id=str(job_posting_id),
            title=str(values["title"]),
            created_at=created_at,
            apply_url=apply_url,
            company_id=str(values["company_id"]),
            company_name=str(values["company_name"]),
        )


@dataclass(frozen=True)
class DesiredRow:
    """A machine row rendered from an ExportRecord. Cells are final Markdown."""

    job_posting_id: str
    company_cell: str
    role_cell: str
    track_cell: str
    apply_cell: str
    date_cell: str
    sort_timestamp: int

    @property
    def cells(self) -> tuple[str, ...]:
        return (self.company_cell, self.role_cell, self.track_cell, self.apply_cell, self.date_cell)


@dataclass(frozen=True)
class ExistingRow:
    """
    A data row parsed from the README block.

    Attributes:
        raw_line: The stripped source line
        cells: Raw cell text with escapes preserved
        job_posting_id: Id found in the Track cell, None for community rows
    """

    raw_line: str
    cells: tuple[str, ...]
    job_posting_id: Optional[str] = None

    @property
    def is_machine(self) -> bool:
        return self.job_posting_id is not None

    @property
    def kind(self) -> RowKind:
        return RowKind.MACHINE if self.is_machine else RowKind.COMMUNITY


@dataclass(frozen=True)
class NormalizedRow:
    """A community row after apply-link and date normalization."""

    cells: tuple[str, ...]
    sort_timestamp: float = math.inf
    date_error: bool = False


@dataclass(frozen=True)
class MergedRow:
    """A row ready to be sorted into the final table."""

    cells: tuple[str, ...]
    kind: RowKind
    sort_timestamp: float
    tie_break_index: int

    @property
    def has_known_date(self) -> bool:
        return not math.isinf(self.sort_timestamp)


@dataclass
class ParsedTable:
    """Result of parsing the anchored block."""

    header_lines: list[str] = field(default_factory=list)
    rows: list[ExistingRow] = field(default_factory=list)
    other_lines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnchoredBlock:
    """The README split around the table anchors. Concatenation is lossless."""

    before: str
    block: str
    after: str

    def reassemble(self, block: Optional[str] = None) -> str:
        return f"{self.before}{self.block if block is None else block}{self.after}"


@dataclass
class MergeResult:
    """
    Result of merging desired rows into the README.

    Attributes:
        next_readme: Full README text after the merge
        changed: Whether next_readme differs from the input
        machine_rows: Rows written from the export
        community_rows: Community rows preserved
        dropped_machine_rows: Machine rows in the old table whose id is no longer exported
        invalid_dates: Community rows whose date could not be parsed
        dropped_other_lines: Non-table lines between the anchors that were not re-emitted
    """

    next_readme: str
    changed: bool
    machine_rows: int = 0
    community_rows: int = 0
    dropped_machine_rows: int = 0
    invalid_dates: int = 0
    dropped_other_lines: int = 0
