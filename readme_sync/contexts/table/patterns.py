"""
Jobs Table Pattern Constants

Anchor literals, column names, and regexes used to parse and render the README
jobs table. Organized into frozen dataclasses by category, following the
convention of class-level constants plus helper functions that use them.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class AnchorPatterns:
    """
    Literal markers delimiting the machine-managed region of the README.

    Placed by hand once; the sync never writes outside them.
    """

    JOBS_TABLE_START: str = "<!-- JOBS_TABLE_START -->"
    JOBS_TABLE_END: str = "<!-- JOBS_TABLE_END -->"


@dataclass(frozen=True)
class ColumnPatterns:
    """
    Column layout of the jobs table.

    Column order is fixed: Company | Role | Track | Application | Date Added.
    The Track column carries the job posting id for machine rows.
    """

    COMPANY: int = 0
    ROLE: int = 1
    TRACK: int = 2
    APPLICATION: int = 3
    DATE_ADDED: int = 4

    HEADER_NAMES: frozenset = frozenset({"company", "role", "track", "application", "date added"})
    LEGACY_HEADER_NAMES: frozenset = frozenset({"company", "role", "track", "apply", "added"})

    DEFAULT_HEADER: str = "| Company | Role | Track | Application | Date Added |"
    DEFAULT_SEPARATOR: str = "|---|---|---|---|---:|"


@dataclass(frozen=True)
class RowRegex:
    """Compiled regexes for row classification and cell normalization."""

    # Separator cells: ---, :---, ---:, :---:
    SEPARATOR_CELL: re.Pattern = re.compile(r"^:?-+:?$")

    # Job detail path in the Track cell: /job/<uuid>
    JOB_POSTING_ID: re.Pattern = re.compile(
        r"/job/(?P<id>[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})(?![0-9a-fA-F-])"
    )

    # A bare URL with no surrounding markup
    BARE_URL: re.Pattern = re.compile(r"^https?://[^\s<>\[\]()\"'`]+$", re.IGNORECASE)


@dataclass(frozen=True)
class CellMarkers:
    """Literal cell contents written by the sync."""

    NO_APPLY_URL: str = "-"
    INVALID_DATE_PREFIX: str = "⚠️ Invalid date:"


ANCHORS = AnchorPatterns()
COLUMNS = ColumnPatterns()
ROW_REGEX = RowRegex()
MARKERS = CellMarkers()

JOBS_TABLE_START = ANCHORS.JOBS_TABLE_START
JOBS_TABLE_END = ANCHORS.JOBS_TABLE_END
