"""
Community row normalizer.

Community rows are never regenerated. Two cells are brought into the canonical
form instead: a bare apply URL becomes an apply badge, and the date is
re-rendered as ``DD Mon YYYY``. Both transforms are fixed points on their own
output, so repeated syncs converge.
"""

import math
from typing import Tuple

from readme_sync.contexts.table.patterns import COLUMNS, MARKERS, ROW_REGEX
from readme_sync.contexts.table.renderer import RenderSettings, render_badge_link
from readme_sync.contexts.table.row_data_structure import ExistingRow, NormalizedRow
from readme_sync.utils.text_processing import sanitize_href
from readme_sync.utils.timestamp import format_display_date, parse_table_date, to_epoch_ms


def normalize_apply_cell(cell: str, settings: RenderSettings) -> str:
    """
    Turn a bare http(s) URL into an apply badge; leave anything else alone.

    Already-styled anchors, Markdown links, and placeholders such as '-'
    pass through unchanged.
    """
    value = cell.strip()
    if not ROW_REGEX.BARE_URL.match(value):
        return cell
    return render_badge_link(sanitize_href(value), "apply", settings)


def is_invalid_date_marker(cell: str) -> bool:
    """True if the cell already carries the invalid-date marker."""
    return cell.strip().startswith(MARKERS.INVALID_DATE_PREFIX)


def render_invalid_date(original: str) -> str:
    """Visible marker that keeps the contributor's original text."""
    return f"{MARKERS.INVALID_DATE_PREFIX} {original.strip()}".rstrip()


def normalize_date_cell(cell: str, settings: RenderSettings) -> Tuple[str, float, bool]:
    """
    Re-render a date cell in display form.

    Accepts ``YYYY-MM-DD`` and ``DD Mon YYYY`` (case-insensitive, full month
    names allowed). Unparsable text is wrapped in the invalid-date marker and
    sorts after every dated row.

    Returns:
        (cell, sort_timestamp, date_error) where sort_timestamp is epoch
        milliseconds of local midnight, or math.inf on failure
    """
    if is_invalid_date_marker(cell):
        return cell.strip(), math.inf, True

    parsed = parse_table_date(cell, settings.display_timezone)
    if parsed is None:
        return render_invalid_date(cell), math.inf, True

    return format_display_date(parsed, settings.display_timezone), to_epoch_ms(parsed), False


def normalize_community_row(row: ExistingRow, settings: RenderSettings) -> NormalizedRow:
    """
    Normalize the Application and Date Added cells of a community row.

    Other cells are kept exactly as parsed. A row too short to have a Date
    Added column gets no timestamp and sorts last.
    """
    cells = list(row.cells)
    sort_timestamp: float = math.inf
    date_error = False

    if len(cells) > COLUMNS.APPLICATION:
        cells[COLUMNS.APPLICATION] = normalize_apply_cell(cells[COLUMNS.APPLICATION], settings)

    if len(cells) > COLUMNS.DATE_ADDED:
        cells[COLUMNS.DATE_ADDED], sort_timestamp, date_error = normalize_date_cell(
            cells[COLUMNS.DATE_ADDED], settings
        )

    return NormalizedRow(cells=tuple(cells), sort_timestamp=sort_timestamp, date_error=date_error)
