"""
Row renderer for export records.

Builds the canonical Markdown cells for machine rows and renders the final
table block. Track and Apply cells are HTML anchors wrapping badge images so
the README host shows a clickable button regardless of Markdown extensions.
"""

from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, Optional, Sequence

from jinja2 import Environment, StrictUndefined

from readme_sync.contexts.table.logger import _log_warning
from readme_sync.contexts.table.patterns import COLUMNS, MARKERS
from readme_sync.contexts.table.row_data_structure import DesiredRow, ExportRecord
from readme_sync.utils.text_processing import collapse_line_breaks, escape_pipes, sanitize_href
from readme_sync.utils.timestamp import DISPLAY_TIMEZONE, format_display_date

DEFAULT_SITE_URL = "https://didtheyghost.me"
DEFAULT_UTM_PARAMS = "utm_source=github&utm_medium=readme&utm_campaign=sg-intern-tech"

# Custom delimiters keep Jinja syntax visually apart from the HTML it emits
_badge_env = Environment(
    variable_start_string="<<<",
    variable_end_string=">>>",
    block_start_string="<%",
    block_end_string="%>",
    autoescape=False,
    undefined=StrictUndefined,
)

BADGE_TEMPLATE = _badge_env.from_string(
    '<a href="<<< href >>>"><img alt="<<< alt >>>" src="<<< src >>>"'
    '<% if width %> width="<<< width >>>"<% endif %> /></a>'
)

BADGE_ALT_TEXT = {"track": "Track", "apply": "Apply"}


@dataclass(frozen=True)
class RenderSettings:
    """
    Site-specific values baked into rendered rows.

    Attributes:
        site_url: Public site root, no trailing slash
        utm_params: Query string appended to company and job links
        button_dir: Directory (relative to the README) holding track.svg / apply.svg
        button_width: Badge width attribute, omitted when None
        display_timezone: Timezone for the Date Added column
    """

    site_url: str = DEFAULT_SITE_URL
    utm_params: str = DEFAULT_UTM_PARAMS
    button_dir: str = "readme-buttons"
    button_width: Optional[int] = 220
    display_timezone: tzinfo = DISPLAY_TIMEZONE

    @property
    def base_url(self) -> str:
        return self.site_url.rstrip("/")


def render_badge_link(href: str, button_type: str, settings: RenderSettings) -> str:
    """
    Render ``<a href=...><img .../></a>`` for a track or apply badge.

    ``href`` is inserted as given; callers sanitize untrusted URLs first.
    """
    return BADGE_TEMPLATE.render(
        href=href,
        alt=BADGE_ALT_TEXT[button_type],
        src=f"{settings.button_dir}/{button_type}.svg",
        width=settings.button_width,
    )


def render_cell_text(text: str) -> str:
    """Free text as a single-line table cell with backslashes and pipes escaped."""
    return escape_pipes(collapse_line_breaks(text).strip())


def render_apply_cell(apply_url: Optional[str], settings: RenderSettings) -> str:
    """Apply badge for a URL, or the '-' placeholder when there is none."""
    if not apply_url:
        return MARKERS.NO_APPLY_URL
    return render_badge_link(sanitize_href(apply_url), "apply", settings)


def render_job_row(record: ExportRecord, settings: RenderSettings) -> DesiredRow:
    """
    Render an export record into a machine row.

    The sort timestamp comes straight from ``created_at`` so ordering stays
    exact even though the Date Added column only shows the day.
    """
    base_url = settings.base_url
    company_href = f"{base_url}/company/{record.company_id}?{settings.utm_params}"
    track_href = f"{base_url}/job/{record.job_posting_id}?{settings.utm_params}"

    return DesiredRow(
        job_posting_id=record.job_posting_id,
        company_cell=f"[{render_cell_text(record.company_name)}]({company_href})",
        role_cell=render_cell_text(record.title),
        track_cell=render_badge_link(track_href, "track", settings),
        apply_cell=render_apply_cell(record.apply_url, settings),
        date_cell=format_display_date(record.created_at, settings.display_timezone),
        sort_timestamp=record.sort_timestamp,
    )


@dataclass
class DesiredRows:
    """
    Rendered machine rows in export order, with lookups by job posting id.
    """

    rows: list[DesiredRow]
    by_id: dict[str, DesiredRow]
    sort_timestamp_by_id: dict[str, int]

    @property
    def order(self) -> list[str]:
        return [row.job_posting_id for row in self.rows]


def build_desired_rows(records: Iterable[ExportRecord], settings: RenderSettings) -> DesiredRows:
    """
    Render every export record, keeping source order.

    A job posting id that appears twice keeps its first occurrence.
    """
    rows = []
    by_id = {}
    sort_timestamp_by_id = {}

    for record in records:
        if record.job_posting_id in by_id:
            _log_warning(f"Duplicate job posting {record.job_posting_id} in export, keeping first")
            continue

        row = render_job_row(record, settings)
        rows.append(row)
        by_id[row.job_posting_id] = row
        sort_timestamp_by_id[row.job_posting_id] = row.sort_timestamp

    return DesiredRows(rows=rows, by_id=by_id, sort_timestamp_by_id=sort_timestamp_by_id)


def render_table_line(cells: Sequence[str]) -> str:
    """``| a | b | c |`` from a sequence of cells."""
    return f"| {' | '.join(cells)} |"


def render_jobs_table(header_lines: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """
    Render the block that goes between the anchors.

    Reuses ``header_lines`` when at least a header and separator were found,
    otherwise writes the default header. The block starts and ends with a
    newline so each anchor sits on its own line.
    """
    if len(header_lines) < 2:
        header_lines = [COLUMNS.DEFAULT_HEADER, COLUMNS.DEFAULT_SEPARATOR]

    out = [""]
    out.extend(header_lines)
    out.extend(render_table_line(cells) for cells in rows)
    out.append("")

    return "\n".join(out)
