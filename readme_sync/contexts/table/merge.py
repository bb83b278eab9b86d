"""
Merge engine for the README jobs table.

Combines machine rows (rebuilt from the export on every run) with community
rows (kept from the README, lightly normalized) into one ordered table, swaps
it into the anchored block, and reports whether the README changed.

Pure and deterministic: no I/O, same inputs always give the same text.
"""

from typing import Iterable, List, Optional

from readme_sync.contexts.table.classifier import partition_rows
from readme_sync.contexts.table.locator import extract_anchored_block
from readme_sync.contexts.table.logger import (
    _log_debug,
    _log_warning,
    log_first_difference,
)
from readme_sync.contexts.table.normalizer import normalize_community_row
from readme_sync.contexts.table.parser import parse_table_block
from readme_sync.contexts.table.renderer import (
    DesiredRows,
    RenderSettings,
    build_desired_rows,
    render_jobs_table,
)
from readme_sync.contexts.table.row_data_structure import (
    ExportRecord,
    MergedRow,
    MergeResult,
    RowKind,
)

# Equal timestamps: community rows go before machine rows
KIND_ORDER = {RowKind.COMMUNITY: 0, RowKind.MACHINE: 1}


def merged_row_sort_key(row: MergedRow) -> tuple:
    """
    Sort key for the final table.

    Newest first; rows without a usable date after every dated row; then
    community before machine; then original position.
    """
    if row.has_known_date:
        return (0, -row.sort_timestamp, KIND_ORDER[row.kind], row.tie_break_index)
    return (1, 0, KIND_ORDER[row.kind], row.tie_break_index)


def order_rows(rows: Iterable[MergedRow]) -> List[MergedRow]:
    """Stable-sort rows into table order."""
    return sorted(rows, key=merged_row_sort_key)


def merge_jobs_table(
    readme: str,
    desired: DesiredRows,
    settings: Optional[RenderSettings] = None,
) -> MergeResult:
    """
    Merge desired machine rows into the README jobs table.

    Steps:
        1. Locate the anchored block (MissingAnchorsError if absent)
        2. Parse header lines and existing rows
        3. Drop existing machine rows, normalize community rows
        4. Tag desired rows as machine rows (tie-break = export position)
        5. Tag community rows (tie-break = document position)
        6. Sort (see merged_row_sort_key)
        7. Render the block, reusing the existing header when present
        8. Reassemble and compare with the input

    Args:
        readme: Current README text
        desired: Rendered machine rows with their id lookups (see build_desired_rows)
        settings: Render settings used to normalize community rows

    Returns:
        MergeResult with the next README text and whether it changed

    Raises:
        MissingAnchorsError: If the README lacks the table anchors
    """
    settings = settings or RenderSettings()

    anchored = extract_anchored_block(readme)
    parsed = parse_table_block(anchored.block)
    machine_rows, community_rows = partition_rows(parsed.rows)

    dropped_machine_rows = sum(1 for row in machine_rows if row.job_posting_id not in desired.by_id)

    merged = [
        MergedRow(
            cells=desired.by_id[job_id].cells,
            kind=RowKind.MACHINE,
            sort_timestamp=desired.sort_timestamp_by_id[job_id],
            tie_break_index=index,
        )
        for index, job_id in enumerate(desired.order)
    ]

    invalid_dates = 0
    for index, row in enumerate(community_rows):
        normalized = normalize_community_row(row, settings)
        if normalized.date_error:
            invalid_dates += 1
            _log_warning(f"Unparsable date in community row: {row.raw_line}")
        merged.append(
            MergedRow(
                cells=normalized.cells,
                kind=RowKind.COMMUNITY,
                sort_timestamp=normalized.sort_timestamp,
                tie_break_index=index,
            )
        )

    next_block = render_jobs_table(parsed.header_lines, (row.cells for row in order_rows(merged)))
    next_readme = anchored.reassemble(next_block)
    changed = next_readme != readme

    if changed:
        log_first_difference(readme, next_readme)
    else:
        _log_debug("No changes detected - README matches expected output")

    return MergeResult(
        next_readme=next_readme,
        changed=changed,
        machine_rows=len(desired.rows),
        community_rows=len(community_rows),
        dropped_machine_rows=dropped_machine_rows,
        invalid_dates=invalid_dates,
        dropped_other_lines=sum(1 for line in parsed.other_lines if line.strip()),
    )


def merge_export_records(
    readme: str,
    records: Iterable[ExportRecord],
    settings: Optional[RenderSettings] = None,
) -> MergeResult:
    """Render export records and merge them into the README in one step."""
    settings = settings or RenderSettings()
    return merge_jobs_table(readme, build_desired_rows(records, settings), settings)
