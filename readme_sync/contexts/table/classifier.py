"""
Row classifier.

Decides whether a parsed row was written by the sync (machine) or by a person
(community). The Track column position is the only place that contract lives.
"""

from typing import Optional, Sequence

from readme_sync.contexts.table.patterns import COLUMNS, ROW_REGEX
from readme_sync.contexts.table.row_data_structure import ExistingRow, RowKind


def extract_job_posting_id(cells: Sequence[str]) -> Optional[str]:
    """
    Pull the job posting id out of the Track cell.

    Expected columns: Company | Role | Track | Application | Date Added.
    The Track cell of a machine row links to ``/job/<uuid>``.

    Returns:
        The UUID, or None for community rows
    """
    if len(cells) <= COLUMNS.TRACK:
        return None

    match = ROW_REGEX.JOB_POSTING_ID.search(cells[COLUMNS.TRACK])
    return match.group("id") if match else None


def classify_row(row: ExistingRow) -> RowKind:
    """MACHINE if the Track cell carries a job posting id, else COMMUNITY."""
    if extract_job_posting_id(row.cells) is not None:
        return RowKind.MACHINE
    return RowKind.COMMUNITY


def partition_rows(
    rows: Sequence[ExistingRow],
) -> tuple[list[ExistingRow], list[ExistingRow]]:
    """
    Split rows into (machine, community), preserving document order.
    """
    machine, community = [], []
    for row in rows:
        (machine if classify_row(row) is RowKind.MACHINE else community).append(row)
    return machine, community
