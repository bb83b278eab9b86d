"""
Table Context

Responsibilities:
- Locates the anchored jobs table inside a README
- Parses Markdown table rows and tells machine rows from community rows
- Normalizes community rows and renders machine rows from export records
- Merges both into a deterministic, sorted table

Owns: README table text, row identity, row ordering
Never: Performs I/O (reading or writing documents, querying job data)
"""

from readme_sync.contexts.table.classifier import classify_row
from readme_sync.contexts.table.exceptions import (
    InvalidExportRecordError,
    MissingAnchorsError,
    ReadmeSyncError,
)
from readme_sync.contexts.table.locator import extract_anchored_block
from readme_sync.contexts.table.merge import merge_export_records, merge_jobs_table
from readme_sync.contexts.table.parser import parse_table_block, split_table_cells
from readme_sync.contexts.table.patterns import JOBS_TABLE_END, JOBS_TABLE_START
from readme_sync.contexts.table.renderer import RenderSettings, build_desired_rows, render_job_row
from readme_sync.contexts.table.row_data_structure import (
    DesiredRow,
    ExistingRow,
    ExportRecord,
    MergedRow,
    MergeResult,
    RowKind,
)

__all__ = [
    # Anchors
    "JOBS_TABLE_START",
    "JOBS_TABLE_END",
    # Pipeline stages
    "extract_anchored_block",
    "parse_table_block",
    "classify_row",
    "split_table_cells",
    "render_job_row",
    "build_desired_rows",
    "merge_jobs_table",
    "merge_export_records",
    "RenderSettings",
    # Data structures
    "ExportRecord",
    "DesiredRow",
    "ExistingRow",
    "MergedRow",
    "MergeResult",
    "RowKind",
    # Errors
    "ReadmeSyncError",
    "MissingAnchorsError",
    "InvalidExportRecordError",
]
