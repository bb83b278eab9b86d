"""
Markdown table parser for the anchored jobs block.

Sorts block lines into header/separator lines, data rows, and everything else.
Data rows keep their raw cell text (escapes included) so community rows can be
written back without re-escaping.
"""

from typing import List

from readme_sync.contexts.table.classifier import extract_job_posting_id
from readme_sync.contexts.table.patterns import COLUMNS, ROW_REGEX
from readme_sync.contexts.table.row_data_structure import ExistingRow, ParsedTable
from readme_sync.utils.text_processing import PIPE, split_unescaped, unescape_pipes

_KNOWN_HEADER_NAMES = COLUMNS.HEADER_NAMES | COLUMNS.LEGACY_HEADER_NAMES


def is_table_row_line(line: str) -> bool:
    """True if the line starts and ends with '|' and has at least two of them."""
    stripped = line.strip()
    return stripped.startswith(PIPE) and stripped.endswith(PIPE) and stripped.count(PIPE) >= 2


def split_table_cells(line: str, unescape: bool = False) -> List[str]:
    """
    Split a table row into stripped cells.

    Pipes preceded by an odd number of backslashes are cell content, not
    delimiters. "| a | b \\| c |" -> ["a", "b \\| c"].

    Args:
        line: A table row line (outer pipes included)
        unescape: Turn escaped pipes back into plain '|' in each cell

    Returns:
        List of cell strings
    """
    inner = line.strip()[1:-1]
    cells = [cell.strip() for cell in split_unescaped(inner)]
    if unescape:
        cells = [unescape_pipes(cell) for cell in cells]
    return cells


def is_header_row(cells: List[str]) -> bool:
    """True if any cell is a known column name (current or legacy layout)."""
    return any(cell.strip().lower() in _KNOWN_HEADER_NAMES for cell in cells)


def is_separator_row(cells: List[str]) -> bool:
    """True if every cell is dashes with optional alignment colons."""
    return all(ROW_REGEX.SEPARATOR_CELL.match(cell) for cell in cells)


def parse_table_block(block: str) -> ParsedTable:
    """
    Parse the text between the table anchors.

    Blank and prose lines go to ``other_lines`` untouched. Header and separator
    lines are kept stripped, in order. All remaining rows become ExistingRow
    with the job posting id (if any) pulled from the Track cell.

    Args:
        block: Text strictly between the anchors

    Returns:
        ParsedTable
    """
    parsed = ParsedTable()

    for line in block.split("\n"):
        normalized = line.strip()

        if not normalized or not is_table_row_line(normalized):
            parsed.other_lines.append(line)
            continue

        cells = split_table_cells(normalized)

        if is_header_row(cells) or is_separator_row(cells):
            parsed.header_lines.append(normalized)
            continue

        parsed.rows.append(
            ExistingRow(
                raw_line=normalized,
                cells=tuple(cells),
                job_posting_id=extract_job_posting_id(cells),
            )
        )

    return parsed
