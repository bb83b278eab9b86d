"""
Table block locator.

Splits a README into the text up to and including the start anchor, the
managed block between the anchors, and the text from the end anchor onward.
"""

from readme_sync.contexts.table.exceptions import MissingAnchorsError
from readme_sync.contexts.table.patterns import JOBS_TABLE_END, JOBS_TABLE_START
from readme_sync.contexts.table.row_data_structure import AnchoredBlock


def extract_anchored_block(
    readme: str,
    start_anchor: str = JOBS_TABLE_START,
    end_anchor: str = JOBS_TABLE_END,
) -> AnchoredBlock:
    """
    Locate the anchor-delimited table block.

    Uses the first occurrence of each anchor. ``before + block + after``
    always reproduces ``readme`` exactly.

    Args:
        readme: Full README text
        start_anchor: Start marker literal
        end_anchor: End marker literal

    Returns:
        AnchoredBlock with before (ends with the start anchor), block, and
        after (starts with the end anchor)

    Raises:
        MissingAnchorsError: If either anchor is absent or the end anchor
            comes before the start anchor
    """
    start_idx = readme.find(start_anchor)
    end_idx = readme.find(end_anchor)

    if start_idx == -1 and end_idx == -1:
        raise MissingAnchorsError(start_anchor, end_anchor, "missing_both")
    if start_idx == -1:
        raise MissingAnchorsError(start_anchor, end_anchor, "missing_start")
    if end_idx == -1:
        raise MissingAnchorsError(start_anchor, end_anchor, "missing_end")

    block_start = start_idx + len(start_anchor)
    if end_idx < block_start:
        raise MissingAnchorsError(start_anchor, end_anchor, "misordered")

    return AnchoredBlock(
        before=readme[:block_start],
        block=readme[block_start:end_idx],
        after=readme[end_idx:],
    )
