"""
Text processing utilities for Markdown table cells and document diffs.
"""

import difflib
import re
from typing import List, Optional, Tuple

PIPE = "|"
BACKSLASH = "\\"
LINE_BREAKS = re.compile(r"[\r\n]+")


def split_unescaped(text: str, delimiter: str = PIPE, escape_char: str = BACKSLASH) -> List[str]:
    """
    Split text on a delimiter, skipping delimiters that are escaped.

    A delimiter counts as escaped when it is preceded by an odd number of
    consecutive escape characters. Escape characters are kept in the output.

    Args:
        text: Text to split
        delimiter: Single-character delimiter (default: '|')
        escape_char: Single-character escape (default: '\\')

    Returns:
        List of segments (not stripped)

    Example:
        ``a | b \\| c`` splits into ``a ``, `` b \\| c``, while a pipe after
        two backslashes is a real delimiter.
    """
    segments = []
    current = []
    run = 0  # consecutive escape chars immediately before pos

    for char in text:
        if char == delimiter and run % 2 == 0:
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
        run = run + 1 if char == escape_char else 0

    segments.append("".join(current))
    return segments


def collapse_line_breaks(text: str) -> str:
    """Replace each run of CR/LF characters with a single space."""
    return LINE_BREAKS.sub(" ", text)


def escape_pipes(text: str) -> str:
    """
    Backslash-escape '|' so text can live inside a Markdown table cell.

    Backslashes are doubled first, so a pipe in the output is escaped exactly
    when it was a pipe in the input. Markdown shows ``\\\\`` as one backslash.

    Example:
        ``A\\|B`` becomes ``A\\\\\\|B``, which splits as one cell.
    """
    return text.replace(BACKSLASH, BACKSLASH * 2).replace(PIPE, BACKSLASH + PIPE)


def unescape_pipes(text: str) -> str:
    """
    Inverse of escape_pipes().

    ``\\\\`` becomes ``\\`` and ``\\|`` becomes ``|``; any other backslash is
    kept as written.
    """
    out = []
    chars = iter(text)
    for char in chars:
        if char != BACKSLASH:
            out.append(char)
            continue
        following = next(chars, "")
        if following in (BACKSLASH, PIPE):
            out.append(following)
        else:
            out.append(char + following)
    return "".join(out)


def escape_html_attribute(text: str) -> str:
    """
    Escape the characters that would break a double-quoted HTML attribute.

    Only ``&"<>`` are replaced; '&' goes first so existing entities are
    escaped exactly once per call.
    """
    return (
        text.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def sanitize_href(url: str) -> str:
    """
    Make a URL safe for an ``href`` attribute inside a Markdown table cell.

    The table delimiter is percent-encoded (a backslash escape is not
    honored inside HTML attributes), then HTML attribute characters are escaped.

    Example:
        >>> sanitize_href('https://x.io/a?b=1&c=2|3')
        'https://x.io/a?b=1&amp;c=2%7C3'
    """
    return escape_html_attribute(unescape_pipes(url.strip()).replace(PIPE, "%7C"))


def first_difference(old: str, new: str) -> Optional[int]:
    """Index of the first differing character, or None if the strings are equal."""
    if old == new:
        return None
    for i, (a, b) in enumerate(zip(old, new)):
        if a != b:
            return i
    return min(len(old), len(new))


def difference_context(old: str, new: str, radius: int = 30) -> Optional[Tuple[int, str, str]]:
    """
    Snippets of both strings around their first difference.

    Returns:
        (index, old_snippet, new_snippet), or None if the strings are equal
    """
    index = first_difference(old, new)
    if index is None:
        return None
    start = max(0, index - radius)
    return index, old[start : index + radius], new[start : index + radius]


def unified_document_diff(
    old: str, new: str, name: str = "README.md", context_lines: int = 1
) -> Tuple[List[str], int]:
    """
    Line-based unified diff between two versions of a document.

    Returns:
        (diff_lines, num_changed_lines) where num_changed_lines counts
        added and removed lines, excluding the file headers
    """
    diff = list(
        difflib.unified_diff(
            old.split("\n"),
            new.split("\n"),
            fromfile=f"a/{name}",
            tofile=f"b/{name}",
            lineterm="",
            n=context_lines,
        )
    )

    num_changed = sum(
        1 for line in diff if line.startswith(("+", "-")) and not line.startswith(("---", "+++"))
    )
    return diff, num_changed
