"""Display width utilities for annotation rendering.

Provides display width measurement for strings containing wide
characters (CJK), ambiguous-width characters (box-drawing), and
zero-width characters, plus the width-bounded truncator used to fit
annotation text into a fixed column budget.
"""

import os
import unicodedata

import wcwidth

DEFAULT_ELLIPSIS = "…"


def _get_ambiguous_width() -> int:
    """Get the width to use for East Asian Ambiguous characters.

    Reads from MARGIN_NOTES_AMBIGUOUS_WIDTH environment variable.
    Default is 1 (standard Western terminals).
    Set to 2 for CJK terminals or terminals with ambiguous width = wide.

    Returns:
        1 or 2 depending on configuration.
    """
    value = os.environ.get("MARGIN_NOTES_AMBIGUOUS_WIDTH", "1")
    return 2 if value.strip() == "2" else 1


def char_width(char: str, ambiguous_width: int = 1) -> int:
    """Display width of a single character in terminal columns."""
    wc = wcwidth.wcwidth(char)
    if wc <= 0:
        # Zero-width (combining marks) and non-printable characters
        return 0

    eaw = unicodedata.east_asian_width(char)
    if eaw in ('F', 'W'):
        return 2
    if eaw == 'A':
        return ambiguous_width
    return 1


def display_width(text: str) -> int:
    """Calculate the display width of a string, accounting for wide characters.

    - Fullwidth (F) and Wide (W) characters: 2 columns
    - Ambiguous (A) characters: configurable via MARGIN_NOTES_AMBIGUOUS_WIDTH
    - Halfwidth (H), Narrow (Na), Neutral (N): 1 column
    - Zero-width characters (via wcwidth): 0 columns

    Args:
        text: The string to measure.

    Returns:
        The display width in terminal columns.
    """
    ambiguous_width = _get_ambiguous_width()
    return sum(char_width(char, ambiguous_width) for char in text)


def first_line(text: str) -> str:
    """Return the text up to the first newline."""
    return text.replace("\r\n", "\n").split("\n", 1)[0]


def truncate_to_width(
    text: str,
    width: int,
    ellipsis: str = DEFAULT_ELLIPSIS,
    padding: str = " ",
) -> str:
    """Truncate the first line of text so it fits in `width` display columns.

    Only the first line is considered. Text that already fits is returned
    unchanged. Overflowing text is cut and the ellipsis appended so the
    result is exactly `width` columns wide; when a wide character would
    straddle the cut, `padding` fills the leftover column.

    Args:
        text: The text to truncate (may be multi-line).
        width: Maximum display width in columns.
        ellipsis: Marker appended when text is cut.
        padding: Single-column character used to fill a split wide char.

    Returns:
        The truncated first line.

    Example:
        >>> truncate_to_width("hello world", 5)
        'hell…'
        >>> truncate_to_width("first\\nsecond", 20)
        'first'
    """
    if width <= 0:
        return ""

    line = first_line(text)
    if display_width(line) <= width:
        return line

    ellipsis_width = display_width(ellipsis)
    if ellipsis_width > width:
        return padding * width

    budget = width - ellipsis_width
    ambiguous_width = _get_ambiguous_width()
    used = 0
    kept = []
    for char in line:
        cw = char_width(char, ambiguous_width)
        if used + cw > budget:
            break
        kept.append(char)
        used += cw

    return "".join(kept) + padding * (budget - used) + ellipsis
