"""
Header folding and unfolding (RFC 5322 section 2.2.3).

Both functions return their argument unchanged (the very same object) when no
transformation is needed, so the common short-ASCII case does not allocate.
"""

import re
from typing import Optional

from ..config import settings

FOLD_SEPARATOR = "\r\n"

# A line break (CRLF, or a bare LF/CR from sloppy senders) followed by WSP
_FOLD_PATTERN = re.compile(r"(?:\r\n|\r|\n)[ \t]+")


def unfold(s: Optional[str]) -> Optional[str]:
    """
    Collapse folded header continuations into one logical line.

    Each line break followed by one or more spaces or tabs becomes a single
    space.

    Args:
        s: Raw (possibly folded) header value

    Returns:
        Unfolded value; ``s`` itself if it contained no fold points

    Examples:
        >>> unfold("Re: a very\\r\\n\\tlong subject")
        'Re: a very long subject'
    """
    if s is None:
        return None
    if "\n" not in s and "\r" not in s:
        return s
    result, count = _FOLD_PATTERN.subn(" ", s)
    return result if count else s


def _index_of_wsp(s: str, start: int) -> int:
    for idx in range(start, len(s)):
        if s[idx] in " \t":
            return idx
    return len(s)


def fold(s: str, used_characters: int, line_budget: Optional[int] = None) -> str:
    """
    Split a long header value into continuation lines.

    Lines are broken only before whitespace; the whitespace character leads the
    continuation line. A word longer than the budget is left intact on its own
    line.

    Args:
        s: Logical header value
        used_characters: Characters already consumed on the first line
            (e.g. ``len("Subject: ")``)
        line_budget: Maximum physical line length (default 76)

    Returns:
        Folded value; ``s`` itself if it already fits
    """
    if line_budget is None:
        line_budget = settings.line_budget

    length = len(s)
    if used_characters + length <= line_budget:
        return s

    lines = []
    last_line_break = -used_characters
    wsp_idx = _index_of_wsp(s, 0)
    while True:
        if wsp_idx == length:
            lines.append(s[max(0, last_line_break):])
            return FOLD_SEPARATOR.join(lines)

        next_wsp_idx = _index_of_wsp(s, wsp_idx + 1)
        if next_wsp_idx - last_line_break > line_budget:
            lines.append(s[max(0, last_line_break):wsp_idx])
            last_line_break = wsp_idx
        wsp_idx = next_wsp_idx
