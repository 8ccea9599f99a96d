"""
RFC 2045 header parameter lookup.

Parses values such as ``multipart/mixed; boundary="----=_Part_0"`` into the
bare value and its ``name=value`` parameters.

Known limitation: comments (``charset=utf-8 (Plain text)``) are not stripped,
so such a parameter value comes back with the comment attached.
"""

from typing import List, Optional

from .folding import unfold


def split_parameters(header: str) -> List[str]:
    """
    Split a header value on ";" separators outside double quotes.

    Args:
        header: Unfolded header value

    Returns:
        Segments, untrimmed; the first one is the bare value
    """
    segments = []
    current = []
    in_quotes = False
    escaped = False

    for ch in header:
        if escaped:
            escaped = False
        elif ch == "\\" and in_quotes:
            escaped = True
        elif ch == '"':
            in_quotes = not in_quotes
        elif ch == ";" and not in_quotes:
            segments.append("".join(current))
            current = []
            continue
        current.append(ch)

    segments.append("".join(current))
    return segments


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def get_header_parameter(header: Optional[str], name: Optional[str]) -> Optional[str]:
    """
    Get a parameter from a structured header value.

    Args:
        header: Header value, e.g. ``text/html; charset="utf-8"``
        name: Parameter name (case-insensitive), or None for the bare value

    Returns:
        - None if ``header`` is None
        - The trimmed bare value (text before the first ";") if ``name`` is None
        - The (unquoted) value of the first matching parameter, else None

    Examples:
        >>> get_header_parameter("header; A=1; B=2", "b")
        '2'
        >>> get_header_parameter("header; A=1; B=2", None)
        'header'
    """
    if header is None:
        return None

    segments = split_parameters(unfold(header))
    if name is None:
        return segments[0].strip()

    wanted = name.strip().lower()
    for segment in segments[1:]:
        key, sep, value = segment.partition("=")
        if not sep:
            # Bare token such as "filename" with no value
            continue
        if key.strip().lower() == wanted:
            return _unquote(value.strip())

    return None
