"""
MIME type pattern matching.

Patterns are ``type/subtype`` strings where either half may be ``*``.
Comparison is case-insensitive (RFC 2045 section 5.1).
"""

from typing import Iterable, Optional, Tuple

WILDCARD = "*"


def _split(mime_type: str) -> Tuple[str, str]:
    main, _, sub = mime_type.strip().lower().partition("/")
    return main, sub


def mime_type_matches(mime_type: Optional[str], pattern: str) -> bool:
    """
    Check whether a MIME type matches a pattern.

    Args:
        mime_type: MIME type, e.g. "text/plain"
        pattern: Pattern, e.g. "text/*", "*/plain", "*/*"

    Returns:
        True if both halves match (or the pattern half is "*")

    Examples:
        >>> mime_type_matches("text/plain", "*/plain")
        True
        >>> mime_type_matches("foo/bar", "text/*")
        False
    """
    if mime_type is None:
        return False

    main, sub = _split(mime_type)
    want_main, want_sub = _split(pattern)
    return (want_main == WILDCARD or want_main == main) and (
        want_sub == WILDCARD or want_sub == sub
    )


def mime_type_matches_any(mime_type: Optional[str], patterns: Iterable[str]) -> bool:
    """
    Check a MIME type against an ordered list of patterns.

    Returns:
        True if any pattern matches; False for an empty list
    """
    return any(mime_type_matches(mime_type, pattern) for pattern in patterns)
