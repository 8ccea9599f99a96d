"""
Header value decoding and encoding.

Decoding turns wire header text (folded, containing RFC 2047 encoded words)
into the logical Unicode string shown to users; encoding goes the other way,
splitting long non-ASCII text into as many encoded words as needed to respect
the 75 character encoded-word limit.

Every entry point returns its argument itself when no work is required.
"""

from typing import List, Optional

import structlog

from ..charsets import charset_registry
from ..config import settings
from .encoded_word import (
    ENC_WORD_PREFIX,
    ENC_WORD_SUFFIX,
    Encoding,
    choose_encoding,
    decode_encoded_word,
    encode_b,
    encode_q,
    encoded_length,
)
from .folding import unfold

logger = structlog.get_logger(__name__)

WORD_SEPARATOR = "\r\n "


# ============================================================================
# DECODING
# ============================================================================

def _find_terminator(body: str, begin: int) -> int:
    """
    Find the "?=" closing the encoded word that starts at ``begin``.

    The search starts after the charset and encoding delimiters so that a
    payload beginning with "=XX" (as in ``Q?=5B...``) is not mistaken for the
    end of the word.
    """
    scan = begin + 2
    qm1 = body.find("?", scan)
    if qm1 != -1:
        qm2 = body.find("?", qm1 + 1)
        if qm2 != -1:
            scan = qm2 + 1
    return body.find(ENC_WORD_SUFFIX, scan)


def _is_linear_whitespace(s: str) -> bool:
    return all(ch in " \t" for ch in s)


def decode(body: Optional[str]) -> Optional[str]:
    """
    Decode all encoded words in a header value.

    Tokens that fail to decode are kept verbatim. Runs of spaces and tabs
    between two decoded words are dropped (RFC 2047 section 6.2); line breaks
    are not, so folded input should go through :func:`unfold_and_decode`.

    Args:
        body: Header value, possibly containing encoded words

    Returns:
        Decoded value; ``body`` itself if nothing was decoded

    Examples:
        >>> decode("=?UTF-8?B?4oaR4oaT4oaQ4oaS?=")
        '↑↓←→'
    """
    if body is None:
        return None
    if ENC_WORD_PREFIX not in body:
        return body

    out: List[str] = []
    previous_end = 0
    previous_was_encoded = False
    changed = False

    while True:
        begin = body.find(ENC_WORD_PREFIX, previous_end)
        end = -1 if begin == -1 else _find_terminator(body, begin)
        if end == -1:
            if not changed:
                return body
            out.append(body[previous_end:])
            return "".join(out)

        end += len(ENC_WORD_SUFFIX)
        separator = body[previous_end:begin]
        decoded = decode_encoded_word(body, begin, end)

        if decoded is None:
            # Keep "=?" and rescan from inside the failed token
            out.append(body[previous_end:begin + 2])
            previous_end = begin + 2
            previous_was_encoded = False
            continue

        if not (previous_was_encoded and _is_linear_whitespace(separator)):
            out.append(separator)
        out.append(decoded)
        changed = True
        previous_end = end
        previous_was_encoded = True


def unfold_and_decode(s: Optional[str]) -> Optional[str]:
    """
    Unfold, then decode, a raw header value.

    Args:
        s: Raw header value as read from the wire

    Returns:
        Logical header text; ``s`` itself if neither step changed anything
    """
    return decode(unfold(s))


# ============================================================================
# ENCODING
# ============================================================================

def _utf16_length(s: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in s)


def _split_index(text: str) -> int:
    """
    Index at which to halve ``text`` when it does not fit in one encoded word.

    The split falls on the last code point that starts strictly before the
    UTF-16 midpoint of the text, so a supplementary character (two UTF-16
    units) is never cut in half.
    """
    midpoint = _utf16_length(text) // 2
    offset = 0
    starts_before = 0
    for ch in text:
        if offset >= midpoint:
            break
        starts_before += 1
        offset += 2 if ord(ch) > 0xFFFF else 1
    return max(1, starts_before - 1)


def _join_surrogates(text: str) -> str:
    """Merge UTF-16 surrogate pairs held as separate code points."""
    if not any(0xD800 <= ord(ch) <= 0xDFFF for ch in text):
        return text
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def _encode_words(
    text: str,
    used_characters: int,
    max_length: int,
    charset: str,
    codec: str,
    words: List[str],
) -> None:
    data = text.encode(codec)
    encoding = choose_encoding(data)
    total_length = len(charset) + 7 + encoded_length(data, encoding)

    if total_length <= max_length - used_characters or len(text) <= 1:
        payload = encode_b(data) if encoding is Encoding.B else encode_q(data)
        words.append(f"{ENC_WORD_PREFIX}{charset}?{encoding.value}?{payload}{ENC_WORD_SUFFIX}")
        return

    split = _split_index(text)
    _encode_words(text[:split], used_characters, max_length, charset, codec, words)
    _encode_words(text[split:], 0, max_length, charset, codec, words)


def fold_and_encode2(
    s: Optional[str],
    used_characters: int,
    max_length: Optional[int] = None,
) -> Optional[str]:
    """
    Encode a header value as one or more UTF-8 encoded words.

    ASCII input is returned unchanged. Otherwise the text is encoded with
    whichever of "B" or "Q" is shorter; if the word would exceed
    ``max_length - used_characters`` the text is halved and each half encoded
    (and, if needed, halved again) on its own. The resulting words are joined
    with CRLF + space.

    Args:
        s: Logical header value
        used_characters: Characters already used on the first line, e.g.
            ``len("Subject: ")``; clamped to 0..50
        max_length: Maximum encoded word length (default 75)

    Returns:
        Wire header value; ``s`` itself if it is pure ASCII

    Examples:
        >>> fold_and_encode2("$\\u20ac", 0)
        '=?UTF-8?B?JOKCrA==?='
    """
    if s is None:
        return None
    if s.isascii():
        return s

    if max_length is None:
        max_length = settings.encoded_word_max_length
    used_characters = min(max(used_characters, 0), settings.max_used_characters)

    charset = settings.encode_charset
    codec = charset_registry.lookup(charset)
    if codec is None:
        raise LookupError(f"Unknown encode charset: {charset}")

    words: List[str] = []
    _encode_words(_join_surrogates(s), used_characters, max_length, charset, codec, words)

    if len(words) > 1:
        logger.debug("header_split_into_words", words=len(words), used_characters=used_characters)
    return WORD_SEPARATOR.join(words)


def fold_and_encode(s: Optional[str]) -> Optional[str]:
    """
    Encode a header value whose label width is not tracked by the caller.

    Args:
        s: Logical header value

    Returns:
        Wire header value; ``s`` itself if it is pure ASCII
    """
    return fold_and_encode2(s, 0)


encode = fold_and_encode2
