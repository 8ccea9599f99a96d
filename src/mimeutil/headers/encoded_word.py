"""
RFC 2047 encoded-word codec.

Handles a single ``=?charset?encoding?encoded-text?=`` token in either the
"B" (Base64) or "Q" (header Quoted-Printable) form. Decoding never raises:
a token that cannot be decoded yields None and the caller passes the original
text through.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog

from ..charsets import charset_registry

logger = structlog.get_logger(__name__)

ENC_WORD_PREFIX = "=?"
ENC_WORD_SUFFIX = "?="

# Ratio (percent) of bytes needing "=XX" escapes above which Base64 wins
Q_ENCODED_THRESHOLD = 30

# Printable ASCII that may appear literally in a "Q" encoded word (RFC 2047 section 5(1))
Q_REGULAR_CHARS = frozenset(b for b in range(33, 127) if chr(b) not in "=_?")

_BASE64_ALPHABET = re.compile(rb"[^A-Za-z0-9+/]")


class Encoding(str, Enum):
    """Encoded-word transfer encodings."""

    B = "B"  # Base64
    Q = "Q"  # Quoted-Printable, header variant


@dataclass(frozen=True)
class EncodedWord:
    """
    A parsed encoded word.

    Attributes:
        charset: MIME charset label as written in the token
        encoding: Transfer encoding of the payload
        payload: Raw (already transfer-decoded) bytes
    """

    charset: str
    encoding: Encoding
    payload: bytes

    def text(self) -> Optional[str]:
        """Decode the payload with the word's charset, or None if the charset is unusable."""
        codec = charset_registry.lookup(self.charset)
        if codec is None:
            return None
        try:
            return self.payload.decode(codec, "replace")
        except (LookupError, UnicodeError) as e:
            logger.debug("encoded_word_decode_failed", charset=self.charset, error=str(e))
            return None


# ============================================================================
# ENCODING CHOICE
# ============================================================================

def choose_encoding(data: bytes) -> Encoding:
    """
    Pick the encoding that gives the shorter encoded word.

    "Q" costs three characters for every byte that needs escaping and one for
    everything else; "B" costs a flat four characters per three bytes. Once
    more than 30% of the bytes need escaping "B" is the smaller of the two.

    Args:
        data: Bytes to be encoded

    Returns:
        Encoding.B or Encoding.Q
    """
    if not data:
        return Encoding.Q

    q_encoded = sum(1 for v in data if v != 0x20 and v not in Q_REGULAR_CHARS)
    percentage = q_encoded * 100 // len(data)
    return Encoding.B if percentage > Q_ENCODED_THRESHOLD else Encoding.Q


def b_encoded_length(data: bytes) -> int:
    return (len(data) + 2) // 3 * 4


def q_encoded_length(data: bytes) -> int:
    return sum(1 if v == 0x20 or v in Q_REGULAR_CHARS else 3 for v in data)


def encoded_length(data: bytes, encoding: Encoding) -> int:
    if encoding is Encoding.B:
        return b_encoded_length(data)
    return q_encoded_length(data)


# ============================================================================
# PAYLOAD CODECS
# ============================================================================

def encode_b(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encode_q(data: bytes) -> str:
    out = []
    for v in data:
        if v == 0x20:
            out.append("_")
        elif v in Q_REGULAR_CHARS:
            out.append(chr(v))
        else:
            out.append("=%02X" % v)
    return "".join(out)


def decode_b(encoded_text: str) -> bytes:
    """
    Decode a "B" payload, ignoring stray characters and missing padding.

    Raises:
        ValueError: If the payload cannot be decoded
    """
    cleaned = _BASE64_ALPHABET.sub(b"", encoded_text.encode("ascii", "ignore"))
    remainder = len(cleaned) % 4
    if remainder == 1:
        # A lone trailing sextet carries no complete byte
        cleaned = cleaned[:-1]
    elif remainder:
        cleaned += b"=" * (4 - remainder)
    try:
        return base64.b64decode(cleaned)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def decode_q(encoded_text: str) -> bytes:
    """
    Decode a "Q" payload: "_" is a space, "=XX" a hex-escaped byte.

    Malformed escapes are kept literally.

    Raises:
        ValueError: If the payload contains characters outside Latin-1
    """
    try:
        raw = encoded_text.encode("latin-1")
    except UnicodeEncodeError as e:
        raise ValueError(f"Invalid quoted-printable payload: {e}") from e
    return binascii.a2b_qp(raw, header=True)


# ============================================================================
# TOKENS
# ============================================================================

def parse_encoded_word(body: str, begin: int, end: int) -> Optional[EncodedWord]:
    """
    Parse the encoded word occupying ``body[begin:end]``.

    ``body[begin:begin + 2]`` must be "=?" and ``body[end - 2:end]`` "?=".

    Returns:
        EncodedWord, or None if the token is structurally invalid
    """
    qm1 = body.find("?", begin + 2)
    if qm1 == -1 or qm1 >= end - 2:
        return None
    qm2 = body.find("?", qm1 + 1)
    if qm2 == -1 or qm2 >= end - 2:
        return None

    mime_charset = body[begin + 2:qm1]
    encoding = body[qm1 + 1:qm2].upper()
    encoded_text = body[qm2 + 1:end - 2]

    # RFC 2231 section 5: charset*language
    mime_charset = mime_charset.split("*", 1)[0]

    if not encoded_text:
        logger.debug("encoded_word_empty", token=body[begin:end])
        return None

    try:
        if encoding == "Q":
            return EncodedWord(mime_charset, Encoding.Q, decode_q(encoded_text))
        if encoding == "B":
            return EncodedWord(mime_charset, Encoding.B, decode_b(encoded_text))
    except ValueError as e:
        logger.debug("encoded_word_payload_invalid", token=body[begin:end], error=str(e))
        return None

    logger.debug("encoded_word_encoding_unsupported", encoding=encoding)
    return None


def decode_encoded_word(body: str, begin: int, end: int) -> Optional[str]:
    """
    Decode the encoded word occupying ``body[begin:end]``.

    Args:
        body: Text containing the token
        begin: Index of the leading "=?"
        end: Index just past the trailing "?="

    Returns:
        Decoded text, or None if the token is not decodable
    """
    word = parse_encoded_word(body, begin, end)
    if word is None:
        return None

    text = word.text()
    if text is None:
        logger.debug("encoded_word_charset_unknown", charset=word.charset)
    return text


def decode_token(token: str) -> Optional[str]:
    """
    Decode a standalone encoded word.

    Args:
        token: Text of the form ``=?charset?B|Q?payload?=``

    Returns:
        Decoded text, or None if ``token`` is not a decodable encoded word

    Examples:
        >>> decode_token("=?iso-8859-1?Q?H=E9llo?=")
        'Héllo'
    """
    if (
        len(token) < 6
        or not token.startswith(ENC_WORD_PREFIX)
        or not token.endswith(ENC_WORD_SUFFIX)
    ):
        return None
    return decode_encoded_word(token, 0, len(token))


def encode_token(
    text: str,
    charset: str = "UTF-8",
    prefer_quoted_printable: Optional[bool] = None,
) -> str:
    """
    Encode ``text`` as a single encoded word (no length limit applied).

    Args:
        text: Text to encode
        charset: MIME charset label to encode with
        prefer_quoted_printable: True forces "Q", False forces "B", None picks
            the shorter one with :func:`choose_encoding`

    Returns:
        Encoded word

    Raises:
        LookupError: If ``charset`` is unknown
        UnicodeEncodeError: If ``text`` cannot be represented in ``charset``
    """
    codec = charset_registry.lookup(charset)
    if codec is None:
        raise LookupError(f"Unknown charset: {charset}")
    data = text.encode(codec)

    if prefer_quoted_printable is None:
        encoding = choose_encoding(data)
    else:
        encoding = Encoding.Q if prefer_quoted_printable else Encoding.B

    payload = encode_b(data) if encoding is Encoding.B else encode_q(data)
    return f"{ENC_WORD_PREFIX}{charset}?{encoding.value}?{payload}{ENC_WORD_SUFFIX}"
