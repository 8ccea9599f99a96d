"""
Content-Transfer-Encoding body decoding (RFC 2045 section 6).
"""

import binascii
from typing import Optional

import structlog

from ..headers.encoded_word import decode_b
from .models import MalformedMessageError

logger = structlog.get_logger(__name__)


def decode_body(data: bytes, content_transfer_encoding: Optional[str]) -> bytes:
    """
    Undo a part's Content-Transfer-Encoding.

    Args:
        data: Body bytes as they appear in the message
        content_transfer_encoding: Header value ("base64", "quoted-printable",
            "7bit", ...), may be None

    Returns:
        Decoded bytes; ``data`` itself for identity encodings and unknown values

    Raises:
        MalformedMessageError: If a base64 body cannot be decoded
    """
    if content_transfer_encoding is None:
        return data

    encoding = content_transfer_encoding.strip().lower()
    if encoding == "base64":
        try:
            return decode_b(data.decode("ascii", "ignore"))
        except ValueError as e:
            raise MalformedMessageError(f"Unreadable base64 body: {e}") from e
    if encoding == "quoted-printable":
        return binascii.a2b_qp(data)
    if encoding not in ("7bit", "8bit", "binary"):
        logger.debug("transfer_encoding_unknown", encoding=encoding)
    return data
