"""
Build part trees from .eml files (RFC 5322/MIME format).

MIME framing is parsed with Python's standard library email module; the result
is converted into the LeafPart/ContainerPart tree consumed by ``parts.tree``.
Header values are kept in their raw wire form so that callers decode them
with ``headers.unfold_and_decode``.
"""

from email import message_from_bytes
from email.message import Message
from email.policy import compat32
from typing import Optional

import charset_normalizer
import structlog

from ..headers.parameters import get_header_parameter
from ..parts.models import (
    HEADER_CONTENT_TRANSFER_ENCODING,
    ContainerPart,
    Headers,
    LeafPart,
    MalformedMessageError,
    Part,
)
from ..parts.transfer import decode_body

logger = structlog.get_logger(__name__)


def parse_eml_bytes(eml_bytes: bytes) -> Message:
    """
    Parse .eml bytes into email.Message object.

    Args:
        eml_bytes: Raw .eml file bytes

    Returns:
        Parsed email.Message object (compat32 policy, raw header values)

    Raises:
        MalformedMessageError: If bytes cannot be parsed
    """
    try:
        return message_from_bytes(eml_bytes, policy=compat32)
    except Exception as e:
        raise MalformedMessageError(f"Failed to parse .eml file: {str(e)}") from e


def parse_eml_file(eml_path: str) -> Part:
    """
    Parse .eml file into a part tree.

    Args:
        eml_path: Path to .eml file

    Returns:
        Root part of the message

    Raises:
        FileNotFoundError: If file doesn't exist
        MalformedMessageError: If file cannot be parsed
    """
    with open(eml_path, "rb") as f:
        eml_bytes = f.read()
    return build_part_tree(parse_eml_bytes(eml_bytes))


def _raw_body(msg: Message) -> bytes:
    payload = msg.get_payload(decode=False)
    if payload is None:
        return b""
    if isinstance(payload, bytes):
        return payload
    # message_from_bytes smuggles 8-bit octets through as surrogate escapes
    return str(payload).encode("ascii", "surrogateescape")


def build_part_tree(msg: Message) -> Part:
    """
    Convert a parsed message into a part tree.

    multipart/* and message/rfc822 become ContainerPart nodes (the attached
    message is the only child of the latter); everything else becomes a
    LeafPart with its Content-Transfer-Encoding undone.

    Args:
        msg: Parsed email.Message object

    Returns:
        Root part

    Raises:
        MalformedMessageError: If a body cannot be decoded
    """
    headers = Headers(msg.items())

    if msg.is_multipart():
        children = [build_part_tree(child) for child in msg.get_payload()]
        return ContainerPart(headers=headers, children=children)

    try:
        raw = _raw_body(msg)
    except UnicodeEncodeError as e:
        raise MalformedMessageError(f"Unreadable body: {e}") from e

    body = decode_body(raw, headers.get(HEADER_CONTENT_TRANSFER_ENCODING))
    return LeafPart(headers=headers, body=body)


def parse_eml_part_tree(eml_bytes: bytes) -> Part:
    """Parse .eml bytes straight into a part tree."""
    root = build_part_tree(parse_eml_bytes(eml_bytes))
    logger.debug("part_tree_built", mime_type=root.mime_type)
    return root


def detect_charset(part: LeafPart) -> Optional[str]:
    """
    Report the charset of a leaf part's body.

    Uses the charset declared in Content-Type when present; otherwise guesses
    from the body with charset-normalizer.

    Args:
        part: Leaf part

    Returns:
        Charset name (e.g. 'utf-8', 'iso-8859-1'), or None if the body is
        empty and no charset is declared
    """
    declared = get_header_parameter(part.content_type, "charset")
    if declared:
        return declared

    if part.body:
        detected = charset_normalizer.from_bytes(part.body).best()
        if detected:
            return detected.encoding

    return None
