"""
Part tree search, text extraction and classification.

All traversals are pre-order, depth-first, so results follow document order.
The tree is only read, never modified.
"""

from typing import Iterator, List, Optional

import structlog

from ..charsets import charset_registry
from ..headers.codec import unfold_and_decode
from ..headers.folding import unfold
from ..headers.parameters import get_header_parameter
from .mime_types import mime_type_matches, mime_type_matches_any
from .models import (
    ContainerPart,
    LeafPart,
    MalformedMessageError,
    Part,
    PartClassification,
)

logger = structlog.get_logger(__name__)

VIEWABLE_TEXT_TYPES = ("text/*",)
INLINE_MEDIA_TYPES = ("image/*",)


def walk_parts(part: Part) -> Iterator[Part]:
    """
    Walk a part tree in document order.

    A subtree shared by several containers is visited once per occurrence.

    Args:
        part: Root part

    Yields:
        Every node (containers included), parents before children

    Raises:
        MalformedMessageError: If a node is neither a leaf nor a container, a
            leaf's body cannot be read, or a container is its own ancestor
    """
    # (node, leaving) pairs; a container is re-pushed with leaving=True so it
    # drops off the ancestor path once its children are done
    stack = [(part, False)]
    ancestors = set()
    while stack:
        node, leaving = stack.pop()
        if leaving:
            ancestors.discard(id(node))
        elif isinstance(node, ContainerPart):
            if id(node) in ancestors:
                raise MalformedMessageError("Part tree contains a cycle")
            ancestors.add(id(node))
            yield node
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
        elif isinstance(node, LeafPart):
            if node.body is None:
                raise MalformedMessageError(
                    f"Body of {node.mime_type} part cannot be read"
                )
            yield node
        else:
            raise MalformedMessageError(
                f"Expected a leaf or container part, got {type(node).__name__}"
            )


def normalize_content_id(content_id: Optional[str]) -> Optional[str]:
    """Strip whitespace and optional surrounding angle brackets from a Content-ID."""
    if content_id is None:
        return None
    value = unfold(content_id).strip()
    if value.startswith("<"):
        value = value[1:]
    if value.endswith(">"):
        value = value[:-1]
    return value


def find_part_by_content_id(part: Part, content_id: Optional[str]) -> Optional[Part]:
    """
    Find the first leaf whose Content-ID matches.

    Args:
        part: Root of the tree to search
        content_id: Content-ID to look for, with or without angle brackets
            (e.g. taken from a ``cid:`` URL)

    Returns:
        Matching leaf part, or None (always None for an empty Content-ID)
    """
    wanted = normalize_content_id(content_id)
    if not wanted:
        return None
    for node in walk_parts(part):
        if isinstance(node, LeafPart) and normalize_content_id(node.content_id) == wanted:
            return node
    return None


def find_first_part_by_mime_type(part: Part, mime_type: str) -> Optional[Part]:
    """
    Find the first part (leaf or container) whose MIME type matches a pattern.

    Args:
        part: Root of the tree to search
        mime_type: Pattern such as "text/html" or "image/*"

    Returns:
        Matching part, or None
    """
    for node in walk_parts(part):
        if mime_type_matches(node.mime_type, mime_type):
            return node
    return None


def get_text_from_part(part: Optional[Part]) -> Optional[str]:
    """
    Read a text/* part's body as a string.

    The charset parameter of Content-Type selects the decoder; when it is
    missing or unknown the default 7-bit charset is used and undecodable bytes
    become U+FFFD.

    Args:
        part: Part to read

    Returns:
        Body text, or None if ``part`` is None, a container, or not text/*

    Raises:
        MalformedMessageError: If the part's body cannot be read
    """
    if not isinstance(part, LeafPart):
        return None
    if not mime_type_matches(part.mime_type, "text/*"):
        return None
    if part.body is None:
        raise MalformedMessageError("Text part has no readable body")

    charset = get_header_parameter(part.content_type, "charset")
    if charset is not None and charset_registry.lookup(charset) is None:
        logger.debug("text_part_charset_unknown", charset=charset)
    return charset_registry.decode(part.body, charset)


def is_attachment(part: Part) -> bool:
    """
    Determine whether a leaf is offered as a download rather than shown inline.

    A part is an attachment when its Content-Disposition type is
    "attachment", or when it names a filename without asking to be inline.
    """
    disposition = part.disposition
    if disposition is None:
        return False

    disposition_type = (get_header_parameter(disposition, None) or "").lower()
    if disposition_type == "attachment":
        return True
    filename = get_header_parameter(disposition, "filename")
    return filename is not None and disposition_type != "inline"


def _is_viewable(part: LeafPart) -> bool:
    if is_attachment(part):
        return False
    mime_type = part.mime_type
    if mime_type_matches_any(mime_type, VIEWABLE_TEXT_TYPES):
        return True
    # Inline media referenced from an HTML body via cid: URLs
    return mime_type_matches_any(mime_type, INLINE_MEDIA_TYPES) and part.content_id is not None


def collect_parts(
    part: Part,
    viewables: Optional[List[Part]] = None,
    attachments: Optional[List[Part]] = None,
) -> PartClassification:
    """
    Split the leaves of a part tree into viewables and attachments.

    Containers are descended into and never classified themselves.

    Args:
        part: Root of the tree
        viewables: List to append viewable leaves to (created if None)
        attachments: List to append attachment leaves to (created if None)

    Returns:
        PartClassification wrapping the two lists, in document order
    """
    result = PartClassification(
        viewables=viewables if viewables is not None else [],
        attachments=attachments if attachments is not None else [],
    )

    for node in walk_parts(part):
        if isinstance(node, ContainerPart):
            continue
        if _is_viewable(node):
            result.viewables.append(node)
        else:
            result.attachments.append(node)

    logger.debug(
        "parts_collected",
        viewables=len(result.viewables),
        attachments=len(result.attachments),
    )
    return result


def get_filename(part: Part) -> Optional[str]:
    """
    Get a part's file name, decoded for display.

    Looks at the Content-Disposition ``filename`` parameter first, then the
    Content-Type ``name`` parameter.
    """
    filename = get_header_parameter(part.disposition, "filename")
    if filename is None:
        filename = get_header_parameter(part.content_type, "name")
    return unfold_and_decode(filename)
