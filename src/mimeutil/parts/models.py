"""
Part tree data model.

A message is a tree of parts. Each node is exactly one of:

- LeafPart: headers plus body bytes (already transfer-decoded)
- ContainerPart: headers plus an ordered list of child parts (multipart/*,
  message/rfc822)

Nodes carry no parent pointers; traversal functions in ``parts.tree`` walk the
tree top-down and return new result collections.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..headers.parameters import get_header_parameter

HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_ID = "Content-ID"
HEADER_CONTENT_DISPOSITION = "Content-Disposition"
HEADER_CONTENT_TRANSFER_ENCODING = "Content-Transfer-Encoding"

DEFAULT_LEAF_MIME_TYPE = "text/plain"  # RFC 2045 section 5.2
DEFAULT_CONTAINER_MIME_TYPE = "multipart/mixed"


class MalformedMessageError(ValueError):
    """Raised when a part tree cannot be traversed or read."""


class Headers:
    """
    Case-insensitive header multi-map preserving insertion order.

    Header names keep the spelling they were added with; lookups ignore case.
    """

    def __init__(
        self,
        items: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None,
    ):
        self._items: List[Tuple[str, str]] = []
        if items is None:
            return
        pairs = items.items() if isinstance(items, Mapping) else items
        for name, value in pairs:
            self.add(name, value)

    def add(self, name: str, value: str) -> None:
        """Append a header, keeping any existing ones with the same name."""
        self._items.append((name, value))

    def set(self, name: str, value: str) -> None:
        """Replace every header called ``name`` with a single value."""
        self.remove(name)
        self.add(name, value)

    def remove(self, name: str) -> None:
        key = name.lower()
        self._items = [(n, v) for n, v in self._items if n.lower() != key]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value for ``name``, or ``default``."""
        key = name.lower()
        for n, v in self._items:
            if n.lower() == key:
                return v
        return default

    def get_all(self, name: str) -> List[str]:
        key = name.lower()
        return [v for n, v in self._items if n.lower() == key]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return (n for n, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


class _PartHeaders:
    """Header accessors shared by both node kinds."""

    headers: Headers
    default_mime_type: str = DEFAULT_LEAF_MIME_TYPE

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get(HEADER_CONTENT_TYPE)

    @property
    def mime_type(self) -> str:
        """Lower-cased ``type/subtype`` from Content-Type, or the RFC 2045 default."""
        value = get_header_parameter(self.content_type, None)
        if not value:
            return self.default_mime_type
        return value.lower()

    @property
    def content_id(self) -> Optional[str]:
        return self.headers.get(HEADER_CONTENT_ID)

    @property
    def disposition(self) -> Optional[str]:
        return self.headers.get(HEADER_CONTENT_DISPOSITION)


@dataclass(eq=False)
class LeafPart(_PartHeaders):
    """
    A body part holding content.

    Attributes:
        headers: Part headers (raw wire values)
        body: Decoded body bytes; None means the body could not be read
    """

    headers: Headers = field(default_factory=Headers)
    body: Optional[bytes] = b""


@dataclass(eq=False)
class ContainerPart(_PartHeaders):
    """
    A part whose content is an ordered sequence of child parts.

    Attributes:
        headers: Part headers (raw wire values)
        children: Child parts in document order
    """

    headers: Headers = field(default_factory=Headers)
    children: List["Part"] = field(default_factory=list)

    default_mime_type = DEFAULT_CONTAINER_MIME_TYPE


Part = Union[LeafPart, ContainerPart]


@dataclass
class PartClassification:
    """
    Leaves of a part tree split by how they are presented.

    Attributes:
        viewables: Parts shown inline, in document order
        attachments: Parts offered for download, in document order
    """

    viewables: List[Part] = field(default_factory=list)
    attachments: List[Part] = field(default_factory=list)


def build_leaf(
    mime_type: str,
    body: bytes = b"",
    content_id: Optional[str] = None,
    disposition: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> LeafPart:
    """
    Build a leaf part from its most common headers.

    Args:
        mime_type: Content-Type header value (may include parameters)
        body: Decoded body bytes
        content_id: Optional Content-ID header value
        disposition: Optional Content-Disposition header value
        headers: Additional headers

    Returns:
        LeafPart
    """
    part_headers = Headers({HEADER_CONTENT_TYPE: mime_type})
    if content_id is not None:
        part_headers.add(HEADER_CONTENT_ID, content_id)
    if disposition is not None:
        part_headers.add(HEADER_CONTENT_DISPOSITION, disposition)
    for name, value in (headers or {}).items():
        part_headers.add(name, value)
    return LeafPart(headers=part_headers, body=body)


def build_container(mime_type: str, children: Iterable[Part]) -> ContainerPart:
    """Build a container part (multipart/*, message/rfc822) from its children."""
    return ContainerPart(
        headers=Headers({HEADER_CONTENT_TYPE: mime_type}),
        children=list(children),
    )
