"""
MIME header codec and message part tree utilities.

Header values travel between the wire form (folded lines, RFC 2047 encoded
words) and logical Unicode text; part trees are searched by Content-ID or MIME
type and split into viewable parts and attachments.
"""

from .headers import (
    decode,
    encode,
    fold,
    fold_and_encode,
    fold_and_encode2,
    get_header_parameter,
    unfold,
    unfold_and_decode,
)
from .parts import (
    ContainerPart,
    Headers,
    LeafPart,
    MalformedMessageError,
    Part,
    PartClassification,
    collect_parts,
    find_first_part_by_mime_type,
    find_part_by_content_id,
    get_text_from_part,
    mime_type_matches,
    mime_type_matches_any,
)

__version__ = "1.0.0"

__all__ = [
    "unfold",
    "fold",
    "decode",
    "unfold_and_decode",
    "encode",
    "fold_and_encode",
    "fold_and_encode2",
    "get_header_parameter",
    "Part",
    "LeafPart",
    "ContainerPart",
    "Headers",
    "PartClassification",
    "MalformedMessageError",
    "mime_type_matches",
    "mime_type_matches_any",
    "find_part_by_content_id",
    "find_first_part_by_mime_type",
    "get_text_from_part",
    "collect_parts",
]
