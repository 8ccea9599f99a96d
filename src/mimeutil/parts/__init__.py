# Part tree model, MIME type matching and traversal

from .mime_types import mime_type_matches, mime_type_matches_any
from .models import (
    ContainerPart,
    Headers,
    LeafPart,
    MalformedMessageError,
    Part,
    PartClassification,
    build_container,
    build_leaf,
)
from .transfer import decode_body
from .tree import (
    collect_parts,
    find_first_part_by_mime_type,
    find_part_by_content_id,
    get_filename,
    get_text_from_part,
    is_attachment,
    walk_parts,
)

__all__ = [
    "Part",
    "LeafPart",
    "ContainerPart",
    "Headers",
    "PartClassification",
    "MalformedMessageError",
    "build_leaf",
    "build_container",
    "mime_type_matches",
    "mime_type_matches_any",
    "decode_body",
    "walk_parts",
    "find_part_by_content_id",
    "find_first_part_by_mime_type",
    "get_text_from_part",
    "get_filename",
    "is_attachment",
    "collect_parts",
]
