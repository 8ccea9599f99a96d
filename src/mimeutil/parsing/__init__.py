# Email parsing module

from .eml_parser import (
    build_part_tree,
    detect_charset,
    parse_eml_bytes,
    parse_eml_file,
    parse_eml_part_tree,
)

__all__ = [
    "parse_eml_bytes",
    "parse_eml_file",
    "parse_eml_part_tree",
    "build_part_tree",
    "detect_charset",
]
