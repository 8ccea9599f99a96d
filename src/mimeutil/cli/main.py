"""
Command-line interface for header decoding/encoding and part inspection.

Usage:
    # Decode a raw header value
    mimeutil decode "=?UTF-8?B?4oaR4oaT4oaQ4oaS?="

    # Encode a header value for a "Subject: " line
    mimeutil encode "Prix: 10 €" --used 9

    # Look up a header parameter
    mimeutil param 'text/html; charset="utf-8"' charset

    # List the parts of a message
    mimeutil parts message.eml --json

    # Print the viewable text of a message
    mimeutil text message.eml
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from mimeutil.headers import fold_and_encode2, get_header_parameter, unfold_and_decode
from mimeutil.logging_config import setup_logging
from mimeutil.parsing.eml_parser import detect_charset, parse_eml_file
from mimeutil.parts import (
    ContainerPart,
    MalformedMessageError,
    Part,
    collect_parts,
    get_filename,
    get_text_from_part,
    walk_parts,
)

logger = structlog.get_logger(__name__)


# ============================================================================
# CLI FUNCTIONS
# ============================================================================

def describe_parts(root: Part) -> List[dict]:
    """
    Describe every part of a message in document order.

    Args:
        root: Root part

    Returns:
        List of dicts with mime type, classification, content-id, filename,
        charset and size
    """
    classification = collect_parts(root)
    viewable_ids = {id(p) for p in classification.viewables}

    rows = []
    for part in walk_parts(root):
        row = {
            "mime_type": part.mime_type,
            "content_id": part.content_id,
        }
        if isinstance(part, ContainerPart):
            row["kind"] = "container"
            row["children"] = len(part.children)
        else:
            row["kind"] = "viewable" if id(part) in viewable_ids else "attachment"
            row["filename"] = get_filename(part)
            row["charset"] = detect_charset(part) if part.mime_type.startswith("text/") else None
            row["size_bytes"] = len(part.body or b"")
        rows.append(row)
    return rows


def extract_text(root: Part) -> str:
    """Concatenate the text of all viewable text parts."""
    texts = []
    for part in collect_parts(root).viewables:
        text = get_text_from_part(part)
        if text is not None:
            texts.append(text)
    return "\n".join(texts)


def _write_parts(rows: List[dict], as_json: bool) -> None:
    if as_json:
        print(json.dumps(rows, ensure_ascii=False, indent=2))
        return
    for row in rows:
        details = [row["kind"], row["mime_type"]]
        if row.get("content_id"):
            details.append(f"cid={row['content_id']}")
        if row.get("filename"):
            details.append(f"filename={row['filename']}")
        if row.get("charset"):
            details.append(f"charset={row['charset']}")
        if "size_bytes" in row:
            details.append(f"{row['size_bytes']} bytes")
        print("  ".join(details))


# ============================================================================
# MAIN CLI
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mimeutil",
        description="MIME header codec and message part inspection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    decode_parser = subparsers.add_parser("decode", help="Unfold and decode a header value")
    decode_parser.add_argument("value", type=str, help="Raw header value")

    encode_parser = subparsers.add_parser("encode", help="Encode a header value as encoded words")
    encode_parser.add_argument("value", type=str, help="Logical header value")
    encode_parser.add_argument(
        "--used",
        "-u",
        type=int,
        default=0,
        help="Characters already used on the first line (e.g. 9 for 'Subject: ')",
    )

    param_parser = subparsers.add_parser("param", help="Get a parameter from a header value")
    param_parser.add_argument("value", type=str, help="Header value")
    param_parser.add_argument(
        "name", type=str, nargs="?", default=None, help="Parameter name (omit for the bare value)"
    )

    parts_parser = subparsers.add_parser("parts", help="List the parts of an .eml file")
    parts_parser.add_argument("input", type=str, help="Path to .eml file")
    parts_parser.add_argument("--json", action="store_true", help="Output JSON")

    text_parser = subparsers.add_parser("text", help="Print the viewable text of an .eml file")
    text_parser.add_argument("input", type=str, help="Path to .eml file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    setup_logging()
    args = build_parser().parse_args(argv)

    if args.command == "decode":
        print(unfold_and_decode(args.value))
        return 0

    if args.command == "encode":
        print(fold_and_encode2(args.value, args.used))
        return 0

    if args.command == "param":
        value = get_header_parameter(args.value, args.name)
        if value is None:
            logger.warning("parameter_not_found", name=args.name)
            return 1
        print(value)
        return 0

    input_path = Path(args.input)
    try:
        root = parse_eml_file(str(input_path))
        if args.command == "parts":
            _write_parts(describe_parts(root), args.json)
        else:
            print(extract_text(root))
    except FileNotFoundError:
        logger.error("input_not_found", path=str(input_path))
        return 1
    except MalformedMessageError as e:
        logger.error("message_malformed", path=str(input_path), error=str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
