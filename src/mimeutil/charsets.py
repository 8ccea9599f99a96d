"""
Charset name resolution.

Maps MIME charset labels (case-insensitive, including common code-page
aliases) onto Python codecs. Unknown labels resolve to None so callers can
fall back to the default 7-bit charset.
"""

import codecs
from typing import Dict, Optional

import structlog

from .config import settings

logger = structlog.get_logger(__name__)

_PROBE_BYTES = b"ascii \xe9\xff"

# Labels seen in the wild that Python's codec registry does not know.
MIME_CHARSET_ALIASES: Dict[str, str] = {
    "ansi_x3.4-1968": "ascii",
    "iso-8859-8-i": "iso8859_8",
    "iso-8859-8-e": "iso8859_8",
    "iso-8859-6-i": "iso8859_6",
    "iso-8859-6-e": "iso8859_6",
    "ks_c_5601-1987": "cp949",
    "ks_c_5601": "cp949",
    "x-sjis": "shift_jis",
    "x-euc-jp": "euc_jp",
    "x-gbk": "gbk",
    "x-mac-roman": "mac_roman",
    "macintosh": "mac_roman",
    "unicode-1-1-utf-7": "utf_7",
    "x-unicode20utf8": "utf_8",
    "windows-874": "cp874",
    "x-windows-874": "cp874",
}


class CharsetRegistry:
    """
    Resolve MIME charset labels to Python codec names.

    Attributes:
        default_charset: Codec used when a label is absent or unknown
        aliases: Extra label -> codec mappings consulted before Python's registry
    """

    def __init__(
        self,
        default_charset: str = "us-ascii",
        aliases: Optional[Dict[str, str]] = None,
    ):
        self.aliases: Dict[str, str] = dict(MIME_CHARSET_ALIASES)
        if aliases:
            self.aliases.update({k.lower(): v for k, v in aliases.items()})
        self._cache: Dict[str, Optional[str]] = {}
        self.default_charset = self.lookup(default_charset) or "ascii"

    def lookup(self, charset: Optional[str]) -> Optional[str]:
        """
        Resolve a charset label to a text codec name.

        Args:
            charset: MIME charset label (e.g. "UTF-8", "windows-1252")

        Returns:
            Canonical Python codec name, or None if the label is unknown or
            names a non-text codec (base64, zlib, ...)
        """
        if not charset:
            return None

        key = charset.strip().lower()
        if key in self._cache:
            return self._cache[key]

        name = self.aliases.get(key, key)
        try:
            info = codecs.lookup(name)
            # Empty input short-circuits the codec, so probe with real bytes.
            # Bytes-to-bytes codecs raise LookupError; idna and undefined
            # raise UnicodeError.
            _PROBE_BYTES.decode(info.name, "replace")
            resolved: Optional[str] = info.name
        except (LookupError, UnicodeError):
            logger.debug("charset_unknown", charset=charset)
            resolved = None

        self._cache[key] = resolved
        return resolved

    def resolve(self, charset: Optional[str]) -> str:
        """Resolve a charset label, falling back to the default charset."""
        return self.lookup(charset) or self.default_charset

    def decode(self, data: bytes, charset: Optional[str], errors: str = "replace") -> str:
        """
        Decode bytes using the resolved charset.

        Args:
            data: Raw bytes
            charset: MIME charset label, may be None
            errors: Codec error handler

        Returns:
            Decoded string; the default charset is used if the resolved codec
            cannot decode at all
        """
        try:
            return data.decode(self.resolve(charset), errors)
        except (LookupError, UnicodeError) as e:
            if errors == "strict":
                raise
            logger.debug("charset_decode_failed", charset=charset, error=str(e))
            return data.decode(self.default_charset, errors)


# Global registry instance
charset_registry = CharsetRegistry(
    default_charset=settings.default_charset,
    aliases=settings.charset_aliases,
)
