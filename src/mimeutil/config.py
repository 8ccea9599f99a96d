"""
Library configuration management.

This module handles configuration from environment variables using Pydantic Settings.
"""

from typing import Dict

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Library configuration from environment variables.

    All settings can be overridden via environment variables prefixed with
    ``MIMEUTIL_`` (e.g. ``MIMEUTIL_LOG_LEVEL=DEBUG``).
    """

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False

    # Charsets
    default_charset: str = "us-ascii"  # Used when a part declares none (or an unknown one)
    encode_charset: str = "UTF-8"  # Charset label emitted in encoded words
    charset_aliases: Dict[str, str] = {}  # Extra alias -> Python codec name

    # Folding and encoded words (RFC 2047 section 2)
    line_budget: int = 76
    encoded_word_max_length: int = 75
    max_used_characters: int = 50

    model_config = {
        "env_prefix": "MIMEUTIL_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
