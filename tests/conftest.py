"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- Mock settings/configuration
- Sample email data
- Hand-built part trees
- Temporary files
"""

import os
from typing import Generator

import pytest

from mimeutil.config import Settings
from mimeutil.parts.models import build_container, build_leaf
from tests.fixtures.emails import SAMPLE_EMAILS


@pytest.fixture
def mock_settings() -> Settings:
    """
    Create mock settings for testing with safe defaults.

    Returns:
        Settings instance with test configuration
    """
    return Settings(
        log_level="INFO",
        log_json=False,  # Easier to read in tests
    )


@pytest.fixture
def related_eml() -> bytes:
    """
    Get nested multipart email with an inline image and a PDF attachment.

    Returns:
        bytes of multipart/mixed email
    """
    return SAMPLE_EMAILS["related_inline_image"]


@pytest.fixture
def multipart_html_eml() -> bytes:
    """
    Get multipart email with both HTML and plain text.

    Returns:
        bytes of multipart/alternative email
    """
    return SAMPLE_EMAILS["multipart_html"]


@pytest.fixture
def tmp_eml_file(tmp_path) -> Generator[str, None, None]:
    """
    Create temporary .eml file for file-based tests.

    Args:
        tmp_path: pytest's temporary directory fixture

    Yields:
        Path to temporary .eml file
    """
    eml_path = tmp_path / "test_email.eml"
    eml_path.write_bytes(SAMPLE_EMAILS["related_inline_image"])
    yield str(eml_path)


@pytest.fixture
def cid_parts():
    """
    Image leaves with Content-IDs, with and without angle brackets.

    Returns:
        Dict of leaf parts keyed by name
    """
    return {
        "cid1": build_leaf("image/gif", b"GIF89a", content_id="cid.1@android.com"),
        "cid2": build_leaf("image/gif", b"GIF89a", content_id="<cid.2@android.com>"),
        "cid3": build_leaf("image/gif", b"GIF89a", content_id="cid.3@android.com"),
        "cid4": build_leaf("image/tiff", b"II*", content_id="cid.4@android.com"),
    }


@pytest.fixture
def nested_message(cid_parts):
    """
    multipart/mixed
      image/tiff (cid.4)
      multipart/related
        multipart/alternative
          text/plain
          text/html
        image/gif (cid.1)
      image/gif (cid.3)
      image/gif (<cid.2>)
    """
    return build_container(
        "multipart/mixed",
        [
            cid_parts["cid4"],
            build_container(
                "multipart/related",
                [
                    build_container(
                        "multipart/alternative",
                        [
                            build_leaf("text/plain", b"plain"),
                            build_leaf("text/html", b"<p>html</p>"),
                        ],
                    ),
                    cid_parts["cid1"],
                ],
            ),
            cid_parts["cid3"],
            cid_parts["cid2"],
        ],
    )


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    This prevents test pollution from env var changes.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config):
    """
    Configure pytest with custom markers and settings.
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
