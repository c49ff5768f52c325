"""Shared fixtures and test utilities for podcast_xml_parser tests.

This module contains:
- Test constants
- Builders for feed XML
- A fake HTTP session and response so no test touches the network
- An autouse fixture that fails any unit test attempting real network I/O

All test files can import from this module using pytest's conftest.py mechanism.
"""

import socket
from pathlib import Path
from unittest.mock import patch

import pytest
import requests
from requests.structures import CaseInsensitiveDict

# Test constants
TEST_BASE_URL = "https://example.com"
TEST_FEED_URL = f"{TEST_BASE_URL}/feed.xml"
TEST_MEDIA_URL = f"{TEST_BASE_URL}/episode.mp3"
TEST_MEDIA_TYPE_MP3 = "audio/mpeg"
TEST_FEED_TITLE = "Test Feed"
TEST_EPISODE_TITLE = "Episode Title"
TEST_CONTENT_TYPE_RSS = "application/rss+xml; charset=utf-8"

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_FEED_PATH = FIXTURES_DIR / "sample_feed.xml"

RSS_NAMESPACES = (
    'xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd" '
    'xmlns:atom="http://www.w3.org/2005/Atom" '
    'xmlns:content="http://purl.org/rss/1.0/modules/content/"'
)

EPISODE_FIELDS = (
    "author",
    "content_encoded",
    "description",
    "guid",
    "itunes_author",
    "itunes_duration",
    "itunes_episode",
    "itunes_episode_type",
    "itunes_explicit",
    "itunes_subtitle",
    "itunes_summary",
    "itunes_title",
    "link",
    "pub_date",
    "title",
)

PODCAST_FIELDS = (
    "title",
    "link",
    "language",
    "copyright",
    "description",
    "content_encoded",
    "feed_url",
    "itunes_author",
    "itunes_category",
    "itunes_explicit",
    "itunes_image",
    "itunes_subtitle",
    "itunes_summary",
    "itunes_type",
)


def read_sample_feed() -> str:
    """Return the full sample feed used for end-to-end parsing."""
    return SAMPLE_FEED_PATH.read_text(encoding="utf-8")


def build_item_xml(title=TEST_EPISODE_TITLE, media_url=TEST_MEDIA_URL, media_type=None):
    """Build one ``<item>`` with a title and an enclosure."""
    type_attr = f' type="{media_type}"' if media_type else ""
    return (
        "<item>"
        f"<title>{title}</title>"
        f'<enclosure url="{media_url}"{type_attr} length="1024"/>'
        "</item>"
    )


def build_rss_xml(title=TEST_FEED_TITLE, items=None, channel_extra=""):
    """Build a minimal RSS 2.0 document.

    Args:
        title: Channel title
        items: List of ``<item>`` XML strings
        channel_extra: Raw XML inserted in the channel before the items
    """
    items_xml = "".join(items or [])
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n<rss version="2.0" {RSS_NAMESPACES}>'
        f"<channel><title>{title}</title>{channel_extra}{items_xml}</channel></rss>"
    )


class MockHTTPResponse:
    """Simple mock for HTTP responses returned by ``FakeSession``."""

    def __init__(self, *, content=b"", url="", headers=None, status_code=200, reason="OK"):
        self.content = content
        self.url = url
        self.headers = CaseInsensitiveDict(headers or {})
        self.status_code = status_code
        self.reason = reason
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """Stand-in for ``requests.Session`` that records every GET."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


def create_rss_response(rss_xml, url=TEST_FEED_URL, content_type=TEST_CONTENT_TYPE_RSS):
    """Create a successful response carrying ``rss_xml`` encoded as UTF-8."""
    return MockHTTPResponse(
        content=rss_xml.encode("utf-8"),
        url=url,
        headers={"Content-Type": content_type},
    )


class NetworkCallDetectedError(Exception):
    """Raised when a unit test attempts to make a network call."""

    def __init__(self, library_name: str, call_type: str):
        self.library_name = library_name
        self.call_type = call_type
        super().__init__(
            f"Network call detected in unit test: {library_name}.{call_type}()\n"
            f"Unit tests must not make network calls. Use FakeSession instead.\n"
            f"If this test needs network access, move it to integration/."
        )


def _create_network_blocker(library_name: str, call_type: str):
    """Create a function that blocks network calls and raises an error."""

    def blocker(*args, **kwargs):
        raise NetworkCallDetectedError(library_name, call_type)

    return blocker


def _is_unit_test(request) -> bool:
    """Check if the current test lives under tests/unit/."""
    nodeid = getattr(request.node, "nodeid", "")
    return "tests/unit/" in nodeid or nodeid.startswith("unit/")


@pytest.fixture(autouse=True)
def block_network_in_unit_tests(request):
    """Block real HTTP and socket connections for tests in the unit/ directory."""
    if not _is_unit_test(request):
        yield
        return

    patchers = [
        patch.object(
            requests.Session, "send", _create_network_blocker("requests.Session", "send")
        ),
        patch.object(
            socket,
            "create_connection",
            side_effect=_create_network_blocker("socket", "create_connection"),
        ),
    ]
    for patcher in patchers:
        patcher.start()
    try:
        yield
    finally:
        for patcher in reversed(patchers):
            patcher.stop()

