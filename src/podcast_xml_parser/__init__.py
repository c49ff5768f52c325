"""Podcast XML Parser - turn podcast RSS feeds into plain records.

The parser accepts raw feed XML or a feed URL and returns a ``ParseResult``
holding one ``Podcast`` and its ``Episode`` list. Broken feeds are repaired
where possible: undefined HTML entities, missing root elements and, for
ranged fetches, a truncated trailing episode.

Programmatic API Example:
    >>> import podcast_xml_parser
    >>>
    >>> result = podcast_xml_parser.parse(xml_text)
    >>> print(result.podcast.title, len(result.episodes))

Fetching Example:
    >>> from pydantic import HttpUrl
    >>> from podcast_xml_parser import FetchConfig, parse, parse_url
    >>>
    >>> result = parse(HttpUrl("https://example.com/feed.xml"))
    >>> # Only download the first 64 KiB; the cut-off episode is dropped
    >>> preview = parse_url("https://example.com/feed.xml", FetchConfig(requestSize=65536))

CLI Usage:
    $ podcast-xml-parser https://example.com/feed.xml
    $ python -m podcast_xml_parser.cli feed.xml --log-level DEBUG
"""

from __future__ import annotations

__version__ = "1.2.0"

from .config import FetchConfig, load_config_file
from .downloader import fetch_feed
from .exceptions import (
    EmptyInputError,
    FetchFailedError,
    MalformedXmlError,
    PodcastXmlParserError,
    TransportError,
)
from .models import Enclosure, Episode, ItunesOwner, ParseResult, Podcast, PodcastImage
from .normalizer import preprocess_xml
from .parser import parse, parse_url
from .repair import fix_incomplete_feed

__all__ = [
    "EmptyInputError",
    "Enclosure",
    "Episode",
    "FetchConfig",
    "FetchFailedError",
    "ItunesOwner",
    "MalformedXmlError",
    "ParseResult",
    "Podcast",
    "PodcastImage",
    "PodcastXmlParserError",
    "TransportError",
    "fetch_feed",
    "fix_incomplete_feed",
    "load_config_file",
    "parse",
    "parse_url",
    "preprocess_xml",
    "__version__",
]
# Note: 'cli' is available via __getattr__ for lazy loading


def __getattr__(name: str):
    if name == "cli":
        import importlib

        return importlib.import_module(f"{__name__}.cli")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
