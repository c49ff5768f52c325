"""Entry points: turn a feed (literal XML or URL) into a ParseResult."""

from __future__ import annotations

import logging
from typing import Optional, Union

import requests
from pydantic import AnyUrl

from . import downloader, normalizer, rss_parser
from .config import FetchConfig
from .exceptions import EmptyInputError
from .models import ParseResult

logger = logging.getLogger(__name__)

XmlSource = Union[str, bytes, AnyUrl]


def _parse_text(xml_text: str, feed_url: Optional[str]) -> ParseResult:
    normalized = normalizer.preprocess_xml(xml_text)
    document = normalizer.load_document(normalized)
    try:
        return rss_parser.extract(document, feed_url=feed_url)
    finally:
        document.unlink()


def parse_url(
    url: Union[str, AnyUrl],
    config: Optional[FetchConfig] = None,
    *,
    session: Optional[requests.Session] = None,
) -> ParseResult:
    """Fetch a feed and parse it.

    This is the entry point for ranged fetches: with ``config.request_size``
    set, only the first bytes of the feed are downloaded and the text is cut
    back to its last complete item before parsing.

    Args:
        url: Feed URL. It becomes ``podcast.feed_url`` verbatim.
        config: Fetch options
        session: Optional requests session (see ``downloader.fetch_feed``)

    Returns:
        ParseResult for the fetched feed

    Raises:
        FetchFailedError: If the server answers with a non-success status
        requests.RequestException: On transport failure
        MalformedXmlError: If the fetched text cannot be parsed
    """
    feed_url = str(url)
    xml_text = downloader.fetch_feed(feed_url, config, session=session)
    return _parse_text(xml_text, feed_url)


def parse(source: XmlSource) -> ParseResult:
    """Parse a podcast feed.

    Literal XML and URLs are told apart by type: ``str``/``bytes`` are the
    document itself, a pydantic URL (``HttpUrl("https://...")``) is fetched
    in full. Use ``parse_url`` to pass fetch options.

    Args:
        source: Feed XML text (bytes are decoded as UTF-8) or feed URL

    Returns:
        ParseResult with the podcast and its episodes in document order

    Raises:
        EmptyInputError: If literal text is empty or whitespace-only
        FetchFailedError: If fetching the URL fails with an HTTP error status
        requests.RequestException: On transport failure
        MalformedXmlError: If the text cannot be parsed even after normalization
        TypeError: If ``source`` is neither text nor a URL

    Example:
        >>> result = parse("<rss><channel><title>Show</title></channel></rss>")
        >>> result.podcast.title
        'Show'
    """
    if isinstance(source, AnyUrl):
        logger.debug("Parsing feed from URL %s", source)
        return parse_url(source)

    if isinstance(source, bytes):
        source = source.decode("utf-8", errors="replace")
    if not isinstance(source, str):
        raise TypeError(f"Expected XML text or a URL, got {type(source).__name__}")
    if not source.strip():
        raise EmptyInputError()

    return _parse_text(source, None)
