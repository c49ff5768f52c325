"""Mapping of feed elements onto ``Podcast`` and ``Episode`` records."""

from __future__ import annotations

import logging
from typing import List, Optional

# Bandit: minidom usage limited to typing references; parsing goes through defusedxml
from xml.dom import minidom  # nosec B408

from . import models
from .exceptions import MalformedXmlError
from .nodes import DomNode, FeedNode, first_attribute, first_element, first_text

logger = logging.getLogger(__name__)

ITEM_TAG = "item"
ATOM_LINK_TAG = "atom:link"
SELF_REL = "self"


def find_feed_url(root: FeedNode) -> str:
    """Return the ``href`` of the first ``<atom:link rel="self">``, else ``""``."""
    for link in root.elements_by_tag(ATOM_LINK_TAG):
        if link.attribute("rel").strip().lower() == SELF_REL:
            return link.attribute("href")
    return ""


def create_episode_from_item(item: FeedNode) -> models.Episode:
    """Create an Episode from an ``<item>`` element.

    Every field takes the text of the first matching element under the item,
    or ``""`` when there is none, so an empty ``<item/>`` still yields a
    complete record.

    Args:
        item: RSS item element

    Returns:
        Episode record
    """
    enclosure = first_element(item, "enclosure")
    return models.Episode(
        author=first_text(item, "author"),
        content_encoded=first_text(item, "content:encoded"),
        description=first_text(item, "description"),
        enclosure=models.Enclosure(
            url=enclosure.attribute("url") if enclosure is not None else "",
            type=enclosure.attribute("type") if enclosure is not None else "",
        ),
        guid=first_text(item, "guid"),
        itunes_author=first_text(item, "itunes:author"),
        itunes_duration=first_text(item, "itunes:duration"),
        itunes_episode=first_text(item, "itunes:episode"),
        itunes_episode_type=first_text(item, "itunes:episodeType"),
        itunes_explicit=first_text(item, "itunes:explicit"),
        itunes_subtitle=first_text(item, "itunes:subtitle"),
        itunes_summary=first_text(item, "itunes:summary"),
        itunes_title=first_text(item, "itunes:title"),
        link=first_text(item, "link"),
        pub_date=first_text(item, "pubDate"),
        title=first_text(item, "title"),
    )


def extract_episodes(root: FeedNode) -> List[models.Episode]:
    """Return one Episode per ``<item>`` under ``root``, in document order."""
    return [create_episode_from_item(item) for item in root.elements_by_tag(ITEM_TAG)]


def extract_podcast(root: FeedNode, feed_url: Optional[str] = None) -> models.Podcast:
    """Create the Podcast record from the document root.

    Lookups take the first matching element in document order. The category
    is the ``text`` attribute of the outermost ``<itunes:category>``; nested
    sub-categories are ignored.

    Args:
        root: Document root element
        feed_url: URL the feed was fetched from. When ``None``, the feed's own
            ``<atom:link rel="self">`` is used.

    Returns:
        Podcast record
    """
    image = first_element(root, "image")
    owner = first_element(root, "itunes:owner")
    return models.Podcast(
        title=first_text(root, "title"),
        link=first_text(root, "link"),
        language=first_text(root, "language"),
        copyright=first_text(root, "copyright"),
        description=first_text(root, "description"),
        content_encoded=first_text(root, "content:encoded"),
        feed_url=feed_url if feed_url is not None else find_feed_url(root),
        image=models.PodcastImage(
            url=first_text(image, "url"),
            title=first_text(image, "title"),
            link=first_text(image, "link"),
        ),
        itunes_author=first_text(root, "itunes:author"),
        itunes_category=first_attribute(root, "itunes:category", "text"),
        itunes_explicit=first_text(root, "itunes:explicit"),
        itunes_image=first_attribute(root, "itunes:image", "href"),
        itunes_owner=models.ItunesOwner(
            name=first_text(owner, "itunes:name"),
            email=first_text(owner, "itunes:email"),
        ),
        itunes_subtitle=first_text(root, "itunes:subtitle"),
        itunes_summary=first_text(root, "itunes:summary"),
        itunes_type=first_text(root, "itunes:type"),
    )


def extract(document: minidom.Document, feed_url: Optional[str] = None) -> models.ParseResult:
    """Map a normalized feed document onto the output records.

    Absent elements and attributes become empty strings; this function does
    not raise for missing data.

    Args:
        document: Normalized feed document
        feed_url: URL the feed was fetched from, if it came from the network

    Returns:
        ParseResult with the podcast and its episodes

    Raises:
        MalformedXmlError: If the document has no root element
    """
    if document.documentElement is None:
        raise MalformedXmlError("document has no root element")

    root = DomNode(document.documentElement)
    episodes = extract_episodes(root)
    podcast = extract_podcast(root, feed_url)
    logger.debug("Extracted podcast %r with %d episodes", podcast.title, len(episodes))
    return models.ParseResult(podcast=podcast, episodes=episodes)
