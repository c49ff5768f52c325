"""Repair of feeds truncated by a ranged fetch."""

from __future__ import annotations

import logging
import re
from typing import List

from . import config_constants

logger = logging.getLogger(__name__)

_ITEM_START = re.compile(r"<item[\s/>]")
# Markup that never opens an element is matched first and ignored
_MARKUP = re.compile(
    r"<!\[CDATA\[.*?\]\]>|<!--.*?-->|<[?!][^>]*>"
    r"|<(?P<closing>/?)(?P<name>[^\s/>!?]+)[^>]*?(?P<self_closing>/?)>",
    re.DOTALL,
)
_UNTERMINATED_SECTIONS = (("<![CDATA[", "]]>"), ("<!--", "-->"))


def fix_incomplete_feed(xml_text: str) -> str:
    """Cut a truncated feed after its last complete item and close it.

    A ``Range`` request usually ends in the middle of an element. Everything
    after the last ``</item>`` is dropped and ``</channel></rss>`` is appended,
    so every fully received episode survives and the partial one disappears.
    This is a textual patch for the single ``<channel>`` RSS layout only.

    Args:
        xml_text: Possibly truncated feed text

    Returns:
        The repaired text, or ``xml_text`` unchanged if it holds no ``</item>``
    """
    last_item_index = xml_text.rfind(config_constants.ITEM_CLOSING_TAG)
    if last_item_index == -1:
        logger.debug("No complete item found in truncated feed; leaving it untouched")
        return xml_text

    cut = last_item_index + len(config_constants.ITEM_CLOSING_TAG)
    logger.debug(
        "Truncated feed repaired: dropped %d trailing characters after the last item",
        len(xml_text) - cut,
    )
    return xml_text[:cut] + config_constants.FEED_CLOSING_TAGS


def _cut_to_last_complete_tag(xml_text: str) -> str:
    end = len(xml_text)
    for opener, closer in _UNTERMINATED_SECTIONS:
        start = xml_text.rfind(opener, 0, end)
        if start != -1 and xml_text.find(closer, start, end) == -1:
            end = start
    return xml_text[: xml_text.rfind(">", 0, end) + 1]


def close_open_elements(xml_text: str) -> str:
    """Append closing tags for every element still open at the end of ``xml_text``."""
    open_tags: List[str] = []
    for match in _MARKUP.finditer(xml_text):
        name = match.group("name")
        if name is None or match.group("self_closing"):
            continue
        if not match.group("closing"):
            open_tags.append(name)
        elif name in open_tags:
            while open_tags.pop() != name:
                pass
    return xml_text + "".join(f"</{name}>" for name in reversed(open_tags))


def close_truncated_header(xml_text: str) -> str:
    """Close a feed cut off before its first complete item.

    A started ``<item>`` is dropped whole. The rest is cut back to its last
    complete tag and every element still open is closed, so the channel
    header parses and the feed yields no episodes.

    Args:
        xml_text: Feed text holding no ``</item>``

    Returns:
        Structurally closed feed text
    """
    item_start = _ITEM_START.search(xml_text)
    head = xml_text[: item_start.start()] if item_start else xml_text
    closed = close_open_elements(_cut_to_last_complete_tag(head))
    if closed != xml_text:
        logger.debug("Truncated feed header closed; no complete item was received")
    return closed


def repair_ranged_body(xml_text: str) -> str:
    """Repair the body of a ranged fetch.

    Uses ``fix_incomplete_feed`` when at least one item arrived in full, and
    ``close_truncated_header`` otherwise.
    """
    if config_constants.ITEM_CLOSING_TAG in xml_text:
        return fix_incomplete_feed(xml_text)
    return close_truncated_header(xml_text)
