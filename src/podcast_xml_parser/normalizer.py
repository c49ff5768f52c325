"""Normalization of malformed feed XML.

Feeds in the wild carry HTML entities XML does not define (``&nbsp;``),
bare ampersands, control characters and sometimes no single root element.
``preprocess_xml`` repairs what it can textually, then round-trips the text
through a DOM so that downstream extraction always receives a well-formed
document. The round-trip is lossy for invalid constructs: unknown entities
become literal text and forbidden characters are dropped. The only hard
failure left is text the XML parser rejects outright, reported as
``MalformedXmlError``.
"""

from __future__ import annotations

import logging
import re
from html.entities import html5
from xml.dom import minidom  # nosec B408
from xml.parsers.expat import errors, ExpatError  # nosec B407
from xml.sax.saxutils import escape

from defusedxml import DefusedXmlException
from defusedxml import expatbuilder as safe_expatbuilder

from . import config_constants
from .exceptions import MalformedXmlError

logger = logging.getLogger(__name__)

_XML_PREDEFINED_ENTITIES = frozenset({"amp", "lt", "gt", "quot", "apos"})

# CDATA sections and comments are copied verbatim; entities inside them are text
_PROTECTED_SECTION = re.compile(r"<!\[CDATA\[.*?\]\]>|<!--.*?-->", re.DOTALL)
_ENTITY_REFERENCE = re.compile(
    r"&(?:#(?P<dec>[0-9]+)|#[xX](?P<hex>[0-9a-fA-F]+)|(?P<name>[A-Za-z_][\w.-]*));|&"
)
# XML 1.0 forbids C0 controls other than tab/newline/carriage return, and lone surrogates
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
_XML_DECLARATION = re.compile(r"^<\?xml[^>]*\?>")
_LEADING_JUNK = "\ufeff \t\r\n"

_JUNK_AFTER_ROOT = errors.codes[errors.XML_ERROR_JUNK_AFTER_DOC_ELEMENT]


def _is_xml_char(codepoint: int) -> bool:
    return (
        codepoint in (0x9, 0xA, 0xD)
        or 0x20 <= codepoint <= 0xD7FF
        or 0xE000 <= codepoint <= 0xFFFD
        or 0x10000 <= codepoint <= 0x10FFFF
    )


def _replace_entity(match: re.Match) -> str:
    name = match.group("name")
    if name is not None:
        if name in _XML_PREDEFINED_ENTITIES:
            return match.group(0)
        resolved = html5.get(f"{name};")
        if resolved is None:
            # Unknown entity: keep it as literal text
            return "&amp;" + match.group(0)[1:]
        return escape(resolved, {'"': "&quot;", "'": "&apos;"})

    number = match.group("dec")
    base = 10
    if number is None:
        number, base = match.group("hex"), 16
    if number is not None:
        return match.group(0) if _is_xml_char(int(number, base)) else ""

    # Bare ampersand
    return "&amp;"


def escape_undefined_entities(xml_text: str) -> str:
    """Make every ``&`` in ``xml_text`` a reference XML understands.

    Outside CDATA sections and comments:

    - the five predefined XML entities and numeric references to valid XML
      characters are kept;
    - named HTML entities are replaced by their (escaped) characters;
    - numeric references to characters XML forbids are dropped;
    - anything else starting with ``&`` is escaped to ``&amp;``.
    """
    pieces = []
    position = 0
    for section in _PROTECTED_SECTION.finditer(xml_text):
        pieces.append(_ENTITY_REFERENCE.sub(_replace_entity, xml_text[position : section.start()]))
        pieces.append(section.group(0))
        position = section.end()
    pieces.append(_ENTITY_REFERENCE.sub(_replace_entity, xml_text[position:]))
    return "".join(pieces)


def _wrap_in_root(xml_text: str) -> str:
    body = _XML_DECLARATION.sub("", xml_text, count=1)
    tag = config_constants.SYNTHETIC_ROOT_TAG
    return f"<{tag}>{body}</{tag}>"


def load_document(xml_text: str) -> minidom.Document:
    """Parse XML text into a minidom document without namespace processing.

    Qualified names such as ``itunes:author`` stay literal tag names, so a feed
    that uses a prefix without declaring it still parses. Parsing goes through
    defusedxml: entity declarations and external references are refused.

    Args:
        xml_text: XML document text

    Returns:
        Parsed document

    Raises:
        MalformedXmlError: If the parser rejects the text
    """
    try:
        return safe_expatbuilder.parseString(xml_text, namespaces=False)
    except ExpatError as exc:
        raise MalformedXmlError(str(exc)) from exc
    except DefusedXmlException as exc:
        raise MalformedXmlError(str(exc)) from exc
    except UnicodeError as exc:
        # Text that cannot be encoded as UTF-8 (lone surrogates) never reaches expat
        raise MalformedXmlError(str(exc)) from exc


def preprocess_xml(xml_text: str) -> str:
    """Turn possibly malformed feed text into well-formed XML.

    Steps:
    1. Drop a leading byte-order mark and whitespace.
    2. Wrap the text in a synthetic ``<root>`` when it does not start with a tag.
    3. Remove characters XML 1.0 forbids and fix undefined entities.
    4. Parse into a DOM and serialize it back. When the text holds several
       top-level elements, it is wrapped in ``<root>`` and parsed again.

    Args:
        xml_text: Raw feed text

    Returns:
        Serialized, well-formed XML

    Raises:
        MalformedXmlError: If the text cannot be parsed at all
    """
    text = xml_text.lstrip(_LEADING_JUNK)
    wrapped = not text.startswith("<")
    if wrapped:
        logger.debug("Feed text has no leading element; wrapping it in a synthetic root")
        text = _wrap_in_root(text)

    cleaned = escape_undefined_entities(_INVALID_XML_CHARS.sub("", text))
    if cleaned != text:
        logger.debug("Replaced invalid characters or undefined entities in feed text")

    try:
        document = load_document(cleaned)
    except MalformedXmlError as exc:
        cause = exc.__cause__
        if wrapped or not isinstance(cause, ExpatError) or cause.code != _JUNK_AFTER_ROOT:
            raise
        logger.debug("Feed text has several top-level elements; wrapping it in a synthetic root")
        document = load_document(_wrap_in_root(cleaned))

    try:
        return document.toxml()
    finally:
        document.unlink()
