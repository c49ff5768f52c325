"""Element lookup helpers used by the field extractor.

Extraction only needs three capabilities from an XML library: find elements
by (qualified) tag name, read an element's text content, and read an
attribute. ``FeedNode`` names that contract and ``DomNode`` implements it on
top of ``xml.dom.minidom`` elements, so ``rss_parser`` never touches the DOM
API directly.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

# Bandit: minidom is only walked here; parsing goes through defusedxml
from xml.dom import minidom, Node  # nosec B408

_TEXT_NODE_TYPES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)


class FeedNode(Protocol):
    """Minimal read-only view of an XML element."""

    def elements_by_tag(self, tag_name: str) -> List["FeedNode"]:
        """Descendant elements named ``tag_name``, in document order."""
        ...

    def text(self) -> str:
        """Concatenated text of all descendant text and CDATA nodes."""
        ...

    def attribute(self, name: str) -> str:
        """Attribute value, or the empty string if absent."""
        ...


class DomNode:
    """``FeedNode`` adapter for a minidom element.

    Tag names are matched literally, prefix included (``itunes:author``), as
    documents are parsed with namespace processing turned off.
    """

    __slots__ = ("_element",)

    def __init__(self, element: minidom.Element) -> None:
        self._element = element

    def __repr__(self) -> str:
        return f"DomNode(<{self._element.tagName}>)"

    @property
    def tag_name(self) -> str:
        return str(self._element.tagName)

    def elements_by_tag(self, tag_name: str) -> List[FeedNode]:
        return [DomNode(e) for e in self._element.getElementsByTagName(tag_name)]

    def text(self) -> str:
        parts: List[str] = []
        stack = list(reversed(self._element.childNodes))
        while stack:
            node = stack.pop()
            if node.nodeType in _TEXT_NODE_TYPES:
                parts.append(node.data)
            elif node.nodeType == Node.ELEMENT_NODE:
                stack.extend(reversed(node.childNodes))
        return "".join(parts)

    def attribute(self, name: str) -> str:
        # minidom already returns "" for a missing attribute
        return str(self._element.getAttribute(name))


def first_element(node: Optional[FeedNode], tag_name: str) -> Optional[FeedNode]:
    """Return the first element named ``tag_name`` under ``node``, if any."""
    if node is None:
        return None
    matches = node.elements_by_tag(tag_name)
    return matches[0] if matches else None


def first_text(node: Optional[FeedNode], tag_name: str) -> str:
    """Text of the first element named ``tag_name`` under ``node``, else ``""``."""
    element = first_element(node, tag_name)
    return element.text() if element is not None else ""


def first_attribute(node: Optional[FeedNode], tag_name: str, attribute: str) -> str:
    """Attribute of the first element named ``tag_name`` under ``node``, else ``""``."""
    element = first_element(node, tag_name)
    return element.attribute(attribute) if element is not None else ""
