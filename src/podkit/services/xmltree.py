"""XML to tree conversion for podcast feeds.

Parsing is delegated to defusedxml; this module only reshapes the parsed
elements into plain dicts, lists and strings:

* attributes are stored under ``"@_<name>"``;
* text of an element that also has attributes or children is stored
  under ``"#text"``, with the text runs around child elements joined
  by a single space;
* an element with neither attributes nor children becomes its text;
* a child name that occurs more than once maps to a list.

Values are never type-coerced. The accessor helpers at the bottom are the
only code that should know about these conventions.
"""

from __future__ import annotations

import io
import xml.etree.ElementTree as ET  # nosec B405 - parsing handled via defusedxml
from typing import Any

from defusedxml.ElementTree import iterparse as safe_iterparse

ATTR_PREFIX = "@_"
TEXT_KEY = "#text"

# Canonical prefixes, used whatever prefix the document declares
KNOWN_NAMESPACES = {
    "http://www.itunes.com/dtds/podcast-1.0.dtd": "itunes",
    "https://podcastindex.org/namespace/1.0": "podcast",
    "https://github.com/Podcastindex-org/podcast-namespace/blob/main/docs/1.0.md": "podcast",
    "http://www.w3.org/2005/Atom": "atom",
    "http://purl.org/rss/1.0/modules/content/": "content",
    "http://purl.org/dc/elements/1.1/": "dc",
    "http://search.yahoo.com/mrss/": "media",
    "http://www.google.com/schemas/play-podcasts/1.0": "googleplay",
}

Node = dict[str, Any] | list[Any] | str


def parse_xml(text: str) -> dict[str, Any]:
    """Parse feed text into a tree of dicts, lists and strings.

    Args:
        text: Raw XML document.

    Returns:
        A single-key dict mapping the root element name to its content,
        e.g. ``{"rss": {"channel": {...}}}``.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well formed.
        defusedxml.DefusedXmlException: If the document uses forbidden
            constructs such as entity declarations.
    """
    prefixes: dict[str, str] = {}
    root: ET.Element | None = None

    for event, item in safe_iterparse(io.StringIO(text), events=("start-ns", "end")):
        if event == "start-ns":
            prefix, uri = item
            # first declaration wins
            prefixes.setdefault(uri, prefix)
        else:
            root = item

    if root is None:
        raise ET.ParseError("no element found")

    return {_qualified_name(root.tag, prefixes): _convert(root, prefixes)}


def _qualified_name(tag: str, prefixes: dict[str, str]) -> str:
    if not tag.startswith("{"):
        return tag
    uri, _, local = tag[1:].partition("}")
    prefix = KNOWN_NAMESPACES.get(uri) or prefixes.get(uri)
    return f"{prefix}:{local}" if prefix else local


def _convert(element: ET.Element, prefixes: dict[str, str]) -> Node:
    children = list(element)
    # mixed content: text around child elements is joined
    pieces = [element.text, *(child.tail for child in children)]
    text = " ".join(piece.strip() for piece in pieces if piece and piece.strip())

    if not element.attrib and not children:
        return text

    node: dict[str, Any] = {}
    for name, value in element.attrib.items():
        node[ATTR_PREFIX + _qualified_name(name, prefixes)] = value

    for child in children:
        name = _qualified_name(child.tag, prefixes)
        value = _convert(child, prefixes)
        if name not in node:
            node[name] = value
        elif isinstance(node[name], list):
            node[name].append(value)
        else:
            node[name] = [node[name], value]

    if text:
        node[TEXT_KEY] = text

    return node


def as_list(value: Any) -> list[Any]:
    """Normalize a field that may be absent, a single node or a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _first(node: Any) -> Any:
    if isinstance(node, list):
        return node[0] if node else None
    return node


def text_of(node: Any) -> Any:
    """Return the text content of a node, or None.

    Plain values are returned unchanged; for a repeated element the first
    occurrence is used.
    """
    node = _first(node)
    if isinstance(node, dict):
        return node.get(TEXT_KEY)
    return node


def attr(node: Any, name: str) -> str | None:
    """Return attribute ``name`` of a node, or None."""
    node = _first(node)
    if isinstance(node, dict):
        return node.get(ATTR_PREFIX + name)
    return None
