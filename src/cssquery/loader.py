"""Build cssquery node trees from XML text.

Parsing itself is delegated to the standard library's ElementTree; this
module only converts the result into Node/TextNode objects with parent links.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .errors import XMLLoadError
from .node import Node, TextNode


def _split_name(tag: str) -> tuple[str, str | None]:
    # ElementTree reports namespaced names in Clark notation: {uri}local
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return local, uri
    return tag, None


def _convert(element: ET.Element) -> Node:
    name, namespace = _split_name(element.tag)
    # Namespaced attributes keep their Clark key so x:href and href stay apart
    attrs: dict[str, str | None] = dict(element.attrib)
    node = Node(name, attrs, namespace)

    if element.text:
        node.append_child(TextNode(element.text))
    for child in element:
        node.append_child(_convert(child))
        if child.tail:
            node.append_child(TextNode(child.tail))
    return node


def parse_xml(source: str | bytes) -> Node:
    """Parse XML text into a ``#document`` node holding the root element.

    Raises:
        XMLLoadError: If the text is not well-formed XML
    """
    try:
        root = ET.fromstring(source)
    except ET.ParseError as e:
        raise XMLLoadError(f"Invalid XML: {e}") from e

    return Node("#document", children=[_convert(root)])
