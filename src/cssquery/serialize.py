"""XML serialization utilities for cssquery nodes."""

from __future__ import annotations

from typing import Any


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str | None) -> str:
    if value is None:
        return ""
    return _escape_text(value).replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: dict[str, str | None] | None, *, empty: bool = False) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append("/>" if empty else ">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def _element_attrs(node: Any) -> dict[str, str | None]:
    attrs: dict[str, str | None] = {}
    parent = node.parent
    parent_ns = getattr(parent, "namespace", None) if parent is not None else None
    if node.namespace != parent_ns and "xmlns" not in (node.attrs or {}):
        # Undeclare an inherited default namespace with xmlns=""
        attrs["xmlns"] = node.namespace or ""

    # Namespaced attributes are keyed {uri}local; give each uri a prefix
    prefixes: dict[str, str] = {}
    for key, value in (node.attrs or {}).items():
        if key.startswith("{"):
            uri, _, local = key[1:].partition("}")
            if uri == XML_NAMESPACE:
                prefix = "xml"
            else:
                prefix = prefixes.get(uri)
                if prefix is None:
                    prefix = prefixes[uri] = f"ns{len(prefixes)}"
                    attrs[f"xmlns:{prefix}"] = uri
            key = f"{prefix}:{local}"
        attrs[key] = value
    return attrs


def to_xml(node: Any, indent: int = 0, indent_size: int = 2, *, pretty: bool = True) -> str:
    """Convert node to XML string."""
    if node.name == "#document":
        # Document root - just render children
        parts = [_node_to_xml(child, indent, indent_size, pretty) for child in node.children]
        parts = [part for part in parts if part]
        return "\n".join(parts) if pretty else "".join(parts)
    return _node_to_xml(node, indent, indent_size, pretty)


def _node_to_xml(node: Any, indent: int = 0, indent_size: int = 2, pretty: bool = True) -> str:
    """Helper to convert a node to XML."""
    prefix = " " * (indent * indent_size) if pretty else ""
    name: str = node.name

    # Text node
    if name == "#text":
        text: str | None = node.data
        if pretty:
            text = text.strip() if text else ""
            return f"{prefix}{_escape_text(text)}" if text else ""
        return _escape_text(text)

    attrs = _element_attrs(node)
    children: list[Any] = node.children
    if not children:
        return f"{prefix}{serialize_start_tag(name, attrs, empty=True)}"

    open_tag = serialize_start_tag(name, attrs)

    # Text-only content stays on one line
    if all(child.name == "#text" for child in children):
        content = "".join(child.data or "" for child in children)
        if pretty:
            content = content.strip()
        return f"{prefix}{open_tag}{_escape_text(content)}{serialize_end_tag(name)}"

    if not pretty:
        inner = "".join(_node_to_xml(child, 0, indent_size, pretty=False) for child in children)
        return f"{open_tag}{inner}{serialize_end_tag(name)}"

    lines = [f"{prefix}{open_tag}"]
    for child in children:
        child_xml = _node_to_xml(child, indent + 1, indent_size, pretty=True)
        if child_xml:
            lines.append(child_xml)
    lines.append(f"{prefix}{serialize_end_tag(name)}")
    return "\n".join(lines)
