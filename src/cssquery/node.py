from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from .serialize import to_xml

if TYPE_CHECKING:
    from .traverser import TraverserOpts


def _to_text_collect(node: Any, parts: list[str], strip: bool) -> None:
    if node.name == "#text":
        data: str | None = node.data
        if not data:
            return
        if strip:
            data = data.strip()
            if not data:
                return
        parts.append(data)
        return

    for child in node.children:
        _to_text_collect(child, parts, strip=strip)


def is_element(node: Any) -> bool:
    """True for element nodes; document, text and comment names start with '#'."""
    name = getattr(node, "name", None)
    return isinstance(name, str) and not name.startswith("#")


class Node:
    """An element or document node.

    This is a small reference tree for the selector engine. The engine only
    relies on ``name``, ``namespace``, ``attrs``, ``parent`` and ``children``,
    so any object exposing those works as well.
    """

    __slots__ = ("attrs", "children", "name", "namespace", "parent")

    name: str
    namespace: str | None
    attrs: dict[str, str | None]
    parent: Node | None
    children: list[Any]

    def __init__(
        self,
        name: str,
        attrs: dict[str, str | None] | None = None,
        namespace: str | None = None,
        children: list[Any] | None = None,
    ) -> None:
        self.name = name
        self.namespace = namespace
        self.attrs = attrs if attrs is not None else {}
        self.parent = None
        self.children = []
        for child in children or ():
            self.append_child(child)

    def __repr__(self) -> str:
        return f"<Node {self.name}>"

    def append_child(self, node: Any) -> Any:
        self.children.append(node)
        node.parent = self
        return node

    def remove_child(self, node: Any) -> None:
        try:
            self.children.remove(node)
        except ValueError:
            raise ValueError("The node to be removed is not a child of this node") from None
        node.parent = None

    def has_child_nodes(self) -> bool:
        """Return True if this node has children."""
        return bool(self.children)

    @property
    def element_children(self) -> list[Node]:
        return [child for child in self.children if is_element(child)]

    def iter_descendants(self, name: str | None = None) -> Iterator[Node]:
        """Yield element descendants in document order, optionally by tag name.

        The node itself is not included.
        """
        for child in self.children:
            if not is_element(child):
                continue
            if name is None or name == "*" or child.name == name:
                yield child
            yield from child.iter_descendants(name)

    def query(self, selector: str, opts: TraverserOpts | None = None) -> list[Any]:
        """
        Query this subtree using a CSS selector.

        Args:
            selector: A CSS selector string
            opts: Optional TraverserOpts (combinator mode, pseudo handlers)

        Returns:
            A list of matching nodes

        Raises:
            SelectorError: If the selector is invalid or unsupported
        """
        from .traverser import query

        return query(self, selector, opts)

    @property
    def text(self) -> str:
        """Return the direct text content of this node (no descendants)."""
        return "".join(child.data or "" for child in self.children if child.name == "#text")

    def to_text(self, separator: str = " ", strip: bool = True) -> str:
        """Return the concatenated text of this node's descendants.

        - `separator` controls how text nodes are joined (default: a single space).
        - `strip=True` strips each text node and drops empty segments.
        """
        parts: list[str] = []
        _to_text_collect(self, parts, strip=strip)
        return separator.join(parts)

    def to_xml(self, indent: int = 0, indent_size: int = 2, pretty: bool = True) -> str:
        """Convert node to an XML string."""
        return to_xml(self, indent, indent_size, pretty=pretty)


class TextNode:
    __slots__ = ("data", "name", "namespace", "parent")

    data: str | None
    name: str
    namespace: None
    parent: Node | None

    def __init__(self, data: str | None) -> None:
        self.data = data
        self.parent = None
        self.name = "#text"
        self.namespace = None

    def __repr__(self) -> str:
        return f"<TextNode {self.data!r}>"

    @property
    def text(self) -> str:
        """Return the text content of this node."""
        return self.data or ""

    def to_text(self, separator: str = " ", strip: bool = True) -> str:  # noqa: ARG002
        # Parameters are accepted for API consistency; they don't affect leaf nodes.
        if self.data is None:
            return ""
        if strip:
            return self.data.strip()
        return self.data

    @property
    def children(self) -> list[Any]:
        """Return empty list for TextNode (leaf node)."""
        return []

    def has_child_nodes(self) -> bool:
        """Return False for TextNode."""
        return False


def element(name: str, attrs: dict[str, str | None] | None = None, *children: Any) -> Node:
    """Build an element; string children become text nodes."""
    node = Node(name, attrs)
    for child in children:
        node.append_child(TextNode(child) if isinstance(child, str) else child)
    return node


def document(*children: Any) -> Node:
    """Build a ``#document`` node holding the given top-level nodes."""
    return Node("#document", children=list(children))
