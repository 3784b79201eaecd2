"""Bottom-up selector matching over a node tree.

A Traverser holds a match set, initially the root it was built from. The
first ``find`` collects every element below the current matches whose tag
name fits the rightmost step of the selector, then keeps the candidates that
satisfy the rest of the selector. Later ``find`` calls filter the current
matches in place, so queries can be chained:

    >>> t = Traverser(doc).find("cd").find(".featured")

How steps left of the rightmost one are checked depends on
``TraverserOpts.combinators``:

- ``CombinatorMode.LEGACY`` checks the id, class, attribute and pseudo parts
  of every step against the candidate itself and ignores combinators and the
  element names of earlier steps. ``a > b`` therefore behaves like ``a b``,
  and neither requires an ``a`` ancestor. The initial narrowing by the
  rightmost element name is the only structural filter.
- ``CombinatorMode.STRICT`` walks the tree from the candidate outward:
  ancestors for descendant, the parent for child, preceding element siblings
  for ``+`` and ``~``, backtracking over alternatives.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from .attributes import match_attribute_test
from .errors import TypeMismatchError, UnsupportedFeatureError
from .matchset import MatchSet
from .node import is_element
from .parser import parse
from .selector import Combinator, CompiledSelector, SelectorList, SimpleSelector

logger = logging.getLogger(__name__)

PseudoHandler = Callable[[Any, "str | None"], bool]

_NODE_ATTRIBUTES = ("name", "attrs", "children", "parent")


class CombinatorMode(enum.Enum):
    LEGACY = "legacy"
    STRICT = "strict"


class TraverserOpts:
    """Options for a Traverser.

    Args:
        combinators: How combinators between steps are enforced.
        pseudo_classes: Handlers keyed by pseudo-class name. A handler gets
            the node and the functional argument (or None) and returns
            whether the node matches. Unregistered names always match.
        pseudo_elements: Same as ``pseudo_classes`` for ``::name`` parts.
    """

    __slots__ = ("combinators", "pseudo_classes", "pseudo_elements")

    combinators: CombinatorMode
    pseudo_classes: dict[str, PseudoHandler]
    pseudo_elements: dict[str, PseudoHandler]

    def __init__(
        self,
        combinators: CombinatorMode | str = CombinatorMode.LEGACY,
        pseudo_classes: Mapping[str, PseudoHandler] | None = None,
        pseudo_elements: Mapping[str, PseudoHandler] | None = None,
    ) -> None:
        self.combinators = CombinatorMode(combinators)
        self.pseudo_classes = dict(pseudo_classes or {})
        self.pseudo_elements = dict(pseudo_elements or {})


def check_node(node: Any) -> None:
    """Raise TypeMismatchError unless ``node`` exposes the node attributes."""
    missing = [attr for attr in _NODE_ATTRIBUTES if not hasattr(node, attr)]
    if missing:
        raise TypeMismatchError(f"{type(node).__name__} is not a tree node (missing: {', '.join(missing)})")


def _element_children(node: Any) -> list[Any]:
    return [child for child in node.children or () if is_element(child)]


def _iter_descendants(node: Any) -> Iterator[Any]:
    # Pre-order, document order, without the node itself
    stack = _element_children(node)
    stack.reverse()
    while stack:
        current = stack.pop()
        yield current
        children = _element_children(current)
        children.reverse()
        stack.extend(children)


def _preceding_siblings(node: Any) -> list[Any]:
    """Element siblings before ``node``, nearest first."""
    parent = node.parent
    if parent is None:
        return []
    preceding: list[Any] = []
    for child in _element_children(parent):
        if child is node:
            preceding.reverse()
            return preceding
        preceding.append(child)
    return []  # node not in parent.children (detached)


def _split_pseudo(text: str) -> tuple[str, str | None]:
    name, paren, arg = text.partition("(")
    if not paren:
        return text, None
    return name, arg[:-1]


def _reject_namespaces(selectors: SelectorList | CompiledSelector | SimpleSelector) -> None:
    if isinstance(selectors, SimpleSelector):
        uses_namespaces = selectors.uses_namespaces
    elif isinstance(selectors, SelectorList):
        uses_namespaces = selectors.uses_namespaces
    else:
        uses_namespaces = any(step.uses_namespaces for step in selectors)
    if uses_namespaces:
        raise UnsupportedFeatureError(f"Namespace-qualified selectors are not supported: {selectors}")


class Traverser:
    """Find nodes matching CSS selectors below a root node or a set of nodes."""

    __slots__ = ("_document", "_initialized", "_matches", "_selector", "opts")

    opts: TraverserOpts
    _document: Any
    _matches: MatchSet
    _selector: SelectorList | None
    _initialized: bool

    def __init__(self, dom: Any, opts: TraverserOpts | None = None) -> None:
        if all(hasattr(dom, attr) for attr in _NODE_ATTRIBUTES):
            roots = [dom]
        elif isinstance(dom, Iterable) and not isinstance(dom, (str, bytes)):
            roots = list(dom)
            for root in roots:
                check_node(root)
        else:
            check_node(dom)
            roots = [dom]

        self.opts = opts or TraverserOpts()
        self._document = dom
        self._matches = MatchSet(roots)
        self._selector = None
        self._initialized = False

    @property
    def document(self) -> Any:
        """The root node (or node collection) this traverser was built from."""
        return self._document

    @property
    def matches(self) -> MatchSet:
        """The current match set."""
        return self._matches

    @property
    def selector(self) -> SelectorList | None:
        """The selector used by the most recent ``find``."""
        return self._selector

    @property
    def initialized(self) -> bool:
        return self._initialized

    def __len__(self) -> int:
        return len(self._matches)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._matches)

    def to_list(self) -> list[Any]:
        return self._matches.to_list()

    def find(self, selector: str) -> Traverser:
        """Narrow the match set to nodes matching ``selector``; returns self.

        Raises:
            SelectorSyntaxError: If the selector text is invalid
            UnsupportedFeatureError: If the selector uses namespaces
        """
        selectors = parse(selector)
        _reject_namespaces(selectors)

        if self._initialized:
            found = MatchSet(node for node in self._matches if self._matches_list(node, selectors, consumed=False))
        else:
            found = self._initial_match(selectors)

        logger.debug("find(%r): %d -> %d matches", selector, len(self._matches), len(found))
        self._matches = found
        self._selector = selectors
        self._initialized = True
        return self

    def _initial_match(self, selectors: SelectorList) -> MatchSet:
        """Collect and verify descendants of the current matches.

        Descendants are narrowed by each member's rightmost element name; that
        element check is consumed by the narrowing and not repeated.
        """
        found = MatchSet()
        candidates = 0
        for root in self._matches:
            for node in _iter_descendants(root):
                if node in found:
                    continue
                for compiled in selectors:
                    element = compiled.target.element
                    if element is not None and node.name != element:
                        continue
                    candidates += 1
                    if self._verify(node, compiled, consumed=True):
                        found.add(node)
                        break
        logger.debug("initial narrowing: %d candidates from %d roots", candidates, len(self._matches))
        return found

    def _matches_list(self, node: Any, selectors: SelectorList, consumed: bool) -> bool:
        return any(self._verify(node, compiled, consumed) for compiled in selectors)

    def _verify(self, node: Any, compiled: CompiledSelector, consumed: bool) -> bool:
        if not self.matches_simple_selector(node, compiled.target, check_element=not consumed):
            return False
        if len(compiled) == 1:
            return True
        if self.opts.combinators is CombinatorMode.STRICT:
            return self._match_relations(node, compiled, len(compiled) - 1)
        return all(self.matches_simple_selector(node, step, check_element=False) for step in compiled[:-1])

    def _match_relations(self, node: Any, compiled: CompiledSelector, index: int) -> bool:
        """Check steps left of ``index`` given that ``node`` matched step ``index``."""
        if index == 0:
            return True

        combinator = compiled[index].combinator
        previous = compiled[index - 1]

        if combinator is Combinator.CHILD:
            parent = node.parent
            candidates = [parent] if parent is not None else []
        elif combinator is Combinator.ADJACENT_SIBLING:
            candidates = _preceding_siblings(node)[:1]
        elif combinator is Combinator.GENERAL_SIBLING:
            candidates = _preceding_siblings(node)
        else:  # Combinator.DESCENDANT
            candidates = self.ancestors(node)

        for candidate in candidates:
            if self.matches_simple_selector(candidate, previous) and self._match_relations(
                candidate, compiled, index - 1
            ):
                return True
        return False

    def matches_selector(self, node: Any, selector: CompiledSelector | SelectorList) -> bool:
        """Check whether ``node`` matches a compiled selector or selector list.

        Unlike ``find``, the rightmost element name is always checked.
        """
        _reject_namespaces(selector)
        if isinstance(selector, SelectorList):
            return self._matches_list(node, selector, consumed=False)
        return self._verify(node, selector, consumed=False)

    def matches_simple_selector(self, node: Any, step: SimpleSelector, check_element: bool = True) -> bool:
        """Check one selector step against ``node``, ignoring its combinator."""
        if not is_element(node):
            return False
        if step.uses_namespaces:
            _reject_namespaces(step)

        # Note that this short circuits as soon as one check fails.
        return (
            (not check_element or self._match_element(node, step))
            and self._match_attributes(node, step)
            and self._match_id(node, step)
            and self._match_classes(node, step)
            and self.match_pseudo_classes(node, step.pseudo_classes)
            and self.match_pseudo_elements(node, step.pseudo_elements)
        )

    def _match_element(self, node: Any, step: SimpleSelector) -> bool:
        return step.element is None or node.name == step.element

    def _match_attributes(self, node: Any, step: SimpleSelector) -> bool:
        return all(match_attribute_test(node.attrs, test) for test in step.attributes)

    def _match_id(self, node: Any, step: SimpleSelector) -> bool:
        if step.id is None:
            return True
        attrs = node.attrs or {}
        return attrs.get("id") == step.id

    def _match_classes(self, node: Any, step: SimpleSelector) -> bool:
        if not step.classes:
            return True
        class_attr = (node.attrs or {}).get("class")
        if not class_attr:
            return False
        return set(step.classes).issubset(class_attr.split())

    def match_pseudo_classes(self, node: Any, names: Iterable[str]) -> bool:
        """Pseudo-class hook: registered handlers decide, anything else matches."""
        return self._run_pseudo_handlers(self.opts.pseudo_classes, node, names)

    def match_pseudo_elements(self, node: Any, names: Iterable[str]) -> bool:
        """Pseudo-element hook: registered handlers decide, anything else matches."""
        return self._run_pseudo_handlers(self.opts.pseudo_elements, node, names)

    def _run_pseudo_handlers(self, handlers: Mapping[str, PseudoHandler], node: Any, names: Iterable[str]) -> bool:
        if not handlers:
            return True
        for text in names:
            name, arg = _split_pseudo(text)
            handler = handlers.get(name)
            if handler is not None and not handler(node, arg):
                return False
        return True

    def ancestors(self, node: Any) -> list[Any]:
        """Return the ancestors of ``node``, nearest first."""
        buffer: list[Any] = []
        parent = node.parent
        while parent is not None:
            buffer.append(parent)
            parent = parent.parent
        return buffer


def query(root: Any, selector_string: str, opts: TraverserOpts | None = None) -> list[Any]:
    """
    Query the tree below root, returning all matching elements.

    Searches descendants of root, not including root itself.

    Args:
        root: The root node to search from
        selector_string: A CSS selector string
        opts: Optional TraverserOpts

    Returns:
        A list of matching nodes in document order
    """
    return Traverser(root, opts).find(selector_string).to_list()


def matches(node: Any, selector_string: str, opts: TraverserOpts | None = None) -> bool:
    """
    Check if a node matches a CSS selector.

    Args:
        node: The node to check
        selector_string: A CSS selector string
        opts: Optional TraverserOpts

    Returns:
        True if the node matches, False otherwise
    """
    traverser = Traverser(node, opts)
    return traverser.matches_selector(node, parse(selector_string))
