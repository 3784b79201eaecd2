# Selector model for cssquery
# Immutable selector steps plus the mutable builder the parser feeds

from __future__ import annotations

import enum

from .errors import SelectorSyntaxError


class Combinator(enum.Enum):
    """Relationship between a selector step and the step before it."""

    NONE = ""
    DESCENDANT = " "
    CHILD = ">"
    ADJACENT_SIBLING = "+"
    GENERAL_SIBLING = "~"


class AttributeOperator(enum.Enum):
    IS_EXACTLY = "="
    CONTAINS_WITH_SPACE = "~="
    CONTAINS_WITH_HYPHEN = "|="
    CONTAINS_IN_STRING = "*="
    BEGINS_WITH = "^="
    ENDS_WITH = "$="


def _escape_value(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _qualify(namespace: str | None, name: str) -> str:
    if namespace is None:
        return name
    return f"{namespace}|{name}"


class AttributeTest:
    """One ``[attr]`` / ``[attr op value]`` clause."""

    __slots__ = ("name", "namespace", "operator", "value")

    name: str
    namespace: str | None
    operator: AttributeOperator | None
    value: str | None

    def __init__(
        self,
        name: str,
        operator: AttributeOperator | None = None,
        value: str | None = None,
        namespace: str | None = None,
    ) -> None:
        self.name = name
        self.namespace = namespace
        self.operator = operator
        self.value = value

    def _key(self) -> tuple[str, str | None, AttributeOperator | None, str | None]:
        return (self.name, self.namespace, self.operator, self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeTest):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        parts = [f"AttributeTest({self.name!r}"]
        if self.namespace is not None:
            parts.append(f", namespace={self.namespace!r}")
        if self.operator is not None:
            parts.append(f", op={self.operator.value!r}, value={self.value!r}")
        parts.append(")")
        return "".join(parts)

    def __str__(self) -> str:
        name = _qualify(self.namespace, self.name)
        if self.operator is None:
            return f"[{name}]"
        return f"[{name}{self.operator.value}{_escape_value(self.value or '')}]"


class SimpleSelector:
    """A single selector step: element, id, classes, attributes and pseudos.

    ``combinator`` links this step to the step on its left. ``element`` is
    None for the wildcard, never the empty string.
    """

    __slots__ = (
        "attributes",
        "classes",
        "combinator",
        "element",
        "id",
        "namespace",
        "pseudo_classes",
        "pseudo_elements",
    )

    element: str | None
    namespace: str | None
    id: str | None
    classes: tuple[str, ...]
    attributes: tuple[AttributeTest, ...]
    pseudo_classes: tuple[str, ...]
    pseudo_elements: tuple[str, ...]
    combinator: Combinator

    def __init__(
        self,
        element: str | None = None,
        namespace: str | None = None,
        id: str | None = None,  # noqa: A002
        classes: tuple[str, ...] = (),
        attributes: tuple[AttributeTest, ...] = (),
        pseudo_classes: tuple[str, ...] = (),
        pseudo_elements: tuple[str, ...] = (),
        combinator: Combinator = Combinator.NONE,
    ) -> None:
        self.element = element or None
        self.namespace = namespace
        self.id = id
        self.classes = tuple(dict.fromkeys(classes))
        self.attributes = tuple(attributes)
        self.pseudo_classes = tuple(pseudo_classes)
        self.pseudo_elements = tuple(pseudo_elements)
        self.combinator = combinator

    def _key(self) -> tuple:
        return (
            self.element,
            self.namespace,
            self.id,
            self.classes,
            self.attributes,
            self.pseudo_classes,
            self.pseudo_elements,
            self.combinator,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimpleSelector):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    @property
    def uses_namespaces(self) -> bool:
        return self.namespace is not None or any(attr.namespace is not None for attr in self.attributes)

    def __repr__(self) -> str:
        parts = ["SimpleSelector("]
        fields = []
        for name in ("element", "namespace", "id"):
            value = getattr(self, name)
            if value is not None:
                fields.append(f"{name}={value!r}")
        for name in ("classes", "attributes", "pseudo_classes", "pseudo_elements"):
            value = getattr(self, name)
            if value:
                fields.append(f"{name}={value!r}")
        if self.combinator is not Combinator.NONE:
            fields.append(f"combinator={self.combinator.name}")
        parts.append(", ".join(fields))
        parts.append(")")
        return "".join(parts)

    def __str__(self) -> str:
        parts: list[str] = []
        if self.element is not None or self.namespace is not None:
            parts.append(_qualify(self.namespace, self.element or "*"))
        if self.id is not None:
            parts.append(f"#{self.id}")
        parts.extend(f".{name}" for name in self.classes)
        parts.extend(str(attr) for attr in self.attributes)
        parts.extend(f":{name}" for name in self.pseudo_classes)
        parts.extend(f"::{name}" for name in self.pseudo_elements)
        return "".join(parts) or "*"


class CompiledSelector(tuple):
    """A chain of selector steps in source order, matched right to left."""

    __slots__ = ()

    @property
    def target(self) -> SimpleSelector:
        """The rightmost step, i.e. the element being selected."""
        return self[-1]

    def __repr__(self) -> str:
        return f"CompiledSelector({list(self)!r})"

    def __str__(self) -> str:
        parts: list[str] = []
        for step in self:
            if step.combinator is Combinator.DESCENDANT:
                parts.append(" ")
            elif step.combinator is not Combinator.NONE:
                parts.append(f" {step.combinator.value} ")
            parts.append(str(step))
        return "".join(parts)


class SelectorList(tuple):
    """A comma-separated list of compiled selectors; any member may match."""

    __slots__ = ()

    @property
    def uses_namespaces(self) -> bool:
        return any(step.uses_namespaces for compiled in self for step in compiled)

    def __repr__(self) -> str:
        return f"SelectorList({list(self)!r})"

    def __str__(self) -> str:
        return ", ".join(str(compiled) for compiled in self)


class SelectorBuilder:
    """Accumulates parse events into a SelectorList.

    The parser reports each piece of a selector as it recognizes it. The
    builder keeps the step under construction, closes it when a combinator
    or comma arrives, and produces immutable selector objects from ``build()``.
    """

    __slots__ = (
        "_attributes",
        "_classes",
        "_combinator",
        "_element",
        "_has_parts",
        "_id",
        "_namespace",
        "_pseudo_classes",
        "_pseudo_elements",
        "_selectors",
        "_steps",
        "selector_text",
    )

    selector_text: str

    def __init__(self, selector_text: str = "") -> None:
        self.selector_text = selector_text
        self._selectors: list[CompiledSelector] = []
        self._steps: list[SimpleSelector] = []
        self._reset_step(Combinator.NONE)

    def _reset_step(self, combinator: Combinator) -> None:
        self._element: str | None = None
        self._namespace: str | None = None
        self._id: str | None = None
        self._classes: list[str] = []
        self._attributes: list[AttributeTest] = []
        self._pseudo_classes: list[str] = []
        self._pseudo_elements: list[str] = []
        self._combinator = combinator
        self._has_parts = False

    def _error(self, code: str, position: int, detail: str | None = None) -> SelectorSyntaxError:
        return SelectorSyntaxError(code, self.selector_text, position, detail)

    @property
    def step_open(self) -> bool:
        """True when the current step has received at least one part."""
        return self._has_parts

    def element(self, name: str | None, namespace: str | None = None, position: int = 0) -> None:
        """Record the element part; None (or ``*``) means any element."""
        if self._has_parts:
            raise self._error("misplaced-element-name", position, name or "*")
        self._element = None if name == "*" else name
        self._namespace = namespace
        self._has_parts = True

    def add_id(self, name: str, position: int = 0) -> None:
        if self._id is not None and self._id != name:
            raise self._error("multiple-ids", position, name)
        self._id = name
        self._has_parts = True

    def add_class(self, name: str) -> None:
        if name not in self._classes:
            self._classes.append(name)
        self._has_parts = True

    def add_attribute(
        self,
        name: str,
        operator: AttributeOperator | None = None,
        value: str | None = None,
        namespace: str | None = None,
    ) -> None:
        self._attributes.append(AttributeTest(name, operator, value, namespace))
        self._has_parts = True

    def add_pseudo_class(self, name: str) -> None:
        self._pseudo_classes.append(name)
        self._has_parts = True

    def add_pseudo_element(self, name: str) -> None:
        self._pseudo_elements.append(name)
        self._has_parts = True

    def _close_step(self) -> None:
        self._steps.append(
            SimpleSelector(
                element=self._element,
                namespace=self._namespace,
                id=self._id,
                classes=tuple(self._classes),
                attributes=tuple(self._attributes),
                pseudo_classes=tuple(self._pseudo_classes),
                pseudo_elements=tuple(self._pseudo_elements),
                combinator=self._combinator,
            )
        )

    def combinator(self, combinator: Combinator, position: int = 0) -> None:
        """Close the current step; the next step is joined by ``combinator``."""
        if not self._has_parts:
            if not self._steps:
                raise self._error("leading-combinator", position, combinator.value)
            raise self._error("consecutive-combinators", position, combinator.value)
        self._close_step()
        self._reset_step(combinator)

    def next_selector(self, position: int = 0) -> None:
        """Close the current compiled selector and start a new list member."""
        self._finish_selector(position, "empty-selector-list-member")
        self._reset_step(Combinator.NONE)

    def _finish_selector(self, position: int, empty_code: str) -> None:
        if not self._has_parts:
            if self._steps:
                raise self._error("trailing-combinator", position, self._combinator.value)
            raise self._error(empty_code, position)
        self._close_step()
        self._selectors.append(CompiledSelector(self._steps))
        self._steps = []

    def build(self, position: int = 0) -> SelectorList:
        """Close everything and return the finished selector list."""
        code = "empty-selector-list-member" if self._selectors else "empty-selector"
        self._finish_selector(position, code)
        return SelectorList(self._selectors)
