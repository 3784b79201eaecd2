from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any


class MatchSet:
    """A set of tree nodes keyed by identity.

    Two distinct nodes are never merged even if they compare equal, and the
    same node added twice is stored once. Iteration follows insertion order.
    """

    __slots__ = ("_nodes",)

    _nodes: dict[int, Any]

    def __init__(self, nodes: Iterable[Any] | None = None) -> None:
        self._nodes = {}
        if nodes is not None:
            self.update(nodes)

    def add(self, node: Any) -> None:
        self._nodes.setdefault(id(node), node)

    def update(self, nodes: Iterable[Any]) -> None:
        for node in nodes:
            self.add(node)

    def __contains__(self, node: object) -> bool:
        return self._nodes.get(id(node)) is node

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatchSet):
            return NotImplemented
        return self._nodes.keys() == other._nodes.keys()

    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def first(self) -> Any | None:
        """Return the first node added, or None when empty."""
        for node in self._nodes.values():
            return node
        return None

    def to_list(self) -> list[Any]:
        return list(self._nodes.values())

    def __repr__(self) -> str:
        names = ", ".join(getattr(node, "name", type(node).__name__) for node in self._nodes.values())
        return f"MatchSet([{names}])"
