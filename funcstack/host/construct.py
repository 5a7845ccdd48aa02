"""Minimal construct tree.

Each construct has a scope (parent), an id unique among its siblings, a
slash-separated path and a stable address derived from that path.
"""

import hashlib
from typing import Optional


class Node:
    """Tree bookkeeping for a construct."""

    def __init__(self, host: "Construct", scope: Optional["Construct"], id: str):
        self.host = host
        self.scope = scope
        self.id = id
        self._children: dict[str, "Construct"] = {}

    @property
    def path(self) -> str:
        parts = []
        node: Optional[Node] = self
        while node is not None and node.scope is not None:
            parts.append(node.id)
            node = node.scope.node
        return "/".join(reversed(parts))

    @property
    def addr(self) -> str:
        """Stable address, unique within the tree."""
        return "c8" + hashlib.sha1(self.path.encode()).hexdigest()

    @property
    def root(self) -> "Construct":
        node = self
        while node.scope is not None:
            node = node.scope.node
        return node.host

    @property
    def children(self) -> list["Construct"]:
        return list(self._children.values())

    def try_find_child(self, id: str) -> Optional["Construct"]:
        return self._children.get(id)

    def add_child(self, child: "Construct", id: str) -> None:
        if id in self._children:
            raise ValueError(
                f"There is already a construct with id '{id}' in '{self.path or '<root>'}'"
            )
        self._children[id] = child


class Construct:
    """Base class for everything in the tree."""

    def __init__(self, scope: Optional["Construct"], id: str):
        self.node = Node(self, scope, id)
        if scope is not None:
            scope.node.add_child(self, id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.node.path or self.node.id}>"
