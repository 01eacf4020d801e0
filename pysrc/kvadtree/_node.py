# _node.py
"""Quadtree nodes and the algorithms that run over them."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional

from ._common import Rect

logger = logging.getLogger(__name__)

Callback = Callable[[float, float, Any, Any], None]
"""Signature of find/walk callbacks: (x, y, payload, context) -> None."""

Extent = tuple[float, float, float, float]
"""Node edges as (min_x, min_y, max_x, max_y)."""

# Quadrant order used for children and for every traversal.
NW, NE, SW, SE = 0, 1, 2, 3


class Entry:
    """A stored (point, payload) pair. The payload is never copied or inspected."""

    __slots__ = ("payload", "x", "y")

    def __init__(self, x: float, y: float, payload: Any):
        self.x = x
        self.y = y
        self.payload = payload


def child_extents(extent: Extent) -> list[Extent]:
    """
    Split an extent into its NW, NE, SW, SE quadrants.

    Children reuse the parent's edges and midpoint as-is, so adjacent
    quadrants share an edge exactly and together cover the parent.
    """
    x0, y0, x1, y1 = extent
    mx = x0 + (x1 - x0) / 2.0
    my = y0 + (y1 - y0) / 2.0
    return [(x0, y0, mx, my), (mx, y0, x1, my), (x0, my, mx, y1), (mx, my, x1, y1)]


class Node:
    """
    A quadtree node.

    A node is a leaf while ``children`` is None and holds entries directly.
    Once split it owns exactly four children (NW, NE, SW, SE) and its entry
    list stays empty. Nodes never revert to leaves.

    Entries are kept in insertion order in ``entries`` and always visited
    newest first.

    ``extent`` holds the node's edges and drives every geometric test;
    ``bounds`` is the same region as (x, y, width, height).

    All algorithms use explicit stacks, so depth is bounded by memory and not
    by the interpreter recursion limit.
    """

    __slots__ = ("bounds", "children", "entries", "extent", "level")

    def __init__(self, bounds: Rect, level: int, extent: Optional[Extent] = None):
        if extent is None:
            x, y, w, h = bounds
            extent = (x, y, x + w, y + h)
        self.bounds = bounds
        self.extent = extent
        self.level = level
        self.children: Optional[list[Node]] = None
        self.entries: list[Entry] = []

    @classmethod
    def from_extent(cls, extent: Extent, level: int) -> Node:
        x0, y0, x1, y1 = extent
        return cls((x0, y0, x1 - x0, y1 - y0), level, extent)

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        kind = "leaf" if self.children is None else "internal"
        return f"Node(level={self.level}, bounds={self.bounds!r}, {kind}, entries={len(self.entries)})"

    # ---- Structure ----

    def contains(self, x: float, y: float) -> bool:
        x0, y0, x1, y1 = self.extent
        return x0 <= x <= x1 and y0 <= y <= y1

    def quadrant_index(self, x: float, y: float) -> int:
        """
        Return the child index for a point inside this node.

        Points on a midline go to the lower index side of that axis.
        """
        x0, y0, x1, y1 = self.extent
        mid_x = x0 + (x1 - x0) / 2.0
        mid_y = y0 + (y1 - y0) / 2.0
        return (y > mid_y) * 2 + (x > mid_x)

    def child_at(self, x: float, y: float) -> Node:
        return self.children[self.quadrant_index(x, y)]  # type: ignore[index]

    def leaf_for(self, x: float, y: float) -> Node:
        """Follow the quadrant rule from this node down to a leaf."""
        node = self
        while node.children is not None:
            node = node.child_at(x, y)
        return node

    def _split(self) -> list[Entry]:
        """Turn this leaf into an internal node and hand back its old entries."""
        level = self.level + 1
        self.children = [Node.from_extent(e, level) for e in child_extents(self.extent)]
        old = self.entries
        self.entries = []
        logger.debug(
            "Splitting node at level %d %r holding %d entries",
            self.level,
            self.bounds,
            len(old),
        )
        return old

    # ---- Algorithms ----

    def insert(
        self, x: float, y: float, payload: Any, max_levels: int, max_points: int
    ) -> None:
        # Each frame is (node, pending entries to re-insert below it). A split
        # pushes the old leaf contents, newest first, and they are placed
        # before the outer frame continues, so cascades nest like recursion.
        stack: list[tuple[Node, Iterator[Entry]]] = [
            (self, iter((Entry(x, y, payload),)))
        ]
        while stack:
            top, pending = stack[-1]
            e = next(pending, None)
            if e is None:
                stack.pop()
                continue
            leaf = top.leaf_for(e.x, e.y)
            leaf.entries.append(e)
            if leaf.level < max_levels and len(leaf.entries) > max_points:
                stack.append((leaf, reversed(leaf._split())))

    def remove_payload(self, x: float, y: float, payload: Any) -> int:
        """Remove every entry in the leaf owning (x, y) whose payload is ``payload``."""
        node = self.leaf_for(x, y)
        before = len(node.entries)
        node.entries = [e for e in node.entries if e.payload is not payload]
        return before - len(node.entries)

    def find(self, rect: Rect, callback: Optional[Callback], context: Any) -> int:
        rx, ry, rw, rh = rect
        rx1, ry1 = rx + rw, ry + rh
        count = 0
        stack = [self]
        while stack:
            node = stack.pop()
            if node.children is not None:
                for child in reversed(node.children):
                    x0, y0, x1, y1 = child.extent
                    if not (x1 < rx or x0 > rx1 or y1 < ry or y0 > ry1):
                        stack.append(child)
                continue
            for e in reversed(node.entries):
                if rx <= e.x <= rx1 and ry <= e.y <= ry1:
                    count += 1
                    if callback is not None:
                        callback(e.x, e.y, e.payload, context)
        return count

    def walk(self, callback: Optional[Callback], context: Any) -> int:
        count = 0
        for e in self.iter_entries():
            count += 1
            if callback is not None:
                callback(e.x, e.y, e.payload, context)
        return count

    def iter_entries(self) -> Iterator[Entry]:
        """Yield every entry below this node in walk order."""
        for node in self.iter_nodes():
            if node.children is None:
                yield from reversed(node.entries)

    def iter_nodes(self) -> Iterator[Node]:
        """Yield this node and all descendants in preorder."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children is not None:
                stack.extend(reversed(node.children))

    def release(self) -> None:
        """Tear down the subtree: children before parents, entries before their leaf."""
        for node in reversed(list(self.iter_nodes())):
            node.entries.clear()
            node.children = None
