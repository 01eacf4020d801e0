# quadtree.py
"""QuadTree - region quadtree over 2D points with opaque payloads."""

from __future__ import annotations

import logging
from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

from ._common import (
    Point,
    Rect,
    _is_np_array,
    rect_contains_point,
    validate_bounds,
    validate_np_coords,
)
from ._errors import InvariantError, OutOfBoundsError, TreeReleasedError
from ._insert_result import InsertResult
from ._item import Item
from ._node import Callback, Node, child_extents

logger = logging.getLogger(__name__)

# Generic payload type
T = TypeVar("T")


class QuadTree(Generic[T]):
    """
    Region quadtree for 2D points carrying caller-owned payloads.

    Every point is stored with a payload object. Payloads are never copied,
    hashed or compared by value; removal matches them by identity.

    A leaf splits into four quadrants once it holds more than
    ``max_points_per_node`` entries, unless it already sits at ``max_levels``.
    Leaves at ``max_levels`` accept any number of entries. The tree only
    grows: removals never merge emptied leaves back into their parent.

    Thread-safety:
        Instances are not thread-safe. Serialize all operations on a given
        tree externally, and do not mutate a tree from inside one of its
        own find/walk callbacks.

    Args:
        bounds: World bounds as (x, y, width, height). Width and height must be positive.
        max_levels: Deepest level a node may reach. The root is level 0.
        max_points_per_node: Leaf capacity before splitting. 0 is treated as 1.
        debug: If True, reject out-of-bounds points with OutOfBoundsError and
            verify the tree structure after every mutation.

    Raises:
        ValueError: If bounds are invalid or max_levels is negative.

    Example:
        ```python
        qt = QuadTree((0.0, 0.0, 100.0, 100.0), max_levels=4, max_points_per_node=2)
        qt.insert(10.0, 20.0, "a")
        for item in qt.query((5.0, 5.0, 20.0, 20.0)):
            print(f"{item.payload} at ({item.x}, {item.y})")
        ```
    """

    __slots__ = (
        "_bounds",
        "_count",
        "_debug",
        "_max_levels",
        "_max_points",
        "_root",
    )

    # ---- Initialization ----

    def __init__(
        self,
        bounds: Rect,
        max_levels: int,
        max_points_per_node: int,
        *,
        debug: bool = False,
    ):
        self._bounds = validate_bounds(bounds)
        if max_levels < 0:
            raise ValueError(f"max_levels must be non-negative, got {max_levels}")
        if max_points_per_node < 1:
            logger.warning(
                "max_points_per_node=%r is not positive, using 1", max_points_per_node
            )
            max_points_per_node = 1
        self._max_levels = max_levels
        self._max_points = max_points_per_node
        self._debug = debug

        self._root: Optional[Node] = Node(self._bounds, 0)
        self._count = 0
        logger.debug(
            "Created quadtree bounds=%r max_levels=%d max_points_per_node=%d",
            self._bounds,
            max_levels,
            max_points_per_node,
        )

    @classmethod
    def create(
        cls,
        x: float,
        y: float,
        width: float,
        height: float,
        max_levels: int,
        max_points_per_node: int,
        *,
        debug: bool = False,
    ) -> QuadTree[Any]:
        """Create a tree from flat origin and size arguments."""
        return cls(
            (x, y, width, height), max_levels, max_points_per_node, debug=debug
        )

    # ---- Configuration ----

    @property
    def bounds(self) -> Rect:
        return self._bounds

    @property
    def max_levels(self) -> int:
        return self._max_levels

    @property
    def max_points_per_node(self) -> int:
        return self._max_points

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def released(self) -> bool:
        return self._root is None

    def _live_root(self) -> Node:
        root = self._root
        if root is None:
            raise TreeReleasedError("quadtree has been released")
        return root

    # ---- Insertion ----

    def insert(self, x: float, y: float, payload: T) -> bool:
        """
        Insert a point with its payload.

        No duplicate check is made; inserting the same point and payload twice
        stores two entries.

        Args:
            x: X coordinate.
            y: Y coordinate.
            payload: Caller object stored by reference.

        Returns:
            True if stored, False if the point lies outside the tree bounds.

        Raises:
            OutOfBoundsError: In debug mode, if the point is outside the bounds.
        """
        root = self._live_root()
        if not rect_contains_point(self._bounds, x, y):
            if self._debug:
                raise OutOfBoundsError(x, y, self._bounds)
            logger.debug("Ignoring point (%r, %r) outside bounds %r", x, y, self._bounds)
            return False

        root.insert(x, y, payload, self._max_levels, self._max_points)
        self._count += 1
        if self._debug:
            self.check_invariants()
        return True

    def insert_many(
        self, points: Iterable[Point], payloads: Optional[list[T]] = None
    ) -> InsertResult:
        """
        Bulk insert points, optionally with payloads aligned by position.

        Args:
            points: Iterable of (x, y) pairs.
            payloads: Optional payload list, same length as points. None stores
                None payloads.

        Returns:
            InsertResult with stored and skipped counts.

        Raises:
            ValueError: If payloads length doesn't match points length.
            OutOfBoundsError: In debug mode, on the first out-of-bounds point.
        """
        points = list(points)
        if payloads is not None and len(payloads) != len(points):
            raise ValueError("payloads length must match points length")

        stored = 0
        ins = self.insert
        if payloads is None:
            for x, y in points:
                stored += ins(x, y, None)  # type: ignore[arg-type]
        else:
            for (x, y), payload in zip(points, payloads):
                stored += ins(x, y, payload)
        return InsertResult(count=stored, skipped=len(points) - stored)

    def insert_many_np(
        self, coords: Any, payloads: Optional[list[T]] = None
    ) -> InsertResult:
        """
        Bulk insert points from a NumPy array.

        Args:
            coords: NumPy array of shape (N, 2) and dtype float64.
            payloads: Optional payload list aligned with the rows of coords.

        Returns:
            InsertResult with stored and skipped counts.

        Raises:
            TypeError: If coords is not a NumPy array or dtype/shape doesn't match.
            ValueError: If payloads length doesn't match.
            ImportError: If NumPy is not installed.
        """
        if not _is_np_array(coords):
            raise TypeError("insert_many_np requires a NumPy array")

        import numpy as np

        if not isinstance(coords, np.ndarray):
            raise TypeError("insert_many_np requires a NumPy array")

        if coords.size == 0:
            return self.insert_many([], payloads)

        validate_np_coords(coords)
        return self.insert_many(
            [(float(x), float(y)) for x, y in coords.tolist()], payloads
        )

    # ---- Deletion ----

    def remove_payload(self, x: float, y: float, payload: T) -> int:
        """
        Remove every entry at the leaf owning (x, y) whose payload is ``payload``.

        Payloads match by identity. The point only locates the leaf: pass the
        coordinates the payload was inserted with, otherwise the wrong leaf is
        searched and nothing is removed.

        Args:
            x: X coordinate the payload was inserted at.
            y: Y coordinate the payload was inserted at.
            payload: The object to remove.

        Returns:
            Number of entries removed, 0 if none matched.

        Raises:
            OutOfBoundsError: In debug mode, if the point is outside the bounds.
        """
        root = self._live_root()
        if self._debug and not rect_contains_point(self._bounds, x, y):
            raise OutOfBoundsError(x, y, self._bounds)

        removed = root.remove_payload(x, y, payload)
        self._count -= removed
        if self._debug:
            self.check_invariants()
        return removed

    def clear(self) -> None:
        """Empty the tree in place, preserving bounds and configuration."""
        self._live_root().release()
        self._root = Node(self._bounds, 0)
        self._count = 0

    def release(self) -> None:
        """
        Tear the tree down. Payloads are left untouched.

        Any further operation raises TreeReleasedError. Releasing twice is a no-op.
        """
        if self._root is None:
            return
        self._root.release()
        self._root = None
        self._count = 0
        logger.debug("Released quadtree bounds=%r", self._bounds)

    def __enter__(self) -> QuadTree[T]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()

    # ---- Queries ----

    def find(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        callback: Optional[Callback] = None,
        context: Any = None,
    ) -> int:
        """
        Visit every entry whose point lies in the rectangle, edges included.

        The callback is called as ``callback(x, y, payload, context)`` for each
        match, quadrants in NW, NE, SW, SE order and newest entry first within
        a leaf. It must not mutate this tree.

        Args:
            x: Query rectangle origin x.
            y: Query rectangle origin y.
            width: Query rectangle width.
            height: Query rectangle height.
            callback: Optional per-match callback. None only counts.
            context: Passed through to every callback call.

        Returns:
            Number of matching entries.
        """
        return self._live_root().find((x, y, width, height), callback, context)

    def walk(self, callback: Optional[Callback] = None, context: Any = None) -> int:
        """
        Visit every stored entry once, in the same order as find().

        Returns:
            Total number of entries in the tree.
        """
        return self._live_root().walk(callback, context)

    def query(self, rect: Rect) -> list[Item]:
        """
        Return all entries inside an axis-aligned rectangle.

        Args:
            rect: Query rectangle as (x, y, width, height).

        Returns:
            List of Item views in find() order.

        Example:
            ```python
            for item in qt.query((10.0, 10.0, 20.0, 20.0)):
                print(f"Found {item.payload!r} at ({item.x}, {item.y})")
            ```
        """
        out: list[Item] = []
        self._live_root().find(
            tuple(rect), lambda x, y, p, _: out.append(Item(x, y, p)), None  # type: ignore[arg-type]
        )
        return out

    def query_np(self, rect: Rect) -> tuple[Any, list[Any]]:
        """
        Return all entries inside a rectangle as a NumPy coordinate array.

        Args:
            rect: Query rectangle as (x, y, width, height).

        Returns:
            Tuple of (coords, payloads) where coords is an NDArray[np.float64]
            with shape (N, 2) and payloads is the aligned list of payloads.

        Raises:
            ImportError: If NumPy is not installed.
        """
        import numpy as np

        xs: list[tuple[float, float]] = []
        payloads: list[Any] = []

        def collect(x: float, y: float, payload: Any, _: Any) -> None:
            xs.append((x, y))
            payloads.append(payload)

        self._live_root().find(tuple(rect), collect, None)  # type: ignore[arg-type]
        coords = np.array(xs, dtype=np.float64).reshape(-1, 2)
        return coords, payloads

    # ---- Utilities ----

    def __len__(self) -> int:
        """Return the number of entries in the tree."""
        return self._count

    def __contains__(self, point: Point) -> bool:
        """
        Check if any entry exists at exactly the given point.

        Example:
            ```python
            qt.insert(10.0, 20.0, "a")
            assert (10.0, 20.0) in qt
            assert (5.0, 5.0) not in qt
            ```
        """
        x, y = point
        root = self._live_root()
        if not rect_contains_point(self._bounds, x, y):
            return False
        return root.find((x, y, 0.0, 0.0), None, None) > 0

    def __iter__(self) -> Iterator[Item]:
        """Iterate over Item views of all entries in walk order."""
        for e in self._live_root().iter_entries():
            yield Item(e.x, e.y, e.payload)

    def get_all_node_boundaries(self) -> list[Rect]:
        """
        Return the bounds of every node in preorder. Useful for visualization.
        """
        return [n.bounds for n in self._live_root().iter_nodes()]

    def get_inner_max_depth(self) -> int:
        """Return the deepest node level currently present in the tree."""
        return max(n.level for n in self._live_root().iter_nodes())

    # ---- Verification ----

    def check_invariants(self) -> None:
        """
        Verify the node structure.

        Raises:
            InvariantError: If any structural invariant is violated.
        """
        root = self._live_root()
        bx, by, bw, bh = self._bounds
        if root.level != 0 or root.extent != (bx, by, bx + bw, by + bh):
            raise InvariantError(f"root node is malformed: {root!r}")

        total = 0
        for node in root.iter_nodes():
            if node.level > self._max_levels:
                raise InvariantError(
                    f"{node!r} exceeds max_levels={self._max_levels}"
                )
            if node.children is None:
                for e in node.entries:
                    if not node.contains(e.x, e.y):
                        raise InvariantError(
                            f"entry ({e.x}, {e.y}) lies outside its leaf {node!r}"
                        )
                if node.level < self._max_levels and len(node.entries) > self._max_points:
                    raise InvariantError(f"{node!r} is over capacity but was not split")
                total += len(node.entries)
                continue

            if node.entries:
                raise InvariantError(f"internal {node!r} holds entries")
            if len(node.children) != 4:
                raise InvariantError(f"internal {node!r} has {len(node.children)} children")
            for i, (child, expected) in enumerate(
                zip(node.children, child_extents(node.extent))
            ):
                if child.extent != expected:
                    raise InvariantError(
                        f"child {i} of {node!r} has extent {child.extent!r}, expected {expected!r}"
                    )
                if child.level != node.level + 1:
                    raise InvariantError(
                        f"child {i} of {node!r} has level {child.level}"
                    )

        if total != self._count:
            raise InvariantError(
                f"stored entry count {total} does not match tracked count {self._count}"
            )
