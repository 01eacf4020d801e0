# _item.py
from __future__ import annotations

from typing import Any


class Item:
    """
    Lightweight view of a stored entry.

    Attributes:
        x: X coordinate.
        y: Y coordinate.
        payload: The caller's object, held by reference.

    Notes:
        - Holds a strong reference to the payload but never copies it.
        - Equality compares coordinates and payload identity, matching how
          the tree itself matches payloads on removal.
    """

    __slots__ = ("payload", "x", "y")

    def __init__(self, x: float, y: float, payload: Any = None):
        self.x = x
        self.y = y
        self.payload = payload

    @property
    def point(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.payload is other.payload

    def __hash__(self) -> int:
        return hash((self.x, self.y, id(self.payload)))

    def __repr__(self) -> str:
        return f"Item(x={self.x!r}, y={self.y!r}, payload={self.payload!r})"
