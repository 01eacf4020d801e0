"""kvadtree - Region quadtree spatial index for 2D points with opaque payloads."""

import logging

from ._common import Point, Rect, rect_contains_point, rect_intersects_rect
from ._errors import InvariantError, OutOfBoundsError, QuadTreeError, TreeReleasedError
from ._insert_result import InsertResult
from ._item import Item
from .quadtree import QuadTree

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "InsertResult",
    "InvariantError",
    "Item",
    "OutOfBoundsError",
    "Point",
    "QuadTree",
    "QuadTreeError",
    "Rect",
    "TreeReleasedError",
    "rect_contains_point",
    "rect_intersects_rect",
]
