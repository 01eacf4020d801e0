"""Exceptions raised by kvadtree."""

from __future__ import annotations


class QuadTreeError(Exception):
    """Base class for all quadtree errors."""


class OutOfBoundsError(QuadTreeError, ValueError):
    """A point lies outside the tree's root bounds."""

    def __init__(self, x: float, y: float, bounds: tuple[float, float, float, float]):
        bx, by, bw, bh = bounds
        super().__init__(
            f"Point ({x}, {y}) is outside bounds ({bx}, {by}, {bw}, {bh})"
        )
        self.point = (x, y)
        self.bounds = bounds


class InvariantError(QuadTreeError, RuntimeError):
    """The node structure violates one of the tree invariants."""


class TreeReleasedError(QuadTreeError, RuntimeError):
    """An operation was attempted on a tree after release()."""
