# _common.py
"""Common type aliases, validation and geometric predicates."""

from __future__ import annotations

from typing import Any

# Type aliases
Rect = tuple[float, float, float, float]
"""Axis-aligned rectangle as (x, y, width, height)."""

Point = tuple[float, float]
"""2D point as (x, y)."""

NP_COORD_DTYPE = "float64"
"""NumPy dtype accepted by the array entry points."""


def _is_np_array(x: Any) -> bool:
    """
    Check if x is a NumPy array without importing NumPy.

    This allows dtype checking without forcing NumPy as a hard dependency.

    Args:
        x: Object to check.

    Returns:
        True if x is a NumPy array.
    """
    mod = getattr(x.__class__, "__module__", "")
    return mod.startswith("numpy") and hasattr(x, "ndim") and hasattr(x, "shape")


def validate_bounds(bounds: Any) -> Rect:
    """
    Validate and normalize bounds to a tuple of floats.

    Args:
        bounds: Bounds as a sequence of 4 numbers (x, y, width, height).

    Returns:
        Validated bounds as tuple.

    Raises:
        ValueError: If bounds are invalid.
    """
    if type(bounds) is not tuple:
        bounds = tuple(bounds)
    if len(bounds) != 4:
        raise ValueError(
            "bounds must be a tuple of four numeric values (x, y, width, height)"
        )
    x, y, w, h = (float(v) for v in bounds)
    if not (w > 0 and h > 0):
        raise ValueError(f"bounds width and height must be positive, got {w} x {h}")
    return (x, y, w, h)


def validate_np_coords(coords: Any) -> None:
    """
    Validate that a NumPy array holds (N, 2) float64 coordinates.

    Args:
        coords: NumPy array to validate.

    Raises:
        TypeError: If dtype or shape doesn't match.
    """
    if coords.dtype != NP_COORD_DTYPE:
        raise TypeError(
            f"NumPy array dtype {coords.dtype} does not match coordinate dtype {NP_COORD_DTYPE}"
        )
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise TypeError(f"NumPy array must have shape (N, 2), got {coords.shape}")


def rect_contains_point(rect: Rect, x: float, y: float) -> bool:
    """Return True if (x, y) lies in rect. All four edges are inclusive."""
    rx, ry, rw, rh = rect
    return rx <= x <= rx + rw and ry <= y <= ry + rh


def rect_intersects_rect(r0: Rect, r1: Rect) -> bool:
    """Return True if the rectangles overlap. Touching edges count as overlap."""
    x0, y0, w0, h0 = r0
    x1, y1, w1, h1 = r1
    return not (x0 + w0 < x1 or x0 > x1 + w1 or y0 + h0 < y1 or y0 > y1 + h1)
