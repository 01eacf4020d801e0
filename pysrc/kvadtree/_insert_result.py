"""InsertResult dataclass for bulk insertion."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class InsertResult:
    """
    Result from bulk insertion operations.

    Attributes:
        count: Number of points stored.
        skipped: Number of points ignored because they fell outside the tree bounds.
    """

    count: int
    skipped: int = 0

    @property
    def total(self) -> int:
        """Return the number of points submitted."""
        return self.count + self.skipped
