"""A fixed-size two-dimensional grid stored as a flat list."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class Matrix(Generic[T]):
    """A width-by-height grid addressed as ``(y, x)``."""

    def __init__(self, width: int, height: int, fill: T = 0) -> None:
        if width < 0 or height < 0:
            raise ValueError("matrix dimensions must not be negative")
        self.width = width
        self.height = height
        self._cells: list[T] = [fill] * (width * height)

    def _index(self, y: int, x: int) -> int:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(f"position ({y}, {x}) is outside the matrix")
        return y * self.width + x

    def get(self, y: int, x: int) -> T:
        """Return the value at row ``y``, column ``x``."""
        return self._cells[self._index(y, x)]

    def set(self, y: int, x: int, value: T) -> None:
        """Store ``value`` at row ``y``, column ``x``."""
        self._cells[self._index(y, x)] = value

    def set_region(self, y: int, x: int, width: int, height: int, value: T) -> None:
        """Fill a rectangle whose top-left corner is ``(y, x)``."""
        if width <= 0 or height <= 0:
            raise ValueError("region width and height must be greater than 0")
        for row in range(y, y + height):
            for column in range(x, x + width):
                self.set(row, column, value)

    def dump(self) -> list[T]:
        """Return all cells in row-major order."""
        return list(self._cells)