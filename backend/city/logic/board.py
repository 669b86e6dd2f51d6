"""
Mutable board grid.

The board applies placements mechanically and never validates them; rule
checks live in city.logic.placement and run before any write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from city.logic.enums import Building
    from city.logic.settings import GameConfig


class Board:
    """A rows x cols grid where each cell is empty (None) or holds one building."""

    def __init__(self, rows: int, cols: int) -> None:
        self._rows = rows
        self._cols = cols
        self._cells: list[list[Building | None]] = _empty_grid(rows, cols)

    @classmethod
    def create(cls, config: GameConfig) -> Board:
        """Create an empty board sized by the configuration."""
        return cls(config.rows, config.cols)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def get(self, row: int, col: int) -> Building | None:
        return self._cells[row][col]

    def is_occupied(self, row: int, col: int) -> bool:
        return self._cells[row][col] is not None

    def place(self, row: int, col: int, building: Building) -> None:
        """Put a building in a cell, overwriting whatever was there."""
        self._cells[row][col] = building

    def clear(self, row: int, col: int) -> None:
        self._cells[row][col] = None

    def reset(self, config: GameConfig) -> None:
        """Empty every cell, resizing to the configuration."""
        self._rows = config.rows
        self._cols = config.cols
        self._cells = _empty_grid(config.rows, config.cols)

    def count_empty_in_column(self, col: int) -> int:
        return sum(1 for row in self._cells if row[col] is None)

    def is_column_full(self, col: int) -> bool:
        return all(row[col] is not None for row in self._cells)

    def snapshot(self) -> tuple[tuple[Building | None, ...], ...]:
        """Return an immutable copy of the grid."""
        return tuple(tuple(row) for row in self._cells)

    def __repr__(self) -> str:
        occupied = sum(1 for row in self._cells for cell in row if cell is not None)
        return f"Board(rows={self._rows}, cols={self._cols}, occupied={occupied})"


def _empty_grid(rows: int, cols: int) -> list[list[Building | None]]:
    return [[None] * cols for _ in range(rows)]
