"""Cell and wall model for rectangular mazes."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from ..base import Position

TOP = "top"
RIGHT = "right"
BOTTOM = "bottom"
LEFT = "left"

SIDES: Tuple[str, ...] = (TOP, RIGHT, BOTTOM, LEFT)

OFFSETS: Dict[str, Tuple[int, int]] = {
    TOP: (-1, 0),
    RIGHT: (0, 1),
    BOTTOM: (1, 0),
    LEFT: (0, -1),
}

OPPOSITE: Dict[str, str] = {
    TOP: BOTTOM,
    RIGHT: LEFT,
    BOTTOM: TOP,
    LEFT: RIGHT,
}


def _all_walls() -> Dict[str, bool]:
    return {side: True for side in SIDES}


@dataclass
class Cell:
    row: int
    col: int
    walls: Mapping[str, bool] = field(default_factory=_all_walls)
    visited: bool = False

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    @property
    def openings(self) -> int:
        return sum(1 for side in SIDES if not self.walls[side])


def side_between(a: Position, b: Position) -> Optional[str]:
    """Return the side of ``a`` that faces ``b``, or None if not axis-adjacent."""

    delta = (b[0] - a[0], b[1] - a[1])
    for side, offset in OFFSETS.items():
        if offset == delta:
            return side
    return None


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class Grid:
    """A ``height x width`` array of cells whose walls can only be removed."""

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError("width and height must be at least 1")
        self.width = width
        self.height = height
        self.cells: List[List[Cell]] = [
            [Cell(row, col) for col in range(width)] for row in range(height)
        ]
        self.removed_walls = 0
        self._frozen = False

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, removed_walls={self.removed_walls})"

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Forbid any further wall changes, including direct edits of ``Cell.walls``."""

        for row in self.cells:
            for cell in row:
                cell.walls = MappingProxyType(dict(cell.walls))
        self._frozen = True

    def in_bounds(self, position: Position) -> bool:
        row, col = position
        return 0 <= row < self.height and 0 <= col < self.width

    def cell(self, position: Position) -> Cell:
        if not self.in_bounds(position):
            raise IndexError(f"Position {position} is outside a {self.width}x{self.height} grid")
        row, col = position
        return self.cells[row][col]

    def positions(self) -> Iterator[Position]:
        """Iterate over every position in row-major order."""

        for row in range(self.height):
            for col in range(self.width):
                yield (row, col)

    def neighbor(self, position: Position, side: str) -> Optional[Position]:
        """Position across ``side``, or None past the grid edge."""

        dr, dc = OFFSETS[side]
        candidate = (position[0] + dr, position[1] + dc)
        return candidate if self.in_bounds(candidate) else None

    def has_wall(self, position: Position, side: str) -> bool:
        return self.cell(position).walls[side]

    def remove_wall(self, a: Position, b: Position) -> None:
        """Open the passage between two axis-adjacent cells."""

        if self._frozen:
            raise RuntimeError("Cannot remove walls from a frozen grid")
        if not self.in_bounds(a) or not self.in_bounds(b):
            raise ValueError(f"Cannot remove wall between {a} and {b}: out of bounds")
        side = side_between(a, b)
        if side is None:
            raise ValueError(f"Cannot remove wall between non-adjacent cells {a} and {b}")
        first = self.cell(a)
        second = self.cell(b)
        if not first.walls[side]:
            return
        first.walls[side] = False
        second.walls[OPPOSITE[side]] = False
        self.removed_walls += 1

    def count_openings(self, position: Position) -> int:
        return self.cell(position).openings

    def open_neighbors(self, position: Position) -> List[Position]:
        """Neighbors reachable without crossing a wall, ordered top, right, bottom, left."""

        cell = self.cell(position)
        result: List[Position] = []
        for side in SIDES:
            if cell.walls[side]:
                continue
            neighbor = self.neighbor(position, side)
            if neighbor is not None:
                result.append(neighbor)
        return result

    def walled_neighbors(self, position: Position) -> List[Tuple[str, Position]]:
        """In-bounds neighbors still separated by a wall, with the side they lie on."""

        cell = self.cell(position)
        result: List[Tuple[str, Position]] = []
        for side in SIDES:
            if not cell.walls[side]:
                continue
            neighbor = self.neighbor(position, side)
            if neighbor is not None:
                result.append((side, neighbor))
        return result

    def reset_visited(self) -> None:
        for row in self.cells:
            for cell in row:
                cell.visited = False

    def openings_matrix(self) -> np.ndarray:
        """Opening count of every cell as a ``(height, width)`` integer array."""

        return np.array(
            [[cell.openings for cell in row] for row in self.cells],
            dtype=np.int8,
        )

    def copy(self) -> "Grid":
        """Independent, unfrozen copy with the same walls."""

        clone = Grid(self.width, self.height)
        for source_row, target_row in zip(self.cells, clone.cells):
            for source, target in zip(source_row, target_row):
                target.walls = dict(source.walls)
                target.visited = source.visited
        clone.removed_walls = self.removed_walls
        return clone


__all__ = [
    "BOTTOM",
    "Cell",
    "Grid",
    "LEFT",
    "OFFSETS",
    "OPPOSITE",
    "RIGHT",
    "SIDES",
    "TOP",
    "manhattan",
    "side_between",
]
