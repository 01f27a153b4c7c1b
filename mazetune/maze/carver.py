"""Randomized depth-first backtracking carver."""

from __future__ import annotations

import logging
from typing import List

from ..base import Position, RandomSource, choose
from .grid import SIDES, Grid

logger = logging.getLogger(__name__)


def _unvisited_neighbors(grid: Grid, position: Position) -> List[Position]:
    result: List[Position] = []
    for side in SIDES:
        neighbor = grid.neighbor(position, side)
        if neighbor is not None and not grid.cell(neighbor).visited:
            result.append(neighbor)
    return result


def carve(grid: Grid, rng: RandomSource, origin: Position = (0, 0)) -> int:
    """Carve a perfect maze into a fully walled grid.

    The walk is iterative so large grids do not hit the recursion limit.
    Every cell is visited exactly once, which leaves ``width * height - 1``
    open passages forming a spanning tree. Visited flags are cleared before
    returning. Returns the number of walls removed.
    """

    if not grid.in_bounds(origin):
        raise ValueError(f"Carving origin {origin} is outside the grid")

    removed_before = grid.removed_walls
    grid.cell(origin).visited = True
    stack: List[Position] = [origin]

    while stack:
        current = stack[-1]
        candidates = _unvisited_neighbors(grid, current)
        if not candidates:
            stack.pop()
            continue
        chosen = choose(rng, candidates)
        grid.remove_wall(current, chosen)
        grid.cell(chosen).visited = True
        stack.append(chosen)

    grid.reset_visited()
    removed = grid.removed_walls - removed_before
    logger.debug("Carved %dx%d grid from %s: %d walls removed", grid.width, grid.height, origin, removed)
    return removed


__all__ = ["carve"]
