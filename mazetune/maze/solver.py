"""Breadth-first search over the open passages of a grid."""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Set

from ..base import Position
from .grid import Grid


def find_shortest_path(grid: Grid, start: Position, goal: Position) -> List[Position]:
    """Shortest path from ``start`` to ``goal`` in steps, or ``[]`` if unreachable."""

    if not grid.in_bounds(start) or not grid.in_bounds(goal):
        raise ValueError(f"Endpoints {start} and {goal} must lie inside the grid")

    queue: deque[Position] = deque([start])
    parents: Dict[Position, Optional[Position]] = {start: None}
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for neighbor in grid.open_neighbors(current):
            if neighbor not in parents:
                parents[neighbor] = current
                queue.append(neighbor)

    if goal not in parents:
        return []
    node: Optional[Position] = goal
    result: List[Position] = []
    while node is not None:
        result.append(node)
        node = parents[node]
    result.reverse()
    return result


def reachable_cells(grid: Grid, origin: Position) -> Set[Position]:
    """All positions connected to ``origin`` through open passages."""

    queue: deque[Position] = deque([origin])
    reachable = {origin}
    while queue:
        current = queue.popleft()
        for neighbor in grid.open_neighbors(current):
            if neighbor not in reachable:
                reachable.add(neighbor)
                queue.append(neighbor)
    return reachable


def is_solvable(grid: Grid, start: Position, goal: Position) -> bool:
    return bool(find_shortest_path(grid, start, goal))


__all__ = ["find_shortest_path", "is_solvable", "reachable_cells"]
