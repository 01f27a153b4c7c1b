"""Shared fixtures for the maze tests."""

from typing import Iterable, Sequence, Tuple

from mazetune.maze.analyzer import analyze_structure
from mazetune.maze.generator import Maze
from mazetune.maze.grid import Grid
from mazetune.maze.solver import find_shortest_path

Position = Tuple[int, int]


class ConstantRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


def open_path(grid: Grid, cells: Sequence[Position]) -> Grid:
    """Remove the walls along consecutive cells."""

    for first, second in zip(cells, cells[1:]):
        grid.remove_wall(first, second)
    return grid


def open_edges(grid: Grid, edges: Iterable[Tuple[Position, Position]]) -> Grid:
    for first, second in edges:
        grid.remove_wall(first, second)
    return grid


def make_maze(grid: Grid, start: Position, end: Position) -> Maze:
    path = find_shortest_path(grid, start, end)
    dead_ends, metrics = analyze_structure(grid, start, end, path)
    return Maze(
        grid=grid,
        start=start,
        end=end,
        solution_path=path,
        dead_ends=dead_ends,
        metrics=metrics,
    )
