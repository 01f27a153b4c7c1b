"""Structural analysis of carved mazes: dead ends, tortuosity and complexity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..base import Position
from .grid import Grid, manhattan, side_between

# Upper bound on corridor cells followed from one dead end. Only reachable on
# malformed grids; the walk returns the depth counted so far.
MAX_CORRIDOR_WALK = 1000

NEAR_SOLUTION_DISTANCE = 2

LENGTH_WEIGHT = 30.0
TORTUOSITY_WEIGHT = 10.0
TORTUOSITY_CAP = 30.0
DEAD_END_WEIGHT = 4.0
DEAD_END_CAP = 25.0
DECOY_WEIGHT = 2.0
DECOY_CAP = 15.0
MAX_COMPLEXITY = 100.0


@dataclass
class DeadEnd:
    position: Position
    depth: int
    distance_to_end: int
    near_solution: bool
    solution_index: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "depth": self.depth,
            "distance_to_end": self.distance_to_end,
            "near_solution": self.near_solution,
            "solution_index": self.solution_index,
        }


@dataclass
class QualityMetrics:
    solution_length: int
    solution_tortuosity: float
    average_dead_end_depth: float
    max_dead_end_depth: int
    dead_end_count: int
    decoy_dead_ends: int
    complexity_score: float

    def to_dict(self) -> dict:
        return {
            "solution_length": self.solution_length,
            "solution_tortuosity": round(self.solution_tortuosity, 4),
            "average_dead_end_depth": round(self.average_dead_end_depth, 4),
            "max_dead_end_depth": self.max_dead_end_depth,
            "dead_end_count": self.dead_end_count,
            "decoy_dead_ends": self.decoy_dead_ends,
            "complexity_score": round(self.complexity_score, 4),
        }


def dead_end_depth(grid: Grid, position: Position) -> int:
    """Length of the corridor that ends at ``position``.

    The dead end itself counts as 1, every corridor cell (two openings) adds
    one more. The walk stops before the first junction, or on the far dead end
    of a corridor with no junction at all (that cell is counted).
    """

    openings = grid.count_openings(position)
    if openings == 0:
        return 1
    if openings != 1:
        raise ValueError(f"{position} has {openings} openings and is not a dead end")

    depth = 1
    previous = position
    current = grid.open_neighbors(position)[0]
    for _ in range(MAX_CORRIDOR_WALK):
        openings = grid.count_openings(current)
        if openings > 2:
            break
        depth += 1
        if openings < 2:
            break
        onward = [n for n in grid.open_neighbors(current) if n != previous]
        if not onward:
            break
        previous, current = current, onward[0]
    return depth


def nearest_path_index(position: Position, solution_path: Sequence[Position]) -> Tuple[int, int]:
    """Return ``(distance, index)`` of the closest path cell by Manhattan distance."""

    if not solution_path:
        raise ValueError("solution_path must not be empty")
    path = np.asarray(solution_path, dtype=np.int64)
    distances = np.abs(path - np.asarray(position, dtype=np.int64)).sum(axis=1)
    index = int(np.argmin(distances))
    return int(distances[index]), index


def find_dead_ends(
    grid: Grid,
    solution_path: Optional[Sequence[Position]] = None,
    end: Optional[Position] = None,
) -> List[DeadEnd]:
    """Scan the grid in row-major order for cells with a single opening."""

    dead_ends: List[DeadEnd] = []
    for row, col in np.argwhere(grid.openings_matrix() == 1):
        position = (int(row), int(col))
        near_solution = False
        solution_index: Optional[int] = None
        if solution_path:
            distance, solution_index = nearest_path_index(position, solution_path)
            near_solution = distance <= NEAR_SOLUTION_DISTANCE
        dead_ends.append(
            DeadEnd(
                position=position,
                depth=dead_end_depth(grid, position),
                distance_to_end=manhattan(position, end) if end is not None else 0,
                near_solution=near_solution,
                solution_index=solution_index,
            )
        )
    return dead_ends


def count_direction_changes(solution_path: Sequence[Position]) -> int:
    changes = 0
    for i in range(1, len(solution_path) - 1):
        before = side_between(solution_path[i - 1], solution_path[i])
        after = side_between(solution_path[i], solution_path[i + 1])
        if before != after:
            changes += 1
    return changes


def solution_tortuosity(solution_path: Sequence[Position], start: Position, end: Position) -> float:
    """Direction changes along the path per unit of start-to-end distance."""

    if len(solution_path) < 3:
        return 0.0
    distance = manhattan(start, end)
    if distance == 0:
        return 0.0
    return count_direction_changes(solution_path) / distance


def complexity_score(
    solution_length: int,
    tortuosity: float,
    average_dead_end_depth: float,
    decoy_dead_ends: int,
    width: int,
    height: int,
) -> float:
    """Capped weighted sum in [0, 100]."""

    length_term = solution_length / (width * height) * LENGTH_WEIGHT
    tortuosity_term = min(tortuosity * TORTUOSITY_WEIGHT, TORTUOSITY_CAP)
    dead_end_term = min(average_dead_end_depth * DEAD_END_WEIGHT, DEAD_END_CAP)
    decoy_term = min(decoy_dead_ends * DECOY_WEIGHT, DECOY_CAP)
    total = length_term + tortuosity_term + dead_end_term + decoy_term
    return float(min(max(total, 0.0), MAX_COMPLEXITY))


def analyze_quality(
    grid: Grid,
    start: Position,
    end: Position,
    solution_path: Sequence[Position],
    dead_ends: Optional[Sequence[DeadEnd]] = None,
) -> QualityMetrics:
    """Compute the quality metrics of a solved maze without touching the grid."""

    if dead_ends is None:
        dead_ends = find_dead_ends(grid, solution_path, end)
    depths = np.array([dead_end.depth for dead_end in dead_ends], dtype=np.float64)
    average_depth = float(depths.mean()) if depths.size else 0.0
    max_depth = int(depths.max()) if depths.size else 0
    decoys = sum(1 for dead_end in dead_ends if dead_end.near_solution)
    tortuosity = solution_tortuosity(solution_path, start, end)
    return QualityMetrics(
        solution_length=len(solution_path),
        solution_tortuosity=tortuosity,
        average_dead_end_depth=average_depth,
        max_dead_end_depth=max_depth,
        dead_end_count=len(dead_ends),
        decoy_dead_ends=decoys,
        complexity_score=complexity_score(
            len(solution_path),
            tortuosity,
            average_depth,
            decoys,
            grid.width,
            grid.height,
        ),
    )


def analyze_structure(
    grid: Grid,
    start: Position,
    end: Position,
    solution_path: Sequence[Position],
) -> Tuple[List[DeadEnd], QualityMetrics]:
    """Dead ends and metrics in one pass."""

    dead_ends = find_dead_ends(grid, solution_path, end)
    return dead_ends, analyze_quality(grid, start, end, solution_path, dead_ends)


__all__ = [
    "DeadEnd",
    "MAX_CORRIDOR_WALK",
    "QualityMetrics",
    "analyze_quality",
    "analyze_structure",
    "complexity_score",
    "count_direction_changes",
    "dead_end_depth",
    "find_dead_ends",
    "nearest_path_index",
    "solution_tortuosity",
]
