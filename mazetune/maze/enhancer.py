"""Reshape a solved maze: lengthen dead ends near the solution and add decoys."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

from ..base import Position, RandomSource, UnsolvableMazeError, choose, draw_int
from .analyzer import DeadEnd, QualityMetrics, analyze_structure, find_dead_ends
from .config import EnhancementConfig
from .grid import Grid, manhattan
from .solver import find_shortest_path

logger = logging.getLogger(__name__)

# Upper bound on carving steps for one extension or decoy branch. A guard
# against pathological grids; the walk keeps whatever it carved so far.
MAX_CARVE_STEPS = 100

EARLY_PATH_RATIO = 0.3
LATE_PATH_RATIO = 0.7
DEFAULT_EXTENSION = 3
EARLY_EXTENSION = (5, 8)
MIDDLE_EXTENSION = (3, 5)
LATE_EXTENSION = (2, 3)


@dataclass
class EnhancementResult:
    grid: Grid
    solution_path: List[Position]
    dead_ends: List[DeadEnd]
    metrics: QualityMetrics
    extended_cells: int
    decoy_cells: int


@dataclass
class DecoyCandidate:
    position: Position
    quality: float
    path_index: int


def extension_target(dead_end: DeadEnd, path_length: int, rng: RandomSource) -> int:
    """Extra cells for a dead end: dead ends early on the solution grow longest."""

    if dead_end.solution_index is None or path_length <= 0:
        return DEFAULT_EXTENSION
    progress = dead_end.solution_index / path_length
    if progress < EARLY_PATH_RATIO:
        return draw_int(rng, *EARLY_EXTENSION)
    if progress < LATE_PATH_RATIO:
        return draw_int(rng, *MIDDLE_EXTENSION)
    return draw_int(rng, *LATE_EXTENSION)


def extend_dead_end(grid: Grid, position: Position, length: int, end: Position) -> int:
    """Carve up to ``length`` cells onward from a dead end, heading away from ``end``.

    Cells with more than one opening are never entered, so the walk cannot
    turn an existing corridor into a junction. Returns the cells carved.
    """

    current = position
    visited: Set[Position] = {position}
    extended = 0
    for _ in range(MAX_CARVE_STEPS):
        if extended >= length:
            break
        base_distance = manhattan(current, end)
        options = sorted(
            grid.walled_neighbors(current),
            key=lambda item: manhattan(item[1], end) - base_distance,
            reverse=True,
        )
        chosen: Optional[Position] = None
        for _side, neighbor in options:
            if neighbor in visited or grid.count_openings(neighbor) > 1:
                continue
            chosen = neighbor
            break
        if chosen is None:
            break
        grid.remove_wall(current, chosen)
        visited.add(chosen)
        current = chosen
        extended += 1
        if grid.count_openings(current) > 2:
            break
    return extended


def extend_dead_ends(
    grid: Grid,
    dead_ends: Sequence[DeadEnd],
    solution_path: Sequence[Position],
    config: EnhancementConfig,
    end: Position,
    rng: RandomSource,
) -> int:
    """Extend the near-solution dead ends closest to the start. Returns cells carved."""

    near_solution = sorted(
        (dead_end for dead_end in dead_ends if dead_end.near_solution),
        key=lambda dead_end: (
            dead_end.solution_index if dead_end.solution_index is not None else float("inf")
        ),
    )
    total = 0
    for dead_end in near_solution[: config.dead_end_extensions]:
        if config.prioritize_early_dead_ends:
            additional = extension_target(dead_end, len(solution_path), rng)
        else:
            additional = config.dead_end_min_length - dead_end.depth
        if additional <= 0:
            continue
        # An earlier extension may have run into this cell
        if grid.count_openings(dead_end.position) != 1:
            continue
        total += extend_dead_end(grid, dead_end.position, additional, end)
    return total


def decoy_candidates(grid: Grid, solution_path: Sequence[Position]) -> List[DecoyCandidate]:
    """Cells one wall away from the solution, best branch points first.

    Quality favours the middle of the path and cells with few openings.
    Each cell appears once, with its best score.
    """

    on_path = set(solution_path)
    length = len(solution_path)
    scored: List[DecoyCandidate] = []
    for index, path_cell in enumerate(solution_path):
        middleness = 1 - abs(index / length - 0.5) * 2
        for _side, neighbor in grid.walled_neighbors(path_cell):
            if neighbor in on_path:
                continue
            quality = middleness * 10 + (4 - grid.count_openings(neighbor)) * 2
            scored.append(DecoyCandidate(neighbor, quality, index))

    scored.sort(key=lambda candidate: candidate.quality, reverse=True)
    seen: Set[Position] = set()
    unique: List[DecoyCandidate] = []
    for candidate in scored:
        if candidate.position in seen:
            continue
        seen.add(candidate.position)
        unique.append(candidate)
    return unique


def carve_decoy_path(
    grid: Grid,
    origin: Position,
    length: int,
    on_path: Set[Position],
    rng: RandomSource,
) -> int:
    """Random branch of up to ``length`` cells that stays off the solution."""

    current = origin
    visited: Set[Position] = {origin}
    carved = 0
    for _ in range(MAX_CARVE_STEPS):
        if carved >= length:
            break
        options = [
            neighbor
            for _side, neighbor in grid.walled_neighbors(current)
            if neighbor not in visited
            and neighbor not in on_path
            and grid.count_openings(neighbor) <= 1
        ]
        if not options:
            break
        chosen = choose(rng, options)
        grid.remove_wall(current, chosen)
        visited.add(chosen)
        current = chosen
        carved += 1
        if grid.count_openings(current) > 2:
            break
    return carved


def add_decoy_paths(
    grid: Grid,
    solution_path: Sequence[Position],
    config: EnhancementConfig,
    rng: RandomSource,
) -> int:
    """Carve up to ``config.decoy_path_count`` decoy branches. Returns cells carved."""

    if config.decoy_path_count <= 0 or not solution_path:
        return 0
    on_path = set(solution_path)
    created = 0
    total = 0
    for candidate in decoy_candidates(grid, solution_path):
        if created >= config.decoy_path_count:
            break
        if grid.count_openings(candidate.position) >= 2:
            continue
        length = draw_int(rng, *config.decoy_length_range)
        carved = carve_decoy_path(grid, candidate.position, length, on_path, rng)
        if carved:
            created += 1
            total += carved
    return total


def enhance(
    grid: Grid,
    start: Position,
    end: Position,
    solution_path: Sequence[Position],
    config: EnhancementConfig,
    rng: RandomSource,
) -> EnhancementResult:
    """Enhance a copy of ``grid`` and re-solve it.

    ``grid`` itself is left untouched. Raises ``UnsolvableMazeError`` when the
    input has no solution or the reshaped copy no longer connects start to end.
    """

    if not solution_path:
        raise UnsolvableMazeError(start, end)

    work = grid.copy()
    dead_ends = find_dead_ends(work, solution_path, end)
    extended = extend_dead_ends(work, dead_ends, solution_path, config, end, rng)
    decoys = add_decoy_paths(work, solution_path, config, rng)

    new_path = find_shortest_path(work, start, end)
    if not new_path:
        raise UnsolvableMazeError(start, end)

    new_dead_ends, metrics = analyze_structure(work, start, end, new_path)
    logger.debug(
        "Enhanced maze: %d cells extended, %d decoy cells, complexity %.1f",
        extended,
        decoys,
        metrics.complexity_score,
    )
    return EnhancementResult(
        grid=work,
        solution_path=new_path,
        dead_ends=new_dead_ends,
        metrics=metrics,
        extended_cells=extended,
        decoy_cells=decoys,
    )


__all__ = [
    "DecoyCandidate",
    "EnhancementResult",
    "MAX_CARVE_STEPS",
    "add_decoy_paths",
    "carve_decoy_path",
    "decoy_candidates",
    "enhance",
    "extend_dead_end",
    "extend_dead_ends",
    "extension_target",
]
