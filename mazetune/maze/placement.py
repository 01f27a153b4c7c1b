"""Start and end placement strategies for carved grids."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..base import Position, RandomSource, coin_flip, draw_int
from .config import MAXIMUM_DISTANCE, OPPOSITE_EDGES, RANDOM_FAR
from .grid import Grid, manhattan
from .solver import find_shortest_path

logger = logging.getLogger(__name__)

Endpoints = Tuple[Position, Position]
PlacementStrategy = Callable[[Grid, RandomSource], Endpoints]

# Draw limit for random-far before accepting the last draw.
MAX_PLACEMENT_ATTEMPTS = 50
FAR_DISTANCE_RATIO = 0.7
MAX_DISTANCE_SAMPLES = 20


def corner_endpoints(grid: Grid) -> Endpoints:
    return (0, 0), (grid.height - 1, grid.width - 1)


def random_position(grid: Grid, rng: RandomSource) -> Position:
    return (draw_int(rng, 0, grid.height - 1), draw_int(rng, 0, grid.width - 1))


def place_opposite_edges(grid: Grid, rng: RandomSource) -> Endpoints:
    """Start on the top or left border, end on the border facing it."""

    if coin_flip(rng):
        start = (0, draw_int(rng, 0, grid.width - 1))
        end = (grid.height - 1, draw_int(rng, 0, grid.width - 1))
    else:
        start = (draw_int(rng, 0, grid.height - 1), 0)
        end = (draw_int(rng, 0, grid.height - 1), grid.width - 1)
    return start, end


def _opposite_band(value: int, size: int, rng: RandomSource) -> int:
    middle = size // 2
    if value < middle:
        return draw_int(rng, middle, size - 1)
    return draw_int(rng, 0, middle - 1)


def place_random_far(grid: Grid, rng: RandomSource) -> Endpoints:
    """Random start with the end in the diagonally opposite quadrant."""

    threshold = FAR_DISTANCE_RATIO * (grid.width + grid.height)
    start, end = corner_endpoints(grid)
    for attempt in range(MAX_PLACEMENT_ATTEMPTS):
        start = random_position(grid, rng)
        end = (
            _opposite_band(start[0], grid.height, rng),
            _opposite_band(start[1], grid.width, rng),
        )
        if manhattan(start, end) > threshold:
            return start, end
    logger.debug(
        "random-far placement settled for distance %d after %d draws",
        manhattan(start, end),
        attempt + 1,
    )
    return start, end


def random_distinct_pair(grid: Grid, rng: RandomSource) -> Endpoints:
    cells = grid.width * grid.height
    first = draw_int(rng, 0, cells - 1)
    second = draw_int(rng, 0, cells - 2)
    if second >= first:
        second += 1
    return divmod(first, grid.width), divmod(second, grid.width)


def place_maximum_distance(grid: Grid, rng: RandomSource) -> Endpoints:
    """Keep the sampled pair with the longest shortest path."""

    best: Optional[Endpoints] = None
    best_length = 0
    for _ in range(MAX_DISTANCE_SAMPLES):
        start, end = random_distinct_pair(grid, rng)
        path: List[Position] = find_shortest_path(grid, start, end)
        if len(path) > best_length:
            best = (start, end)
            best_length = len(path)
    if best is None:
        logger.debug("No sampled pair was connected; using corner endpoints")
        return corner_endpoints(grid)
    return best


STRATEGIES: Dict[str, PlacementStrategy] = {
    OPPOSITE_EDGES: place_opposite_edges,
    RANDOM_FAR: place_random_far,
    MAXIMUM_DISTANCE: place_maximum_distance,
}


def place_endpoints(strategy: str, grid: Grid, rng: RandomSource) -> Endpoints:
    if grid.width < 2 or grid.height < 2:
        raise ValueError("Endpoint placement needs a grid of at least 2x2 cells")
    try:
        place = STRATEGIES[strategy]
    except KeyError as exc:
        raise ValueError(f"Unknown placement strategy '{strategy}'") from exc
    return place(grid, rng)


__all__ = [
    "Endpoints",
    "MAX_DISTANCE_SAMPLES",
    "MAX_PLACEMENT_ATTEMPTS",
    "STRATEGIES",
    "corner_endpoints",
    "place_endpoints",
    "place_maximum_distance",
    "place_opposite_edges",
    "place_random_far",
    "random_distinct_pair",
    "random_position",
]
