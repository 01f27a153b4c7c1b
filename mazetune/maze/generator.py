"""Maze generator that keeps the best of several enhanced candidates."""

from __future__ import annotations

import argparse
import json
import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..base import AbstractMazeGenerator, Position, RandomSource, UnsolvableMazeError, make_rng
from .analyzer import DeadEnd, QualityMetrics, analyze_structure
from .carver import carve
from .config import DIFFICULTIES, GenerationConfig, ScoringWeights, get_preset
from .enhancer import enhance
from .grid import Grid
from .placement import corner_endpoints, place_endpoints
from .solver import find_shortest_path

logger = logging.getLogger(__name__)

FALLBACK_PLACEMENT = "corners"


@dataclass
class Maze:
    grid: Grid
    start: Position
    end: Position
    solution_path: List[Position]
    dead_ends: List[DeadEnd]
    metrics: QualityMetrics
    score: Optional[float] = None
    placement: str = FALLBACK_PLACEMENT

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def to_dict(self) -> dict:
        return {
            "grid_size": [self.height, self.width],
            "start": list(self.start),
            "end": list(self.end),
            "placement": self.placement,
            "score": None if self.score is None else round(self.score, 4),
            "solution_length": len(self.solution_path),
            "dead_ends": len(self.dead_ends),
            "metrics": self.metrics.to_dict(),
        }


def score_candidate(metrics: QualityMetrics, width: int, height: int, weights: ScoringWeights) -> float:
    """Weighted selection score; higher is harder."""

    perimeter = 2 * (width + height)
    return (
        weights.tortuosity * metrics.solution_tortuosity
        + weights.dead_end * metrics.average_dead_end_depth
        + weights.decoy * metrics.decoy_dead_ends
        + weights.length * metrics.solution_length / perimeter
    )


def select_best(candidates: Sequence[Maze], weights: ScoringWeights) -> Maze:
    """Score every candidate, then return the highest. Earlier candidates win ties."""

    if not candidates:
        raise ValueError("No candidates to select from")
    for candidate in candidates:
        candidate.score = score_candidate(candidate.metrics, candidate.width, candidate.height, weights)
    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.score > best.score:
            best = candidate
    return best


def _build_simple_maze(width: int, height: int, rng: RandomSource) -> Maze:
    grid = Grid(width, height)
    carve(grid, rng)
    start, end = corner_endpoints(grid)
    path = find_shortest_path(grid, start, end)
    dead_ends, metrics = analyze_structure(grid, start, end, path)
    grid.freeze()
    return Maze(
        grid=grid,
        start=start,
        end=end,
        solution_path=path,
        dead_ends=dead_ends,
        metrics=metrics,
    )


def generate_simple_maze(
    width: int,
    height: int,
    *,
    seed: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> Maze:
    """Carve one maze with corner endpoints, no enhancement and no scoring.

    Deprecated: use ``MazeGenerator`` or ``generate_for_difficulty``.
    """

    warnings.warn(
        "generate_simple_maze is deprecated; use MazeGenerator or generate_for_difficulty",
        DeprecationWarning,
        stacklevel=2,
    )
    if width < 2 or height < 2:
        raise ValueError("width and height must be at least 2")
    return _build_simple_maze(width, height, make_rng(seed, rng))


class MazeGenerator(AbstractMazeGenerator[Maze]):
    """Generate several candidate mazes and keep the hardest-looking one."""

    def __init__(
        self,
        width: int = 15,
        height: int = 15,
        config: Optional[GenerationConfig] = None,
        *,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        super().__init__(seed=seed, rng=rng)
        if width < 2 or height < 2:
            raise ValueError("width and height must be at least 2")
        self.width = width
        self.height = height
        self.config = config if config is not None else GenerationConfig()

    @classmethod
    def for_difficulty(
        cls,
        difficulty: str,
        *,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
    ) -> "MazeGenerator":
        preset = get_preset(difficulty)
        return cls(preset.width, preset.height, preset.config, seed=seed, rng=rng)

    def create_maze(self) -> Maze:
        candidates: List[Maze] = []
        for attempt in range(self.config.attempts):
            candidate = self._build_candidate(attempt)
            if candidate is not None:
                candidates.append(candidate)

        if not candidates:
            logger.warning(
                "All %d attempts produced unsolvable %dx%d mazes; using fallback",
                self.config.attempts,
                self.width,
                self.height,
            )
            return _build_simple_maze(self.width, self.height, self._rng)

        best = select_best(candidates, self.config.weights)
        best.grid.freeze()
        logger.info(
            "Selected %dx%d maze %s -> %s with score %.3f (%d candidates)",
            self.width,
            self.height,
            best.start,
            best.end,
            best.score,
            len(candidates),
        )
        return best

    def create_random_maze(self) -> Maze:
        return self.create_maze()

    # ------------------------------------------------------------------

    def _build_candidate(self, attempt: int) -> Optional[Maze]:
        grid = Grid(self.width, self.height)
        carve(grid, self._rng)
        start, end = place_endpoints(self.config.placement, grid, self._rng)
        path = find_shortest_path(grid, start, end)
        if not path:
            logger.debug("Attempt %d: no path from %s to %s, discarding", attempt, start, end)
            return None
        dead_ends, metrics = analyze_structure(grid, start, end, path)

        try:
            result = enhance(grid, start, end, path, self.config.enhancement, self._rng)
        except UnsolvableMazeError:
            logger.warning("Attempt %d: enhancement broke solvability, keeping the carved maze", attempt)
        else:
            grid = result.grid
            path = result.solution_path
            dead_ends = result.dead_ends
            metrics = result.metrics

        logger.debug(
            "Attempt %d: %s -> %s, path %d, complexity %.1f",
            attempt,
            start,
            end,
            len(path),
            metrics.complexity_score,
        )
        return Maze(
            grid=grid,
            start=start,
            end=end,
            solution_path=path,
            dead_ends=dead_ends,
            metrics=metrics,
            placement=self.config.placement,
        )


def generate_for_difficulty(
    difficulty: str,
    *,
    seed: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> Maze:
    """Generate a maze with the preset size and configuration of ``difficulty``."""

    return MazeGenerator.for_difficulty(difficulty, seed=seed, rng=rng).create_maze()


__all__ = [
    "Maze",
    "MazeGenerator",
    "generate_for_difficulty",
    "generate_simple_maze",
    "score_candidate",
    "select_best",
]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate difficulty-tuned grid mazes")
    parser.add_argument("count", type=int, nargs="?", default=1, help="Number of mazes to generate")
    parser.add_argument("--difficulty", choices=DIFFICULTIES, default="medium")
    parser.add_argument("--width", type=int, default=None, help="Override the preset width")
    parser.add_argument("--height", type=int, default=None, help="Override the preset height")
    parser.add_argument("--attempts", type=int, default=None, help="Override the candidate count")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with generation settings merged over the difficulty preset",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true", help="Log every candidate attempt")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    preset = get_preset(args.difficulty)
    config = preset.config
    if args.config is not None:
        overrides = json.loads(args.config.read_text(encoding="utf-8"))
        config = GenerationConfig.from_dict(overrides, base=config)
    if args.attempts is not None:
        config = GenerationConfig.from_dict({"attempts": args.attempts}, base=config)

    generator = MazeGenerator(
        width=preset.width if args.width is None else args.width,
        height=preset.height if args.height is None else args.height,
        config=config,
        seed=args.seed,
    )
    for maze in generator.generate_batch(args.count):
        print(json.dumps(maze.to_dict()))


if __name__ == "__main__":
    main()
