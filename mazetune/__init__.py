"""Difficulty-tuned grid maze generation toolkit."""

__all__ = [
    "AbstractMazeGenerator",
    "RandomSource",
    "UnsolvableMazeError",
    "Grid",
    "Maze",
    "MazeGenerator",
    "GenerationConfig",
    "EnhancementConfig",
    "ScoringWeights",
    "QualityMetrics",
    "DeadEnd",
    "generate_for_difficulty",
    "PlayerState",
    "start_session",
    "move",
]

from .base import AbstractMazeGenerator, RandomSource, UnsolvableMazeError
from .maze import (
    DeadEnd,
    EnhancementConfig,
    GenerationConfig,
    Grid,
    Maze,
    MazeGenerator,
    QualityMetrics,
    ScoringWeights,
    generate_for_difficulty,
)
from .session import PlayerState, move, start_session
