"""Maze carving, solving, analysis and enhancement package."""

__all__ = [
    "DIFFICULTY_PRESETS",
    "DeadEnd",
    "EnhancementConfig",
    "EnhancementResult",
    "GenerationConfig",
    "Grid",
    "Maze",
    "MazeGenerator",
    "QualityMetrics",
    "ScoringWeights",
    "analyze_quality",
    "carve",
    "enhance",
    "find_dead_ends",
    "find_shortest_path",
    "generate_for_difficulty",
    "generate_simple_maze",
    "get_preset",
]

from .analyzer import DeadEnd, QualityMetrics, analyze_quality, find_dead_ends
from .carver import carve
from .config import (
    DIFFICULTY_PRESETS,
    EnhancementConfig,
    GenerationConfig,
    ScoringWeights,
    get_preset,
)
from .enhancer import EnhancementResult, enhance
from .generator import Maze, MazeGenerator, generate_for_difficulty, generate_simple_maze
from .grid import Grid
from .solver import find_shortest_path
