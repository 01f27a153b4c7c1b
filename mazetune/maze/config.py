"""Generation settings and per-difficulty presets."""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

OPPOSITE_EDGES = "opposite-edges"
RANDOM_FAR = "random-far"
MAXIMUM_DISTANCE = "maximum-distance"

PLACEMENT_STRATEGIES: Tuple[str, ...] = (OPPOSITE_EDGES, RANDOM_FAR, MAXIMUM_DISTANCE)

DIFFICULTIES: Tuple[str, ...] = ("easy", "medium", "hard")


@dataclass
class EnhancementConfig:
    """How far the enhancer reshapes a solved maze."""

    dead_end_min_length: int = 3
    dead_end_extensions: int = 0
    decoy_path_count: int = 0
    prioritize_early_dead_ends: bool = True
    decoy_length_range: Tuple[int, int] = (3, 6)

    def __post_init__(self) -> None:
        self.decoy_length_range = tuple(self.decoy_length_range)  # type: ignore[assignment]
        if self.dead_end_min_length < 0:
            raise ValueError("dead_end_min_length must be non-negative")
        if self.dead_end_extensions < 0 or self.decoy_path_count < 0:
            raise ValueError("dead_end_extensions and decoy_path_count must be non-negative")
        if len(self.decoy_length_range) != 2:
            raise ValueError("decoy_length_range must be a (min, max) pair")
        low, high = self.decoy_length_range
        if low < 1 or high < low:
            raise ValueError("decoy_length_range must satisfy 1 <= min <= max")

    @property
    def enabled(self) -> bool:
        return self.dead_end_extensions > 0 or self.decoy_path_count > 0


@dataclass
class ScoringWeights:
    tortuosity: float = 1.0
    dead_end: float = 0.5
    decoy: float = 0.3
    length: float = 0.5


@dataclass
class GenerationConfig:
    placement: str = OPPOSITE_EDGES
    enhancement: EnhancementConfig = field(default_factory=EnhancementConfig)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    attempts: int = 3

    def __post_init__(self) -> None:
        if self.placement not in PLACEMENT_STRATEGIES:
            raise ValueError(
                f"Unknown placement strategy '{self.placement}', expected one of {PLACEMENT_STRATEGIES}"
            )
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["enhancement"]["decoy_length_range"] = list(self.enhancement.decoy_length_range)
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["GenerationConfig"] = None) -> "GenerationConfig":
        """Build a config from ``data``, filling unspecified values from ``base``."""

        merged = (base or cls()).to_dict()
        _merge_known(merged, data, "generation config")
        return cls(
            placement=merged["placement"],
            enhancement=EnhancementConfig(**merged["enhancement"]),
            weights=ScoringWeights(**merged["weights"]),
            attempts=int(merged["attempts"]),
        )


def _merge_known(target: Dict[str, Any], overrides: Dict[str, Any], label: str) -> None:
    for key, value in overrides.items():
        if key not in target:
            raise ValueError(f"Unknown {label} key '{key}'")
        if isinstance(target[key], dict):
            if not isinstance(value, dict):
                raise ValueError(f"'{key}' must be a mapping")
            _merge_known(target[key], value, key)
        else:
            target[key] = value


@dataclass(frozen=True)
class DifficultyPreset:
    width: int
    height: int
    config: GenerationConfig


DIFFICULTY_PRESETS: Dict[str, DifficultyPreset] = {
    "easy": DifficultyPreset(
        width=10,
        height=10,
        config=GenerationConfig(
            placement=OPPOSITE_EDGES,
            enhancement=EnhancementConfig(
                dead_end_min_length=3,
                dead_end_extensions=0,
                decoy_path_count=0,
                prioritize_early_dead_ends=False,
            ),
            weights=ScoringWeights(tortuosity=1.0, dead_end=0.5, decoy=0.3, length=0.5),
            attempts=3,
        ),
    ),
    "medium": DifficultyPreset(
        width=15,
        height=15,
        config=GenerationConfig(
            placement=RANDOM_FAR,
            enhancement=EnhancementConfig(
                dead_end_min_length=4,
                dead_end_extensions=0,
                decoy_path_count=0,
                prioritize_early_dead_ends=True,
            ),
            weights=ScoringWeights(tortuosity=1.5, dead_end=1.0, decoy=0.7, length=0.8),
            attempts=5,
        ),
    ),
    "hard": DifficultyPreset(
        width=20,
        height=20,
        config=GenerationConfig(
            placement=RANDOM_FAR,
            enhancement=EnhancementConfig(
                dead_end_min_length=5,
                dead_end_extensions=0,
                decoy_path_count=0,
                prioritize_early_dead_ends=True,
            ),
            weights=ScoringWeights(tortuosity=2.0, dead_end=1.5, decoy=1.2, length=1.0),
            attempts=8,
        ),
    ),
}


def get_preset(difficulty: str) -> DifficultyPreset:
    """Return a private copy of the preset for ``difficulty``."""

    try:
        preset = DIFFICULTY_PRESETS[difficulty]
    except KeyError as exc:
        raise ValueError(f"Unknown difficulty '{difficulty}', expected one of {DIFFICULTIES}") from exc
    return DifficultyPreset(preset.width, preset.height, copy.deepcopy(preset.config))


__all__ = [
    "DIFFICULTIES",
    "DIFFICULTY_PRESETS",
    "DifficultyPreset",
    "EnhancementConfig",
    "GenerationConfig",
    "MAXIMUM_DISTANCE",
    "OPPOSITE_EDGES",
    "PLACEMENT_STRATEGIES",
    "RANDOM_FAR",
    "ScoringWeights",
    "get_preset",
]
