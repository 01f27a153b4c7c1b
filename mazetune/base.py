"""Abstract interfaces shared by the maze generation pipeline."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Protocol, Sequence, Tuple, TypeVar

Position = Tuple[int, int]
RecordT = TypeVar("RecordT")
T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that yields floats in [0, 1). ``random.Random`` qualifies."""

    def random(self) -> float:
        ...


class UnsolvableMazeError(RuntimeError):
    """Raised when a maze no longer connects its start to its end."""

    def __init__(self, start: Position, end: Position) -> None:
        super().__init__(f"No path from {start} to {end}")
        self.start = start
        self.end = end


def make_rng(seed: Optional[int] = None, rng: Optional[RandomSource] = None) -> RandomSource:
    """Return ``rng`` when given, otherwise a fresh ``random.Random(seed)``."""

    if rng is not None:
        return rng
    return random.Random(seed)


def draw_int(rng: RandomSource, low: int, high: int) -> int:
    """Uniform integer in the inclusive range ``[low, high]``."""

    if high < low:
        raise ValueError(f"Empty range [{low}, {high}]")
    span = high - low + 1
    # Guard against sources that return exactly 1.0
    return low + min(int(rng.random() * span), span - 1)


def choose(rng: RandomSource, options: Sequence[T]) -> T:
    """Uniformly pick one element of a non-empty sequence."""

    if not options:
        raise ValueError("Cannot choose from an empty sequence")
    return options[draw_int(rng, 0, len(options) - 1)]


def coin_flip(rng: RandomSource) -> bool:
    return rng.random() < 0.5


class AbstractMazeGenerator(ABC, Generic[RecordT]):
    """Base class for builders that emit maze records."""

    def __init__(self, *, seed: Optional[int] = None, rng: Optional[RandomSource] = None) -> None:
        self._rng = make_rng(seed, rng)

    @property
    def rng(self) -> RandomSource:
        return self._rng

    @abstractmethod
    def create_maze(self, *args, **kwargs) -> RecordT:
        """Create a maze from the generator's configuration."""

    @abstractmethod
    def create_random_maze(self) -> RecordT:
        """Create a single randomized maze instance."""

    def generate_batch(self, count: int) -> List[RecordT]:
        """Generate several independent mazes."""

        if count < 0:
            raise ValueError("count must be non-negative")
        return [self.create_random_maze() for _ in range(count)]


__all__ = [
    "AbstractMazeGenerator",
    "Position",
    "RandomSource",
    "UnsolvableMazeError",
    "choose",
    "coin_flip",
    "draw_int",
    "make_rng",
]
