"""Player movement on a generated maze: legal moves, trail and win detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .base import Position
from .maze.generator import Maze
from .maze.grid import BOTTOM, LEFT, RIGHT, TOP

MOVES: Dict[str, Tuple[str, Tuple[int, int]]] = {
    "up": (TOP, (-1, 0)),
    "down": (BOTTOM, (1, 0)),
    "left": (LEFT, (0, -1)),
    "right": (RIGHT, (0, 1)),
}


@dataclass
class PlayerState:
    position: Position
    path: List[Position] = field(default_factory=list)
    has_won: bool = False


def start_session(maze: Maze) -> PlayerState:
    return PlayerState(position=maze.start, path=[maze.start], has_won=maze.start == maze.end)


def next_position(position: Position, direction: str) -> Position:
    try:
        _side, (dr, dc) = MOVES[direction]
    except KeyError as exc:
        raise ValueError(f"Unknown direction '{direction}'") from exc
    return (position[0] + dr, position[1] + dc)


def can_move(maze: Maze, position: Position, direction: str) -> bool:
    """A move is legal when it stays on the grid and no wall blocks it."""

    destination = next_position(position, direction)
    if not maze.grid.in_bounds(destination):
        return False
    side, _offset = MOVES[direction]
    return not maze.grid.has_wall(position, side)


def is_backtracking(path: Sequence[Position], position: Position) -> bool:
    return len(path) >= 2 and path[-2] == position


def update_path(path: Sequence[Position], position: Position) -> List[Position]:
    """Trim the trail when stepping back onto the previous cell, extend it otherwise."""

    if is_backtracking(path, position):
        return list(path[:-1])
    return list(path) + [position]


def check_win(position: Position, end: Position) -> bool:
    return position == end


def move(maze: Maze, state: PlayerState, direction: str) -> PlayerState:
    """Apply one move. Illegal moves and moves after winning return ``state`` unchanged."""

    if state.has_won or not can_move(maze, state.position, direction):
        return state
    destination = next_position(state.position, direction)
    return PlayerState(
        position=destination,
        path=update_path(state.path, destination),
        has_won=check_win(destination, maze.end),
    )


__all__ = [
    "MOVES",
    "PlayerState",
    "can_move",
    "check_win",
    "is_backtracking",
    "move",
    "next_position",
    "start_session",
    "update_path",
]
