import contextlib
import io
import json
import random
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mazetune.base import UnsolvableMazeError
from mazetune.maze.config import EnhancementConfig, GenerationConfig, ScoringWeights
from mazetune.maze.generator import (
    Maze,
    MazeGenerator,
    generate_for_difficulty,
    generate_simple_maze,
    main,
    score_candidate,
    select_best,
)
from mazetune.maze.grid import Grid, side_between

from support import make_maze, open_path


class GeneratorTests(unittest.TestCase):
    def assertSolved(self, maze: Maze) -> None:
        path = maze.solution_path
        self.assertTrue(path)
        self.assertEqual(path[0], maze.start)
        self.assertEqual(path[-1], maze.end)
        for first, second in zip(path, path[1:]):
            self.assertFalse(maze.grid.has_wall(first, side_between(first, second)))

    def test_easy_maze_uses_opposite_edges(self) -> None:
        for seed in range(5):
            maze = generate_for_difficulty("easy", seed=seed)
            with self.subTest(seed=seed):
                self.assertEqual((maze.width, maze.height), (10, 10))
                self.assertNotEqual(maze.start, maze.end)
                on_rows = maze.start[0] == 0 and maze.end[0] == 9
                on_cols = maze.start[1] == 0 and maze.end[1] == 9
                self.assertTrue(on_rows or on_cols)
                self.assertSolved(maze)
                self.assertIsNotNone(maze.score)
                self.assertEqual(maze.placement, "opposite-edges")

    def test_every_difficulty_returns_a_solved_frozen_maze(self) -> None:
        for difficulty, size in (("easy", 10), ("medium", 15), ("hard", 20)):
            maze = generate_for_difficulty(difficulty, rng=random.Random(7))
            with self.subTest(difficulty=difficulty):
                self.assertEqual(maze.width, size)
                self.assertSolved(maze)
                self.assertTrue(maze.grid.frozen)
                self.assertEqual(maze.grid.removed_walls, size * size - 1)
                self.assertLessEqual(maze.metrics.complexity_score, 100.0)
                self.assertEqual(maze.metrics.dead_end_count, len(maze.dead_ends))

    def test_unknown_difficulty(self) -> None:
        with self.assertRaises(ValueError):
            generate_for_difficulty("impossible")

    def test_same_seed_same_maze(self) -> None:
        first = MazeGenerator.for_difficulty("medium", seed=42).create_maze()
        second = MazeGenerator.for_difficulty("medium", seed=42).create_maze()
        self.assertEqual((first.start, first.end, first.score), (second.start, second.end, second.score))
        self.assertEqual(first.solution_path, second.solution_path)

    def test_enhanced_generation_stays_solvable(self) -> None:
        config = GenerationConfig(
            placement="maximum-distance",
            enhancement=EnhancementConfig(dead_end_extensions=4, decoy_path_count=2),
            attempts=2,
        )
        maze = MazeGenerator(12, 9, config, seed=3).create_maze()
        self.assertSolved(maze)
        self.assertGreaterEqual(maze.grid.removed_walls, 12 * 9 - 1)

    def test_score_combines_weighted_metrics(self) -> None:
        maze = make_maze(open_path(Grid(3, 1), [(0, 0), (0, 1), (0, 2)]), (0, 0), (0, 2))
        weights = ScoringWeights(tortuosity=2.0, dead_end=1.0, decoy=0.5, length=4.0)
        # No turns, two dead ends of depth 3, both on the path, path of 3 over perimeter 8
        self.assertAlmostEqual(score_candidate(maze.metrics, 3, 1, weights), 3.0 + 1.0 + 1.5)

    def test_ties_go_to_the_first_candidate(self) -> None:
        candidates = [
            make_maze(open_path(Grid(3, 1), [(0, 0), (0, 1), (0, 2)]), (0, 0), (0, 2)),
            make_maze(open_path(Grid(3, 1), [(0, 0), (0, 1), (0, 2)]), (0, 0), (0, 2)),
        ]
        best = select_best(candidates, ScoringWeights())
        self.assertIs(best, candidates[0])
        self.assertEqual(candidates[0].score, candidates[1].score)

    def test_fallback_when_every_attempt_fails(self) -> None:
        generator = MazeGenerator(6, 4, GenerationConfig(attempts=3), seed=1)
        with mock.patch.object(MazeGenerator, "_build_candidate", return_value=None) as build:
            maze = generator.create_maze()
        self.assertEqual(build.call_count, 3)
        self.assertEqual((maze.start, maze.end), ((0, 0), (3, 5)))
        self.assertIsNone(maze.score)
        self.assertEqual(maze.placement, "corners")
        self.assertSolved(maze)

    def test_rejected_enhancement_keeps_the_carved_maze(self) -> None:
        config = GenerationConfig(enhancement=EnhancementConfig(decoy_path_count=2), attempts=1)
        with mock.patch(
            "mazetune.maze.generator.enhance",
            side_effect=UnsolvableMazeError((0, 0), (1, 1)),
        ):
            maze = MazeGenerator(8, 8, config, seed=5).create_maze()
        self.assertSolved(maze)
        self.assertEqual(maze.grid.removed_walls, 63)

    def test_generate_batch(self) -> None:
        mazes = MazeGenerator(5, 5, GenerationConfig(attempts=1), seed=9).generate_batch(3)
        self.assertEqual(len(mazes), 3)
        with self.assertRaises(ValueError):
            MazeGenerator(5, 5).generate_batch(-1)

    def test_rejects_tiny_grids(self) -> None:
        with self.assertRaises(ValueError):
            MazeGenerator(1, 5)

    def test_simple_maze_is_deprecated(self) -> None:
        with self.assertWarns(DeprecationWarning):
            maze = generate_simple_maze(7, 5, seed=4)
        self.assertEqual((maze.start, maze.end), ((0, 0), (4, 6)))
        self.assertSolved(maze)

    def test_to_dict_summarises_the_maze(self) -> None:
        maze = generate_for_difficulty("easy", seed=2)
        payload = maze.to_dict()
        self.assertEqual(payload["grid_size"], [10, 10])
        self.assertEqual(payload["start"], list(maze.start))
        self.assertEqual(payload["solution_length"], len(maze.solution_path))
        self.assertIn("complexity_score", payload["metrics"])
        json.dumps(payload)

    def test_command_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"weights": {"decoy": 1.0}}), encoding="utf-8")
            buffer = io.StringIO()
            with contextlib.redirect_stdout(buffer):
                main(["2", "--difficulty", "easy", "--seed", "1", "--attempts", "2", "--config", str(config_path)])
        lines = buffer.getvalue().strip().splitlines()
        self.assertEqual(len(lines), 2)
        for line in lines:
            payload = json.loads(line)
            self.assertEqual(payload["grid_size"], [10, 10])
            self.assertEqual(payload["placement"], "opposite-edges")

    def test_command_line_rejects_zero_width(self) -> None:
        with self.assertRaises(ValueError):
            main(["--width", "0", "--seed", "1"])


if __name__ == "__main__":
    unittest.main()
