import random
import unittest
from unittest import mock

from mazetune.base import UnsolvableMazeError
from mazetune.maze import enhancer
from mazetune.maze.analyzer import DeadEnd
from mazetune.maze.carver import carve
from mazetune.maze.config import EnhancementConfig
from mazetune.maze.enhancer import (
    carve_decoy_path,
    decoy_candidates,
    enhance,
    extend_dead_end,
    extension_target,
)
from mazetune.maze.grid import BOTTOM, LEFT, TOP, Grid, side_between
from mazetune.maze.placement import corner_endpoints
from mazetune.maze.solver import find_shortest_path

from support import ConstantRandom, open_path

TOP_ROW = [(0, col) for col in range(7)]


class DecoyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = open_path(Grid(7, 5), TOP_ROW)
        self.path = find_shortest_path(self.grid, (0, 0), (0, 6))

    def test_candidates_sit_below_the_middle_of_the_path(self) -> None:
        candidates = decoy_candidates(self.grid, self.path)
        self.assertEqual(len(candidates), 7)
        self.assertEqual({c.position for c in candidates[:2]}, {(1, 3), (1, 4)})
        self.assertEqual({c.position for c in candidates[-1:]}, {(1, 0)})
        self.assertTrue(all(c.position[0] == 1 for c in candidates))

    def test_two_decoys_add_their_lengths_in_wall_removals(self) -> None:
        config = EnhancementConfig(decoy_path_count=2, dead_end_extensions=0)
        result = enhance(self.grid, (0, 0), (0, 6), self.path, config, ConstantRandom(0.0))

        # Each decoy draws the shortest length, 3 cells
        self.assertEqual(result.decoy_cells, 6)
        self.assertEqual(result.grid.removed_walls - self.grid.removed_walls, 6)
        self.assertEqual(result.extended_cells, 0)
        self.assertEqual(result.solution_path, TOP_ROW)
        for position in TOP_ROW:
            self.assertTrue(result.grid.has_wall(position, BOTTOM))

    def test_input_grid_is_left_untouched(self) -> None:
        config = EnhancementConfig(decoy_path_count=3)
        enhance(self.grid, (0, 0), (0, 6), self.path, config, random.Random(1))
        self.assertEqual(self.grid.removed_walls, 6)
        self.assertEqual(self.grid.count_openings((1, 3)), 0)


class ExtensionTests(unittest.TestCase):
    def test_extension_heads_away_from_the_end(self) -> None:
        grid = open_path(Grid(5, 5), [(2, 1), (2, 2)])
        carved = extend_dead_end(grid, (2, 2), 2, end=(2, 0))
        self.assertEqual(carved, 2)
        # All three first options move away by one; the first side wins the tie
        self.assertFalse(grid.has_wall((2, 2), TOP))
        self.assertFalse(grid.has_wall((1, 2), TOP))
        self.assertEqual(grid.removed_walls, 3)

    def test_extension_never_enters_corridors(self) -> None:
        grid = Grid(3, 3)
        open_path(grid, [(0, 0), (0, 1), (0, 2)])
        open_path(grid, [(1, 1), (2, 1)])
        carved = extend_dead_end(grid, (1, 1), 1, end=(2, 2))
        self.assertEqual(carved, 1)
        # Up ranks first among the moves away from the end, but (0, 1) is a corridor
        self.assertTrue(grid.has_wall((1, 1), TOP))
        self.assertFalse(grid.has_wall((1, 1), LEFT))

    def test_tiered_extension_targets(self) -> None:
        def dead_end(index):
            return DeadEnd(position=(0, 0), depth=1, distance_to_end=5, near_solution=True, solution_index=index)

        low, high = ConstantRandom(0.0), ConstantRandom(0.999)
        self.assertEqual(extension_target(dead_end(0), 10, low), 5)
        self.assertEqual(extension_target(dead_end(0), 10, high), 8)
        self.assertEqual(extension_target(dead_end(5), 10, low), 3)
        self.assertEqual(extension_target(dead_end(5), 10, high), 5)
        self.assertEqual(extension_target(dead_end(9), 10, low), 2)
        self.assertEqual(extension_target(dead_end(9), 10, high), 3)
        self.assertEqual(extension_target(dead_end(None), 10, high), 3)

    def test_extension_stops_at_the_step_ceiling(self) -> None:
        grid = Grid(6, 6)
        with mock.patch.object(enhancer, "MAX_CARVE_STEPS", 2):
            carved = extend_dead_end(grid, (0, 0), 8, end=(5, 5))
        self.assertEqual(carved, 2)
        self.assertEqual(grid.removed_walls, 2)

    def test_decoy_stops_at_the_step_ceiling(self) -> None:
        grid = Grid(6, 6)
        with mock.patch.object(enhancer, "MAX_CARVE_STEPS", 3):
            carved = carve_decoy_path(grid, (0, 0), 9, set(), ConstantRandom(0.0))
        self.assertEqual(carved, 3)
        self.assertEqual(grid.removed_walls, 3)


class EnhanceTests(unittest.TestCase):
    def test_enhancement_keeps_mazes_solvable(self) -> None:
        configs = [
            EnhancementConfig(dead_end_extensions=6, decoy_path_count=4),
            EnhancementConfig(dead_end_extensions=10, decoy_path_count=0, prioritize_early_dead_ends=False,
                              dead_end_min_length=6),
            EnhancementConfig(dead_end_extensions=0, decoy_path_count=8, decoy_length_range=(1, 2)),
        ]
        for seed in range(6):
            for config in configs:
                grid = Grid(12, 12)
                carve(grid, random.Random(seed))
                start, end = corner_endpoints(grid)
                path = find_shortest_path(grid, start, end)
                result = enhance(grid, start, end, path, config, random.Random(seed))
                with self.subTest(seed=seed, config=config):
                    self.assertEqual(grid.removed_walls, 143)
                    self.assertEqual(
                        result.grid.removed_walls - grid.removed_walls,
                        result.extended_cells + result.decoy_cells,
                    )
                    self.assertEqual(result.solution_path[0], start)
                    self.assertEqual(result.solution_path[-1], end)
                    for first, second in zip(result.solution_path, result.solution_path[1:]):
                        self.assertFalse(result.grid.has_wall(first, side_between(first, second)))
                    self.assertLessEqual(result.metrics.complexity_score, 100.0)

    def test_disabled_enhancement_changes_nothing(self) -> None:
        grid = Grid(8, 8)
        carve(grid, random.Random(3))
        start, end = corner_endpoints(grid)
        path = find_shortest_path(grid, start, end)
        result = enhance(grid, start, end, path, EnhancementConfig(), random.Random(3))
        self.assertEqual(result.grid.removed_walls, grid.removed_walls)
        self.assertEqual(result.solution_path, path)

    def test_missing_solution_is_rejected(self) -> None:
        with self.assertRaises(UnsolvableMazeError):
            enhance(Grid(3, 3), (0, 0), (2, 2), [], EnhancementConfig(decoy_path_count=1), random.Random(0))


if __name__ == "__main__":
    unittest.main()
