import random

from catmaze.maze.generator import MazeGenerator
from catmaze.maze.grid import MazeGrid
from catmaze.maze.placement import EntityPlacer
from catmaze.world.transform import WorldTransform


def test_target_is_first_path_cell_scanning_from_far_corner():
    grid = MazeGrid.from_lines(
        [
            "#####",
            "#...#",
            "#.#.#",
            "#..##",
            "#####",
        ]
    )
    assert EntityPlacer.find_target(grid) == (2, 3)


def test_generated_maze_target_is_far_corner_room():
    for size in (11, 21, 31):
        grid = MazeGenerator(random.Random(size)).generate(size)
        assert EntityPlacer.find_target(grid) == (size - 2, size - 2)


def test_monster_candidates_have_at_most_two_path_neighbours():
    grid = MazeGenerator(random.Random(4)).generate(21)
    candidates = EntityPlacer.monster_candidates(grid)
    assert candidates
    for x, y in candidates:
        assert grid.is_interior(x, y)
        assert grid.is_path(x, y)
        assert len(grid.path_neighbors(x, y)) <= 2
    excluded = [c for c in grid.path_cells() if grid.is_interior(*c) and c not in candidates]
    for x, y in excluded:
        assert len(grid.path_neighbors(x, y)) >= 3


def test_monster_count_is_clamped_to_candidates_without_duplicates():
    grid = MazeGenerator(random.Random(0)).generate(5)
    placer = EntityPlacer(random.Random(1))
    placement = placer.place(grid, WorldTransform(grid.size), monster_count=15)
    assert len(placement.candidates) < 15
    assert len(placement.monster_cells) == len(placement.candidates)
    assert len(set(placement.monster_cells)) == len(placement.monster_cells)
    assert set(placement.monster_cells) <= set(placement.candidates)


def test_requested_count_is_honoured_when_enough_candidates():
    grid = MazeGenerator(random.Random(2)).generate(31)
    placement = EntityPlacer(random.Random(3)).place(grid, WorldTransform(grid.size), monster_count=15)
    assert len(placement.monster_cells) == 15
    assert len(set(placement.monster_cells)) == 15


def test_zero_or_negative_count_spawns_nothing():
    grid = MazeGenerator(random.Random(2)).generate(11)
    placer = EntityPlacer(random.Random(3))
    assert placer.sample_monsters(EntityPlacer.monster_candidates(grid), 0) == []
    assert placer.sample_monsters(EntityPlacer.monster_candidates(grid), -4) == []


def test_placement_is_reproducible_for_same_rng():
    grid = MazeGenerator(random.Random(8)).generate(21)
    t = WorldTransform(grid.size)
    a = EntityPlacer(random.Random(5)).place(grid, t, 7)
    b = EntityPlacer(random.Random(5)).place(grid, t, 7)
    assert a == b


def test_props_scatter_inside_maze_extent():
    grid = MazeGenerator(random.Random(8)).generate(11)
    t = WorldTransform(grid.size)
    placement = EntityPlacer(random.Random(6)).place(grid, t, 3)
    assert len(placement.props) == 10
    half = grid.size * t.cell_size / 2
    for prop in placement.props:
        assert -half <= prop.x < half
        assert -half <= prop.z < half
        assert 0.6 <= prop.scale < 1.4
    assert placement.start == (1, 1)


def test_start_cell_is_kept_free_of_monsters():
    # (1, 1) has the entrance and one corridor, so it is a dead-end candidate
    grid = MazeGrid.from_lines(
        [
            "#####",
            "..#.#",
            "#.#.#",
            "#....",
            "#####",
        ]
    )
    assert (1, 1) in EntityPlacer.monster_candidates(grid)

    placement = EntityPlacer(random.Random(0)).place(grid, WorldTransform(grid.size), monster_count=10)
    assert grid.start not in placement.candidates
    assert grid.start not in placement.monster_cells
    assert placement.monster_cells


def test_start_zone_covers_cells_within_contact_range():
    grid = MazeGenerator(random.Random(6)).generate(11)
    transform = WorldTransform(grid.size)
    assert EntityPlacer(random.Random(0)).start_zone(grid, transform) == {grid.start}
    # a reach larger than one cell also covers the neighbouring corridor cells
    wide = EntityPlacer(random.Random(0), safe_distance=transform.cell_size).start_zone(grid, transform)
    assert wide == {grid.start, *grid.path_neighbors(*grid.start)}
