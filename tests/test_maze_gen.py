"""Tests for carving, placement and the generation pipeline."""

import numpy as np
import pytest

from escape_maze import generate
from escape_maze.eval_core.validator import MazeValidator
from escape_maze.maze_gen import GridCarver, MazeConfig, MazeGenerationError, MazeGenerator, Placer, maze_to_dict
from escape_maze.pathing import Tile, bfs, is_reachable
from escape_maze.pathing.grid import new_grid


def open_cells(grid):
    ys, xs = np.nonzero(grid == Tile.OPEN)
    return set(zip(xs.tolist(), ys.tolist()))


def component_from(grid, origin=(1, 1)):
    # (0, 0) is always a border wall, so the search floods the whole component
    return bfs(origin, (0, 0), grid).visited


@pytest.mark.parametrize('size', range(5, 16))
def test_carve_spans_every_open_cell(size):
    grid = GridCarver(np.random.default_rng(size)).carve(size)
    cells = open_cells(grid)
    assert component_from(grid) == cells
    # perfect maze: k rooms joined by k-1 knocked-out walls
    k = len(range(1, size - 1, 2)) ** 2
    assert len(cells) == 2 * k - 1


def test_carve_keeps_border_walls():
    grid = GridCarver(np.random.default_rng(1)).carve(12)
    assert np.all(grid[0, :] == Tile.WALL)
    assert np.all(grid[-1, :] == Tile.WALL)
    assert np.all(grid[:, 0] == Tile.WALL)
    assert np.all(grid[:, -1] == Tile.WALL)


def test_add_openings_only_joins_existing_corridors():
    carver = GridCarver(np.random.default_rng(7))
    grid = carver.carve(15)
    before = len(open_cells(grid))
    punched = carver.add_openings(grid, ratio=3.0)
    cells = open_cells(grid)
    assert len(cells) == before + punched
    assert component_from(grid) == cells


def test_carve_is_seed_deterministic():
    a = GridCarver(np.random.default_rng(42)).carve(12)
    b = GridCarver(np.random.default_rng(42)).carve(12)
    assert np.array_equal(a, b)


@pytest.mark.parametrize('seed', range(10))
def test_placement_invariants(seed):
    rng = np.random.default_rng(seed)
    carver = GridCarver(rng)
    grid = carver.carve(12)
    carver.add_openings(grid)
    placed = Placer(rng).place(grid)

    assert placed.start == (1, 1)
    assert placed.start != placed.exit
    endpoints = {placed.start, placed.exit}
    obstacle_cells = [o.pos for o in placed.obstacles]
    collectible_cells = [c.pos for c in placed.collectibles]
    assert len(placed.obstacles) <= int(12 * 0.6)
    assert len(placed.collectibles) <= 8
    assert not endpoints & set(obstacle_cells)
    assert not endpoints & set(collectible_cells)
    assert len(set(collectible_cells)) == len(collectible_cells)
    assert not set(collectible_cells) & set(obstacle_cells)
    for x, y in obstacle_cells + collectible_cells:
        assert grid[y, x] == Tile.OPEN
    for o in placed.obstacles:
        assert o.type in ('fire', 'stairs', 'door')
        assert o.immutable is False
    if len(placed.collectibles) == 8:
        assert [c.type for c in placed.collectibles] == ['extinguisher', 'firstaid', 'flashlight', 'phone'] * 2
    assert all(not c.collected for c in placed.collectibles)


def test_even_size_exit_moves_to_farthest_valid_cell():
    # with an even size the default corner lands on the wall lattice
    for seed in range(5):
        grid = GridCarver(np.random.default_rng(seed)).carve(12)
        placer = Placer(np.random.default_rng(seed))
        assert placer.validate_exit((10, 10), grid) is False
        assert placer.choose_exit(grid, (1, 1)) == (9, 9)


def test_odd_size_keeps_default_exit():
    grid = GridCarver(np.random.default_rng(3)).carve(11)
    assert Placer(np.random.default_rng(3)).choose_exit(grid, (1, 1)) == (9, 9)


def test_exit_falls_back_to_default_when_nothing_validates():
    grid = new_grid(8, Tile.WALL)
    placer = Placer(np.random.default_rng(0))
    assert placer.find_valid_exit(grid, (1, 1)) is None
    assert placer.choose_exit(grid, (1, 1)) == (6, 6)


def test_find_valid_exit_breaks_ties_by_scan_order():
    grid = new_grid(6, Tile.WALL)
    for cell in [(1, 1), (1, 2), (2, 1), (3, 1), (1, 3)]:
        grid[cell[1], cell[0]] = Tile.OPEN
    # (3, 1) and (1, 3) are both 2 away; row-major scan reaches (3, 1) first
    assert Placer(np.random.default_rng(0)).find_valid_exit(grid, (1, 1)) == (3, 1)


@pytest.mark.parametrize('seed', range(25))
def test_generated_maze_is_always_reachable(seed):
    maze = MazeGenerator(MazeConfig(seed=seed)).generate()
    assert is_reachable(maze['start'], maze['exit'], maze['grid'], maze['obstacles']).reachable
    assert MazeValidator().validate(maze)['ok']
    grid = maze['grid']
    assert grid[maze['start'][1], maze['start'][0]] == Tile.PLAYER
    assert grid[maze['exit'][1], maze['exit'][0]] == Tile.EXIT
    assert maze['diagnostics'] is None
    assert maze['attempts'] >= 1


def test_crowded_mazes_get_repaired():
    repaired = 0
    for seed in range(20):
        cfg = MazeConfig(size=12, seed=seed, obstacle_ratio=3.0, diagnostics=True)
        maze = MazeGenerator(cfg).generate()
        assert MazeValidator().validate(maze)['ok']
        if maze['repaired']:
            repaired += 1
            fixed = maze['diagnostics']['repair']
            assert fixed.repaired is True
            assert fixed.removed
            assert maze['diagnostics']['reachability'].reachable is False
            removed = {(r.x, r.y) for r in fixed.removed}
            assert not removed & {o.pos for o in maze['obstacles']}
    assert repaired > 0


def test_copy_mode_generation_still_valid():
    for seed in range(10):
        cfg = MazeConfig(seed=seed, obstacle_ratio=3.0, mutate_in_place=False)
        maze = MazeGenerator(cfg).generate()
        assert MazeValidator().validate(maze)['ok']


def test_diagonal_generation_is_valid():
    for seed in range(10):
        cfg = MazeConfig(seed=seed, allow_diagonal=True, obstacle_ratio=2.0)
        maze = MazeGenerator(cfg).generate()
        assert MazeValidator(allow_diagonal=True).validate(maze)['ok']


def test_generation_is_seed_deterministic():
    a = MazeGenerator(MazeConfig(seed=99)).generate()
    b = MazeGenerator(MazeConfig(seed=99)).generate()
    assert maze_to_dict(a) == maze_to_dict(b)


def test_diagnostics_are_attached_when_enabled():
    maze = MazeGenerator(MazeConfig(seed=5, diagnostics=True)).generate()
    diag = maze['diagnostics']
    assert set(diag) == {'reachability', 'repair'}
    assert maze['start'] in diag['reachability'].visited
    data = maze_to_dict(maze)
    assert data['diagnostics']['reachability']['visited']


def test_generation_gives_up_after_max_attempts():
    gen = MazeGenerator(MazeConfig(seed=1, max_attempts=3))
    calls = []

    def failing_attempt():
        calls.append(1)
        return None

    gen._attempt = failing_attempt
    with pytest.raises(MazeGenerationError, match='3 attempts'):
        gen.generate()
    assert len(calls) == 3


def test_generate_entry_point_uses_defaults():
    maze = generate()
    assert maze['size'] == 12
    assert np.asarray(maze['grid']).shape == (12, 12)


@pytest.mark.parametrize('kwargs', [{'size': 4}, {'obstacle_cost': 0}, {'max_attempts': 0}, {'max_repair_iterations': 0}])
def test_invalid_config_is_rejected(kwargs):
    with pytest.raises(ValueError):
        MazeConfig(**kwargs)


def test_config_from_dict_ignores_unknown_keys():
    cfg = MazeConfig.from_dict({'size': 15, 'seed': None, 'colour': 'red'})
    assert cfg.size == 15
    assert cfg.seed is None
    assert cfg.obstacle_cost == 10


def test_obstacle_draws_may_repeat_a_cell():
    grid = new_grid(5, Tile.WALL)
    for cell in [(1, 1), (2, 2), (3, 3)]:
        grid[cell[1], cell[0]] = Tile.OPEN
    # only (2, 2) is free, so every accepted draw lands there
    placer = Placer(np.random.default_rng(0), obstacle_ratio=100)
    obstacles = placer.place_obstacles(grid, (1, 1), (3, 3))
    assert len(obstacles) > 1
    assert {o.pos for o in obstacles} == {(2, 2)}
