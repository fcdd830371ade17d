import dataclasses
import logging
from typing import List, Optional, Sequence
import numpy as np

from .astar import a_star
from .grid import Coord, Tile, check_endpoints, neighbors
from .reachability import bfs, path_cost
from .types import Obstacle, RemovedObstacle, RepairResult

logger = logging.getLogger(__name__)


def _find_removable(obstacles: List[Obstacle], pos: Coord) -> int:
    for i, obs in enumerate(obstacles):
        if obs.pos == pos and not obs.immutable:
            return i
    return -1


def _first_removable(obstacles: List[Obstacle], cells: Sequence[Coord]) -> Optional[int]:
    for pos in cells:
        idx = _find_removable(obstacles, tuple(pos))
        if idx != -1:
            return idx
    return None


def repair(start: Coord, exit: Coord, grid: np.ndarray, obstacles: List[Obstacle], mutate: bool = True,
           obstacle_cost: int = 10, max_iterations: int = 50, allow_diagonal: bool = False) -> RepairResult:
    """Clear obstacles until exit is reachable from start, or no further progress is possible.

    With mutate=True the given grid and obstacle list are edited in place and
    handed back in the result; otherwise the work happens on copies and the
    caller's objects are left untouched.
    """
    size = grid.shape[0]
    start, exit = tuple(start), tuple(exit)
    check_endpoints(start, exit, size)
    if not mutate:
        grid = grid.copy()
        obstacles = [dataclasses.replace(o) for o in obstacles]

    costs = {o.pos: obstacle_cost for o in obstacles}
    candidate = a_star(start, exit, grid, costs, allow_diagonal=allow_diagonal)
    if candidate is None:
        # no route even through obstacles, clearing cells cannot help
        logger.warning('no candidate path from %s to %s', start, exit)
        return RepairResult(repaired=False, removed=[], path=[], grid=grid, obstacles=obstacles)
    steps, cost = path_cost(candidate, costs)
    logger.debug('candidate path: %d steps, cost %d', steps, cost)

    exit_ring = neighbors(exit, size, allow_diagonal)
    removed: List[RemovedObstacle] = []
    iterations = 0
    while iterations < max_iterations:
        check = bfs(start, exit, grid, obstacles, allow_diagonal=allow_diagonal)
        if check.reachable:
            return RepairResult(repaired=True, removed=removed, path=check.path, grid=grid, obstacles=obstacles)

        idx = _first_removable(obstacles, candidate)
        if idx is None:
            # fallback: anything removable right next to the exit
            idx = _first_removable(obstacles, exit_ring)
        if idx is None:
            break

        obs = obstacles.pop(idx)
        removed.append(RemovedObstacle(x=obs.x, y=obs.y, old_type=obs.type))
        if grid[obs.y, obs.x] == Tile.WALL:
            grid[obs.y, obs.x] = Tile.OPEN
        logger.debug('removed %s at %s', obs.type, obs.pos)
        iterations += 1

    final = bfs(start, exit, grid, obstacles, allow_diagonal=allow_diagonal)
    return RepairResult(repaired=final.reachable, removed=removed, path=final.path, grid=grid, obstacles=obstacles)
