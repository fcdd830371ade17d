from collections import deque
from typing import Iterable, List, Tuple
import numpy as np

from .grid import Coord, check_endpoints, directions, from_index, is_passable, to_index
from .types import Obstacle, ReachabilityResult


def obstacle_mask(obstacles: Iterable[Obstacle], size: int) -> np.ndarray:
    blocked = np.zeros(size * size, dtype=bool)
    for obs in obstacles:
        if 0 <= obs.x < size and 0 <= obs.y < size:
            blocked[to_index(obs.pos, size)] = True
    return blocked


def _reconstruct(parent: np.ndarray, end: int, size: int) -> List[Coord]:
    path = []
    cur = end
    while cur != -1:
        path.append(from_index(cur, size))
        cur = int(parent[cur])
    return list(reversed(path))


def bfs(start: Coord, exit: Coord, grid: np.ndarray, obstacles: Iterable[Obstacle] = (),
        allow_diagonal: bool = False) -> ReachabilityResult:
    size = grid.shape[0]
    start, exit = tuple(start), tuple(exit)
    check_endpoints(start, exit, size)
    blocked = obstacle_mask(obstacles, size)
    # flattened y*size+x arena instead of coordinate-keyed maps
    seen = np.zeros(size * size, dtype=bool)
    parent = np.full(size * size, -1, dtype=np.int64)
    steps = directions(allow_diagonal)

    s_idx, e_idx = to_index(start, size), to_index(exit, size)
    seen[s_idx] = True
    q = deque([s_idx])
    found = False
    while q:
        cur = q.popleft()
        if cur == e_idx:
            found = True
            break
        x, y = from_index(cur, size)
        for dx, dy in steps:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < size and 0 <= ny < size):
                continue
            n_idx = ny * size + nx
            if seen[n_idx] or blocked[n_idx] or not is_passable(grid, nx, ny):
                continue
            seen[n_idx] = True
            parent[n_idx] = cur
            q.append(n_idx)

    visited = {from_index(int(i), size) for i in np.flatnonzero(seen)}
    if not found:
        return ReachabilityResult(reachable=False, path=[], visited=visited)
    return ReachabilityResult(reachable=True, path=_reconstruct(parent, e_idx, size), visited=visited)


def is_reachable(start: Coord, exit: Coord, grid: np.ndarray, obstacles: Iterable[Obstacle] = (),
                 allow_diagonal: bool = False) -> ReachabilityResult:
    return bfs(start, exit, grid, obstacles, allow_diagonal=allow_diagonal)


def path_cost(path: List[Coord], cost_overrides: dict) -> Tuple[int, int]:
    """(steps, weighted cost) of a path, counting every cell after the first."""
    steps = max(0, len(path) - 1)
    cost = sum(cost_overrides.get(tuple(p), 1) for p in path[1:])
    return steps, cost
