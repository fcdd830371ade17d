import heapq
from typing import Dict, List, Optional
import numpy as np

from .grid import Coord, check_endpoints, chebyshev, directions, from_index, is_passable, manhattan, to_index


def a_star(start: Coord, exit: Coord, grid: np.ndarray, cost_overrides: Optional[Dict[Coord, int]] = None,
           allow_diagonal: bool = False) -> Optional[List[Coord]]:
    """Least-cost path from start to exit, or None when the grid has no route at all.

    Stepping onto a cell costs 1, or cost_overrides[cell] when present. A cell is
    traversable when its tile is passable or it carries an override, so an
    obstacle sitting on a wall is still a candidate to clear.

    Frontier ties are broken by lowest f, then lowest g, then lowest y*size+x.
    """
    size = grid.shape[0]
    start, exit = tuple(start), tuple(exit)
    check_endpoints(start, exit, size)
    costs = {tuple(k): v for k, v in (cost_overrides or {}).items()}
    h = chebyshev if allow_diagonal else manhattan
    steps = directions(allow_diagonal)

    g_score = np.full(size * size, np.inf)
    parent = np.full(size * size, -1, dtype=np.int64)
    closed = np.zeros(size * size, dtype=bool)

    s_idx, e_idx = to_index(start, size), to_index(exit, size)
    g_score[s_idx] = 0
    heap = [(h(start, exit), 0, s_idx)]
    while heap:
        f, g, cur = heapq.heappop(heap)
        if closed[cur] or g > g_score[cur]:
            continue  # stale entry
        if cur == e_idx:
            path = []
            while cur != -1:
                path.append(from_index(cur, size))
                cur = int(parent[cur])
            return list(reversed(path))
        closed[cur] = True
        x, y = from_index(cur, size)
        for dx, dy in steps:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < size and 0 <= ny < size):
                continue
            n_idx = ny * size + nx
            if closed[n_idx]:
                continue
            override = costs.get((nx, ny))
            if override is None and not is_passable(grid, nx, ny):
                continue
            tentative = g + (override if override is not None else 1)
            if tentative >= g_score[n_idx]:
                continue
            g_score[n_idx] = tentative
            parent[n_idx] = cur
            heapq.heappush(heap, (tentative + h((nx, ny), exit), tentative, n_idx))
    return None
