from typing import List, Tuple
import numpy as np

from escape_maze.pathing.grid import Coord, Tile, new_grid

# up, right, down, left in cell-spacing-2 steps
CARVE_STEPS = [(0, -2), (2, 0), (0, 2), (-2, 0)]


class GridCarver:
    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def _interior(self, x: int, y: int, size: int) -> bool:
        return 0 < x < size - 1 and 0 < y < size - 1

    def _shuffled_steps(self) -> List[Coord]:
        steps = list(CARVE_STEPS)
        self.rng.shuffle(steps)
        return steps

    def _open_neighbors(self, x: int, y: int, grid: np.ndarray) -> int:
        size = grid.shape[0]
        count = 0
        for dx, dy in [(0, -1), (0, 1), (-1, 0), (1, 0)]:
            nx, ny = x + dx, y + dy
            if 0 <= nx < size and 0 <= ny < size and grid[ny, nx] == Tile.OPEN:
                count += 1
        return count

    def carve(self, size: int, origin: Coord = (1, 1)) -> np.ndarray:
        grid = new_grid(size, Tile.WALL)
        # Recursive backtracker with an explicit stack: each frame keeps its own
        # shuffled direction list so the visiting order matches the recursive form.
        ox, oy = origin
        grid[oy, ox] = Tile.OPEN
        stack: List[Tuple[Coord, List[Coord]]] = [(origin, self._shuffled_steps())]
        while stack:
            (x, y), pending = stack[-1]
            if not pending:
                stack.pop()
                continue
            dx, dy = pending.pop(0)
            nx, ny = x + dx, y + dy
            if self._interior(nx, ny, size) and grid[ny, nx] == Tile.WALL:
                grid[y + dy // 2, x + dx // 2] = Tile.OPEN
                grid[ny, nx] = Tile.OPEN
                stack.append(((nx, ny), self._shuffled_steps()))
        return grid

    def add_openings(self, grid: np.ndarray, ratio: float = 0.8) -> int:
        # Knock out walls that join at least two open cells, giving the tree some cycles
        size = grid.shape[0]
        punched = 0
        for _ in range(int(size * ratio)):
            x = int(self.rng.integers(1, size - 1))
            y = int(self.rng.integers(1, size - 1))
            if grid[y, x] == Tile.WALL and self._open_neighbors(x, y, grid) >= 2:
                grid[y, x] = Tile.OPEN
                punched += 1
        return punched
