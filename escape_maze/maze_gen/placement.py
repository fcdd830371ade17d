from dataclasses import dataclass
from typing import List, Optional, Tuple
import numpy as np

from escape_maze.pathing.grid import Coord, Tile, in_bounds, is_passable, manhattan, neighbors
from escape_maze.pathing.types import COLLECTIBLE_TYPES, OBSTACLE_TYPES, Collectible, Obstacle


@dataclass
class Placement:
    start: Coord
    exit: Coord
    obstacles: List[Obstacle]
    collectibles: List[Collectible]


class Placer:
    def __init__(self, rng: np.random.Generator, obstacle_ratio: float = 0.6,
                 max_collectibles: int = 8, collectible_attempts: int = 50):
        self.rng = rng
        self.obstacle_ratio = obstacle_ratio
        self.max_collectibles = max_collectibles
        self.collectible_attempts = collectible_attempts

    def place(self, grid: np.ndarray) -> Placement:
        start = (1, 1)
        exit = self.choose_exit(grid, start)
        obstacles = self.place_obstacles(grid, start, exit)
        collectibles = self.place_collectibles(grid, start, exit, obstacles)
        return Placement(start=start, exit=exit, obstacles=obstacles, collectibles=collectibles)

    def validate_exit(self, exit: Coord, grid: np.ndarray) -> bool:
        # orthogonal neighbours only, whatever the movement mode
        size = grid.shape[0]
        return any(is_passable(grid, nx, ny) for nx, ny in neighbors(exit, size, allow_diagonal=False))

    def find_valid_exit(self, grid: np.ndarray, start: Coord) -> Optional[Coord]:
        size = grid.shape[0]
        candidates: List[Tuple[int, int, Coord]] = []
        order = 0
        for y in range(1, size - 1):
            for x in range(1, size - 1):
                if grid[y, x] == Tile.OPEN and (x, y) != start and self.validate_exit((x, y), grid):
                    # farthest first, scan order breaks ties
                    candidates.append((-manhattan((x, y), start), order, (x, y)))
                    order += 1
        if not candidates:
            return None
        return min(candidates)[2]

    def choose_exit(self, grid: np.ndarray, start: Coord) -> Coord:
        size = grid.shape[0]
        exit = (size - 2, size - 2)
        if self.validate_exit(exit, grid):
            return exit
        found = self.find_valid_exit(grid, start)
        # keep the default corner when nothing validates
        return found if found is not None else exit

    def _free(self, grid: np.ndarray, x: int, y: int, start: Coord, exit: Coord) -> bool:
        size = grid.shape[0]
        return in_bounds(x, y, size) and grid[y, x] == Tile.OPEN and (x, y) != start and (x, y) != exit

    def place_obstacles(self, grid: np.ndarray, start: Coord, exit: Coord) -> List[Obstacle]:
        size = grid.shape[0]
        obstacles: List[Obstacle] = []
        for _ in range(int(size * self.obstacle_ratio)):
            x = int(self.rng.integers(0, size))
            y = int(self.rng.integers(0, size))
            kind = OBSTACLE_TYPES[int(self.rng.integers(0, len(OBSTACLE_TYPES)))]
            # a draw off the open corridor is skipped; repeats of a cell are kept
            if not self._free(grid, x, y, start, exit):
                continue
            obstacles.append(Obstacle(x=x, y=y, type=kind))
        return obstacles

    def place_collectibles(self, grid: np.ndarray, start: Coord, exit: Coord,
                           obstacles: List[Obstacle]) -> List[Collectible]:
        size = grid.shape[0]
        blocked = {o.pos for o in obstacles}
        used = set()
        collectibles: List[Collectible] = []
        for i in range(self.max_collectibles):
            for _ in range(self.collectible_attempts):
                x = int(self.rng.integers(0, size))
                y = int(self.rng.integers(0, size))
                if self._free(grid, x, y, start, exit) and (x, y) not in blocked and (x, y) not in used:
                    collectibles.append(Collectible(x=x, y=y, type=COLLECTIBLE_TYPES[i % len(COLLECTIBLE_TYPES)]))
                    used.add((x, y))
                    break
        return collectibles
