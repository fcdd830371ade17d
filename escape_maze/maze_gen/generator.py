from dataclasses import dataclass, fields
import logging
from typing import Dict, List, Optional
import numpy as np

from escape_maze.pathing.grid import Coord, Tile
from escape_maze.pathing.reachability import bfs
from escape_maze.pathing.repair import repair
from escape_maze.pathing.types import Obstacle, ReachabilityResult, RepairResult
from .carver import GridCarver
from .placement import Placer

logger = logging.getLogger(__name__)


class MazeGenerationError(RuntimeError):
    pass


@dataclass
class MazeConfig:
    size: int = 12
    seed: Optional[int] = None
    allow_diagonal: bool = False
    obstacle_cost: int = 10
    max_repair_iterations: int = 50
    mutate_in_place: bool = True
    diagnostics: bool = False
    max_attempts: int = 25  # outer regeneration cap
    opening_ratio: float = 0.8
    obstacle_ratio: float = 0.6
    max_collectibles: int = 8
    collectible_attempts: int = 50

    def __post_init__(self):
        if self.size < 5:
            raise ValueError(f'size must be at least 5, got {self.size}')
        if self.obstacle_cost < 1:
            raise ValueError(f'obstacle_cost must be >= 1, got {self.obstacle_cost}')
        if self.max_repair_iterations < 1 or self.max_attempts < 1:
            raise ValueError('max_repair_iterations and max_attempts must be positive')

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'MazeConfig':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known and v is not None})


class MazeGenerator:
    def __init__(self, cfg: MazeConfig):
        self.cfg = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.carver = GridCarver(self.rng)
        self.placer = Placer(self.rng, obstacle_ratio=cfg.obstacle_ratio,
                             max_collectibles=cfg.max_collectibles,
                             collectible_attempts=cfg.collectible_attempts)

    def is_reachable(self, start: Coord, exit: Coord, grid: np.ndarray,
                     obstacles: List[Obstacle]) -> ReachabilityResult:
        return bfs(start, exit, grid, obstacles, allow_diagonal=self.cfg.allow_diagonal)

    def repair(self, start: Coord, exit: Coord, grid: np.ndarray, obstacles: List[Obstacle],
               mutate: Optional[bool] = None) -> RepairResult:
        if mutate is None:
            mutate = self.cfg.mutate_in_place
        return repair(start, exit, grid, obstacles, mutate=mutate,
                      obstacle_cost=self.cfg.obstacle_cost,
                      max_iterations=self.cfg.max_repair_iterations,
                      allow_diagonal=self.cfg.allow_diagonal)

    def _attempt(self) -> Optional[Dict]:
        grid = self.carver.carve(self.cfg.size)
        self.carver.add_openings(grid, self.cfg.opening_ratio)
        placed = self.placer.place(grid)
        start, exit = placed.start, placed.exit
        # ensure endpoints
        grid[start[1], start[0]] = Tile.PLAYER
        grid[exit[1], exit[0]] = Tile.EXIT
        obstacles = placed.obstacles

        reach = self.is_reachable(start, exit, grid, obstacles)
        fixed: Optional[RepairResult] = None
        if not reach.reachable:
            logger.info('exit %s unreachable from %s, attempting repair', exit, start)
            fixed = self.repair(start, exit, grid, obstacles)
            if not fixed.repaired:
                logger.warning('could not repair maze after removing %d obstacles', len(fixed.removed))
                return None
            logger.info('maze repaired, removed %d obstacles', len(fixed.removed))
            grid, obstacles = fixed.grid, fixed.obstacles

        return {
            'size': self.cfg.size,
            'grid': grid,
            'start': start,
            'exit': exit,
            'obstacles': obstacles,
            'collectibles': placed.collectibles,
            'repaired': fixed is not None,
            'diagnostics': {'reachability': reach, 'repair': fixed} if self.cfg.diagnostics else None,
        }

    def generate(self) -> Dict:
        for attempt in range(1, self.cfg.max_attempts + 1):
            maze = self._attempt()
            if maze is not None:
                maze['attempts'] = attempt
                return maze
            logger.warning('regenerating maze (attempt %d/%d failed)', attempt, self.cfg.max_attempts)
        raise MazeGenerationError(f'could not produce a valid maze after {self.cfg.max_attempts} attempts')


def maze_to_dict(maze: Dict) -> Dict:
    diag = maze.get('diagnostics')
    if diag is not None:
        diag = {
            'reachability': diag['reachability'].to_dict(),
            'repair': diag['repair'].to_dict() if diag.get('repair') is not None else None,
        }
    return {
        'size': maze['size'],
        'grid': np.asarray(maze['grid']).tolist(),
        'start': list(maze['start']),
        'exit': list(maze['exit']),
        'obstacles': [o.to_dict() for o in maze['obstacles']],
        'collectibles': [c.to_dict() for c in maze['collectibles']],
        'attempts': maze.get('attempts', 1),
        'repaired': maze.get('repaired', False),
        'diagnostics': diag,
    }
