from typing import Any, Dict, List
import numpy as np

from escape_maze.pathing.grid import in_bounds
from escape_maze.pathing.reachability import bfs


class MazeValidator:
    def __init__(self, allow_diagonal: bool = False):
        self.allow_diagonal = allow_diagonal

    def validate(self, maze: Dict) -> Dict[str, Any]:
        grid = np.asarray(maze['grid'], dtype=np.int8)
        start = tuple(maze['start'])
        exit = tuple(maze['exit'])
        errors = self._check_layout(grid, start, exit, maze['obstacles'], maze['collectibles'])
        if 'out_of_bounds' in errors or 'start_equals_exit' in errors:
            return {'ok': False, 'errors': errors, 'path_length': 0}
        reach = bfs(start, exit, grid, maze['obstacles'], allow_diagonal=self.allow_diagonal)
        if not reach.reachable:
            errors.append('unreachable')
        return {'ok': not errors, 'errors': errors, 'path_length': len(reach.path)}

    def _check_layout(self, grid: np.ndarray, start, exit, obstacles, collectibles) -> List[str]:
        size = grid.shape[0]
        errors: List[str] = []
        if start == exit:
            errors.append('start_equals_exit')
        if not in_bounds(*start, size) or not in_bounds(*exit, size):
            errors.append('out_of_bounds')
        endpoints = {start, exit}
        if any(o.pos in endpoints for o in obstacles):
            errors.append('obstacle_on_endpoint')
        if any(c.pos in endpoints for c in collectibles):
            errors.append('collectible_on_endpoint')
        cpos = [c.pos for c in collectibles]
        if len(set(cpos)) != len(cpos):
            errors.append('duplicate_collectible')
        opos = {o.pos for o in obstacles}
        if any(p in opos for p in cpos):
            errors.append('collectible_on_obstacle')
        return errors
