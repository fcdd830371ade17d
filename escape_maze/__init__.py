from typing import Dict, Optional

from .maze_gen.generator import MazeConfig, MazeGenerationError, MazeGenerator, maze_to_dict
from .pathing import (
    Collectible, Obstacle, ReachabilityResult, RemovedObstacle, RepairResult, Tile,
    a_star, bfs, is_reachable, repair,
)

__version__ = '0.1.0'


def generate(cfg: Optional[MazeConfig] = None) -> Dict:
    return MazeGenerator(cfg or MazeConfig()).generate()


__all__ = [
    'Collectible', 'MazeConfig', 'MazeGenerationError', 'MazeGenerator', 'Obstacle',
    'ReachabilityResult', 'RemovedObstacle', 'RepairResult', 'Tile',
    'a_star', 'bfs', 'generate', 'is_reachable', 'maze_to_dict', 'repair',
]
