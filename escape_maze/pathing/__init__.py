from .astar import a_star
from .grid import Coord, Tile
from .reachability import bfs, is_reachable
from .repair import repair
from .types import Collectible, Obstacle, ReachabilityResult, RemovedObstacle, RepairResult

__all__ = [
    'Coord', 'Tile', 'a_star', 'bfs', 'is_reachable', 'repair',
    'Collectible', 'Obstacle', 'ReachabilityResult', 'RemovedObstacle', 'RepairResult',
]
