from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set
import numpy as np

from .grid import Coord


OBSTACLE_TYPES = ('fire', 'stairs', 'door')
COLLECTIBLE_TYPES = ('extinguisher', 'firstaid', 'flashlight', 'phone')


@dataclass
class Obstacle:
    x: int
    y: int
    type: str
    immutable: bool = False  # repair must never remove it

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    def to_dict(self) -> Dict:
        return {'x': self.x, 'y': self.y, 'type': self.type, 'immutable': self.immutable}


@dataclass
class Collectible:
    x: int
    y: int
    type: str
    collected: bool = False

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    def to_dict(self) -> Dict:
        return {'x': self.x, 'y': self.y, 'type': self.type, 'collected': self.collected}


@dataclass
class RemovedObstacle:
    x: int
    y: int
    old_type: str

    def to_dict(self) -> Dict:
        return {'x': self.x, 'y': self.y, 'old_type': self.old_type}


@dataclass
class ReachabilityResult:
    reachable: bool
    path: List[Coord] = field(default_factory=list)
    visited: Set[Coord] = field(default_factory=set)

    def to_dict(self) -> Dict:
        return {
            'reachable': self.reachable,
            'path': [list(p) for p in self.path],
            'visited': sorted([list(p) for p in self.visited]),
        }


@dataclass
class RepairResult:
    repaired: bool
    removed: List[RemovedObstacle] = field(default_factory=list)
    path: List[Coord] = field(default_factory=list)
    # the grid/obstacles the repair worked on; the caller's own objects when mutating
    grid: Optional[np.ndarray] = None
    obstacles: List[Obstacle] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'repaired': self.repaired,
            'removed': [r.to_dict() for r in self.removed],
            'path': [list(p) for p in self.path],
        }
