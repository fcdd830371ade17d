from enum import IntEnum
from typing import List, Tuple
import numpy as np

Coord = Tuple[int, int]  # (x, y)


class Tile(IntEnum):
    OPEN = 0
    WALL = 1
    EXIT = 2
    PLAYER = 3


PASSABLE = (Tile.OPEN, Tile.EXIT, Tile.PLAYER)

_ORTHOGONAL = [(0, 1), (1, 0), (0, -1), (-1, 0)]
_DIAGONAL = [(1, 1), (-1, -1), (1, -1), (-1, 1)]


def new_grid(size: int, fill: Tile = Tile.WALL) -> np.ndarray:
    return np.full((size, size), int(fill), dtype=np.int8)


def directions(allow_diagonal: bool = False) -> List[Coord]:
    if allow_diagonal:
        return _ORTHOGONAL + _DIAGONAL
    return list(_ORTHOGONAL)


def in_bounds(x: int, y: int, size: int) -> bool:
    return 0 <= x < size and 0 <= y < size


def is_passable(grid: np.ndarray, x: int, y: int) -> bool:
    return int(grid[y, x]) in PASSABLE


def neighbors(coord: Coord, size: int, allow_diagonal: bool = False) -> List[Coord]:
    # in-bounds only, in direction order
    x, y = coord
    res = []
    for dx, dy in directions(allow_diagonal):
        nx, ny = x + dx, y + dy
        if in_bounds(nx, ny, size):
            res.append((nx, ny))
    return res


def to_index(coord: Coord, size: int) -> int:
    return coord[1] * size + coord[0]


def from_index(idx: int, size: int) -> Coord:
    return (idx % size, idx // size)


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def chebyshev(a: Coord, b: Coord) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def check_endpoints(start: Coord, exit: Coord, size: int) -> None:
    for name, (x, y) in (('start', start), ('exit', exit)):
        if not in_bounds(x, y, size):
            raise ValueError(f'{name} {(x, y)} is outside a {size}x{size} grid')
