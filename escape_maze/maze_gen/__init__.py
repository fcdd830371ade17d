from .carver import GridCarver
from .generator import MazeConfig, MazeGenerationError, MazeGenerator, maze_to_dict
from .placement import Placement, Placer

__all__ = ['GridCarver', 'MazeConfig', 'MazeGenerationError', 'MazeGenerator', 'maze_to_dict', 'Placement', 'Placer']
