"""Maze grid, generation, analysis and entity placement."""

from .tiles import Cell
from .grid import MazeGrid
from .generator import MazeGenerator
from .placement import EntityPlacer, Placement

__all__ = [
    "Cell",
    "MazeGrid",
    "MazeGenerator",
    "EntityPlacer",
    "Placement",
]
