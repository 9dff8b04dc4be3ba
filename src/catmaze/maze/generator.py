from __future__ import annotations

import logging
import random
from typing import Iterator, List, Tuple

from ..constants import CARVE_STEPS
from ..exceptions import MazeGenerationError
from .grid import MazeGrid, Point
from .tiles import Cell

logger = logging.getLogger(__name__)

MIN_SIZE = 5


class MazeGenerator:
    """Perfect-maze generator using the recursive backtracker.

    Carving starts at (1, 1). Every step shuffles the four two-cell moves with
    the injected RNG and, for each interior target that is still a wall, opens
    the wall between and continues from the target. The walk is driven by an
    explicit stack of ``(cell, remaining moves)`` frames, so the largest grids
    never hit the interpreter recursion limit.

    After carving, the entrance (0, 1) and exit (N-1, N-2) are opened
    unconditionally. Neither is checked for connectivity; see
    ``catmaze.maze.analysis.exit_reachable``.
    """

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def generate(self, size: int) -> MazeGrid:
        if isinstance(size, bool) or not isinstance(size, int):
            raise MazeGenerationError(f"maze size must be an integer, got {size!r}")
        if size < MIN_SIZE or size % 2 == 0:
            raise MazeGenerationError(f"maze size must be odd and >= {MIN_SIZE}, got {size}")

        cells: List[List[Cell]] = [[Cell.WALL for _ in range(size)] for _ in range(size)]
        carved = self._carve(cells, size, (1, 1))

        cells[1][0] = Cell.PATH
        cells[size - 2][size - 1] = Cell.PATH

        grid = MazeGrid(cells)
        logger.debug("Generated %dx%d maze (%d cells carved) signature=%s", size, size, carved, grid.signature())
        return grid

    def _shuffled_steps(self) -> Iterator[Tuple[int, int]]:
        steps = list(CARVE_STEPS)
        self.rng.shuffle(steps)
        return iter(steps)

    def _carve(self, cells: List[List[Cell]], size: int, origin: Point) -> int:
        ox, oy = origin
        cells[oy][ox] = Cell.PATH
        carved = 1
        stack: List[Tuple[Point, Iterator[Tuple[int, int]]]] = [(origin, self._shuffled_steps())]
        while stack:
            (x, y), steps = stack[-1]
            for dx, dy in steps:
                nx, ny = x + dx, y + dy
                if 0 < nx < size - 1 and 0 < ny < size - 1 and cells[ny][nx] is Cell.WALL:
                    cells[y + dy // 2][x + dx // 2] = Cell.PATH
                    cells[ny][nx] = Cell.PATH
                    carved += 2
                    stack.append(((nx, ny), self._shuffled_steps()))
                    break
            else:
                stack.pop()
        return carved
