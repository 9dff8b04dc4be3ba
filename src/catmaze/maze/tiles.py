from __future__ import annotations

from enum import Enum


class Cell(Enum):
    """Cell types of a maze grid.

    Values match the classic 0=path / 1=wall encoding so grids can be dumped
    to compact integer matrices when needed.
    """

    PATH = 0
    WALL = 1

    @property
    def symbol(self) -> str:
        return "." if self is Cell.PATH else "#"


SYMBOLS = {".": Cell.PATH, "#": Cell.WALL}
