from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from ..constants import CELL_SIZE


@dataclass(frozen=True)
class WorldTransform:
    """Fixed mapping between grid cells and world-space XZ coordinates.

    The maze is centred on the world origin; cell (x, y) maps to the centre of
    a ``cell_size`` square at
    ``((x - N/2) * cell + cell/2, (y - N/2) * cell + cell/2)``.
    """

    grid_size: int
    cell_size: float = CELL_SIZE

    def cell_to_world(self, x: int, y: int) -> Tuple[float, float]:
        half = self.grid_size / 2
        wx = (x - half) * self.cell_size + self.cell_size / 2
        wz = (y - half) * self.cell_size + self.cell_size / 2
        return wx, wz

    def cell_bounds(self, x: int, y: int) -> Tuple[float, float, float, float]:
        """Return ``(min_x, max_x, min_z, max_z)`` of the cell footprint."""
        cx, cz = self.cell_to_world(x, y)
        h = self.cell_size / 2
        return cx - h, cx + h, cz - h, cz + h

    def world_to_cell(self, wx: float, wz: float) -> Tuple[int, int]:
        """Grid cell containing a world point (may lie outside the grid)."""
        half = self.grid_size / 2
        return (
            math.floor(wx / self.cell_size + half),
            math.floor(wz / self.cell_size + half),
        )
