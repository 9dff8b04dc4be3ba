from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..constants import WALL_CLEARANCE, WALL_HEIGHT
from ..maze.grid import MazeGrid, Point
from .geometry import Vec3
from .transform import WorldTransform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObstacleVolume:
    """Axis-aligned wall box, already shrunk by the collision clearance.

    Only the horizontal footprint takes part in queries; ``height`` is kept
    for consumers that build wall meshes.
    """

    cell: Point
    min_x: float
    max_x: float
    min_z: float
    max_z: float
    height: float = WALL_HEIGHT

    def contains(self, x: float, z: float, margin: float = 0.0) -> bool:
        """Strict containment on the XZ plane; ``margin`` grows the box."""
        return (
            self.min_x - margin < x < self.max_x + margin
            and self.min_z - margin < z < self.max_z + margin
        )

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_z + self.max_z) / 2)


class CollisionField:
    """2D obstacle map built from the wall cells of a maze.

    Every wall cell becomes one ``ObstacleVolume`` whose footprint is the cell
    square shrunk inward by ``clearance`` on each side, which lets agents
    slide along corridors without snagging on the seams between boxes.

    Volumes are bucketed by their grid cell, so a query only inspects the
    cells its point (plus margin) can touch instead of every wall.
    An empty field (``CollisionField.empty()``) never reports a collision.
    """

    def __init__(
        self,
        volumes: Iterable[ObstacleVolume] = (),
        transform: Optional[WorldTransform] = None,
        clearance: float = WALL_CLEARANCE,
    ) -> None:
        self._transform = transform
        self._clearance = clearance
        self._by_cell: Dict[Point, ObstacleVolume] = {}
        for v in volumes:
            self._by_cell[v.cell] = v

    @classmethod
    def empty(cls) -> "CollisionField":
        return cls()

    @classmethod
    def from_grid(
        cls,
        grid: MazeGrid,
        transform: WorldTransform,
        clearance: float = WALL_CLEARANCE,
        height: float = WALL_HEIGHT,
    ) -> "CollisionField":
        if clearance * 2 >= transform.cell_size:
            raise ValueError("clearance must be smaller than half the cell size")
        volumes: List[ObstacleVolume] = []
        for x, y in grid.wall_cells():
            min_x, max_x, min_z, max_z = transform.cell_bounds(x, y)
            volumes.append(
                ObstacleVolume(
                    cell=(x, y),
                    min_x=min_x + clearance,
                    max_x=max_x - clearance,
                    min_z=min_z + clearance,
                    max_z=max_z - clearance,
                    height=height,
                )
            )
        field = cls(volumes, transform=transform, clearance=clearance)
        logger.info("Built collision field with %d wall volumes (clearance=%.2f)", len(volumes), clearance)
        return field

    @property
    def volumes(self) -> List[ObstacleVolume]:
        return list(self._by_cell.values())

    @property
    def is_empty(self) -> bool:
        return not self._by_cell

    def __len__(self) -> int:
        return len(self._by_cell)

    def _candidates(self, x: float, z: float, margin: float) -> Iterator[ObstacleVolume]:
        if self._transform is None:
            # Volumes without a transform cannot be bucketed; scan them all.
            yield from self._by_cell.values()
            return
        reach = max(0.0, margin - self._clearance)
        cx0, cz0 = self._transform.world_to_cell(x - reach, z - reach)
        cx1, cz1 = self._transform.world_to_cell(x + reach, z + reach)
        for cz in range(cz0, cz1 + 1):
            for cx in range(cx0, cx1 + 1):
                vol = self._by_cell.get((cx, cz))
                if vol is not None:
                    yield vol

    def intersects(self, point: Vec3, margin: float = 0.0) -> bool:
        """True if ``point`` lies strictly inside any wall box on the XZ plane.

        Height is ignored. ``margin`` inflates every box, which callers can
        use as an agent radius on top of the built-in clearance.
        """
        if not self._by_cell:
            return False
        return any(v.contains(point.x, point.z, margin) for v in self._candidates(point.x, point.z, margin))
