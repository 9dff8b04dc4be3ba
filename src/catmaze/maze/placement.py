from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from ..constants import MONSTER_CONTACT_DISTANCE, PROP_COUNT, PROP_MIN_SCALE, PROP_SCALE_SPREAD
from ..world.transform import WorldTransform
from .grid import MazeGrid, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prop:
    """Decorative, non-colliding pillar in world space."""

    x: float
    z: float
    scale: float


@dataclass(frozen=True)
class Placement:
    start: Point
    target: Optional[Point]
    monster_cells: Tuple[Point, ...]
    candidates: Tuple[Point, ...]
    props: Tuple[Prop, ...] = field(default=())


class EntityPlacer:
    """Chooses where the player, the cat, the monsters and the props go.

    - player: the start cell (1, 1)
    - cat: first path cell in a bottom-to-top, right-to-left scan of the
      interior, i.e. the path cell nearest the far corner in scan order
    - monsters: uniform sample without replacement from interior path cells
      with at most two path neighbours, excluding any cell whose centre is
      within contact range of the start; the request is clamped to the pool
    - props: uniform world positions, no constraints
    """

    def __init__(
        self,
        rng: random.Random,
        prop_count: int = PROP_COUNT,
        safe_distance: float = MONSTER_CONTACT_DISTANCE,
    ) -> None:
        self.rng = rng
        self.prop_count = prop_count
        self.safe_distance = safe_distance

    def place(self, grid: MazeGrid, transform: WorldTransform, monster_count: int) -> Placement:
        target = self.find_target(grid)
        candidates = self.monster_candidates(grid, exclude=self.start_zone(grid, transform))
        monsters = self.sample_monsters(candidates, monster_count)
        props = self.scatter_props(grid.size, transform.cell_size)
        placement = Placement(
            start=grid.start,
            target=target,
            monster_cells=tuple(monsters),
            candidates=tuple(candidates),
            props=tuple(props),
        )
        logger.info(
            "Placed start=%s target=%s monsters=%d/%d (requested %d)",
            placement.start,
            placement.target,
            len(monsters),
            len(candidates),
            monster_count,
        )
        return placement

    @staticmethod
    def find_target(grid: MazeGrid) -> Optional[Point]:
        n = grid.size
        for y in range(n - 2, 0, -1):
            for x in range(n - 2, 0, -1):
                if grid.is_path(x, y):
                    return (x, y)
        logger.warning("No interior path cell found for target placement")
        return None

    def start_zone(self, grid: MazeGrid, transform: WorldTransform) -> Set[Point]:
        """Path cells a monster could not spawn on without touching the player."""
        sx, sz = transform.cell_to_world(*grid.start)
        zone = {grid.start}
        for x, y in grid.path_cells():
            cx, cz = transform.cell_to_world(x, y)
            if math.hypot(cx - sx, cz - sz) <= self.safe_distance:
                zone.add((x, y))
        return zone

    @staticmethod
    def monster_candidates(grid: MazeGrid, exclude: Iterable[Point] = ()) -> List[Point]:
        """Interior path cells with <= 2 orthogonal path neighbours."""
        skip = set(exclude)
        n = grid.size
        out: List[Point] = []
        for y in range(1, n - 1):
            for x in range(1, n - 1):
                if (x, y) in skip:
                    continue
                if grid.is_path(x, y) and len(grid.path_neighbors(x, y)) <= 2:
                    out.append((x, y))
        return out

    def sample_monsters(self, candidates: List[Point], count: int) -> List[Point]:
        k = max(0, min(int(count), len(candidates)))
        if k < count:
            logger.debug("Clamped monster count %d to %d available candidates", count, k)
        return self.rng.sample(candidates, k)

    def scatter_props(self, size: int, cell_size: float) -> List[Prop]:
        props: List[Prop] = []
        for _ in range(self.prop_count):
            px = (self.rng.random() * size - size / 2) * cell_size
            pz = (self.rng.random() * size - size / 2) * cell_size
            scale = PROP_MIN_SCALE + self.rng.random() * PROP_SCALE_SPREAD
            props.append(Prop(x=px, z=pz, scale=scale))
        return props
