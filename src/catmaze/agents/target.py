from __future__ import annotations

from dataclasses import dataclass

from ..constants import TARGET_FOUND_DISTANCE
from ..world.geometry import Vec3


@dataclass
class Target:
    """The cat: a non-colliding point the player has to reach."""

    position: Vec3
    active: bool = True

    def is_reached_by(self, point: Vec3, threshold: float = TARGET_FOUND_DISTANCE) -> bool:
        return self.active and point.horizontal_distance(self.position) < threshold
