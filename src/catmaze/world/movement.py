from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol, Tuple

from .geometry import Vec3

logger = logging.getLogger(__name__)


class ObstacleMap(Protocol):
    """Protocol for collision fields used by MovementResolver.

    Anything that can answer a horizontal point query works, which keeps the
    resolver testable against hand-built fields.
    """

    def intersects(self, point: Vec3, margin: float = 0.0) -> bool: ...


class MoveOutcome(Enum):
    FULL = "full"
    SLIDE_X = "slide_x"
    SLIDE_Z = "slide_z"
    BLOCKED = "blocked"
    IDLE = "idle"


class MovementResolver:
    """Resolves a desired horizontal displacement against an obstacle map.

    Axis-separated sliding: try the whole move, then X alone, then Z alone,
    and stay put if all three land inside a wall. Only the destination point
    is tested, never the swept segment, so per-step deltas must stay well
    below the wall thickness (the frame clamp guarantees this). The Y
    component of the position is passed through untouched.
    """

    def __init__(self, margin: float = 0.0) -> None:
        self.margin = margin

    def can_move(self, pos: Vec3, delta: Vec3, field: ObstacleMap) -> bool:
        """True if the full horizontal move lands outside every obstacle."""
        target = Vec3(pos.x + delta.x, pos.y, pos.z + delta.z)
        return not field.intersects(target, self.margin)

    def resolve_with_outcome(self, pos: Vec3, delta: Vec3, field: ObstacleMap) -> Tuple[Vec3, MoveOutcome]:
        if delta.x == 0.0 and delta.z == 0.0:
            return pos, MoveOutcome.IDLE

        full = Vec3(pos.x + delta.x, pos.y, pos.z + delta.z)
        if not field.intersects(full, self.margin):
            return full, MoveOutcome.FULL

        only_x = Vec3(pos.x + delta.x, pos.y, pos.z)
        if not field.intersects(only_x, self.margin):
            logger.debug("Sliding along X from (%.2f, %.2f)", pos.x, pos.z)
            return only_x, MoveOutcome.SLIDE_X

        only_z = Vec3(pos.x, pos.y, pos.z + delta.z)
        if not field.intersects(only_z, self.margin):
            logger.debug("Sliding along Z from (%.2f, %.2f)", pos.x, pos.z)
            return only_z, MoveOutcome.SLIDE_Z

        logger.debug("Blocked move by (%.3f, %.3f) at (%.2f, %.2f)", delta.x, delta.z, pos.x, pos.z)
        return pos, MoveOutcome.BLOCKED

    def resolve(self, pos: Vec3, delta: Vec3, field: ObstacleMap) -> Vec3:
        """Return the new position after sliding resolution."""
        new_pos, _ = self.resolve_with_outcome(pos, delta, field)
        return new_pos
