from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass

from ..constants import (
    MONSTER_CONTACT_DISTANCE,
    MONSTER_HEIGHT,
    MONSTER_MIN_SPEED,
    MONSTER_SPEED_SPREAD,
    MONSTER_TURN_CHANCE,
)
from ..world.geometry import Vec3
from ..world.movement import MovementResolver, ObstacleMap
from .player import Player

logger = logging.getLogger(__name__)


@dataclass
class Monster:
    mid: int
    position: Vec3
    heading: float
    speed: float

    def step_vector(self, dt: float) -> Vec3:
        return Vec3(math.cos(self.heading), 0.0, math.sin(self.heading)).scaled(self.speed * dt)


class MonsterAI:
    """Random walk with wall avoidance, plus player contact detection.

    Each step a monster tries to walk along its heading. If the move would
    end inside a wall, or on a small random chance, it turns by a random
    angle within a half circle and stays in place for that step.
    """

    def __init__(
        self,
        rng: random.Random,
        resolver: MovementResolver | None = None,
        turn_chance: float = MONSTER_TURN_CHANCE,
        contact_distance: float = MONSTER_CONTACT_DISTANCE,
    ) -> None:
        self.rng = rng
        self.resolver = resolver or MovementResolver()
        self.turn_chance = turn_chance
        self.contact_distance = contact_distance

    def spawn(self, mid: int, x: float, z: float) -> Monster:
        pos = Vec3(x, MONSTER_HEIGHT, z)
        return Monster(
            mid=mid,
            position=pos,
            heading=self.rng.random() * math.pi * 2,
            speed=MONSTER_MIN_SPEED + self.rng.random() * MONSTER_SPEED_SPREAD,
        )

    def step(self, monster: Monster, dt: float, field: ObstacleMap) -> bool:
        """Advance one monster; returns True if it moved."""
        delta = monster.step_vector(dt)
        # Collision is tested first so the random draw only happens on open ground.
        if not self.resolver.can_move(monster.position, delta, field) or self.rng.random() < self.turn_chance:
            monster.heading += (self.rng.random() - 0.5) * math.pi
            logger.debug("Monster %d turned to heading %.3f", monster.mid, monster.heading)
            return False
        monster.position = monster.position + delta
        return True

    def touches(self, monster: Monster, player: Player) -> bool:
        """Horizontal proximity check against a living player."""
        return player.alive and monster.position.horizontal_distance(player.position) < self.contact_distance
