from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from ..constants import (
    GRAVITY,
    JUMP_SPEED,
    PLAYER_GROUND_HEIGHT,
    PLAYER_RUN_MULTIPLIER,
    PLAYER_SPEED,
    PLAYER_YAW_SPEED,
)
from ..input import MoveIntent
from ..world.geometry import Vec3
from ..world.movement import MovementResolver, ObstacleMap

logger = logging.getLogger(__name__)


class VerticalState(Enum):
    GROUNDED = "grounded"
    AIRBORNE = "airborne"


@dataclass
class Player:
    """Player capsule. ``position.y`` is eye height above the floor."""

    position: Vec3
    yaw: float = 0.0
    velocity_y: float = 0.0
    vertical: VerticalState = VerticalState.GROUNDED
    alive: bool = True

    @property
    def grounded(self) -> bool:
        return self.vertical is VerticalState.GROUNDED

    def forward_vector(self) -> Vec3:
        """Flat facing direction; yaw 0 looks down -Z."""
        return Vec3(-math.sin(self.yaw), 0.0, -math.cos(self.yaw))

    def right_vector(self) -> Vec3:
        return Vec3(math.cos(self.yaw), 0.0, -math.sin(self.yaw))


class PlayerController:
    """Integrates one simulation step for the player.

    Horizontal movement follows the facing and goes through the movement
    resolver. Vertical motion is a separate Grounded/Airborne state machine
    under constant gravity with a hard clamp at ground height. Directional
    input is dropped entirely while the player is not engaged and no
    joystick is deflected.
    """

    def __init__(
        self,
        resolver: MovementResolver | None = None,
        speed: float = PLAYER_SPEED,
        run_multiplier: float = PLAYER_RUN_MULTIPLIER,
        yaw_speed: float = PLAYER_YAW_SPEED,
        gravity: float = GRAVITY,
        jump_speed: float = JUMP_SPEED,
        ground_height: float = PLAYER_GROUND_HEIGHT,
    ) -> None:
        self.resolver = resolver or MovementResolver()
        self.speed = speed
        self.run_multiplier = run_multiplier
        self.yaw_speed = yaw_speed
        self.gravity = gravity
        self.jump_speed = jump_speed
        self.ground_height = ground_height

    def desired_delta(self, player: Player, intent: MoveIntent, dt: float) -> Vec3:
        if not intent.has_movement or not (intent.engaged or intent.mobile_active):
            return Vec3()
        move = player.forward_vector().scaled(intent.forward) + player.right_vector().scaled(intent.strafe)
        if move.horizontal_length() == 0.0:
            return Vec3()
        speed = self.speed * (self.run_multiplier if intent.run else 1.0)
        return move.horizontal_normalized().scaled(speed * dt)

    def step(self, player: Player, intent: MoveIntent, dt: float, field: ObstacleMap) -> Player:
        """Advance ``player`` in place by ``dt`` seconds and return it."""
        delta = self.desired_delta(player, intent, dt)
        player.position = self.resolver.resolve(player.position, delta, field)

        if intent.turn:
            player.yaw -= intent.turn * self.yaw_speed * dt

        self._integrate_vertical(player, intent.jump, dt)
        return player

    def _integrate_vertical(self, player: Player, jump: bool, dt: float) -> None:
        if jump and player.grounded:
            player.velocity_y = self.jump_speed
            player.vertical = VerticalState.AIRBORNE
            logger.debug("Player jumped at (%.2f, %.2f)", player.position.x, player.position.z)

        player.velocity_y += self.gravity * dt
        new_y = player.position.y + player.velocity_y * dt
        if new_y <= self.ground_height:
            new_y = self.ground_height
            player.velocity_y = 0.0
            player.vertical = VerticalState.GROUNDED
        player.position = player.position.with_y(new_y)
