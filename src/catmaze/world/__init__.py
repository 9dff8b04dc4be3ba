"""World-space geometry: coordinate transform, wall collision and movement."""

from .geometry import Vec3
from .transform import WorldTransform
from .collision import CollisionField, ObstacleVolume
from .movement import MovementResolver

__all__ = [
    "Vec3",
    "WorldTransform",
    "CollisionField",
    "ObstacleVolume",
    "MovementResolver",
]
