from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec3:
    """Immutable 3D vector. Y is up; the maze lies in the XZ plane."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, factor: float) -> "Vec3":
        return Vec3(self.x * factor, self.y * factor, self.z * factor)

    def with_y(self, y: float) -> "Vec3":
        return Vec3(self.x, y, self.z)

    def horizontal_length(self) -> float:
        return math.hypot(self.x, self.z)

    def horizontal_distance(self, other: "Vec3") -> float:
        """Distance in the XZ plane, ignoring height."""
        return math.hypot(self.x - other.x, self.z - other.z)

    def horizontal_normalized(self) -> "Vec3":
        length = self.horizontal_length()
        if length == 0.0:
            return Vec3()
        return Vec3(self.x / length, 0.0, self.z / length)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)
