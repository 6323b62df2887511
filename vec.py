import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """Small immutable 2D vector. Every operation returns a new value."""

    x: float
    y: float

    def __add__(self, other):
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar):
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar):
        return self.__mul__(scalar)

    def dot(self, other):
        return self.x * other.x + self.y * other.y

    def length(self):
        return math.hypot(self.x, self.y)

    def normalized(self):
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / length, self.y / length)

    def perp(self):
        """Rotate 90 degrees: (x, y) -> (-y, x)."""
        return Vec2(-self.y, self.x)

    def is_finite(self):
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_int_tuple(self):
        return int(round(self.x)), int(round(self.y))

    @classmethod
    def from_angle(cls, angle):
        return cls(math.cos(angle), math.sin(angle))

    def angle(self):
        return math.atan2(self.y, self.x)
