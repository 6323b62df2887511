import math

from vec import Vec2


class Heading:
    """
    Shared travel direction and speed of the moving pattern.

    The direction is stored as an angle and rebuilt as a unit vector after
    every rotation. Speed never drops below zero.
    """
    def __init__(self, direction=Vec2(1.0, 0.0), speed=120.0, rotation_rate=math.pi / 2,
                 acceleration=120.0):
        direction = direction.normalized()
        if direction.length() == 0:
            raise ValueError("Heading direction must be non-zero")
        if not math.isfinite(speed) or speed < 0:
            raise ValueError(f"Speed must be non-negative, got {speed}")
        self.angle = direction.angle()
        self.speed = float(speed)
        self.rotation_rate = rotation_rate  # radians per second
        self.acceleration = acceleration  # pixels per second^2

    @property
    def direction(self):
        return Vec2.from_angle(self.angle)

    def rotate(self, turn, dt):
        """Turn by rotation_rate * dt; turn is -1 (left), 0 or +1 (right)."""
        self.angle += turn * self.rotation_rate * dt

    def accelerate(self, throttle, dt):
        """Change speed by acceleration * dt; throttle is -1, 0 or +1."""
        self.speed = max(0.0, self.speed + throttle * self.acceleration * dt)

    def step(self, dt):
        """Displacement of the pattern over dt seconds."""
        return self.direction * (self.speed * dt)


def advance_families(families, step):
    """
    Scroll every family by the shared step.

    Each family takes the component of step along its own normal as offset
    and the component along its own tangent as dash phase, so differently
    oriented families drift at different rates from one global velocity.
    """
    for family in families:
        family.scroll(step)
