import math
from collections import namedtuple

import config
from grid import GridFamily
from motion import Heading, advance_families
from points import PointSet
from touch import TouchDetector
from vec import Vec2

# Point mutations requested by input handling. They are queued and applied at
# the start of the next tick, never in the middle of a touch evaluation.
Command = namedtuple("Command", ["kind", "arg"])

ADD_POINT = "add"
REMOVE_POINT = "remove"
TOGGLE_POINT = "toggle"
RESET = "reset"


def default_families():
    return [GridFamily.from_dict(entry) for entry in config.GRID_FAMILIES]


def default_point_positions(width, height):
    return [Vec2(width * fx, height * fy) for fx, fy in config.DEFAULT_POINT_LAYOUT]


def default_heading(speed=None):
    return Heading(
        direction=Vec2(*config.DEFAULT_DIRECTION),
        speed=config.DEFAULT_SPEED if speed is None else speed,
        rotation_rate=math.radians(config.ROTATION_RATE_DEGREES),
        acceleration=config.ACCELERATION,
    )


class Scene:
    """
    Grid families, tracked points and touch detection advanced one tick at a time.

    A tick applies queued point commands, rotates/accelerates the heading,
    scrolls every family by the shared step and then re-evaluates every
    (family, point) pair. Each new touch is handed to every registered sink.
    """
    def __init__(self, width, height, families=None, point_positions=None, heading=None):
        self.width = width
        self.height = height
        # Reference origin for line coordinates and a length that exceeds the visible field
        self.center = Vec2(width / 2, height / 2)
        self.diag = math.hypot(width, height)

        self.families = list(families) if families is not None else default_families()
        self.detector = TouchDetector(self.families)
        if point_positions is None:
            point_positions = default_point_positions(width, height)
        self._initial_positions = list(point_positions)
        self.points = PointSet(self.detector, self._initial_positions)
        self.heading = heading if heading is not None else default_heading()
        self._initial_heading = (self.heading.angle, self.heading.speed)

        self.sinks = []
        self.pending = []
        self.hover_index = None
        self.time = 0.0
        self.tick_count = 0
        self.touch_count = 0

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def add_sink(self, sink):
        """Register a callable that receives every TouchEvent."""
        self.sinks.append(sink)

    def queue_add(self, position):
        self.pending.append(Command(ADD_POINT, position))

    def queue_remove(self, index):
        self.pending.append(Command(REMOVE_POINT, index))

    def queue_toggle(self, position):
        self.pending.append(Command(TOGGLE_POINT, position))

    def queue_reset(self):
        self.pending.append(Command(RESET, None))

    def update_hover(self, cursor):
        """Track which point (if any) is under the cursor."""
        self.hover_index = self.points.nearest(cursor, config.HOVER_RADIUS)
        return self.hover_index

    def _apply_commands(self):
        commands, self.pending = self.pending, []
        for command in commands:
            if command.kind == ADD_POINT:
                self.points.add(command.arg)
            elif command.kind == REMOVE_POINT:
                self.points.remove_at(command.arg)
            elif command.kind == TOGGLE_POINT:
                self.points.toggle_at(command.arg, config.HOVER_RADIUS)
            elif command.kind == RESET:
                self.reset()
            else:
                raise ValueError(f"Unknown scene command: {command.kind}")
        if commands:
            # Indices may have shifted
            self.hover_index = None

    def reset(self):
        """Restore families, heading and points to their starting state."""
        for family in self.families:
            family.reset()
        self.heading.angle, self.heading.speed = self._initial_heading
        self.points.reset(self._initial_positions)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self, dt, turn=0, throttle=0):
        """Advance one frame and return the touches it produced."""
        self._apply_commands()

        self.heading.rotate(turn, dt)
        self.heading.accelerate(throttle, dt)
        advance_families(self.families, self.heading.step(dt))

        self.time += dt
        self.tick_count += 1

        events = self.detector.evaluate(self.points, self.center, self.diag, self.time)
        self.touch_count += len(events)
        for event in events:
            for sink in self.sinks:
                sink(event)
        return events
