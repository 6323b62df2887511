import json
import math
import os
from collections import namedtuple

from vec import Vec2

# Result of a nearest-line query: integer line index, the line's coordinate
# along the normal (relative to the reference center) and the perpendicular
# distance from the query point to that line.
NearestLine = namedtuple("NearestLine", ["index", "coord", "distance"])


def round_half_away(value):
    """Round to the nearest integer, ties away from zero (0.5 -> 1, -0.5 -> -1)."""
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(whole, value)


def dash_modulo(pos, period):
    """Position within one dash period, always in [0, period)."""
    return math.fmod(math.fmod(pos, period) + period, period)


class GridFamily:
    """
    One infinite family of parallel, evenly spaced lines.

    Line k satisfies normal . (x - center) = k * spacing + offset. The lines are
    never materialised: the nearest one to any point is found by rounding.
    offset and dash_phase are the only fields that change after construction;
    the motion integrator updates them once per tick.
    """
    def __init__(self, normal, spacing, offset=0.0, thickness=2.0,
                 dash_length=0.0, gap_length=0.0, dash_phase=0.0,
                 color=(255, 255, 255), name=None):
        normal = Vec2(float(normal[0]), float(normal[1])) if not isinstance(normal, Vec2) else normal
        if not normal.is_finite() or normal.length() == 0:
            raise ValueError(f"Grid normal must be a finite non-zero vector, got {normal}")
        if not math.isfinite(spacing) or spacing <= 0:
            raise ValueError(f"Grid spacing must be positive, got {spacing}")
        if not math.isfinite(thickness) or thickness < 0:
            raise ValueError(f"Grid thickness must be non-negative, got {thickness}")
        if not (math.isfinite(dash_length) and math.isfinite(gap_length)):
            raise ValueError(f"Dash and gap lengths must be finite, got {dash_length}/{gap_length}")
        if not (math.isfinite(offset) and math.isfinite(dash_phase)):
            raise ValueError(f"Offset and dash phase must be finite, got {offset}/{dash_phase}")

        self.normal = normal.normalized()
        self.tangent = self.normal.perp()
        self.spacing = float(spacing)
        self.offset = float(offset)
        self.thickness = float(thickness)
        self.dash_length = float(dash_length)
        self.gap_length = float(gap_length)
        self.dash_phase = float(dash_phase)
        self.color = tuple(color)
        self.name = name

        # Restored by reset()
        self._initial_offset = self.offset
        self._initial_dash_phase = self.dash_phase

    def __repr__(self):
        return (f"GridFamily(name={self.name!r}, normal=({self.normal.x:.3f}, {self.normal.y:.3f}), "
                f"spacing={self.spacing}, offset={self.offset:.3f}, dash_phase={self.dash_phase:.3f})")

    @property
    def is_dashed(self):
        return self.dash_length > 0 and self.gap_length > 0

    @property
    def period(self):
        return self.dash_length + self.gap_length

    def reset(self):
        """Restore the scroll state the family was created with."""
        self.offset = self._initial_offset
        self.dash_phase = self._initial_dash_phase

    def scroll(self, step):
        """Advance by one tick of the shared velocity step."""
        # Normal motion slides the lines across the field
        self.offset += self.normal.dot(step)
        # Subtracted so positive motion along the tangent moves the dashes along the tangent on screen
        self.dash_phase -= self.tangent.dot(step)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def nearest_line(self, point, center):
        """Nearest line to point, in O(1) regardless of how many lines exist."""
        d_along = self.normal.dot(point - center)
        k = round_half_away((d_along - self.offset) / self.spacing)
        closest = k * self.spacing + self.offset
        return NearestLine(int(k), closest, abs(d_along - closest))

    def line_foot(self, center, coord):
        """Point where the line at coord crosses the normal through center."""
        return center + self.normal * coord

    def dash_position(self, along, diag):
        """
        Position along the drawn line, measured from where dashes are laid out.

        along is the point's tangential coordinate relative to the line foot.
        Dashes are laid out from tangential coordinate diag (shifted back by the
        dash phase) toward -diag. This is the only place that anchoring is
        defined; dash_intervals inverts it for drawing.
        """
        return diag - along - self.dash_phase

    def in_dash(self, pos):
        """True if pos falls on a drawn segment. The boundary is half-open."""
        if not self.is_dashed:
            return True
        return dash_modulo(pos, self.period) < self.dash_length

    def contains(self, point, center, diag):
        """True if point lies inside this family's touch band and not in a gap."""
        nearest = self.nearest_line(point, center)
        if nearest.distance > self.thickness:
            return False
        if not self.is_dashed:
            return True
        foot = self.line_foot(center, nearest.coord)
        along = self.tangent.dot(point - foot)
        return self.in_dash(self.dash_position(along, diag))

    # ------------------------------------------------------------------
    # Drawing support
    # ------------------------------------------------------------------

    def visible_lines(self, diag):
        """(index, coord) for every line that can cross a field of the given diagonal."""
        k_min = int(math.floor((-diag - self.offset) / self.spacing)) - 1
        k_max = int(math.ceil((diag - self.offset) / self.spacing)) + 1
        return [(k, k * self.spacing + self.offset) for k in range(k_min, k_max + 1)]

    def dash_intervals(self, diag, extent=None):
        """
        Drawn intervals of one line as (start, end) tangential coordinates.

        Only the part of the line within [-extent, extent] of the foot is
        returned (extent defaults to diag). Solid families give one interval.
        """
        if extent is None:
            extent = diag
        if not self.is_dashed:
            return [(extent, -extent)]

        period = self.period
        # dash_position decreases as the tangential coordinate increases
        pos_lo = self.dash_position(extent, diag)
        pos_hi = self.dash_position(-extent, diag)
        j_first = int(math.floor(pos_lo / period))
        j_last = int(math.floor(pos_hi / period))

        intervals = []
        for j in range(j_first, j_last + 1):
            seg_start = max(j * period, pos_lo)
            seg_end = min(j * period + self.dash_length, pos_hi)
            if seg_end <= seg_start:
                continue
            # Same formula in reverse: along = diag - pos - dash_phase
            intervals.append((self.dash_position(seg_start, diag), self.dash_position(seg_end, diag)))
        return intervals

    def dash_segments(self, foot, diag, extent=None):
        """World-space (start, end) endpoints of the drawn pieces of the line through foot."""
        return [
            (foot + self.tangent * a, foot + self.tangent * b)
            for a, b in self.dash_intervals(diag, extent)
        ]

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data):
        """Build a family from a plain mapping (as found in a grid config file)."""
        if "normal" not in data or "spacing" not in data:
            raise ValueError("Grid entry needs at least 'normal' and 'spacing'")
        normal = data["normal"]
        if len(normal) != 2:
            raise ValueError(f"Grid normal must have two components, got {normal}")
        return cls(
            normal=Vec2(float(normal[0]), float(normal[1])),
            spacing=float(data["spacing"]),
            offset=float(data.get("offset", 0.0)),
            thickness=float(data.get("thickness", 2.0)),
            dash_length=float(data.get("dash_length", 0.0)),
            gap_length=float(data.get("gap_length", 0.0)),
            color=tuple(data.get("color", (255, 255, 255))),
            name=data.get("name"),
        )


def load_grid_families(filepath):
    """Load grid families from a JSON list of family objects."""
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Grid config not found: {filepath}")
    with open(filepath, "r") as f:
        data = json.load(f)
    if not isinstance(data, list) or not data:
        raise ValueError(f"Grid config must be a non-empty list of families: {filepath}")

    families = []
    for i, entry in enumerate(data):
        try:
            families.append(GridFamily.from_dict(entry))
        except (TypeError, ValueError, KeyError) as e:
            raise ValueError(f"Invalid grid family #{i} in {filepath}: {e}") from e
    return families
