from collections import namedtuple

# One false -> true transition of a (family, point) pair.
TouchEvent = namedtuple("TouchEvent", ["family_index", "point_id", "time"])


class TouchState:
    """
    Per-point record of which family bands the point was inside last tick.

    Keyed by stable point id so inserting or removing a point can never shift
    another point's bookkeeping. Each entry holds one boolean per family.
    """
    def __init__(self, num_families):
        if num_families < 0:
            raise ValueError(f"Number of families must be non-negative, got {num_families}")
        self.num_families = num_families
        self._inside = {}  # point_id -> [bool] * num_families

    def __contains__(self, point_id):
        return point_id in self._inside

    def __len__(self):
        return len(self._inside)

    def add_point(self, point_id):
        """Register a point. It starts outside every band."""
        if point_id in self._inside:
            raise ValueError(f"Point {point_id} already tracked")
        self._inside[point_id] = [False] * self.num_families

    def remove_point(self, point_id):
        del self._inside[point_id]

    def was_inside(self, family_index, point_id):
        return self._inside[point_id][family_index]

    def update(self, family_index, point_id, inside):
        """Store the new state; return True on a false -> true transition."""
        flags = self._inside[point_id]
        entered = inside and not flags[family_index]
        flags[family_index] = inside
        return entered

    def row(self, family_index, point_ids):
        """Flags of one family for the given points, in the given order."""
        return [self._inside[pid][family_index] for pid in point_ids]

    def rows(self, point_ids):
        """Family-major table view: one row per family, one column per point."""
        return [self.row(fi, point_ids) for fi in range(self.num_families)]

    @property
    def shape(self):
        return self.num_families, len(self._inside)


class TouchDetector:
    """
    Edge-triggered touch detection between grid families and tracked points.

    Every evaluation recomputes the inside flag of every (family, point) pair
    and reports a TouchEvent only when a pair goes from outside to inside.
    A point resting in a band therefore fires once, not once per tick.
    """
    def __init__(self, families):
        self.families = list(families)
        self.state = TouchState(len(self.families))

    def add_point(self, point_id):
        self.state.add_point(point_id)

    def remove_point(self, point_id):
        self.state.remove_point(point_id)

    def evaluate(self, points, center, diag, time=0.0):
        """
        Evaluate all pairs for one tick.

        points is an iterable of objects with .id and .position. Returns the
        list of TouchEvents for this tick, ordered by family then point.
        """
        points = list(points)
        events = []
        for family_index, family in enumerate(self.families):
            for point in points:
                inside = family.contains(point.position, center, diag)
                if self.state.update(family_index, point.id, inside):
                    events.append(TouchEvent(family_index, point.id, time))
        return events

    def inside_flags(self, point_id):
        """Current inside flags of one point, one per family."""
        return [self.state.was_inside(fi, point_id) for fi in range(len(self.families))]
