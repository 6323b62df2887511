import math

from vec import Vec2


class TrackedPoint:
    """
    A marker on the plane that grid lines can touch.
    """
    def __init__(self, point_id, position):
        self.id = point_id
        self.position = position

    def __repr__(self):
        return f"TrackedPoint(id={self.id}, position=({self.position.x:.1f}, {self.position.y:.1f}))"


class PointSet:
    """
    Ordered collection of tracked points.

    Every structural change is mirrored in the touch detector's bookkeeping in
    the same call, so the detector always holds exactly one entry per point.
    Ids are handed out in increasing order and never reused.
    """
    def __init__(self, detector, positions=()):
        self.detector = detector
        self.points = []
        self._next_id = 1
        for position in positions:
            self.add(position)

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    @property
    def ids(self):
        return [p.id for p in self.points]

    def add(self, position):
        """Append a point at position and return it."""
        position = Vec2(float(position[0]), float(position[1])) if not isinstance(position, Vec2) else position
        if not position.is_finite():
            raise ValueError(f"Point position must be finite, got {position}")
        point = TrackedPoint(self._next_id, position)
        self.detector.add_point(point.id)
        self._next_id += 1
        self.points.append(point)
        return point

    def remove_at(self, index):
        """
        Remove the point at index (insertion order) and return it.

        index must be in range; an out-of-range index raises IndexError.
        """
        point = self.points[index]
        self.detector.remove_point(point.id)
        del self.points[index]
        return point

    def remove(self, point_id):
        for index, point in enumerate(self.points):
            if point.id == point_id:
                return self.remove_at(index)
        raise KeyError(point_id)

    def nearest(self, position, radius):
        """Index of the closest point within radius of position, or None."""
        best_index = None
        best_dist = radius
        for index, point in enumerate(self.points):
            d = math.hypot(point.position.x - position.x, point.position.y - position.y)
            # <= so the latest of equally close points wins
            if d <= best_dist:
                best_dist = d
                best_index = index
        return best_index

    def toggle_at(self, position, radius):
        """Remove the point under position if there is one, otherwise add one there."""
        index = self.nearest(position, radius)
        if index is not None:
            return self.remove_at(index)
        return self.add(position)

    def reset(self, positions):
        """Replace every point with a fresh set."""
        while self.points:
            self.remove_at(len(self.points) - 1)
        for position in positions:
            self.add(position)
