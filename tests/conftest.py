"""
Shared pytest fixtures.

No test opens a window or an audio device: SDL is pointed at its dummy
drivers before pygame (pulled in by config) is imported.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from grid import GridFamily
from points import PointSet, TrackedPoint
from touch import TouchDetector
from vec import Vec2


@pytest.fixture
def origin():
    return Vec2(0.0, 0.0)


@pytest.fixture
def solid_family():
    """Vertical solid lines every 60px with a 2px touch band."""
    return GridFamily(Vec2(1.0, 0.0), spacing=60.0, offset=0.0, thickness=2.0)


@pytest.fixture
def dashed_family():
    """Vertical lines dashed 60 on / 60 off."""
    return GridFamily(Vec2(1.0, 0.0), spacing=60.0, offset=0.0, thickness=2.0,
                      dash_length=60.0, gap_length=60.0)


@pytest.fixture
def make_point():
    """Build a bare tracked point (no point set involved)."""
    def _make(point_id, x, y):
        return TrackedPoint(point_id, Vec2(float(x), float(y)))
    return _make


@pytest.fixture
def detector(solid_family):
    return TouchDetector([solid_family])


@pytest.fixture
def point_set(solid_family, dashed_family):
    return PointSet(TouchDetector([solid_family, dashed_family]))
