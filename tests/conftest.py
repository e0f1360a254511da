"""
Pytest fixtures for trailtrack tests.

Provides point builders, a fake monotonic clock for the player, and
stores/journals rooted in tmp_path.
"""

import math

import pytest

from trailtrack.config import EARTH_RADIUS_M
from trailtrack.core.trail_store import SessionJournal, TrailStore, build_trail
from trailtrack.models.geo import GeoPoint


# Degrees of latitude per meter on the haversine sphere
DEG_PER_M = 180.0 / (math.pi * EARTH_RADIUS_M)

BASE_LAT = 52.3676
BASE_LNG = 4.9041


def point_north(meters: float, timestamp: int, lat: float = BASE_LAT, lng: float = BASE_LNG) -> GeoPoint:
    """A point `meters` due north of (lat, lng)."""
    return GeoPoint(lat=lat + meters * DEG_PER_M, lng=lng, timestamp=timestamp)


class FakeClock:
    """Monotonic clock in seconds that only moves when told to."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ten_point_path():
    """10 points, 1 s apart (9000 ms total), 20 m apart northwards."""
    return [point_north(20.0 * i, 1_700_000_000_000 + 1000 * i) for i in range(10)]


@pytest.fixture
def ten_point_trail(ten_point_path):
    return build_trail(ten_point_path, created_ms=1_700_000_100_000)


@pytest.fixture
def store(tmp_path):
    return TrailStore(tmp_path / "trails.json")


@pytest.fixture
def journal(tmp_path):
    return SessionJournal(tmp_path / "active_session.json")
