"""
Tests for great-circle distance, cumulative distance and duration.
"""

import math

import pytest

from trailtrack.core.geometry import cumulative_distance, duration, great_circle_distance
from trailtrack.models.geo import GeoPoint

from conftest import point_north


POINTS = [
    GeoPoint(0.0, 0.0, 0),
    GeoPoint(0.0, 1.0, 0),
    GeoPoint(52.3676, 4.9041, 0),
    GeoPoint(-33.8688, 151.2093, 0),
    GeoPoint(10.0, 179.9, 0),
    GeoPoint(10.0, -179.9, 0),
    GeoPoint(89.999, 45.0, 0),
    GeoPoint(-90.0, 0.0, 0),
]


class TestGreatCircleDistance:

    def test_one_degree_longitude_at_equator(self):
        d = great_circle_distance(GeoPoint(0.0, 0.0, 0), GeoPoint(0.0, 1.0, 0))
        assert d == pytest.approx(111_195, rel=0.005)

    @pytest.mark.parametrize("a", POINTS)
    @pytest.mark.parametrize("b", POINTS)
    def test_symmetric_and_non_negative(self, a, b):
        assert great_circle_distance(a, b) == great_circle_distance(b, a)
        assert great_circle_distance(a, b) >= 0

    @pytest.mark.parametrize("a", POINTS)
    def test_zero_for_same_coordinates(self, a):
        other = GeoPoint(a.lat, a.lng, a.timestamp + 5000)
        assert great_circle_distance(a, other) == 0.0

    def test_positive_for_different_coordinates(self):
        a = GeoPoint(0.0, 0.0, 0)
        b = GeoPoint(0.0, 0.000001, 0)
        assert great_circle_distance(a, b) > 0

    def test_across_antimeridian_is_short(self):
        """179.9E to 179.9W is ~0.2 degrees, not ~359.8."""
        d = great_circle_distance(GeoPoint(10.0, 179.9, 0), GeoPoint(10.0, -179.9, 0))
        assert d < 25_000

    def test_meters_north(self):
        d = great_circle_distance(point_north(0, 0), point_north(15, 0))
        assert d == pytest.approx(15.0, abs=1e-6)

    def test_non_finite_input_gives_nan(self):
        d = great_circle_distance(GeoPoint(float("nan"), 0.0, 0), GeoPoint(0.0, 0.0, 0))
        assert math.isnan(d)


class TestCumulativeDistance:

    def test_empty_and_single_point(self):
        assert cumulative_distance([]) == 0
        assert cumulative_distance([GeoPoint(1.0, 2.0, 0)]) == 0

    def test_sum_of_consecutive_pairs(self, ten_point_path):
        expected = sum(
            great_circle_distance(ten_point_path[i], ten_point_path[i + 1])
            for i in range(len(ten_point_path) - 1)
        )
        assert cumulative_distance(ten_point_path) == pytest.approx(expected)
        assert cumulative_distance(ten_point_path) == pytest.approx(180.0, abs=1e-4)

    def test_back_and_forth_counts_both_legs(self):
        path = [point_north(0, 0), point_north(50, 1000), point_north(0, 2000)]
        assert cumulative_distance(path) == pytest.approx(100.0, abs=1e-6)


class TestDuration:

    def test_empty_and_single_point(self):
        assert duration([]) == 0
        assert duration([GeoPoint(1.0, 2.0, 12345)]) == 0

    def test_last_minus_first(self, ten_point_path):
        assert duration(ten_point_path) == 9000
