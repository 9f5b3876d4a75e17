import math

import pytest

from access_route.domain.entities.geography import Coordinate
from access_route.domain.planning.planning_geomath import (
    bearing,
    bearing_to_direction,
    distance,
    distance_to_segment,
    is_near_waypoint,
    validate_coordinate,
)
from access_route.exceptions import InvalidCoordinatesError

POINTS = [
    Coordinate(0.0, 0.0),
    Coordinate(0.0, 0.01),
    Coordinate(45.5, -73.6),
    Coordinate(45.51, -73.55),
    Coordinate(-33.9, 151.2),
    Coordinate(51.5, -0.12),
]

M_PER_DEG = 6_371_000.0 * math.pi / 180.0


def test_distance_identity_and_symmetry():
    for a in POINTS:
        assert distance(a, a) == 0.0
        for b in POINTS:
            assert distance(a, b) == pytest.approx(distance(b, a))


def test_distance_triangle_inequality():
    for a in POINTS:
        for b in POINTS:
            for c in POINTS:
                assert distance(a, b) + distance(b, c) >= distance(a, c) - 1e-6


def test_distance_small_eastward_hop():
    d = distance(Coordinate(0, 0), Coordinate(0, 0.01))
    assert d == pytest.approx(1113.0, rel=0.05)
    assert d == pytest.approx(0.01 * M_PER_DEG, rel=1e-9)


@pytest.mark.parametrize(
    "to,expected",
    [((1, 0), 0.0), ((0, 1), 90.0), ((-1, 0), 180.0), ((0, -1), 270.0)],
)
def test_bearing_cardinals(to, expected):
    assert bearing(Coordinate(0, 0), Coordinate(*to)) == pytest.approx(expected)


def test_bearing_range():
    for a in POINTS:
        for b in POINTS:
            if a != b:
                assert 0.0 <= bearing(a, b) < 360.0


@pytest.mark.parametrize(
    "deg,name",
    [
        (0.0, "north"),
        (22.4, "north"),
        (22.5, "northeast"),
        (90.0, "east"),
        (180.0, "south"),
        (224.9, "southwest"),
        (315.0, "northwest"),
        (337.5, "north"),
        (359.9, "north"),
    ],
)
def test_bearing_to_direction(deg, name):
    assert bearing_to_direction(deg) == name


def test_distance_to_segment_perpendicular_and_clamped():
    a, b = Coordinate(0, 0), Coordinate(0, 0.01)
    north_50 = Coordinate(50 / M_PER_DEG, 0.005)
    assert distance_to_segment(north_50, a, b) == pytest.approx(50.0, rel=1e-3)

    beyond = Coordinate(0, 0.011)
    assert distance_to_segment(beyond, a, b) == pytest.approx(distance(beyond, b))

    # degenerate segment collapses to point distance
    assert distance_to_segment(north_50, a, a) == pytest.approx(distance(north_50, a))


def test_is_near_waypoint():
    w = Coordinate(0, 0)
    assert is_near_waypoint(Coordinate(10 / M_PER_DEG, 0), w)
    assert not is_near_waypoint(Coordinate(25 / M_PER_DEG, 0), w)


@pytest.mark.parametrize(
    "c",
    [
        Coordinate(float("nan"), 0.0),
        Coordinate(0.0, float("inf")),
        Coordinate(90.5, 0.0),
        Coordinate(0.0, -180.5),
    ],
)
def test_validate_coordinate_rejects(c):
    with pytest.raises(InvalidCoordinatesError):
        validate_coordinate(c)


def test_validate_coordinate_accepts_edges():
    c = Coordinate(-90.0, 180.0)
    assert validate_coordinate(c) is c
