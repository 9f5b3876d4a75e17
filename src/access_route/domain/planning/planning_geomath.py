import math

from access_route.domain.entities.geography import Coordinate
from access_route.exceptions import InvalidCoordinatesError

EARTH_RADIUS_M = 6_371_000.0

DIRECTIONS = ("north", "northeast", "east", "southeast", "south", "southwest", "west", "northwest")


def distance(a: Coordinate, b: Coordinate) -> float:
    """Haversine great-circle distance in meters."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlmb = math.radians(b.lng - a.lng)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing(a: Coordinate, b: Coordinate) -> float:
    """Initial compass bearing from a to b, degrees in [0, 360)."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dlmb = math.radians(b.lng - a.lng)
    y = math.sin(dlmb) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlmb)
    deg = math.degrees(math.atan2(y, x))
    return (deg + 360.0) % 360.0


def bearing_to_direction(deg: float) -> str:
    # round half up: 22.5 -> northeast
    return DIRECTIONS[int(math.floor(deg / 45.0 + 0.5)) % 8]


def distance_to_segment(p: Coordinate, start: Coordinate, end: Coordinate) -> float:
    """Meters from p to the closest point of segment start-end.

    The foot point is found in a local equirectangular frame, then measured
    with haversine.
    """
    k = math.cos(math.radians((start.lat + end.lat) / 2))
    ax, ay = (p.lng - start.lng) * k, p.lat - start.lat
    cx, cy = (end.lng - start.lng) * k, end.lat - start.lat
    len_sq = cx * cx + cy * cy
    t = 0.0 if len_sq == 0 else (ax * cx + ay * cy) / len_sq
    t = min(1.0, max(0.0, t))
    foot = Coordinate(start.lat + t * (end.lat - start.lat), start.lng + t * (end.lng - start.lng))
    return distance(p, foot)


def is_near_waypoint(p: Coordinate, waypoint: Coordinate, threshold_m: float = 20.0) -> bool:
    return distance(p, waypoint) <= threshold_m


def validate_coordinate(c: Coordinate, *, name: str = "coordinate") -> Coordinate:
    lat, lng = c.lat, c.lng
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinatesError(f"invalid input: {name} must be finite, got {c}")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise InvalidCoordinatesError(f"invalid input: {name} out of range, got {c}")
    return c
