from dataclasses import dataclass
from typing import Literal

Surface = Literal["paved", "asphalt", "concrete", "gravel", "dirt", "other"]

SMOOTH_SURFACES: frozenset[str] = frozenset({"paved", "asphalt", "concrete"})
ROUGH_SURFACES: frozenset[str] = frozenset({"gravel", "dirt"})


# Core geometry types used by the planner
@dataclass(frozen=True)
class Coordinate:
    lat: float  # degrees, WGS84
    lng: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class SegmentAttributes:
    """Physical descriptors of the edge leading into a coordinate."""

    has_elevator: bool = False
    has_ramp: bool = False
    has_stairs: bool = False
    width_m: float = 2.0
    slope_pct: float = 0.0  # unsigned grade
    surface: Surface = "paved"


Coord = Coordinate | tuple[float, float]


def to_coordinate(p: Coord) -> Coordinate:
    return p if isinstance(p, Coordinate) else Coordinate(float(p[0]), float(p[1]))
