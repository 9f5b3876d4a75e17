from dataclasses import dataclass, field
from typing import Literal

from access_route.domain.entities.geography import Coordinate

Maneuver = Literal["straight", "turn-left", "turn-right", "uturn", "elevator", "ramp", "arrive"]


@dataclass(frozen=True)
class RouteStep:
    instruction: str
    distance_m: float  # to the next maneuver
    maneuver: Maneuver
    waypoint: Coordinate | None = None

    def to_record(self) -> dict:
        return {
            "instruction": self.instruction,
            "distance": self.distance_m,
            "maneuver": self.maneuver,
            "waypoint": self.waypoint.as_tuple() if self.waypoint else None,
        }


@dataclass(frozen=True)
class Route:
    distance_m: float
    duration_min: float
    waypoints: tuple[Coordinate, ...]
    steps: tuple[RouteStep, ...]
    accessibility_score: int
    description: str
    accessibility_verified: bool = True
    features: frozenset[str] = field(default_factory=frozenset)  # "ramp", "elevator", "stairs"

    def to_record(self) -> dict:
        """Flat record for map rendering and route history."""
        return {
            "distance": self.distance_m,
            "duration": self.duration_min,
            "waypoints": [w.as_tuple() for w in self.waypoints],
            "steps": [s.to_record() for s in self.steps],
            "accessibility_score": self.accessibility_score,
            "description": self.description,
            "accessibility_verified": self.accessibility_verified,
            "features": sorted(self.features),
        }


@dataclass(frozen=True)
class NextInstruction:
    instruction: str
    distance_m: float
    maneuver: Maneuver | None = None
