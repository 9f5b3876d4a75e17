import math
from collections.abc import Sequence

from access_route.domain.entities.geography import Coordinate
from access_route.domain.entities.route import NextInstruction, Route
from access_route.domain.planning.planning_geomath import (
    distance,
    distance_to_segment,
    is_near_waypoint,
)

FALLBACK_INSTRUCTION = "Continue to your destination"


class RouteTracker:
    """Read-only checks of a live position against a committed route."""

    def __init__(self, tolerance_m: float = 30.0, near_waypoint_m: float = 20.0):
        self.tolerance_m, self.near_waypoint_m = tolerance_m, near_waypoint_m

    def min_distance(self, p: Coordinate, waypoints: Sequence[Coordinate]) -> float:
        if not waypoints:
            return math.inf
        if len(waypoints) == 1:
            return distance(p, waypoints[0])
        return min(
            distance_to_segment(p, waypoints[i], waypoints[i + 1])
            for i in range(len(waypoints) - 1)
        )

    def is_on_path(
        self, p: Coordinate, waypoints: Sequence[Coordinate], tolerance_m: float | None = None
    ) -> bool:
        tol = self.tolerance_m if tolerance_m is None else tolerance_m
        return self.min_distance(p, waypoints) <= tol

    def next_instruction(self, p: Coordinate, route: Route) -> NextInstruction:
        best_i, best_d = -1, math.inf
        for i, w in enumerate(route.waypoints):
            d = distance(p, w)
            if d < best_d:
                best_i, best_d = i, d
        if 0 <= best_i < len(route.steps):
            step = route.steps[best_i]
            return NextInstruction(step.instruction, best_d, step.maneuver)
        return NextInstruction(FALLBACK_INSTRUCTION, best_d)

    def is_near_waypoint(self, p: Coordinate, waypoint: Coordinate) -> bool:
        return is_near_waypoint(p, waypoint, self.near_waypoint_m)
