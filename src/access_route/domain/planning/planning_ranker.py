from collections.abc import Sequence
from dataclasses import replace

from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import SegmentAttributes
from access_route.domain.entities.route import Route

BASE_SCORE = 70
NEUTRAL_SCORE = 50

MOST_ACCESSIBLE = "Most accessible route"
ACCESSIBLE = "Accessible route"
CHALLENGING = "Route with some accessibility challenges"
UNVERIFIED = "Direct route (accessibility not verified)"
SHORTEST_VARIANT = "Shortest route (may have accessibility challenges)"
ACCESSIBLE_VARIANT = "Most accessible route (slightly longer)"


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def path_features(segments: Sequence[SegmentAttributes]) -> frozenset[str]:
    feats = set()
    for s in segments:
        if s.has_ramp:
            feats.add("ramp")
        if s.has_elevator:
            feats.add("elevator")
        if s.has_stairs:
            feats.add("stairs")
    return frozenset(feats)


class RouteRanker:
    def score(self, features: frozenset[str]) -> int:
        ramps, elevators, stairs = "ramp" in features, "elevator" in features, "stairs" in features
        s = BASE_SCORE
        if not stairs and ramps and elevators:
            s += 20
        elif not stairs and (ramps or elevators):
            s += 10
        if stairs and not (ramps or elevators):
            s -= 30
        return _clamp(s)

    def describe(self, score: int) -> str:
        if score > 90:
            return MOST_ACCESSIBLE
        if score >= 70:
            return ACCESSIBLE
        return CHALLENGING

    def variants(self, route: Route) -> list[Route]:
        """Scaled siblings of one searched route; approximations, not independent searches."""
        shorter = replace(
            route,
            distance_m=route.distance_m * 0.8,
            duration_min=route.duration_min * 0.8,
            accessibility_score=_clamp(route.accessibility_score - 20),
            description=SHORTEST_VARIANT,
        )
        longer = replace(
            route,
            distance_m=route.distance_m * 1.2,
            duration_min=route.duration_min * 1.2,
            accessibility_score=_clamp(route.accessibility_score + 15),
            description=ACCESSIBLE_VARIANT,
        )
        return [shorter, longer]


def select_route(routes: Sequence[Route], prefs: AccessibilityPreferences) -> Route:
    """Pick one route automatically; ties keep list order."""
    if not routes:
        raise ValueError("no routes to select from")
    rp = prefs.route_preferences
    if rp.prefer_fewest_obstacles:
        return max(routes, key=lambda r: r.accessibility_score)
    if rp.prefer_shortest_route:
        return min(routes, key=lambda r: r.distance_m)
    return routes[0]
