from collections.abc import Sequence

from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import Coordinate, SegmentAttributes
from access_route.domain.entities.route import Maneuver, RouteStep
from access_route.domain.planning.planning_geomath import bearing, bearing_to_direction, distance

ARRIVE = "Arrive at your destination"


def classify_turn(turn_angle: float) -> Maneuver:
    """Bucket a clockwise turn angle in [0, 360).

    The buckets are not symmetric around 180; kept as documented behaviour.
    """
    if turn_angle < 45 or turn_angle > 315:
        return "straight"
    if turn_angle < 135:
        return "turn-right"
    if turn_angle < 225:
        return "uturn"
    return "turn-left"


def _turn_text(maneuver: Maneuver, direction: str, meters: int) -> str:
    if maneuver == "straight":
        return f"Continue {direction} for {meters} meters"
    if maneuver == "turn-right":
        return f"Turn right and go {meters} meters"
    if maneuver == "uturn":
        return f"Make a U-turn and go {meters} meters"
    return f"Turn left and go {meters} meters"


class RouteNarrator:
    """Turn a waypoint sequence into one step per consecutive pair."""

    def narrate(
        self,
        waypoints: Sequence[Coordinate],
        segments: Sequence[SegmentAttributes] = (),
        prefs: AccessibilityPreferences | None = None,
    ) -> tuple[RouteStep, ...]:
        if len(waypoints) == 1:
            # start was already within arrival tolerance
            return (RouteStep(ARRIVE, 0.0, "arrive", waypoints[0]),)
        callouts = prefs is not None and prefs.requires_wheelchair_access
        steps: list[RouteStep] = []
        last = len(waypoints) - 2
        prev_bearing = None
        for i in range(len(waypoints) - 1):
            a, b = waypoints[i], waypoints[i + 1]
            d = distance(a, b)
            brg = bearing(a, b)
            direction = bearing_to_direction(brg)
            meters = round(d)

            if i == 0:
                text, maneuver = f"Head {direction} for {meters} meters", "straight"
            elif i == last:
                steps.append(RouteStep(ARRIVE, 0.0, "arrive", b))
                break
            else:
                maneuver = classify_turn((brg - prev_bearing + 360) % 360)
                text = _turn_text(maneuver, direction, meters)

            attrs = segments[i] if i < len(segments) else None
            if callouts and attrs is not None:
                if attrs.has_elevator:
                    text, maneuver = f"{text}. Use elevator ahead", "elevator"
                elif attrs.has_ramp:
                    text, maneuver = f"{text}. Use ramp ahead", "ramp"

            steps.append(RouteStep(text, d, maneuver, b))
            prev_bearing = brg
        return tuple(steps)

    def narrate_direct(self, start: Coordinate, goal: Coordinate) -> tuple[RouteStep, ...]:
        """Steps for an unverified straight-line route."""
        return (
            RouteStep("Head to your destination", distance(start, goal), "straight", goal),
            RouteStep(ARRIVE, 0.0, "arrive", goal),
        )
