# domain/planning/planning_core.py
from access_route.app.protocols import CancelSignal
from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import Coord, Coordinate, to_coordinate
from access_route.domain.entities.route import Route
from access_route.domain.planning.planning_geomath import distance, validate_coordinate
from access_route.domain.planning.planning_narrator import RouteNarrator
from access_route.domain.planning.planning_ranker import (
    NEUTRAL_SCORE,
    UNVERIFIED,
    RouteRanker,
    path_features,
)
from access_route.domain.planning.planning_search import AStarRouteSearch, SearchResult
from access_route.engine.hooks import NoopHooks, SearchHooks
from access_route.exceptions import InvalidCoordinatesError


def checked_coordinate(p: Coord, name: str) -> Coordinate:
    try:
        c = to_coordinate(p)
    except (TypeError, ValueError, IndexError) as e:
        raise InvalidCoordinatesError(f"invalid input: {name} {p!r}") from e
    return validate_coordinate(c, name=name)


class RoutePlanner:
    """
    Façade over search -> narrate -> score -> variants.
    Stateless between calls; each plan() owns its own search state.
    """

    def __init__(
        self,
        search: AStarRouteSearch,
        *,
        narrator: RouteNarrator | None = None,
        ranker: RouteRanker | None = None,
        walking_speed_kmh: float = 5.0,
        generate_variants: bool = True,
        hooks: SearchHooks | None = None,
    ):
        self.search = search
        self.narrator = narrator or RouteNarrator()
        self.ranker = ranker or RouteRanker()
        self.walking_speed_kmh = walking_speed_kmh
        self.generate_variants = generate_variants
        self.hooks = hooks or NoopHooks()

    def duration_min(self, distance_m: float) -> float:
        return distance_m / (self.walking_speed_kmh * 1000.0) * 60.0

    def build_route(self, result: SearchResult, prefs: AccessibilityPreferences) -> Route:
        wps = result.waypoints
        total = sum(distance(wps[i], wps[i + 1]) for i in range(len(wps) - 1))
        feats = path_features(result.segments)
        score = self.ranker.score(feats)
        return Route(
            distance_m=total,
            duration_min=self.duration_min(total),
            waypoints=wps,
            steps=self.narrator.narrate(wps, result.segments, prefs),
            accessibility_score=score,
            description=self.ranker.describe(score),
            features=feats,
        )

    def fallback_route(self, start: Coordinate, goal: Coordinate) -> Route:
        d = distance(start, goal)
        return Route(
            distance_m=d,
            duration_min=self.duration_min(d),
            waypoints=(start, goal),
            steps=self.narrator.narrate_direct(start, goal),
            accessibility_score=NEUTRAL_SCORE,
            description=UNVERIFIED,
            accessibility_verified=False,
        )

    async def plan(
        self,
        start: Coord,
        goal: Coord,
        prefs: AccessibilityPreferences,
        *,
        cancel: CancelSignal | None = None,
    ) -> list[Route]:
        """Primary route first, then its shorter and more-accessible siblings.

        A search that does not reach the goal yields a single unverified direct route.
        Raises InvalidCoordinatesError before any search state exists.
        """
        a = checked_coordinate(start, "start")
        b = checked_coordinate(goal, "goal")
        result = await self.search.search(a, b, prefs, cancel=cancel)
        if not result.found:
            self.hooks.fallback(start=a, goal=b, reason=result.outcome)
            route = self.fallback_route(a, b)
            self.hooks.route_planned(route, variants=0)
            return [route]

        route = self.build_route(result, prefs)
        routes = [route]
        if self.generate_variants:
            routes.extend(self.ranker.variants(route))
        self.hooks.route_planned(route, variants=len(routes) - 1)
        return routes
