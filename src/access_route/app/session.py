# app/session.py
import asyncio
from dataclasses import dataclass

from access_route.app.protocols import PositionFeed
from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import Coord, Coordinate
from access_route.domain.entities.route import NextInstruction, Route
from access_route.domain.planning.planning_core import RoutePlanner, checked_coordinate
from access_route.domain.planning.planning_ranker import select_route
from access_route.domain.planning.planning_tracker import RouteTracker
from access_route.exceptions import SearchCancelled
from access_route.services.speech import SpeechChannel


@dataclass(frozen=True)
class TrackingUpdate:
    position: Coordinate
    on_path: bool
    next_instruction: NextInstruction | None
    reroute_needed: bool
    arrived: bool = False


class NavigationSession:
    """
    One traveler, one current route, at most one search in flight.

    Every request takes a new token and cancels the previous request's search;
    a result is applied only if its token is still the newest, so a slow stale
    search can never overwrite a newer route.
    """

    def __init__(
        self,
        planner: RoutePlanner,
        preferences: AccessibilityPreferences,
        *,
        tracker: RouteTracker | None = None,
        speech: SpeechChannel | None = None,
        announce_within_m: float = 30.0,
    ):
        self.planner = planner
        self.preferences = preferences
        self.tracker = tracker or RouteTracker()
        self.speech = speech
        self.announce_within_m = announce_within_m
        self.routes: list[Route] = []
        self.route: Route | None = None
        self.goal: Coordinate | None = None
        self.rerouting = False
        self._token = 0
        self._cancel: asyncio.Event | None = None
        self._arrival_announced = False

    @property
    def token(self) -> int:
        return self._token

    @property
    def speaking(self) -> bool:
        return self.speech is not None and self.preferences.route_preferences.audio_guidance

    def _say(self, text: str) -> None:
        if self.speaking:
            self.speech.speak(text)

    def _supersede(self) -> int:
        self._token += 1
        if self._cancel is not None:
            self._cancel.set()
            self._cancel = None
        return self._token

    async def request_routes(self, start: Coord, goal: Coord) -> list[Route] | None:
        """Plan and commit a route; None when this request was superseded."""
        a = checked_coordinate(start, "start")
        b = checked_coordinate(goal, "goal")
        token = self._supersede()
        cancel = self._cancel = asyncio.Event()
        is_reroute = self.route is not None
        try:
            routes = await self.planner.plan(a, b, self.preferences, cancel=cancel)
        except SearchCancelled:
            return None
        if token != self._token:
            return None

        self._cancel = None
        self.routes, self.goal = routes, b
        self.route = select_route(routes, self.preferences)
        self.rerouting = False
        self._arrival_announced = False
        if is_reroute:
            self._say("New route found. Continuing navigation.")
        elif self.speaking:
            self._say(self._route_summary(self.route))
        return routes

    @staticmethod
    def _route_summary(route: Route) -> str:
        text = (
            f"Route found. {route.distance_m / 1000:.1f} kilometers, "
            f"approximately {round(route.duration_min)} minutes."
        )
        if route.steps:
            text += f" First direction: {route.steps[0].instruction}"
        return text

    def update_position(self, position: Coord) -> TrackingUpdate:
        p = checked_coordinate(position, "position")
        if self.route is None:
            return TrackingUpdate(p, False, None, False)

        if not self.tracker.is_on_path(p, self.route.waypoints):
            reroute = not self.rerouting
            if reroute:
                self.rerouting = True
                self._say("You appear to be off route. Recalculating.")
            return TrackingUpdate(p, False, None, reroute)

        nxt = self.tracker.next_instruction(p, self.route)
        arrived = self.tracker.is_near_waypoint(p, self.route.waypoints[-1]) or (
            nxt.maneuver == "arrive" and nxt.distance_m < self.announce_within_m
        )
        if arrived and not self._arrival_announced:
            self._arrival_announced = True
            self._say("You have arrived at your destination.")
        return TrackingUpdate(p, True, nxt, False, arrived)

    async def poll(self, feed: PositionFeed) -> TrackingUpdate | None:
        """Pull the latest fix; reroute from it when the traveler has left the route."""
        pos = feed.latest()
        if pos is None:
            return None
        update = self.update_position(pos)
        if update.reroute_needed and self.goal is not None:
            await self.request_routes(update.position, self.goal)
        return update

    def stop(self) -> None:
        self._supersede()
        if self.route is not None:
            self._say("Navigation stopped.")
        self.routes, self.route, self.goal = [], None, None
        self.rerouting = False
