# access_route/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from access_route.app.protocols import SpatialGraphProvider
from access_route.app.session import NavigationSession
from access_route.config.models import PlannerAppModel
from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.planning.planning_core import RoutePlanner
from access_route.domain.planning.planning_factory import build_planner
from access_route.domain.planning.planning_tracker import RouteTracker
from access_route.engine.hooks import NoopHooks, SearchHooks
from access_route.engine.rng import RNGRegistry
from access_route.io.recorder import JsonlSink, Recorder, Sink
from access_route.io.search_logging import SearchLogging
from access_route.services.speech import LoggingSpeechEngine, SpeechChannel


@dataclass
class App:
    config: PlannerAppModel
    rng: RNGRegistry
    hooks: SearchHooks
    recorder: Recorder
    planner: RoutePlanner

    def tracker(self) -> RouteTracker:
        t = self.config.tracker
        return RouteTracker(tolerance_m=t.on_path_tolerance_m, near_waypoint_m=t.near_waypoint_m)

    def session(
        self,
        preferences: AccessibilityPreferences | Mapping | None = None,
        *,
        speech: SpeechChannel | None = None,
    ) -> NavigationSession:
        if preferences is None:
            prefs = AccessibilityPreferences()
        elif isinstance(preferences, AccessibilityPreferences):
            prefs = preferences
        else:
            prefs = AccessibilityPreferences.model_validate(preferences)
        return NavigationSession(
            self.planner,
            prefs,
            tracker=self.tracker(),
            speech=speech or SpeechChannel(LoggingSpeechEngine()),
            announce_within_m=self.config.tracker.announce_within_m,
        )


def build(
    cfg: PlannerAppModel | Mapping | None = None,
    *,
    provider: SpatialGraphProvider | None = None,
    sinks: tuple[Sink, ...] | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    if cfg is None:
        model = PlannerAppModel()
    else:
        model = cfg if isinstance(cfg, PlannerAppModel) else PlannerAppModel.model_validate(cfg)

    # 1) RNG
    rng_registry = RNGRegistry(model.seed, scenario=model.name)

    # 2) Route history + hooks
    recorder = Recorder(*(sinks or (JsonlSink(),)))
    hooks = (
        SearchLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            recorder=recorder,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Planner
    planner = build_planner(model, rng_registry, provider=provider, hooks=hooks)
    return App(model, rng_registry, hooks, recorder, planner)
