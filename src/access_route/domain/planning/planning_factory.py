# domain/planning/planning_factory.py

from access_route.app.protocols import SpatialGraphProvider
from access_route.config.models import PlannerAppModel
from access_route.domain.planning.planning_core import RoutePlanner
from access_route.domain.planning.planning_search import AStarRouteSearch
from access_route.engine.hooks import SearchHooks
from access_route.engine.rng import RNGRegistry
from access_route.runtime.registries import make_cost_model, make_provider


def build_planner(
    cfg: PlannerAppModel,
    rng_registry: RNGRegistry,
    *,
    provider: SpatialGraphProvider | None = None,
    hooks: SearchHooks | None = None,
) -> RoutePlanner:
    """An explicit provider (e.g. a live map-data client) overrides cfg.provider."""
    provider = provider or make_provider(cfg.provider, deps={"rng_registry": rng_registry})
    cost_model = make_cost_model(cfg.cost_model)

    search = AStarRouteSearch(
        provider,
        cost_model,
        arrival_tolerance_m=cfg.search.arrival_tolerance_m,
        max_expansions=cfg.search.max_expansions,
        coord_epsilon_deg=cfg.search.coord_epsilon_deg,
        provider_timeout_s=cfg.search.provider_timeout_s,
        hooks=hooks,
    )
    return RoutePlanner(
        search,
        walking_speed_kmh=cfg.route.walking_speed_kmh,
        generate_variants=cfg.route.generate_variants,
        hooks=hooks,
    )
