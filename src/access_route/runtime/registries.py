# runtime/registries.py
from collections.abc import Callable
from typing import Any

from access_route.app.protocols import CostModel, SpatialGraphProvider
from access_route.config.models import (
    CostModelAccessibilityModel,
    CostModelDistanceModel,
    CostModelUnion,
    ProviderGridModel,
    ProviderPolylineModel,
    ProviderTableModel,
    ProviderUnion,
    SegmentAttributesModel,
)
from access_route.domain.entities.geography import SegmentAttributes
from access_route.domain.planning.planning_costs import AccessibilityCostModel, DistanceCostModel
from access_route.domain.planning.planning_providers import (
    SeededGridGraphProvider,
    TableGraphProvider,
)

ProviderFactory = Callable[[ProviderUnion, dict[str, Any]], SpatialGraphProvider]
CostModelFactory = Callable[[CostModelUnion, dict[str, Any]], CostModel]

_provider_registry: dict[str, ProviderFactory] = {}
_cost_model_registry: dict[str, CostModelFactory] = {}


def _attrs(m: SegmentAttributesModel) -> SegmentAttributes:
    return SegmentAttributes(**m.model_dump())


# ------------------- Spatial graph providers ---------------------------


def register_provider(kind: str):
    def deco(fn: ProviderFactory):
        _provider_registry[kind] = fn
        return fn

    return deco


def make_provider(cfg: ProviderUnion, *, deps: dict) -> SpatialGraphProvider:
    try:
        factory = _provider_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown provider kind {cfg.kind!r}")
    return factory(cfg, deps)


@register_provider("grid")
def _make_grid(cfg: ProviderGridModel, deps):
    return SeededGridGraphProvider(
        rng_registry=deps["rng_registry"],
        step_deg=cfg.step_deg,
        p_elevator=cfg.p_elevator,
        p_ramp=cfg.p_ramp,
        p_stairs=cfg.p_stairs,
        width_m=cfg.width_m,
        slope_pct=cfg.slope_pct,
        cache_size=cfg.cache_size,
    )


@register_provider("table")
def _make_table(cfg: ProviderTableModel, deps):
    return TableGraphProvider.from_edges(
        ((cfg.nodes[e.a], cfg.nodes[e.b], _attrs(e.attrs)) for e in cfg.edges),
        bidirectional=cfg.bidirectional,
    )


@register_provider("polyline")
def _make_polyline(cfg: ProviderPolylineModel, deps):
    return TableGraphProvider.from_polyline(cfg.points, _attrs(cfg.attrs))


# --------------------- Cost models  ---------------------


def register_cost_model(kind: str):
    def deco(fn: CostModelFactory):
        _cost_model_registry[kind] = fn
        return fn

    return deco


def make_cost_model(cfg: CostModelUnion, *, deps: dict | None = None) -> CostModel:
    try:
        factory = _cost_model_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown cost model kind {cfg.kind!r}")
    return factory(cfg, deps or {})


@register_cost_model("accessibility")
def _make_accessibility(cfg: CostModelAccessibilityModel, deps):
    return AccessibilityCostModel(
        elevator=cfg.elevator, ramp=cfg.ramp, stairs=cfg.stairs, smooth=cfg.smooth
    )


@register_cost_model("distance")
def _make_distance(cfg: CostModelDistanceModel, deps):
    return DistanceCostModel()
