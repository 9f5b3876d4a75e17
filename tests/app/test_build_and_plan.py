import asyncio
import json
import math
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from access_route.app.build import build
from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import Coordinate
from access_route.domain.planning.planning_providers import TableGraphProvider
from access_route.domain.planning.planning_ranker import (
    ACCESSIBLE,
    ACCESSIBLE_VARIANT,
    SHORTEST_VARIANT,
    UNVERIFIED,
)
from access_route.exceptions import InvalidCoordinatesError
from access_route.io.recorder import MemorySink
from access_route.runtime.registries import make_cost_model, make_provider

START, GOAL = (0.0, 0.0), (0.0, 0.01)

WHEELCHAIR = {
    "disabilityTypes": ["wheelchair"],
    "routePreferences": {"avoidStairs": True},
}


def plan(app, start, goal, prefs=None):
    prefs = prefs if prefs is not None else AccessibilityPreferences()
    if not isinstance(prefs, AccessibilityPreferences):
        prefs = AccessibilityPreferences.model_validate(prefs)
    return asyncio.run(app.planner.plan(start, goal, prefs))


def test_straight_line_scenario():
    sink = MemorySink()
    app = build(
        {"name": "test", "run_id": "t-1"},
        provider=TableGraphProvider.straight_line(START, GOAL, segments=5),
        sinks=(sink,),
    )
    routes = plan(app, START, GOAL)
    primary = routes[0]

    assert primary.distance_m == pytest.approx(1113.0, rel=0.05)
    assert primary.duration_min == pytest.approx(primary.distance_m / 5000 * 60)
    assert len(primary.waypoints) == 6
    assert len(primary.steps) == 5
    assert primary.steps[0].maneuver == "straight"
    assert "east" in primary.steps[0].instruction
    assert primary.steps[-1].maneuver == "arrive"
    assert primary.steps[-1].distance_m == 0.0
    assert primary.accessibility_score == 70
    assert primary.description == ACCESSIBLE
    assert primary.accessibility_verified

    assert [r.description for r in routes[1:]] == [SHORTEST_VARIANT, ACCESSIBLE_VARIANT]

    assert len(sink.records) == 1
    rec = sink.records[0]
    assert rec["run_id"] == "t-1"
    assert rec["accessibility_score"] == 70
    assert rec["waypoints"][0] == START
    json.dumps(rec)


def test_wheelchair_detour_from_table_config():
    cfg = {
        "provider": {
            "kind": "table",
            "nodes": {
                "S": [0.0, 0.0],
                "A": [0.0, 0.001],
                "D": [-0.002, 0.0015],
                "G": [0.0, 0.003],
            },
            "edges": [
                {"a": "S", "b": "A", "attrs": {"has_stairs": True}},
                {"a": "A", "b": "G"},
                {"a": "S", "b": "D", "attrs": {"has_ramp": True}},
                {"a": "D", "b": "G"},
            ],
        }
    }
    app = build(cfg, sinks=(MemorySink(),), use_logging=False)
    primary = plan(app, (0.0, 0.0), (0.0, 0.003), WHEELCHAIR)[0]
    assert primary.waypoints[1] == Coordinate(-0.002, 0.0015)
    assert primary.features == frozenset({"ramp"})
    assert primary.accessibility_score == 80
    assert primary.steps[0].maneuver == "ramp"
    assert primary.steps[0].instruction.endswith("Use ramp ahead")

    # without a wheelchair profile the stairs leg stays on the shorter route
    walker = plan(app, (0.0, 0.0), (0.0, 0.003), {"routePreferences": {"avoidStairs": True}})[0]
    assert walker.waypoints[1] == Coordinate(0.0, 0.001)
    assert walker.accessibility_score == 40


def test_polyline_provider_from_config():
    cfg = {"provider": {"kind": "polyline", "points": [[0, 0], [0, 0.005], [0.005, 0.005]]}}
    app = build(cfg, sinks=(MemorySink(),), use_logging=False)
    primary = plan(app, (0, 0), (0.005, 0.005))[0]
    assert len(primary.waypoints) == 3
    assert [s.maneuver for s in primary.steps] == ["straight", "arrive"]


def test_unreachable_goal_falls_back_to_direct_route():
    class Empty:
        def neighbors(self, c, prefs):
            return []

    sink = MemorySink()
    app = build(provider=Empty(), sinks=(sink,))
    routes = plan(app, START, GOAL)
    assert len(routes) == 1
    r = routes[0]
    assert r.accessibility_score == 50
    assert r.description == UNVERIFIED
    assert not r.accessibility_verified
    assert r.waypoints == (Coordinate(*START), Coordinate(*GOAL))
    assert [s.maneuver for s in r.steps] == ["straight", "arrive"]
    assert sink.records[0]["accessibility_verified"] is False


@pytest.mark.parametrize(
    "start,goal",
    [
        ((math.nan, 0.0), GOAL),
        (START, (0.0, math.inf)),
        ((91.0, 0.0), GOAL),
        (START, (0.0, 181.0)),
        (("x",), GOAL),
    ],
)
def test_invalid_coordinates_rejected_before_search(start, goal):
    calls = []

    class Spy:
        def neighbors(self, c, prefs):
            calls.append(c)
            return []

    app = build(provider=Spy(), sinks=(MemorySink(),), use_logging=False)
    with pytest.raises(InvalidCoordinatesError):
        plan(app, start, goal)
    assert calls == []


def test_grid_planning_is_deterministic():
    def once():
        sink = MemorySink()
        app = build({"seed": 5}, sinks=(sink,))
        plan(app, (0.0, 0.0), (0.0006, 0.0004), WHEELCHAIR)
        return json.dumps(sink.records)

    assert once() == once()


def test_variants_can_be_disabled():
    app = build(
        {"route": {"generate_variants": False}},
        provider=TableGraphProvider.straight_line(START, GOAL),
        sinks=(MemorySink(),),
        use_logging=False,
    )
    assert len(plan(app, START, GOAL)) == 1


@pytest.mark.parametrize(
    "cfg",
    [
        {"provider": {"kind": "teleport"}},
        {"provider": {"kind": "table", "nodes": {"S": [0, 0]}, "edges": [{"a": "S", "b": "Q"}]}},
        {"provider": {"kind": "polyline", "points": [[0, 0]]}},
        {"cost_model": {"kind": "accessibility", "stairs": 0}},
        {"search": {"max_expansions": 0}},
        {"bogus": 1},
    ],
)
def test_config_validation(cfg):
    with pytest.raises(ValidationError):
        build(cfg, use_logging=False)


def test_registries_reject_unknown_kind():
    with pytest.raises(ValueError):
        make_provider(SimpleNamespace(kind="nope"), deps={})
    with pytest.raises(ValueError):
        make_cost_model(SimpleNamespace(kind="nope"))


def test_distance_cost_model_ignores_stairs():
    cfg = {
        "cost_model": {"kind": "distance"},
        "provider": {
            "kind": "table",
            "nodes": {"S": [0, 0], "A": [0, 0.001], "G": [0, 0.002]},
            "edges": [{"a": "S", "b": "A", "attrs": {"has_stairs": True}}, {"a": "A", "b": "G"}],
        },
    }
    app = build(cfg, sinks=(MemorySink(),), use_logging=False)
    primary = plan(app, (0, 0), (0, 0.002), WHEELCHAIR)[0]
    assert primary.accessibility_verified
    assert primary.accessibility_score == 40


def test_start_within_arrival_tolerance_gives_arrive_route():
    app = build(
        provider=TableGraphProvider.straight_line(START, GOAL),
        sinks=(MemorySink(),),
        use_logging=False,
    )
    routes = plan(app, START, (0.0, 0.0001))
    primary = routes[0]
    assert primary.accessibility_verified
    assert primary.waypoints == (Coordinate(*START),)
    assert [s.maneuver for s in primary.steps] == ["arrive"]
    assert primary.steps[-1].distance_m == 0.0
    assert primary.distance_m == 0.0
    assert all(r.steps[-1].maneuver == "arrive" for r in routes)
