# domain/planning/planning_search.py
import asyncio
import heapq
import inspect
import math
import time
from dataclasses import dataclass
from typing import Literal

from access_route.app.protocols import CancelSignal, CostModel, Neighbor, SpatialGraphProvider
from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import Coordinate, SegmentAttributes
from access_route.domain.planning.planning_geomath import distance
from access_route.engine.hooks import NoopHooks, SearchHooks
from access_route.exceptions import SearchCancelled

Outcome = Literal["arrived", "exhausted", "budget"]


@dataclass
class SearchNode:
    coord: Coordinate
    g: float
    h: float
    parent: int | None  # arena index
    attrs: SegmentAttributes | None  # edge that reached this node
    closed: bool = False
    version: int = 0

    @property
    def f(self) -> float:
        return self.g + self.h


@dataclass(frozen=True)
class SearchResult:
    outcome: Outcome
    waypoints: tuple[Coordinate, ...]
    segments: tuple[SegmentAttributes, ...]  # segments[i] joins waypoints[i] -> waypoints[i + 1]
    cost: float
    expansions: int

    @property
    def found(self) -> bool:
        return self.outcome == "arrived"


class _CoordIndex:
    """Epsilon lookup over the arena: cells are eps wide, so a match is at most one cell away."""

    def __init__(self, eps: float):
        self.eps = eps
        self._cells: dict[tuple[int, int], list[int]] = {}

    def _cell(self, c: Coordinate) -> tuple[int, int]:
        return math.floor(c.lat / self.eps), math.floor(c.lng / self.eps)

    def add(self, c: Coordinate, k: int) -> None:
        self._cells.setdefault(self._cell(c), []).append(k)

    def find(self, c: Coordinate, nodes: list[SearchNode]) -> int | None:
        ci, cj = self._cell(c)
        best = None
        for di in (-1, 0, 1):
            for dj in (-1, 0, 1):
                for k in self._cells.get((ci + di, cj + dj), ()):
                    p = nodes[k].coord
                    if abs(p.lat - c.lat) < self.eps and abs(p.lng - c.lng) < self.eps:
                        if best is None or k < best:
                            best = k
        return best


class AStarRouteSearch:
    """
    A* over a provider-backed spatial graph.

    OPEN is a heap of (f, h, seq, node, version); seq makes the order total so
    identical inputs always expand identically. Nodes live in an arena and
    point at their parent by index. Stale heap entries (node closed, or its g
    improved since the push) are skipped on pop.
    """

    def __init__(
        self,
        provider: SpatialGraphProvider,
        cost_model: CostModel,
        *,
        arrival_tolerance_m: float = 20.0,
        max_expansions: int = 1000,
        coord_epsilon_deg: float = 1e-5,
        provider_timeout_s: float | None = None,
        hooks: SearchHooks | None = None,
    ):
        self.provider, self.cost_model = provider, cost_model
        self.arrival_tolerance_m = arrival_tolerance_m
        self.max_expansions = max_expansions
        self.eps = coord_epsilon_deg
        self.provider_timeout_s = provider_timeout_s
        self.hooks = hooks or NoopHooks()

    async def _neighbors(self, c: Coordinate, prefs: AccessibilityPreferences) -> list[Neighbor]:
        try:
            out = self.provider.neighbors(c, prefs)
            if inspect.isawaitable(out):
                if self.provider_timeout_s is not None:
                    out = await asyncio.wait_for(out, self.provider_timeout_s)
                else:
                    out = await out
            return list(out)
        except Exception as e:  # a failed lookup means "no neighbors from here"
            self.hooks.provider_error(at=c, error=e)
            return []

    async def search(
        self,
        start: Coordinate,
        goal: Coordinate,
        prefs: AccessibilityPreferences,
        *,
        cancel: CancelSignal | None = None,
    ) -> SearchResult:
        t0 = time.perf_counter()
        nodes: list[SearchNode] = [SearchNode(start, 0.0, distance(start, goal), None, None)]
        index = _CoordIndex(self.eps)
        index.add(start, 0)
        seq = 0
        open_q: list[tuple[float, float, int, int, int]] = [(nodes[0].f, nodes[0].h, seq, 0, 0)]
        expansions = 0
        outcome: Outcome = "exhausted"
        self.hooks.search_start(start=start, goal=goal, h0=nodes[0].h)

        while open_q:
            if cancel is not None and cancel.is_set():
                self.hooks.cancelled(expansions=expansions)
                raise SearchCancelled(expansions)
            _, _, _, k, version = heapq.heappop(open_q)
            cur = nodes[k]
            if cur.closed or version != cur.version:
                continue
            if distance(cur.coord, goal) < self.arrival_tolerance_m:
                result = self._reconstruct(nodes, k, expansions)
                self.hooks.search_end(
                    found=True,
                    expansions=expansions,
                    cost=result.cost,
                    waypoints=len(result.waypoints),
                    ms=(time.perf_counter() - t0) * 1000,
                )
                return result
            if expansions >= self.max_expansions:
                outcome = "budget"
                break

            cur.closed = True
            expansions += 1
            self.hooks.expand(
                at=cur.coord, g=cur.g, f=cur.f, open_size=len(open_q), expansions=expansions
            )
            for nb, attrs in await self._neighbors(cur.coord, prefs):
                verdict = self.cost_model.evaluate(attrs, prefs)
                if not verdict.admissible:
                    continue
                j = index.find(nb, nodes)
                if j is not None and nodes[j].closed:
                    continue
                g = cur.g + distance(cur.coord, nb) * verdict.multiplier
                if j is None:
                    j = len(nodes)
                    nodes.append(SearchNode(nb, g, distance(nb, goal), k, attrs))
                    index.add(nb, j)
                elif g < nodes[j].g:
                    n = nodes[j]
                    n.g, n.parent, n.attrs = g, k, attrs
                    n.version += 1
                else:
                    continue
                seq += 1
                heapq.heappush(open_q, (nodes[j].f, nodes[j].h, seq, j, nodes[j].version))
            # expansion boundary: let a superseding request run and set our cancel signal
            await asyncio.sleep(0)

        self.hooks.search_end(
            found=False,
            expansions=expansions,
            cost=None,
            waypoints=0,
            ms=(time.perf_counter() - t0) * 1000,
        )
        return SearchResult(outcome, (start, goal), (), math.inf, expansions)

    @staticmethod
    def _reconstruct(nodes: list[SearchNode], k: int, expansions: int) -> SearchResult:
        coords, segs = [], []
        cost = nodes[k].g
        cur: int | None = k
        while cur is not None:
            n = nodes[cur]
            coords.append(n.coord)
            if n.attrs is not None:
                segs.append(n.attrs)
            cur = n.parent
        coords.reverse()
        segs.reverse()
        return SearchResult("arrived", tuple(coords), tuple(segs), cost, expansions)
