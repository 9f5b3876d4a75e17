# domain/planning/planning_providers.py
import functools
from collections.abc import Iterable, Sequence

from access_route.app.protocols import Neighbor, SpatialGraphProvider
from access_route.domain.entities.geography import Coord, Coordinate, SegmentAttributes, to_coordinate
from access_route.engine.rng import RNGRegistry

SURFACES = ("paved", "asphalt", "concrete", "gravel", "dirt")


class TableGraphProvider(SpatialGraphProvider):
    """Adjacency table keyed by coordinate; lookups tolerate eps of float noise."""

    def __init__(self, *, eps: float = 1e-9):
        self.eps = eps
        self._adj: dict[Coordinate, list[Neighbor]] = {}

    def add_edge(
        self,
        a: Coord,
        b: Coord,
        attrs: SegmentAttributes | None = None,
        *,
        bidirectional: bool = True,
    ) -> None:
        a, b = to_coordinate(a), to_coordinate(b)
        attrs = attrs or SegmentAttributes()
        self._adj.setdefault(a, []).append((b, attrs))
        if bidirectional:
            self._adj.setdefault(b, []).append((a, attrs))

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[Coord, Coord, SegmentAttributes | None]],
        *,
        bidirectional: bool = True,
    ) -> "TableGraphProvider":
        g = cls()
        for a, b, attrs in edges:
            g.add_edge(a, b, attrs, bidirectional=bidirectional)
        return g

    @classmethod
    def from_polyline(
        cls,
        points: Sequence[Coord],
        attrs: SegmentAttributes | None = None,
        *,
        bidirectional: bool = True,
    ) -> "TableGraphProvider":
        return cls.from_edges(
            ((points[i], points[i + 1], attrs) for i in range(len(points) - 1)),
            bidirectional=bidirectional,
        )

    @classmethod
    def straight_line(
        cls, start: Coord, goal: Coord, segments: int = 5, attrs: SegmentAttributes | None = None
    ) -> "TableGraphProvider":
        """Evenly interpolated chain start -> goal with `segments` hops."""
        s, g = to_coordinate(start), to_coordinate(goal)
        pts = [
            Coordinate(s.lat + (g.lat - s.lat) * i / segments, s.lng + (g.lng - s.lng) * i / segments)
            for i in range(segments + 1)
        ]
        return cls.from_polyline(pts, attrs)

    def neighbors(self, c, prefs=None):
        hit = self._adj.get(c)
        if hit is None:
            for k, v in self._adj.items():
                if abs(k.lat - c.lat) <= self.eps and abs(k.lng - c.lng) <= self.eps:
                    hit = v
                    break
        return list(hit or ())


class SeededGridGraphProvider(SpatialGraphProvider):
    """
    8-connected lattice of `step_deg` spacing. Each undirected edge draws its
    attributes from its own seeded substream, so a query is a pure function of
    (seed, edge) and repeated searches see the same world.
    """

    DIRECTIONS = ((1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1))

    def __init__(
        self,
        *,
        rng_registry: RNGRegistry,
        step_deg: float = 1e-4,
        p_elevator: float = 0.2,
        p_ramp: float = 0.4,
        p_stairs: float = 0.5,
        width_m: tuple[float, float] = (1.0, 4.0),
        slope_pct: tuple[float, float] = (0.0, 10.0),
        surfaces: Sequence[str] = SURFACES,
        cache_size: int = 65_536,
    ):
        self.rng, self.step = rng_registry, step_deg
        self.p_elevator, self.p_ramp, self.p_stairs = p_elevator, p_ramp, p_stairs
        self.width_m, self.slope_pct, self.surfaces = width_m, slope_pct, tuple(surfaces)
        self._draw_cached = functools.lru_cache(maxsize=cache_size)(self._draw)

    def _cell(self, c: Coordinate) -> tuple[int, int]:
        return round(c.lat / self.step), round(c.lng / self.step)

    def _point(self, cell: tuple[int, int]) -> Coordinate:
        return Coordinate(cell[0] * self.step, cell[1] * self.step)

    def attributes(self, a: tuple[int, int], b: tuple[int, int]) -> SegmentAttributes:
        return self._draw_cached(*((a, b) if a <= b else (b, a)))

    def _draw(self, a: tuple[int, int], b: tuple[int, int]) -> SegmentAttributes:
        g = self.rng.substream("segment", *a, *b)
        u = g.random(3)
        return SegmentAttributes(
            has_elevator=bool(u[0] < self.p_elevator),
            has_ramp=bool(u[1] < self.p_ramp),
            has_stairs=bool(u[2] < self.p_stairs),
            width_m=float(g.uniform(*self.width_m)),
            slope_pct=float(g.uniform(*self.slope_pct)),
            surface=self.surfaces[int(g.integers(0, len(self.surfaces)))],
        )

    def cache_info(self):
        return self._draw_cached.cache_info()

    def neighbors(self, c, prefs=None):
        here = self._cell(c)
        out = []
        for di, dj in self.DIRECTIONS:
            there = (here[0] + di, here[1] + dj)
            out.append((self._point(there), self.attributes(here, there)))
        return out
