from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, model_validator

from access_route.domain.entities.geography import Surface


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: PositiveInt = 1


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    arrival_tolerance_m: PositiveFloat = 20.0
    max_expansions: PositiveInt = 1000
    coord_epsilon_deg: PositiveFloat = 1e-5
    provider_timeout_s: PositiveFloat | None = None


class RouteModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    walking_speed_kmh: PositiveFloat = 5.0
    generate_variants: bool = True


class TrackerModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    on_path_tolerance_m: PositiveFloat = 30.0
    near_waypoint_m: PositiveFloat = 20.0
    announce_within_m: PositiveFloat = 30.0


# ----------------- COST MODELS ---------------------


class CostModelAccessibilityModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["accessibility"] = "accessibility"
    elevator: PositiveFloat = 0.8
    ramp: PositiveFloat = 0.9
    stairs: PositiveFloat = 1.5
    smooth: PositiveFloat = 0.9


class CostModelDistanceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["distance"] = "distance"


CostModelUnion = Annotated[
    CostModelAccessibilityModel | CostModelDistanceModel, Field(discriminator="kind")
]

# ----------------- PROVIDERS ---------------------


class SegmentAttributesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    has_elevator: bool = False
    has_ramp: bool = False
    has_stairs: bool = False
    width_m: float = Field(default=2.0, ge=0)
    slope_pct: float = 0.0
    surface: Surface = "paved"


class EdgeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    a: str
    b: str
    attrs: SegmentAttributesModel = Field(default_factory=SegmentAttributesModel)


class ProviderTableModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["table"] = "table"
    nodes: dict[str, tuple[float, float]]
    edges: list[EdgeModel] = Field(default_factory=list)
    bidirectional: bool = True

    @model_validator(mode="after")
    def _known_nodes(self):
        for e in self.edges:
            for end in (e.a, e.b):
                if end not in self.nodes:
                    raise ValueError(f"edge references unknown node {end!r}")
        return self


class ProviderPolylineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["polyline"] = "polyline"
    points: list[tuple[float, float]] = Field(min_length=2)
    attrs: SegmentAttributesModel = Field(default_factory=SegmentAttributesModel)


class ProviderGridModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["grid"] = "grid"
    step_deg: PositiveFloat = 1e-4
    p_elevator: float = Field(default=0.2, ge=0, le=1)
    p_ramp: float = Field(default=0.4, ge=0, le=1)
    p_stairs: float = Field(default=0.5, ge=0, le=1)
    width_m: tuple[float, float] = (1.0, 4.0)
    slope_pct: tuple[float, float] = (0.0, 10.0)
    cache_size: PositiveInt = 65_536


ProviderUnion = Annotated[
    ProviderGridModel | ProviderTableModel | ProviderPolylineModel, Field(discriminator="kind")
]

# ------------------------------------------------------------------


class PlannerAppModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "access_route"
    run_id: str = "local"
    seed: int = 123
    log: LogModel = LogModel()
    search: SearchModel = SearchModel()
    route: RouteModel = RouteModel()
    tracker: TrackerModel = TrackerModel()
    cost_model: CostModelUnion = Field(default_factory=CostModelAccessibilityModel)
    provider: ProviderUnion = Field(default_factory=ProviderGridModel)
