# config/preferences.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DisabilityType = Literal["wheelchair", "visual", "hearing", "cognitive", "mobility", "none"]
MobilityAid = Literal["none", "manual_wheelchair", "power_wheelchair", "walker", "cane"]

WHEELCHAIR_AIDS = frozenset({"manual_wheelchair", "power_wheelchair"})


class _Snapshot(BaseModel):
    # profile store sends camelCase; python callers use snake_case
    model_config = ConfigDict(
        extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class RoutePreferences(_Snapshot):
    avoid_stairs: bool = False
    prefer_elevators: bool = False
    prefer_ramps: bool = False
    prefer_smooth_terrain: bool = False
    prefer_shortest_route: bool = True
    prefer_fewest_obstacles: bool = False
    audio_guidance: bool = False
    max_slope: float | None = None  # percent grade
    min_width: float | None = None  # meters

    @field_validator("max_slope", "min_width")
    @classmethod
    def _nonneg(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("limits must be >= 0")
        return v


class AccessibilityPreferences(_Snapshot):
    """Read-only snapshot of a traveler's accessibility profile.

    The selection modes (shortest / fewest obstacles / smooth terrain) are kept
    mutually exclusive by the profile owner; the planner does not re-check them.
    """

    disability_types: tuple[DisabilityType, ...] = ()
    required_features: tuple[str, ...] = ()
    avoid_features: tuple[str, ...] = ()
    mobility_aid: MobilityAid = "none"
    route_preferences: RoutePreferences = Field(default_factory=RoutePreferences)

    @property
    def requires_wheelchair_access(self) -> bool:
        return "wheelchair" in self.disability_types or self.mobility_aid in WHEELCHAIR_AIDS

    @property
    def route(self) -> RoutePreferences:
        return self.route_preferences
