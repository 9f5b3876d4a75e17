from access_route.app.protocols import CostModel, CostVerdict
from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import ROUGH_SURFACES, SMOOTH_SURFACES, SegmentAttributes


class AccessibilityCostModel(CostModel):
    """
    Hard constraints apply only to wheelchair-class profiles; every profile gets
    the multiplicative cost shaping.
    """

    def __init__(
        self,
        *,
        elevator: float = 0.8,
        ramp: float = 0.9,
        stairs: float = 1.5,
        smooth: float = 0.9,
    ):
        self.elevator, self.ramp, self.stairs, self.smooth = elevator, ramp, stairs, smooth

    def admissible(self, attrs: SegmentAttributes, prefs: AccessibilityPreferences) -> bool:
        if not prefs.requires_wheelchair_access:
            return True
        rp = prefs.route_preferences
        if rp.avoid_stairs and attrs.has_stairs and not (attrs.has_ramp or attrs.has_elevator):
            return False
        if rp.max_slope is not None and attrs.slope_pct > rp.max_slope:
            return False
        if rp.min_width is not None and attrs.width_m < rp.min_width:
            return False
        if rp.prefer_smooth_terrain and attrs.surface in ROUGH_SURFACES:
            return False
        return True

    def multiplier(self, attrs: SegmentAttributes, prefs: AccessibilityPreferences) -> float:
        rp = prefs.route_preferences
        m = 1.0
        if rp.prefer_elevators and attrs.has_elevator:
            m *= self.elevator
        if rp.prefer_ramps and attrs.has_ramp:
            m *= self.ramp
        if rp.avoid_stairs and attrs.has_stairs:
            m *= self.stairs
        if rp.prefer_smooth_terrain and attrs.surface in SMOOTH_SURFACES:
            m *= self.smooth
        return m

    def evaluate(self, attrs: SegmentAttributes, prefs: AccessibilityPreferences) -> CostVerdict:
        if not self.admissible(attrs, prefs):
            return CostVerdict(False, 0.0)
        return CostVerdict(True, self.multiplier(attrs, prefs))


class DistanceCostModel(CostModel):
    def evaluate(self, attrs, prefs):
        return CostVerdict(True, 1.0)
