from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from access_route.config.preferences import AccessibilityPreferences
from access_route.domain.entities.geography import Coordinate, SegmentAttributes

Neighbor = tuple[Coordinate, SegmentAttributes]


@dataclass(frozen=True)
class CostVerdict:
    admissible: bool
    multiplier: float


# ------------- Planning --------------------
@runtime_checkable
class SpatialGraphProvider(Protocol):
    """
    Responsibilities:
      • Yield the neighbor edges of a coordinate with their physical attributes.
      • Terminate and return a finite list per call; may be sync or async.
    How the graph is populated (map data, tables, seeded lattice) is up to the provider.
    """

    def neighbors(
        self, c: Coordinate, prefs: AccessibilityPreferences
    ) -> list[Neighbor] | Awaitable[list[Neighbor]]: ...


@runtime_checkable
class CostModel(Protocol):
    """
    Turn a segment's attributes into an admissibility verdict and a cost multiplier.
    Multipliers must be > 0 so edge costs stay positive.
    """

    def evaluate(self, attrs: SegmentAttributes, prefs: AccessibilityPreferences) -> CostVerdict: ...


@runtime_checkable
class CancelSignal(Protocol):
    """Anything with is_set(): asyncio.Event, threading.Event."""

    def is_set(self) -> bool: ...


# ------------- Outer collaborators --------------------
@runtime_checkable
class PositionFeed(Protocol):
    def latest(self) -> Coordinate | None: ...


@runtime_checkable
class ProfileStore(Protocol):
    def preferences(self, user_id: str) -> AccessibilityPreferences: ...


@runtime_checkable
class GeocodingService(Protocol):
    def search(self, query: str) -> list[tuple[str, Coordinate]]: ...
    def reverse(self, c: Coordinate) -> str | None: ...


@runtime_checkable
class Utterance(Protocol):
    @property
    def done(self) -> bool: ...
    def cancel(self) -> None: ...


@runtime_checkable
class SpeechEngine(Protocol):
    """Platform text-to-speech; one call starts one utterance."""

    def say(self, text: str, *, rate: float, pitch: float, volume: float) -> Utterance: ...
