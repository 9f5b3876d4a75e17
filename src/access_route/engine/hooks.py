# engine/hooks.py
from typing import Protocol


class SearchHooks(Protocol):
    def search_start(self, *, start, goal, h0): ...
    def expand(self, *, at, g, f, open_size, expansions): ...
    def provider_error(self, *, at, error: BaseException): ...
    def cancelled(self, *, expansions): ...
    def search_end(self, *, found: bool, expansions, cost, waypoints, ms): ...
    def fallback(self, *, start, goal, reason: str): ...
    def route_planned(self, route, *, variants: int): ...


class NoopHooks:
    def search_start(self, **_):
        pass

    def expand(self, **_):
        pass

    def provider_error(self, **_):
        pass

    def cancelled(self, **_):
        pass

    def search_end(self, **_):
        pass

    def fallback(self, **_):
        pass

    def route_planned(self, *_, **__):
        pass
