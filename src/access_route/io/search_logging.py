# io/search_logging.py
import json
import logging
import sys

from access_route.engine.hooks import NoopHooks
from access_route.io.recorder import Recorder


def _default_json_logger(name="access_route", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


def _pt(c) -> list[float] | None:
    return [c.lat, c.lng] if c is not None else None


class SearchLogging(NoopHooks):
    """
    One place to shape and emit structured logs for searches and planned routes.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 100,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"run_id": self.run_id, **extra}})

    # --------------- search lifecycle -----------------------------

    def search_start(self, *, start, goal, h0):
        self._emit("INFO", "search_start", start=_pt(start), goal=_pt(goal), h0_m=round(h0, 2))

    def expand(self, *, at, g, f, open_size, expansions):
        if self.debug and (expansions % self.sample_every) == 0:
            self._emit(
                "DEBUG", "expand", at=_pt(at), g=g, f=f, open_size=open_size, expansions=expansions
            )

    def provider_error(self, *, at, error: BaseException):
        self._emit("WARNING", "provider_error", at=_pt(at), error=repr(error))

    def cancelled(self, *, expansions):
        self._emit("INFO", "search_cancelled", expansions=expansions)

    def search_end(self, *, found: bool, expansions, cost, waypoints, ms):
        self._emit(
            "INFO",
            "search_end",
            found=found,
            expansions=expansions,
            cost=cost,
            waypoints=waypoints,
            ms=round(ms, 3),
        )

    def fallback(self, *, start, goal, reason: str):
        self._emit("WARNING", "route_fallback", start=_pt(start), goal=_pt(goal), reason=reason)

    # ------------- planned routes --------------------------

    def route_planned(self, route, *, variants: int):
        self._emit(
            "INFO",
            "route_planned",
            distance_m=round(route.distance_m, 1),
            score=route.accessibility_score,
            verified=route.accessibility_verified,
            variants=variants,
        )
        if self.recorder:
            self.recorder.emit(route, run_id=self.run_id)
