import io
import json
import logging

from access_route.domain.entities.geography import Coordinate
from access_route.domain.entities.route import Route, RouteStep
from access_route.io.recorder import JsonlSink, MemorySink, Recorder
from access_route.io.search_logging import SearchLogging, _default_json_logger


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def make_logger(name: str) -> tuple[logging.Logger, ListHandler]:
    logger = logging.getLogger(name)
    logger.handlers.clear()
    h = ListHandler()
    logger.addHandler(h)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger, h


def sample_route() -> Route:
    a, b = Coordinate(0.0, 0.0), Coordinate(0.0, 0.001)
    return Route(
        distance_m=111.19,
        duration_min=1.33,
        waypoints=(a, b),
        steps=(RouteStep("Head east for 111 meters", 111.19, "straight", b),),
        accessibility_score=80,
        description="Accessible route",
        features=frozenset({"ramp"}),
    )


def test_route_planned_logs_and_records():
    logger, h = make_logger("test.access_route.planned")
    sink = MemorySink()
    hooks = SearchLogging(run_id="r-9", logger=logger, recorder=Recorder(sink))

    hooks.route_planned(sample_route(), variants=2)

    (rec,) = h.records
    assert rec.getMessage() == "route_planned"
    assert rec.extra["run_id"] == "r-9"
    assert rec.extra["score"] == 80
    assert rec.extra["variants"] == 2

    (row,) = sink.records
    assert row["run_id"] == "r-9"
    assert row["features"] == ["ramp"]
    assert row["steps"][0]["maneuver"] == "straight"


def test_expand_is_sampled_only_in_debug():
    logger, h = make_logger("test.access_route.expand")
    quiet = SearchLogging(logger=logger)
    for i in range(1, 5):
        quiet.expand(at=Coordinate(0, 0), g=0.0, f=1.0, open_size=1, expansions=i)
    assert h.records == []

    loud = SearchLogging(logger=logger, debug=True, sample_every=2)
    for i in range(1, 5):
        loud.expand(at=Coordinate(0, 0), g=0.0, f=1.0, open_size=1, expansions=i)
    assert [r.extra["expansions"] for r in h.records] == [2, 4]
    assert all(r.levelno == logging.DEBUG for r in h.records)


def test_fallback_and_provider_error_are_warnings():
    logger, h = make_logger("test.access_route.warn")
    hooks = SearchLogging(logger=logger)
    hooks.provider_error(at=Coordinate(1, 2), error=TimeoutError("slow"))
    hooks.fallback(start=Coordinate(0, 0), goal=Coordinate(0, 1), reason="exhausted")
    assert [r.levelno for r in h.records] == [logging.WARNING, logging.WARNING]
    assert h.records[0].extra["at"] == [1, 2]
    assert h.records[1].extra["reason"] == "exhausted"


def test_json_formatter_merges_extra():
    logger = _default_json_logger("test.access_route.json")
    fmt = logger.handlers[0].formatter
    rec = logger.makeRecord(logger.name, logging.INFO, __file__, 1, "search_end", (), None)
    rec.extra = {"run_id": "x", "found": True}
    payload = json.loads(fmt.format(rec))
    assert payload == {
        "level": "INFO",
        "msg": "search_end",
        "logger": "test.access_route.json",
        "run_id": "x",
        "found": True,
    }


def test_recorder_survives_failing_sink():
    class Broken:
        def write(self, record):
            raise OSError("disk full")

    good = MemorySink()
    Recorder(Broken(), good).emit(sample_route(), run_id="r")
    assert len(good.records) == 1


def test_jsonl_sink_writes_one_line_per_route():
    buf = io.StringIO()
    Recorder(JsonlSink(buf)).emit(sample_route())
    lines = buf.getvalue().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["waypoints"] == [[0.0, 0.0], [0.0, 0.001]]
