# io/recorder.py
import json
import logging
import sys
from typing import Protocol

from access_route.domain.entities.route import Route

log = logging.getLogger("access_route.recorder")


class Sink(Protocol):
    def write(self, record: dict) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, record: dict) -> None:
        self.fp.write(json.dumps(record) + "\n")


class MemorySink:
    def __init__(self):
        self.records: list[dict] = []

    def write(self, record: dict) -> None:
        self.records.append(record)


class Recorder:
    """Route history: fans each planned route out to its sinks as a flat record."""

    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, route: Route, **meta) -> None:
        record = {**meta, **route.to_record()}
        for s in self.sinks:
            try:
                s.write(record)
            except Exception as e:  # history is best effort; never fail a plan over it
                log.warning("route history sink failed: %s", e)
