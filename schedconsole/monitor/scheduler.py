# schedconsole/monitor/scheduler.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from ..api.errors import AuthRequired, ValidationError
from ..auth.session import Session, SessionStore
from ..obs.metrics import metric_count

log = logging.getLogger("schedconsole.poll")

MIN_INTERVAL_MS = 1000

Probe = Callable[[], None]


class ResourceKind(str, Enum):
    HEALTH = "health"
    METRICS = "metrics"


# Kinds whose probes need a bearer token.
PRIVILEGED_KINDS = frozenset({ResourceKind.METRICS})


@dataclass(frozen=True)
class PollHandle:
    resource_kind: ResourceKind
    interval_ms: int
    active: bool


class _PollLoop:
    def __init__(self, kind: ResourceKind, interval_ms: int, probe: Probe) -> None:
        self.kind = kind
        self.interval_ms = interval_ms
        self.probe = probe
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=f"poll-{kind.value}", daemon=True)

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def cancel(self) -> None:
        self._stop.set()

    def fire(self) -> None:
        # a tick that races cancel() must not reach the probe
        if self._stop.is_set():
            return
        try:
            metric_count("schedconsole.poll.tick", 1, {"kind": self.kind.value})
            self.probe()
        except Exception:
            log.exception("poll.probe_failed", extra={"kind": self.kind.value})

    def _run(self) -> None:
        while not self._stop.wait(self.interval_ms / 1000.0):
            self.fire()


class PollingScheduler:
    """One recurring probe per resource kind; metrics polling follows the session."""

    def __init__(self, session: SessionStore, min_interval_ms: int = MIN_INTERVAL_MS) -> None:
        self.session = session
        self.min_interval_ms = int(min_interval_ms)
        self._lock = threading.Lock()
        self._probes: Dict[ResourceKind, Probe] = {}
        self._loops: Dict[ResourceKind, _PollLoop] = {}
        session.subscribe(self._on_session_change)

    def register_probe(self, kind: ResourceKind, probe: Probe) -> None:
        with self._lock:
            self._probes[kind] = probe

    def start(self, kind: ResourceKind, interval_ms: int) -> PollHandle:
        interval_ms = int(interval_ms)
        if interval_ms < self.min_interval_ms:
            raise ValidationError(
                "interval_ms",
                interval_ms,
                f"Interval must be at least {self.min_interval_ms // 1000} second",
            )
        if kind in PRIVILEGED_KINDS and not self.session.authenticated:
            raise AuthRequired(f"Authentication required for {kind.value} auto-refresh")

        with self._lock:
            probe = self._probes.get(kind)
            if probe is None:
                raise KeyError(f"no probe registered for {kind.value}")
            # a forced stop may have run since the check above
            if kind in PRIVILEGED_KINDS and not self.session.authenticated:
                raise AuthRequired(f"Authentication required for {kind.value} auto-refresh")
            previous = self._loops.pop(kind, None)
            loop = _PollLoop(kind, interval_ms, probe)
            self._loops[kind] = loop

        if previous is not None:
            previous.cancel()
            log.info("poll.replaced", extra={"kind": kind.value, "previous_interval_ms": previous.interval_ms})

        loop.start()
        log.info("poll.started", extra={"kind": kind.value, "interval_ms": interval_ms})
        loop.fire()
        return PollHandle(resource_kind=kind, interval_ms=interval_ms, active=not loop.cancelled)

    def stop(self, kind: ResourceKind) -> PollHandle:
        with self._lock:
            loop = self._loops.pop(kind, None)
        if loop is None:
            return PollHandle(resource_kind=kind, interval_ms=0, active=False)
        loop.cancel()
        log.info("poll.stopped", extra={"kind": kind.value})
        return PollHandle(resource_kind=kind, interval_ms=loop.interval_ms, active=False)

    def toggle(self, kind: ResourceKind, interval_ms: int) -> PollHandle:
        if self.is_active(kind):
            return self.stop(kind)
        return self.start(kind, interval_ms)

    def is_active(self, kind: ResourceKind) -> bool:
        with self._lock:
            return kind in self._loops

    def handle(self, kind: ResourceKind) -> PollHandle:
        with self._lock:
            loop = self._loops.get(kind)
        if loop is None:
            return PollHandle(resource_kind=kind, interval_ms=0, active=False)
        return PollHandle(resource_kind=kind, interval_ms=loop.interval_ms, active=True)

    def shutdown(self) -> None:
        for kind in list(ResourceKind):
            self.stop(kind)

    def _on_session_change(self, session: Session) -> None:
        if session.authenticated:
            return
        for kind in PRIVILEGED_KINDS:
            was_active = self.is_active(kind)
            self.stop(kind)
            if was_active:
                log.info("poll.forced_stop", extra={"kind": kind.value, "reason": "unauthenticated"})
