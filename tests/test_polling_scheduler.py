import threading
import time

import pytest

from schedconsole.api.errors import AuthRequired, ValidationError
from schedconsole.auth.session import SessionStore
from schedconsole.monitor.scheduler import PollingScheduler, ResourceKind
from schedconsole.runtime.storage import KeyValueStore


class CountingProbe:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.count = 0

    def __call__(self) -> None:
        with self._lock:
            self.count += 1


def _session(tmp_path, token=None):
    storage = KeyValueStore(tmp_path / "storage.json")
    if token:
        storage.set("jwtToken", token)
    store = SessionStore(storage)
    store.initialize()
    return store


def _scheduler(session, min_interval_ms=1000):
    scheduler = PollingScheduler(session, min_interval_ms=min_interval_ms)
    probes = {kind: CountingProbe() for kind in ResourceKind}
    for kind, probe in probes.items():
        scheduler.register_probe(kind, probe)
    return scheduler, probes


def test_interval_below_floor_is_rejected(tmp_path):
    scheduler, probes = _scheduler(_session(tmp_path))

    with pytest.raises(ValidationError, match="Interval must be at least 1 second"):
        scheduler.start(ResourceKind.HEALTH, 500)

    assert scheduler.is_active(ResourceKind.HEALTH) is False
    assert probes[ResourceKind.HEALTH].count == 0


def test_metrics_requires_authentication(tmp_path):
    scheduler, probes = _scheduler(_session(tmp_path))

    with pytest.raises(AuthRequired, match="Authentication required for metrics auto-refresh"):
        scheduler.start(ResourceKind.METRICS, 5000)

    assert scheduler.is_active(ResourceKind.METRICS) is False
    assert probes[ResourceKind.METRICS].count == 0


def test_start_probes_immediately_and_reports_handle(tmp_path):
    scheduler, probes = _scheduler(_session(tmp_path))
    try:
        handle = scheduler.start(ResourceKind.HEALTH, 60_000)

        assert probes[ResourceKind.HEALTH].count == 1
        assert handle.active is True
        assert handle.interval_ms == 60_000
        assert scheduler.handle(ResourceKind.HEALTH) == handle
    finally:
        scheduler.shutdown()


def test_probe_repeats_on_interval(tmp_path):
    scheduler, probes = _scheduler(_session(tmp_path), min_interval_ms=50)
    try:
        scheduler.start(ResourceKind.HEALTH, 100)
        time.sleep(0.55)
    finally:
        scheduler.shutdown()

    assert probes[ResourceKind.HEALTH].count >= 3


def test_restart_cancels_previous_timer(tmp_path):
    scheduler, probes = _scheduler(_session(tmp_path), min_interval_ms=50)
    try:
        scheduler.start(ResourceKind.HEALTH, 100)
        scheduler.start(ResourceKind.HEALTH, 60_000)
        time.sleep(0.4)

        # one immediate probe per start; the 100ms loop must be gone
        assert probes[ResourceKind.HEALTH].count == 2
        assert scheduler.handle(ResourceKind.HEALTH).interval_ms == 60_000
    finally:
        scheduler.shutdown()


def test_stop_is_idempotent_and_halts_probing(tmp_path):
    scheduler, probes = _scheduler(_session(tmp_path), min_interval_ms=50)

    idle = scheduler.stop(ResourceKind.HEALTH)
    assert idle.active is False

    scheduler.start(ResourceKind.HEALTH, 100)
    stopped = scheduler.stop(ResourceKind.HEALTH)
    count = probes[ResourceKind.HEALTH].count
    time.sleep(0.3)

    assert stopped.active is False
    assert scheduler.is_active(ResourceKind.HEALTH) is False
    assert probes[ResourceKind.HEALTH].count == count
    assert scheduler.stop(ResourceKind.HEALTH).active is False


def test_toggle_flips_state(tmp_path):
    scheduler, _ = _scheduler(_session(tmp_path))
    try:
        assert scheduler.toggle(ResourceKind.HEALTH, 60_000).active is True
        assert scheduler.toggle(ResourceKind.HEALTH, 60_000).active is False
        assert scheduler.is_active(ResourceKind.HEALTH) is False
    finally:
        scheduler.shutdown()


def test_logout_forces_metrics_stop_but_keeps_health(tmp_path):
    session = _session(tmp_path, token="tok")
    scheduler, _ = _scheduler(session)
    try:
        scheduler.start(ResourceKind.METRICS, 60_000)
        scheduler.start(ResourceKind.HEALTH, 60_000)

        session.logout()

        assert scheduler.is_active(ResourceKind.METRICS) is False
        assert scheduler.handle(ResourceKind.METRICS).active is False
        assert scheduler.is_active(ResourceKind.HEALTH) is True
    finally:
        scheduler.shutdown()


def test_failing_probe_does_not_break_the_loop(tmp_path):
    scheduler = PollingScheduler(_session(tmp_path), min_interval_ms=50)
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("probe exploded")

    scheduler.register_probe(ResourceKind.HEALTH, flaky)
    try:
        scheduler.start(ResourceKind.HEALTH, 100)
        time.sleep(0.35)
    finally:
        scheduler.shutdown()

    assert len(calls) >= 2


def test_start_without_probe_is_an_error(tmp_path):
    scheduler = PollingScheduler(_session(tmp_path))
    with pytest.raises(KeyError):
        scheduler.start(ResourceKind.HEALTH, 5000)


def test_no_metrics_probe_fires_after_logout(tmp_path):
    session = _session(tmp_path, token="tok")
    scheduler, probes = _scheduler(session, min_interval_ms=50)
    try:
        scheduler.start(ResourceKind.METRICS, 100)
        time.sleep(0.25)
        session.logout()
        count = probes[ResourceKind.METRICS].count
        time.sleep(0.3)

        assert count >= 2
        assert probes[ResourceKind.METRICS].count == count
    finally:
        scheduler.shutdown()


class LogoutDuringCheck(SessionStore):
    """Reports authenticated once, then logs out before the caller can act on it."""

    def __init__(self, storage):
        super().__init__(storage)
        self.armed = False
        self.tripped = False

    @property
    def authenticated(self):
        value = super().authenticated
        if value and self.armed and not self.tripped:
            self.tripped = True
            self.logout()
        return value


def test_logout_racing_start_leaves_metrics_idle(tmp_path):
    storage = KeyValueStore(tmp_path / "storage.json")
    storage.set("jwtToken", "tok")
    session = LogoutDuringCheck(storage)
    session.initialize()
    scheduler, probes = _scheduler(session, min_interval_ms=50)
    session.armed = True
    try:
        with pytest.raises(AuthRequired):
            scheduler.start(ResourceKind.METRICS, 100)
        time.sleep(0.3)

        assert session.tripped is True
        assert session.session.authenticated is False
        assert scheduler.is_active(ResourceKind.METRICS) is False
        assert probes[ResourceKind.METRICS].count == 0
    finally:
        scheduler.shutdown()


def test_cancelled_loop_does_not_probe(tmp_path):
    scheduler, probes = _scheduler(_session(tmp_path), min_interval_ms=50)
    scheduler.start(ResourceKind.HEALTH, 60_000)
    loop = scheduler._loops[ResourceKind.HEALTH]
    scheduler.stop(ResourceKind.HEALTH)

    loop.fire()

    assert probes[ResourceKind.HEALTH].count == 1
