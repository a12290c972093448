from conftest import PRIMARY, make_settings
from schedconsole.monitor.probes import probe_health
from schedconsole.obs import metrics


class FakeStatsd:
    def __init__(self):
        self.sent = []

    def increment(self, name, value, tags=None):
        self.sent.append(("count", name, value, tags))

    def gauge(self, name, value, tags=None):
        self.sent.append(("gauge", name, value, tags))


def test_disabled_metrics_are_noops(tmp_path):
    metrics.init_metrics(make_settings(tmp_path, dd_enabled=False))
    assert metrics.metrics_enabled() is False
    metrics.metric_count("schedconsole.api.request")


def test_tags_are_stringified_and_none_dropped(monkeypatch):
    fake = FakeStatsd()
    monkeypatch.setattr(metrics, "_STATS", fake)

    metrics.metric_count("schedconsole.poll.tick", 1, {"kind": "health", "skip": None})
    metrics.metric_gauge("schedconsole.health.up", 1.0, {"port": 8082})

    assert fake.sent == [
        ("count", "schedconsole.poll.tick", 1, ["kind:health"]),
        ("gauge", "schedconsole.health.up", 1.0, ["port:8082"]),
    ]


def test_probe_health_emits_gauge(monkeypatch, ctx, http):
    fake = FakeStatsd()
    monkeypatch.setattr(metrics, "_STATS", fake)
    http.route("GET", PRIMARY + "/health", body={"status": "healthy"})

    result = probe_health(ctx.api)

    assert result.healthy is True
    assert ("gauge", "schedconsole.health.up", 1.0, []) in fake.sent
