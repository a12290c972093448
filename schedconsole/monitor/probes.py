# schedconsole/monitor/probes.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..api.client import ApiClient, ApiResponse, ServiceTarget
from ..api.errors import TransportError
from ..api.routes import HEALTH_PATH, METRICS_PATH
from ..obs.metrics import metric_gauge
from .history import HealthProbeResult

METRIC_LABELS: List[Tuple[str, str]] = [
    ("UserSched Last Run", "usersched_last_run_at"),
    ("Queued Tasks", "nr_queued"),
    ("Scheduled Tasks", "nr_scheduled"),
    ("Running Tasks", "nr_running"),
    ("Online CPUs", "nr_online_cpus"),
    ("User Dispatches", "nr_user_dispatches"),
    ("Kernel Dispatches", "nr_kernel_dispatches"),
    ("Cancel Dispatches", "nr_cancel_dispatches"),
    ("Bounce Dispatches", "nr_bounce_dispatches"),
    ("Failed Dispatches", "nr_failed_dispatches"),
    ("Scheduler Congested", "nr_sched_congested"),
]


def probe_health(api: ApiClient) -> HealthProbeResult:
    try:
        resp = api.get(HEALTH_PATH, target=ServiceTarget.PRIMARY)
    except TransportError as e:
        metric_gauge("schedconsole.health.up", 0.0)
        return HealthProbeResult.failed(str(e))

    body = resp.body
    healthy = resp.ok and isinstance(body, dict) and body.get("status") == "healthy"
    metric_gauge("schedconsole.health.up", 1.0 if healthy else 0.0)
    return HealthProbeResult.completed(healthy, body)


def fetch_metrics(api: ApiClient) -> ApiResponse:
    return api.get(METRICS_PATH, authenticated=True, target=ServiceTarget.SECONDARY)


def format_metrics(body: Dict[str, Any]) -> Dict[str, Any]:
    data = body.get("data") or {}
    out: Dict[str, Any] = {"Last Update": body.get("metrics_timestamp", body.get("timestamp"))}
    for label, key in METRIC_LABELS:
        out[label] = data.get(key) if isinstance(data, dict) else None
    return out
