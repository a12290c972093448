# schedconsole/web/controller.py
from __future__ import annotations

import json
import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..api.client import ServiceTarget
from ..api.errors import ConsoleError, ValidationError
from ..api.routes import POD_PIDS_PATH, STRATEGIES_SELF_PATH
from ..auth.session import PasswordCredentials, PublicKeyCredentials
from ..monitor.probes import fetch_metrics, format_metrics, probe_health
from ..monitor.scheduler import ResourceKind
from ..runtime.context import ConsoleContext
from ..shared.results import ActionResult

log = logging.getLogger("schedconsole.controller")

SAMPLE_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIICIjANBgkqhkiG9w0BAQEFAAOCAg8AMIICCgKCAgEAny28YMC2/+yYj3T29lz6
0uryNz8gNVrqD7lTJuHQ3DMTE6ADqnERy8VgHve0tWzhJc5ZBZ1Hduvj+z/kNqbc
U81YGhmfOrQ3iFNYBlSAseIHdAw39HGyC6OKzTXI4HRpc8CwcF6hKExkyWlkALr5
i+IQDfimvarjjZ6Nm368L0Rthv3KOkI5CqRZ6bsVwwBug7GcdkvFs3LiRSKlMBpH
2tCkZ5ZZE8VyuK7VnlwV7n6EHzN5BqaHq8HVLw2KzvibSi+/5wIZV2Yx33tViLbh
OsZqLt6qQCGGgKzNX4TGwRLGAiVV1NCpgQhimZ4YP2thqSsqbaISOuvFlYq+QGP1
bcvcHB7UhT1ZnHSDYcbT2qiD3VoqytXVKLB1X5XCD99YLSP9B32f1lvZD4MhDtE4
IhAuqn15MGB5ct4yj/uMldFScs9KhqnWcwS4K6Qx3IfdB+ZxT5hEOWJLEcGqe/CS
XITNG7oS9mrSAJJvHSLz++4R/Sh1MnT2YWjyDk6qeeqAwut0w5iDKWt7qsGEcHFP
IVVlos+xLfrPDtgHQk8upjslUcMyMDTf21Y3RdJ3k1gTR9KHEwzKeiNlLjen9ekF
WupF8jik1aYRWL6h54ZyGxwKEyMYi9o18G2pXPzvVaPYtU+TGXdO4QwiES72TNCD
bNaGj75Gj0sN+LfjjQ4A898CAwEAAQ==
-----END PUBLIC KEY-----"""


class Panel(str, Enum):
    AUTH = "auth"
    HEALTH = "health"
    POD_PIDS = "pod_pids"
    STRATEGIES = "strategies"
    METRICS = "metrics"


class ResultBoard:
    """Last result shown in each panel of the page."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._results: Dict[Panel, ActionResult] = {}

    def show(self, panel: Panel, result: ActionResult) -> None:
        with self._lock:
            self._results[panel] = result

    def get(self, panel: Panel) -> Optional[ActionResult]:
        with self._lock:
            return self._results.get(panel)

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {p.value: r.to_dict() for p, r in self._results.items()}


def _pretty(body: Any) -> str:
    return json.dumps(body, indent=2)


def _interval_ms(interval_s: Any) -> int:
    # fractional seconds truncate toward zero, so "1.5" polls every second
    try:
        return int(float(str(interval_s).strip())) * 1000
    except (ValueError, OverflowError) as e:
        raise ValidationError("interval_s", interval_s, "Interval must be at least 1 second") from e


class ConsoleController:
    def __init__(self, ctx: ConsoleContext, board: Optional[ResultBoard] = None) -> None:
        self.ctx = ctx
        self.board = board or ResultBoard()
        self._intervals_s: Dict[ResourceKind, Any] = {
            ResourceKind.HEALTH: ctx.cfg.health_interval_s,
            ResourceKind.METRICS: ctx.cfg.metrics_interval_s,
        }
        ctx.scheduler.register_probe(ResourceKind.HEALTH, self.check_health)
        ctx.scheduler.register_probe(ResourceKind.METRICS, self.get_metrics)

    def open(self) -> None:
        self.ctx.session.initialize()
        if len(self.ctx.strategies) == 0:
            self.ctx.strategies.add_strategy()

    def _guard(self, panel: Panel, action: Callable[[], ActionResult]) -> ActionResult:
        try:
            result = action()
        except ConsoleError as e:
            log.warning("controller.action_failed", extra={"panel": panel.value, "error": str(e)})
            result = ActionResult.error(f"Request failed: {e}")
        self.board.show(panel, result)
        return result

    # --- authentication

    def login_with_password(self, username: str, password: str) -> ActionResult:
        username, password = (username or "").strip(), (password or "").strip()
        if not username or not password:
            result = ActionResult.error("Please enter username and password")
            self.board.show(Panel.AUTH, result)
            return result
        creds = PasswordCredentials(username=username, password=password)
        return self._guard(Panel.AUTH, lambda: self.ctx.session.login(self.ctx.api, creds))

    def login_with_public_key(self, public_key: str) -> ActionResult:
        public_key = (public_key or "").strip()
        if not public_key:
            result = ActionResult.error("Please enter public key")
            self.board.show(Panel.AUTH, result)
            return result
        creds = PublicKeyCredentials(public_key=public_key)
        return self._guard(Panel.AUTH, lambda: self.ctx.session.login(self.ctx.api, creds))

    def clear_token(self) -> ActionResult:
        self.ctx.session.logout()
        result = ActionResult.success("Authentication token cleared")
        self.board.show(Panel.AUTH, result)
        return result

    # --- monitoring

    def check_health(self) -> ActionResult:
        def run() -> ActionResult:
            probe = probe_health(self.ctx.api)
            self.ctx.history.record(probe)
            if probe.error_message is not None:
                return ActionResult.error(f"Request failed: {probe.error_message}")
            text = _pretty(probe.payload)
            return ActionResult.success(text) if probe.healthy else ActionResult.error(text)

        return self._guard(Panel.HEALTH, run)

    def get_metrics(self) -> ActionResult:
        def run() -> ActionResult:
            resp = fetch_metrics(self.ctx.api)
            envelope = resp.envelope()
            if not resp.succeeded:
                return ActionResult.error("Failed: " + envelope.reason("Unknown error"))
            if not envelope.data:
                return ActionResult.info(str(envelope.message or "No metrics data available"))
            formatted = format_metrics(resp.body)
            return ActionResult.success(_pretty(formatted), data=formatted)

        return self._guard(Panel.METRICS, run)

    def get_pod_pids(self) -> ActionResult:
        return self._fetch(Panel.POD_PIDS, POD_PIDS_PATH, ServiceTarget.SECONDARY)

    def get_strategies(self) -> ActionResult:
        return self._fetch(Panel.STRATEGIES, STRATEGIES_SELF_PATH, ServiceTarget.PRIMARY)

    def _fetch(self, panel: Panel, path: str, target: ServiceTarget) -> ActionResult:
        def run() -> ActionResult:
            resp = self.ctx.api.get(path, authenticated=True, target=target)
            if resp.succeeded:
                return ActionResult.success(_pretty(resp.body), data=resp.body)
            return ActionResult.error("Failed: " + resp.envelope().reason("Unknown error"))

        return self._guard(panel, run)

    def toggle_health_auto_refresh(self, interval_s: Any) -> ActionResult:
        return self._toggle(ResourceKind.HEALTH, Panel.HEALTH, interval_s)

    def toggle_metrics_auto_refresh(self, interval_s: Any) -> ActionResult:
        return self._toggle(ResourceKind.METRICS, Panel.METRICS, interval_s)

    def _toggle(self, kind: ResourceKind, panel: Panel, interval_s: Any) -> ActionResult:
        scheduler = self.ctx.scheduler
        try:
            if scheduler.is_active(kind):
                scheduler.stop(kind)
                return ActionResult.info("Auto-refresh stopped")
            self._intervals_s[kind] = interval_s
            handle = scheduler.start(kind, _interval_ms(interval_s))
        except ConsoleError as e:
            # the probe owns the panel once polling runs; only rejections are shown here
            result = ActionResult.error(str(e))
            self.board.show(panel, result)
            return result
        return ActionResult.info(f"Auto-refresh every {handle.interval_ms // 1000}s")

    # --- strategy form

    def add_strategy(self) -> int:
        return self.ctx.strategies.add_strategy()

    def remove_strategy(self, strategy_id: int) -> bool:
        return self.ctx.strategies.remove_strategy(strategy_id)

    def clear_all_strategies(self) -> ActionResult:
        self.ctx.strategies.clear_all()
        result = ActionResult.info("All strategies cleared")
        self.board.show(Panel.STRATEGIES, result)
        return result

    def add_selector(self, strategy_id: int) -> Optional[int]:
        return self.ctx.strategies.add_selector(strategy_id)

    def remove_selector(self, strategy_id: int, selector_index: int) -> bool:
        return self.ctx.strategies.remove_selector(strategy_id, selector_index)

    def update_strategy(self, strategy_id: int, **fields: Any) -> bool:
        return self.ctx.strategies.update_strategy(strategy_id, **fields)

    def update_selector(self, strategy_id: int, selector_index: int, **fields: Any) -> bool:
        return self.ctx.strategies.update_selector(strategy_id, selector_index, **fields)

    def save_all_strategies(self) -> ActionResult:
        return self._guard(Panel.STRATEGIES, lambda: self.ctx.strategies.submit(self.ctx.api))

    # --- rendering

    def _poll_view(self, kind: ResourceKind) -> Dict[str, Any]:
        handle = self.ctx.scheduler.handle(kind)
        interval_s = handle.interval_ms // 1000 if handle.active else self._intervals_s[kind]
        return {
            "active": handle.active,
            "interval_s": interval_s,
            "button_label": "Stop Auto-refresh" if handle.active else "Start Auto-refresh",
            "input_disabled": handle.active,
        }

    def view(self) -> Dict[str, Any]:
        authenticated = self.ctx.session.authenticated
        return {
            "auth": {
                "authenticated": authenticated,
                "status_text": "Authenticated" if authenticated else "Not Authenticated",
                "button_label": "Clear Token" if authenticated else "Get Token",
            },
            "auth_required_enabled": authenticated,
            "panels": self.board.to_dict(),
            "health_grid": [slot.to_dict() for slot in self.ctx.history.snapshot()],
            "polling": {
                ResourceKind.HEALTH.value: self._poll_view(ResourceKind.HEALTH),
                ResourceKind.METRICS.value: self._poll_view(ResourceKind.METRICS),
            },
            "strategies": [r.to_dict() for r in self.ctx.strategies.strategies()],
        }
