from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Tuple

import pytest
import requests

from schedconsole.config.settings import Settings
from schedconsole.runtime.context import build_context

PRIMARY = "http://sched.local:8080"
SECONDARY = "http://sched.local:8082"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeHttp:
    """Stands in for requests.Session; unrouted URLs fail like a refused connection."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def route(self, method: str, url: str, status: int = 200, body: Any = None, *, invalid_json: bool = False) -> None:
        self.routes[(method, url)] = FakeResponse(status, body, invalid_json)

    def fail(self, method: str, url: str, error: Exception) -> None:
        self.routes[(method, url)] = error

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "headers": dict(headers or {}), "json": json, "timeout": timeout})
        target = self.routes.get((method, url))
        if target is None:
            raise requests.ConnectionError(f"connection refused: {url}")
        if isinstance(target, Exception):
            raise target
        return target

    def calls_to(self, url: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["url"] == url]

    def close(self) -> None:
        self.closed = True


def make_settings(tmp_path, **overrides: Any) -> Settings:
    cfg = Settings(
        console_host="127.0.0.1",
        console_port=8000,
        service_origin=PRIMARY,
        dashboard_port=8080,
        decision_port=8082,
        request_timeout_s=30.0,
        token_store_path=str(tmp_path / "storage.json"),
        health_interval_s=5,
        metrics_interval_s=5,
        dd_enabled=False,
        dd_env="test",
        dd_service="schedconsole",
        dd_version="0.0.0",
        dd_agent_host="127.0.0.1",
        dd_dogstatsd_port=8125,
    )
    return replace(cfg, **overrides)


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def cfg(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def ctx(cfg, http):
    context = build_context(cfg, http=http)
    yield context
    context.close()


def authenticate(ctx, token: str = "tok-123") -> None:
    ctx.storage.set("jwtToken", token)
    ctx.session.initialize()
