# schedconsole/api/client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from ..obs.metrics import metric_count
from .envelope import Envelope, decode_envelope
from .errors import AuthRequired, TransportError

if TYPE_CHECKING:
    from ..auth.session import SessionStore

log = logging.getLogger("schedconsole.api")


class ServiceTarget(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


def secondary_origin(origin: str, dashboard_port: int, decision_port: int) -> str:
    """Origin of the decision service: same host, alternate port.

    Only the dashboard's well-known port is swapped; any other port is reused
    as-is so non-standard deployments talk to a single port.
    """
    parts = urlsplit(origin)
    if parts.port is None or parts.port != dashboard_port:
        return origin.rstrip("/")
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    netloc = f"{host}:{decision_port}"
    if parts.username:
        userinfo = parts.username + (f":{parts.password}" if parts.password else "")
        netloc = f"{userinfo}@{netloc}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", "")).rstrip("/")


@dataclass(frozen=True)
class ServiceEndpoints:
    primary: str
    secondary: str

    @classmethod
    def from_origin(cls, origin: str, dashboard_port: int = 8080, decision_port: int = 8082) -> "ServiceEndpoints":
        return cls(
            primary=origin.rstrip("/"),
            secondary=secondary_origin(origin, dashboard_port, decision_port),
        )

    def base_url(self, target: ServiceTarget) -> str:
        return self.secondary if target is ServiceTarget.SECONDARY else self.primary


@dataclass(frozen=True)
class ApiResponse:
    ok: bool
    status: int
    body: Any

    def envelope(self) -> Envelope:
        return decode_envelope(self.body)

    @property
    def succeeded(self) -> bool:
        return self.ok and self.envelope().success


class ApiClient:
    def __init__(
        self,
        endpoints: ServiceEndpoints,
        session: "SessionStore",
        timeout_s: float = 30.0,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.endpoints = endpoints
        self.session = session
        self.timeout_s = float(timeout_s)
        self._http = http or requests.Session()

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if authenticated:
            token = self.session.token
            if not token:
                raise AuthRequired()
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        path: str,
        method: str = "GET",
        payload: Optional[Dict[str, Any]] = None,
        *,
        authenticated: bool = False,
        target: ServiceTarget = ServiceTarget.PRIMARY,
    ) -> ApiResponse:
        headers = self._headers(authenticated)
        url = f"{self.endpoints.base_url(target)}{path}"
        tags = {"target": target.value, "method": method}

        try:
            r = self._http.request(method, url, headers=headers, json=payload, timeout=self.timeout_s)
        except requests.RequestException as e:
            log.warning("api.transport_error", extra={"url": url, "error": str(e)})
            metric_count("schedconsole.api.request", 1, {**tags, "outcome": "transport_error"})
            raise TransportError(str(e), url=url) from e

        try:
            body = r.json()
        except ValueError as e:
            log.warning("api.invalid_json", extra={"url": url, "status": r.status_code})
            metric_count("schedconsole.api.request", 1, {**tags, "outcome": "invalid_json"})
            raise TransportError(f"Invalid JSON response (HTTP {r.status_code}): {e}", url=url) from e

        ok = 200 <= r.status_code < 300
        metric_count("schedconsole.api.request", 1, {**tags, "outcome": "ok" if ok else "http_error"})
        log.debug("api.response", extra={"url": url, "status": r.status_code})
        return ApiResponse(ok=ok, status=r.status_code, body=body)

    def get(self, path: str, *, authenticated: bool = False, target: ServiceTarget = ServiceTarget.PRIMARY) -> ApiResponse:
        return self.request(path, "GET", authenticated=authenticated, target=target)

    def post(
        self,
        path: str,
        payload: Dict[str, Any],
        *,
        authenticated: bool = False,
        target: ServiceTarget = ServiceTarget.PRIMARY,
    ) -> ApiResponse:
        return self.request(path, "POST", payload, authenticated=authenticated, target=target)

    def close(self) -> None:
        self._http.close()
