# schedconsole/auth/session.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Union

from ..api.client import ServiceTarget
from ..api.errors import TransportError
from ..api.routes import LOGIN_PATH, TOKEN_PATH
from ..obs.metrics import metric_count
from ..runtime.storage import KeyValueStore
from ..shared.results import ActionResult

if TYPE_CHECKING:
    from ..api.client import ApiClient

log = logging.getLogger("schedconsole.session")

TOKEN_KEY = "jwtToken"


@dataclass(frozen=True)
class Session:
    token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.token)


@dataclass(frozen=True)
class PasswordCredentials:
    username: str
    password: str


@dataclass(frozen=True)
class PublicKeyCredentials:
    public_key: str


Credentials = Union[PasswordCredentials, PublicKeyCredentials]
SessionListener = Callable[[Session], None]


@dataclass(frozen=True)
class _LoginRoute:
    mode: str
    path: str
    target: ServiceTarget
    success_message: str
    failure_label: str
    fallback_reason: str


_PASSWORD_ROUTE = _LoginRoute(
    mode="password",
    path=LOGIN_PATH,
    target=ServiceTarget.PRIMARY,
    success_message="Login successful!",
    failure_label="Login failed",
    fallback_reason="Invalid credentials",
)

_PUBLIC_KEY_ROUTE = _LoginRoute(
    mode="public_key",
    path=TOKEN_PATH,
    target=ServiceTarget.SECONDARY,
    success_message="Authentication successful!",
    failure_label="Authentication failed",
    fallback_reason="Unknown error",
)


class SessionStore:
    """Sole owner of the bearer token.

    The token and the authenticated flag live in one frozen ``Session`` that is
    swapped whole, so readers never see one without the other.
    """

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage
        self._lock = threading.Lock()
        self._session = Session()
        self._listeners: List[SessionListener] = []

    @property
    def session(self) -> Session:
        with self._lock:
            return self._session

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    @property
    def authenticated(self) -> bool:
        return self.session.authenticated

    def subscribe(self, listener: SessionListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def initialize(self) -> Session:
        token = self._storage.get(TOKEN_KEY)
        self._replace(Session(token=token or None))
        log.info("session.initialized", extra={"authenticated": self.authenticated})
        return self.session

    def login(self, api: "ApiClient", credentials: Credentials) -> ActionResult:
        if isinstance(credentials, PasswordCredentials):
            route = _PASSWORD_ROUTE
            body = {"username": credentials.username, "password": credentials.password}
        else:
            route = _PUBLIC_KEY_ROUTE
            body = {"public_key": credentials.public_key}

        try:
            resp = api.post(route.path, body, target=route.target)
        except TransportError as e:
            metric_count("schedconsole.session.login", 1, {"mode": route.mode, "outcome": "transport_error"})
            return ActionResult.error(f"Request failed: {e}")

        envelope = resp.envelope()
        grant = envelope.token_grant() if resp.ok else None
        if grant is None:
            reason = envelope.reason(route.fallback_reason)
            log.warning("session.login_failed", extra={"mode": route.mode, "status": resp.status, "reason": reason})
            metric_count("schedconsole.session.login", 1, {"mode": route.mode, "outcome": "rejected"})
            return ActionResult.error(f"{route.failure_label}: {reason}")

        try:
            self._storage.set(TOKEN_KEY, grant.token)
        except OSError as e:
            log.error("session.persist_failed", extra={"error": str(e)})
            return ActionResult.error(f"Request failed: could not persist token: {e}")

        self._replace(Session(token=grant.token))
        log.info("session.login_succeeded", extra={"mode": route.mode, "envelope": grant.shape})
        metric_count("schedconsole.session.login", 1, {"mode": route.mode, "outcome": "ok"})
        return ActionResult.success(route.success_message)

    def logout(self) -> None:
        try:
            self._storage.remove(TOKEN_KEY)
        except OSError as e:
            log.warning("session.clear_persisted_failed", extra={"error": str(e)})
        self._replace(Session())
        log.info("session.logged_out")

    def _replace(self, new: Session) -> None:
        with self._lock:
            changed = new != self._session
            self._session = new
            listeners = list(self._listeners)
        if not changed:
            return
        for listener in listeners:
            try:
                listener(new)
            except Exception:
                log.exception("session.listener_failed")
