# schedconsole/runtime/context.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from ..api.client import ApiClient, ServiceEndpoints
from ..auth.session import SessionStore
from ..config.settings import Settings
from ..monitor.history import HealthHistory
from ..monitor.scheduler import PollingScheduler
from ..strategies.model import StrategyFormModel
from .storage import KeyValueStore


@dataclass
class ConsoleContext:
    cfg: Settings
    storage: KeyValueStore
    session: SessionStore
    api: ApiClient
    history: HealthHistory
    scheduler: PollingScheduler
    strategies: StrategyFormModel

    def close(self) -> None:
        self.scheduler.shutdown()
        self.api.close()


def build_context(cfg: Settings, http: Optional[requests.Session] = None) -> ConsoleContext:
    storage = KeyValueStore(cfg.token_store_path)
    session = SessionStore(storage)
    endpoints = ServiceEndpoints.from_origin(cfg.service_origin, cfg.dashboard_port, cfg.decision_port)
    api = ApiClient(endpoints, session, timeout_s=cfg.request_timeout_s, http=http)
    return ConsoleContext(
        cfg=cfg,
        storage=storage,
        session=session,
        api=api,
        history=HealthHistory(),
        scheduler=PollingScheduler(session),
        strategies=StrategyFormModel(),
    )
