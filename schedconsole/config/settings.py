# schedconsole/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    console_host: str
    console_port: int

    service_origin: str
    dashboard_port: int
    decision_port: int
    request_timeout_s: float

    token_store_path: str

    health_interval_s: int
    metrics_interval_s: int

    dd_enabled: bool
    dd_env: str
    dd_service: str
    dd_version: str
    dd_agent_host: str
    dd_dogstatsd_port: int


def _opt(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _opt_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name, str(default)).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def _opt_int(name: str, default: int) -> int:
    try:
        return int(_opt(name, str(default)))
    except Exception:
        return int(default)


def _opt_float(name: str, default: float) -> float:
    try:
        return float(_opt(name, str(default)))
    except Exception:
        return float(default)


def load_settings(env_path: str = ".env") -> Settings:
    load_dotenv(env_path)

    origin = _opt("SCHED_SERVICE_ORIGIN", "http://127.0.0.1:8080").rstrip("/")
    if "://" not in origin:
        origin = f"http://{origin}"

    return Settings(
        console_host=_opt("CONSOLE_HOST", "127.0.0.1"),
        console_port=_opt_int("CONSOLE_PORT", _opt_int("PORT", 8000)),

        service_origin=origin,
        dashboard_port=_opt_int("SCHED_DASHBOARD_PORT", 8080),
        decision_port=_opt_int("SCHED_DECISION_PORT", 8082),
        request_timeout_s=_opt_float("REQUEST_TIMEOUT_S", 30.0),

        token_store_path=_opt("TOKEN_STORE_PATH", "./.schedconsole/storage.json"),

        health_interval_s=max(1, _opt_int("HEALTH_INTERVAL_S", 5)),
        metrics_interval_s=max(1, _opt_int("METRICS_INTERVAL_S", 5)),

        dd_enabled=_opt_bool("DD_ENABLED", True),
        dd_env=_opt("DD_ENV", "dev"),
        dd_service=_opt("DD_SERVICE", "schedconsole"),
        dd_version=_opt("DD_VERSION", "0.1.0"),
        dd_agent_host=_opt("DD_AGENT_HOST", "127.0.0.1"),
        dd_dogstatsd_port=_opt_int("DD_DOGSTATSD_PORT", 8125),
    )
