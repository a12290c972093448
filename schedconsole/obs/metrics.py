# schedconsole/obs/metrics.py
from __future__ import annotations

import logging
from typing import Any, Dict

from datadog import DogStatsd

from ..config.settings import Settings

log = logging.getLogger("schedconsole")

_STATS: DogStatsd | None = None


def _safe_tags(tags: Dict[str, Any]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in (tags or {}).items():
        if v is None:
            continue
        out[str(k)] = str(v)
    return out


def _tag_list(tags: Dict[str, Any] | None) -> list[str]:
    return [f"{k}:{v}" for k, v in _safe_tags(tags or {}).items()]


def init_metrics(cfg: Settings) -> None:
    global _STATS

    if not cfg.dd_enabled:
        log.warning("metrics.disabled", extra={"DD_ENABLED": False})
        _STATS = None
        return

    base_tags = [
        f"service:{cfg.dd_service}",
        f"env:{cfg.dd_env}",
        f"version:{cfg.dd_version}",
    ]
    try:
        _STATS = DogStatsd(
            host=cfg.dd_agent_host,
            port=cfg.dd_dogstatsd_port,
            namespace="",
            constant_tags=base_tags,
        )
    except Exception as e:
        _STATS = None
        log.warning("metrics.dogstatsd_unavailable", extra={"error": str(e)})
        return

    log.info(
        "metrics.init_complete",
        extra={"agent_host": cfg.dd_agent_host, "dogstatsd_port": cfg.dd_dogstatsd_port},
    )


def metrics_enabled() -> bool:
    return _STATS is not None


def metric_count(name: str, value: int = 1, tags: Dict[str, Any] | None = None) -> None:
    if _STATS is None:
        return
    _STATS.increment(name, value, tags=_tag_list(tags))


def metric_gauge(name: str, value: float, tags: Dict[str, Any] | None = None) -> None:
    if _STATS is None:
        return
    _STATS.gauge(name, value, tags=_tag_list(tags))
