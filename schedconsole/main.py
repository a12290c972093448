# schedconsole/main.py
from __future__ import annotations

import logging

import uvicorn

from .config.settings import load_settings
from .obs.logging import setup_logging
from .obs.metrics import init_metrics, metric_gauge
from .runtime.context import build_context
from .web.api import build_app
from .web.controller import ConsoleController

log = logging.getLogger("schedconsole")


def main() -> None:
    cfg = load_settings(".env")

    setup_logging()
    log.info(
        "app.starting",
        extra={"service": cfg.dd_service, "env": cfg.dd_env, "version": cfg.dd_version},
    )

    init_metrics(cfg)
    metric_gauge(
        "schedconsole.app.info",
        1.0,
        tags={"service_origin": cfg.service_origin, "decision_port": cfg.decision_port},
    )

    ctx = build_context(cfg)
    controller = ConsoleController(ctx)
    controller.open()

    app = build_app(cfg, controller)

    log.info(
        "app.ui_ready",
        extra={
            "url": f"http://{cfg.console_host}:{cfg.console_port}/ui",
            "primary": ctx.api.endpoints.primary,
            "secondary": ctx.api.endpoints.secondary,
        },
    )
    try:
        uvicorn.run(app, host=cfg.console_host, port=cfg.console_port, access_log=False)
    finally:
        ctx.close()
        log.info("app.stopped")


if __name__ == "__main__":
    main()
