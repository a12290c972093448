# schedconsole/obs/logging.py
from __future__ import annotations

import logging
import os
import sys

from pythonjsonlogger import jsonlogger


class ServiceContextFilter(logging.Filter):

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = os.getenv("DD_SERVICE", "schedconsole")
        record.env = os.getenv("DD_ENV", "dev")
        record.version = os.getenv("DD_VERSION", "0.1.0")
        return True


def setup_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)

    fmt = (
        "%(asctime)s %(levelname)s %(name)s %(message)s "
        "%(service)s %(env)s %(version)s"
    )
    formatter = jsonlogger.JsonFormatter(fmt)
    handler.setFormatter(formatter)
    handler.addFilter(ServiceContextFilter())

    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(os.getenv("UVICORN_LOG_LEVEL", "WARNING"))
    logging.getLogger("urllib3").setLevel(os.getenv("URLLIB3_LOG_LEVEL", "WARNING"))
