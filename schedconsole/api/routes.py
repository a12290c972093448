# schedconsole/api/routes.py
from __future__ import annotations

LOGIN_PATH = "/api/v1/auth/login"
TOKEN_PATH = "/api/v1/auth/token"
HEALTH_PATH = "/health"
POD_PIDS_PATH = "/api/v1/pods/pids"
STRATEGIES_SELF_PATH = "/api/v1/strategies/self"
STRATEGIES_PATH = "/api/v1/strategies"
METRICS_PATH = "/api/v1/metrics"
