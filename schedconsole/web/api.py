# schedconsole/web/api.py
from __future__ import annotations

from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ..config.settings import Settings
from ..shared.results import ActionResult
from .controller import SAMPLE_PUBLIC_KEY, ConsoleController
from .ui import ui_html


class PasswordIn(BaseModel):
    username: str = ""
    password: str = ""


class PublicKeyIn(BaseModel):
    public_key: str = ""


class IntervalIn(BaseModel):
    interval_s: Union[int, str]


class StrategyPatchIn(BaseModel):
    priority: Optional[bool] = None
    execution_time: Optional[Union[int, str]] = None
    pid: Optional[Union[int, str]] = None
    command_regex: Optional[str] = None


class SelectorPatchIn(BaseModel):
    key: Optional[str] = None
    value: Optional[str] = None


def _not_found(strategy_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Unknown strategy {strategy_id}")


def build_app(cfg: Settings, controller: ConsoleController) -> FastAPI:
    app = FastAPI(title="Scheduler Console")

    def respond(result: Optional[ActionResult] = None, **extra: Any) -> Dict[str, Any]:
        out: Dict[str, Any] = {"state": controller.view(), **extra}
        if result is not None:
            out["result"] = result.to_dict()
        return out

    @app.get("/ui", response_class=HTMLResponse)
    def ui():
        return ui_html()

    @app.get("/state")
    def state():
        return controller.view()

    @app.get("/config")
    def config():
        return {
            "service_origin": cfg.service_origin,
            "decision_origin": controller.ctx.api.endpoints.secondary,
            "health_interval_s": cfg.health_interval_s,
            "metrics_interval_s": cfg.metrics_interval_s,
        }

    # --- auth

    @app.post("/auth/password")
    def auth_password(inp: PasswordIn):
        return respond(controller.login_with_password(inp.username, inp.password))

    @app.post("/auth/public-key")
    def auth_public_key(inp: PublicKeyIn):
        return respond(controller.login_with_public_key(inp.public_key))

    @app.post("/auth/clear")
    def auth_clear():
        return respond(controller.clear_token())

    @app.get("/auth/sample-key")
    def auth_sample_key():
        return {"public_key": SAMPLE_PUBLIC_KEY}

    # --- monitoring

    @app.post("/health/check")
    def health_check():
        return respond(controller.check_health())

    @app.post("/health/auto")
    def health_auto(inp: IntervalIn):
        return respond(controller.toggle_health_auto_refresh(inp.interval_s))

    @app.post("/metrics/fetch")
    def metrics_fetch():
        return respond(controller.get_metrics())

    @app.post("/metrics/auto")
    def metrics_auto(inp: IntervalIn):
        return respond(controller.toggle_metrics_auto_refresh(inp.interval_s))

    @app.post("/pods/pids")
    def pods_pids():
        return respond(controller.get_pod_pids())

    # --- strategies

    @app.post("/strategies/fetch")
    def strategies_fetch():
        return respond(controller.get_strategies())

    @app.post("/strategies/save")
    def strategies_save():
        return respond(controller.save_all_strategies())

    @app.post("/strategies/clear")
    def strategies_clear():
        return respond(controller.clear_all_strategies())

    @app.post("/strategies")
    def strategies_add():
        return respond(strategy_id=controller.add_strategy())

    @app.patch("/strategies/{strategy_id}")
    def strategies_update(strategy_id: int, inp: StrategyPatchIn):
        if not controller.update_strategy(strategy_id, **inp.model_dump(exclude_none=True)):
            raise _not_found(strategy_id)
        return respond()

    @app.delete("/strategies/{strategy_id}")
    def strategies_remove(strategy_id: int):
        if not controller.remove_strategy(strategy_id):
            raise _not_found(strategy_id)
        return respond()

    @app.post("/strategies/{strategy_id}/selectors")
    def selectors_add(strategy_id: int):
        index = controller.add_selector(strategy_id)
        if index is None:
            raise _not_found(strategy_id)
        return respond(selector_index=index)

    @app.patch("/strategies/{strategy_id}/selectors/{index}")
    def selectors_update(strategy_id: int, index: int, inp: SelectorPatchIn):
        if not controller.update_selector(strategy_id, index, **inp.model_dump(exclude_none=True)):
            raise HTTPException(status_code=404, detail=f"Unknown selector {strategy_id}/{index}")
        return respond()

    @app.delete("/strategies/{strategy_id}/selectors/{index}")
    def selectors_remove(strategy_id: int, index: int):
        if not controller.remove_selector(strategy_id, index):
            raise HTTPException(status_code=404, detail=f"Unknown selector {strategy_id}/{index}")
        return respond()

    return app
