# schedconsole/strategies/wire.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SelectorPayload(BaseModel):
    key: str
    value: str


class StrategyPayload(BaseModel):
    priority: bool = False
    execution_time: int
    pid: Optional[int] = None
    command_regex: Optional[str] = None
    selectors: List[SelectorPayload] = Field(default_factory=list)


class StrategiesRequest(BaseModel):
    strategies: List[StrategyPayload] = Field(default_factory=list)

    def to_body(self) -> dict:
        # pid / command_regex are omitted, never sent as null
        return self.model_dump(exclude_none=True)
