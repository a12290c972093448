# schedconsole/shared/results.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

ResultStatus = Literal["success", "error", "info"]


@dataclass(frozen=True)
class ActionResult:
    status: ResultStatus
    message: str
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.status != "error"

    @classmethod
    def success(cls, message: str, data: Any = None) -> "ActionResult":
        return cls(status="success", message=message, data=data)

    @classmethod
    def error(cls, message: str, data: Any = None) -> "ActionResult":
        return cls(status="error", message=message, data=data)

    @classmethod
    def info(cls, message: str, data: Any = None) -> "ActionResult":
        return cls(status="info", message=message, data=data)

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "message": self.message}
