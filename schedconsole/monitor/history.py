# schedconsole/monitor/history.py
from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Literal, Optional

HISTORY_CAPACITY = 10

SlotState = Literal["empty", "healthy", "unhealthy"]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class HealthProbeResult:
    timestamp: str
    healthy: bool
    payload: Optional[Any] = None
    error_message: Optional[str] = None

    @classmethod
    def completed(cls, healthy: bool, payload: Any, timestamp: Optional[str] = None) -> "HealthProbeResult":
        return cls(timestamp=timestamp or utc_now_iso(), healthy=healthy, payload=payload)

    @classmethod
    def failed(cls, error_message: str, timestamp: Optional[str] = None) -> "HealthProbeResult":
        return cls(timestamp=timestamp or utc_now_iso(), healthy=False, error_message=error_message)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"timestamp": self.timestamp, "healthy": self.healthy}
        if self.error_message is not None:
            out["error"] = self.error_message
        else:
            out["data"] = self.payload
        return out


@dataclass(frozen=True)
class HealthSlot:
    state: SlotState
    title: str
    timestamp: Optional[str] = None

    @property
    def glyph(self) -> str:
        if self.state == "healthy":
            return "✓"
        if self.state == "unhealthy":
            return "✗"
        return ""

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state, "title": self.title, "timestamp": self.timestamp, "glyph": self.glyph}


def _slot_for(result: HealthProbeResult) -> HealthSlot:
    try:
        clock = datetime.fromisoformat(result.timestamp).strftime("%H:%M:%S")
    except ValueError:
        clock = result.timestamp
    label = "Healthy" if result.healthy else "Unhealthy"
    return HealthSlot(
        state="healthy" if result.healthy else "unhealthy",
        title=f"{clock}: {label}",
        timestamp=result.timestamp,
    )


class HealthHistory:

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        self.capacity = int(capacity)
        self._lock = threading.Lock()
        self._results: Deque[HealthProbeResult] = deque(maxlen=self.capacity)

    def record(self, result: HealthProbeResult) -> None:
        with self._lock:
            self._results.append(result)

    def items(self) -> List[HealthProbeResult]:
        with self._lock:
            return list(self._results)

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def snapshot(self) -> List[HealthSlot]:
        """Fixed-width timeline: "No data" slots first, then oldest to newest."""
        results = self.items()
        empty = [HealthSlot(state="empty", title="No data") for _ in range(self.capacity - len(results))]
        return empty + [_slot_for(r) for r in results]
