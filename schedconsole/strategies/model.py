# schedconsole/strategies/model.py
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..api.errors import ValidationError
from ..api.routes import STRATEGIES_PATH
from ..obs.metrics import metric_count
from ..shared.results import ActionResult
from .wire import SelectorPayload, StrategiesRequest, StrategyPayload

if TYPE_CHECKING:
    from ..api.client import ApiClient

log = logging.getLogger("schedconsole.strategies")

DEFAULT_EXECUTION_TIME_NS = 20_000_000


@dataclass
class Selector:
    key: str = ""
    value: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass
class StrategyRecord:
    # Text fields hold the operator's input verbatim; parsing happens in serialize().
    id: int
    priority: bool = False
    execution_time: str = str(DEFAULT_EXECUTION_TIME_NS)
    pid: str = ""
    command_regex: str = ""
    selectors: List[Selector] = field(default_factory=lambda: [Selector()])

    @property
    def title(self) -> str:
        return f"Strategy {self.id}"

    def copy(self) -> "StrategyRecord":
        return replace(self, selectors=[replace(s) for s in self.selectors])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority,
            "execution_time": self.execution_time,
            "pid": self.pid,
            "command_regex": self.command_regex,
            "selectors": [s.to_dict() for s in self.selectors],
        }


@dataclass(frozen=True)
class SerializedForm:
    payload: Dict[str, Any]
    substitutions: List[ValidationError]

    @property
    def count(self) -> int:
        return len(self.payload.get("strategies", []))

    def note(self) -> str:
        if not self.substitutions:
            return ""
        return "\n" + "\n".join(f"Note: {s}" for s in self.substitutions)


def _parse_execution_time(record: StrategyRecord, issues: List[ValidationError]) -> int:
    raw = record.execution_time
    try:
        value = int(str(raw).strip())
    except ValueError:
        value = 0
    if value > 0:
        return value
    issues.append(
        ValidationError(
            "execution_time",
            raw,
            f"{record.title}: execution time {raw!r} is not a positive integer; using {DEFAULT_EXECUTION_TIME_NS}",
            substituted=DEFAULT_EXECUTION_TIME_NS,
        )
    )
    return DEFAULT_EXECUTION_TIME_NS


def _parse_pid(record: StrategyRecord, issues: List[ValidationError]) -> Optional[int]:
    raw = str(record.pid).strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        issues.append(ValidationError("pid", record.pid, f"{record.title}: PID {record.pid!r} is not an integer; omitted"))
        return None


def _to_payload(record: StrategyRecord, issues: List[ValidationError]) -> StrategyPayload:
    selectors = []
    for s in record.selectors:
        key, value = s.key.strip(), s.value.strip()
        if key and value:
            selectors.append(SelectorPayload(key=key, value=value))

    regex = record.command_regex.strip()
    return StrategyPayload(
        priority=bool(record.priority),
        execution_time=_parse_execution_time(record, issues),
        pid=_parse_pid(record, issues),
        command_regex=regex or None,
        selectors=selectors,
    )


class StrategyFormModel:
    """Editable list of strategy records, each with at least one selector row.

    Ids come from a counter that only moves forward until ``clear_all`` resets
    it, so a removed record's id is never handed out again in between.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = 0
        self._records: List[StrategyRecord] = []

    def _find(self, strategy_id: int) -> Optional[StrategyRecord]:
        for record in self._records:
            if record.id == strategy_id:
                return record
        return None

    def _append_default(self) -> int:
        self._counter += 1
        self._records.append(StrategyRecord(id=self._counter))
        return self._counter

    def add_strategy(self) -> int:
        with self._lock:
            return self._append_default()

    def remove_strategy(self, strategy_id: int) -> bool:
        with self._lock:
            record = self._find(strategy_id)
            if record is not None:
                self._records.remove(record)
            if not self._records:
                self._append_default()
            return record is not None

    def clear_all(self) -> int:
        with self._lock:
            self._records.clear()
            self._counter = 0
            return self._append_default()

    def add_selector(self, strategy_id: int) -> Optional[int]:
        with self._lock:
            record = self._find(strategy_id)
            if record is None:
                return None
            record.selectors.append(Selector())
            return len(record.selectors) - 1

    def remove_selector(self, strategy_id: int, selector_index: int) -> bool:
        with self._lock:
            record = self._find(strategy_id)
            if record is None:
                return False
            removed = 0 <= selector_index < len(record.selectors)
            if removed:
                del record.selectors[selector_index]
            if not record.selectors:
                record.selectors.append(Selector())
            return removed

    def update_strategy(
        self,
        strategy_id: int,
        *,
        priority: Optional[bool] = None,
        execution_time: Optional[Any] = None,
        pid: Optional[Any] = None,
        command_regex: Optional[str] = None,
    ) -> bool:
        with self._lock:
            record = self._find(strategy_id)
            if record is None:
                return False
            if priority is not None:
                record.priority = bool(priority)
            if execution_time is not None:
                record.execution_time = str(execution_time)
            if pid is not None:
                record.pid = str(pid)
            if command_regex is not None:
                record.command_regex = command_regex
            return True

    def update_selector(
        self,
        strategy_id: int,
        selector_index: int,
        *,
        key: Optional[str] = None,
        value: Optional[str] = None,
    ) -> bool:
        with self._lock:
            record = self._find(strategy_id)
            if record is None or not 0 <= selector_index < len(record.selectors):
                return False
            selector = record.selectors[selector_index]
            if key is not None:
                selector.key = key
            if value is not None:
                selector.value = value
            return True

    def strategies(self) -> List[StrategyRecord]:
        with self._lock:
            return [r.copy() for r in self._records]

    def get(self, strategy_id: int) -> Optional[StrategyRecord]:
        with self._lock:
            record = self._find(strategy_id)
            return record.copy() if record is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def serialize(self) -> SerializedForm:
        issues: List[ValidationError] = []
        with self._lock:
            payloads = [_to_payload(r, issues) for r in self._records]
        for issue in issues:
            log.warning(
                "strategies.value_substituted",
                extra={"field": issue.field, "raw": str(issue.raw), "substituted": issue.substituted},
            )
        return SerializedForm(payload=StrategiesRequest(strategies=payloads).to_body(), substitutions=issues)

    def submit(self, api: "ApiClient") -> ActionResult:
        form = self.serialize()
        if form.count == 0:
            return ActionResult.info("No strategies to save")

        resp = api.post(STRATEGIES_PATH, form.payload, authenticated=True)
        envelope = resp.envelope()
        if resp.ok and envelope.success:
            log.info("strategies.saved", extra={"count": form.count})
            metric_count("schedconsole.strategies.submit", 1, {"outcome": "ok"})
            return ActionResult.success(
                f"Successfully saved {form.count} strategies: " + json.dumps(resp.body, indent=2) + form.note(),
                data=resp.body,
            )

        reason = envelope.reason("Unknown error")
        log.warning("strategies.save_failed", extra={"status": resp.status, "reason": reason})
        metric_count("schedconsole.strategies.submit", 1, {"outcome": "rejected"})
        return ActionResult.error(f"Save failed: {reason}" + form.note(), data=resp.body)
