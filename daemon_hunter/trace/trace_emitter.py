from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from daemon_hunter.core.model import Entry


class TraceStore(Protocol):
    def append(self, event: dict[str, Any]) -> None: ...


def entry_ref(entry: "Entry") -> dict[str, str]:
    return {"scope": entry.scope.value, "label": entry.label, "path": str(entry.path)}


class TraceEmitter:
    def __init__(self, store: TraceStore, run_id: str):
        self._store = store
        self._run_id = run_id

    @property
    def run_id(self) -> str:
        return self._run_id

    def emit(
        self,
        event_type: str,
        *,
        action: str | None = None,
        tool_id: str | None = None,
        entry: Entry | None = None,
        message: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        event: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "run_id": self._run_id,
            "event_type": event_type,
        }
        if action is not None:
            event["action"] = action
        if tool_id is not None:
            event["tool_id"] = tool_id
        if entry is not None:
            event["entry"] = entry_ref(entry)
        if message is not None:
            event["message"] = message
        if data is not None:
            event["data"] = data

        self._store.append(event)
