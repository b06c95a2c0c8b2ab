from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional, TextIO


class TraceStoreJSONL:
    """
    Appends one JSON object per line.

    A failed write (bad path, read-only directory, full disk) prints one warning
    and switches the store off for the rest of the session; tracing never ends a session.
    """

    def __init__(self, path: Path, *, warn_to: Optional[TextIO] = None):
        self._path = path
        self._warn_to = warn_to
        self._failed = False

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def failed(self) -> bool:
        return self._failed

    def append(self, event: dict[str, Any]) -> None:
        if self._failed:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(event, ensure_ascii=False) + "\n")
        except OSError as e:
            self._failed = True
            out = self._warn_to if self._warn_to is not None else sys.stderr
            out.write(f"Warning: trace disabled, cannot write {self._path}: {e.strerror or e}\n")
            out.flush()


class NullTraceStore:
    """
    Store used when tracing is switched off; drops every event.
    """

    @property
    def path(self) -> Optional[Path]:
        return None

    def append(self, event: dict[str, Any]) -> None:
        _ = event


class MemoryTraceStore:
    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []

    @property
    def path(self) -> Optional[Path]:
        return None

    def append(self, event: dict[str, Any]) -> None:
        self.events.append(event)
