from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional


_OFF_VALUES = ("", "0", "off", "none", "false", "no")
_TRUE_VALUES = ("1", "true", "yes")


def _default_trace_path(home: Path) -> Path:
    return home / "Library" / "Logs" / "daemon-hunter" / "trace.jsonl"


@dataclass(frozen=True)
class RuntimeContext:
    """
    Session-wide settings, resolved once at startup.

    Hard rules:
    - Environment variables only; no configuration file is read.
    - dry_run makes every mutating tool report expected effects instead of acting.
    """

    run_id: str
    home: Path = field(default_factory=Path.home)
    uid: int = 0
    dry_run: bool = False
    trace_path: Optional[Path] = None

    @property
    def tracing_enabled(self) -> bool:
        return self.trace_path is not None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RuntimeContext":
        env = os.environ if environ is None else environ

        home_raw = env.get("DAEMON_HUNTER_HOME")
        home = Path(home_raw).expanduser() if home_raw and home_raw.strip() else Path.home()

        trace_raw = env.get("DAEMON_HUNTER_TRACE")
        trace_path = None  # type: Optional[Path]
        if trace_raw is None:
            trace_path = _default_trace_path(home)
        elif trace_raw.strip().lower() not in _OFF_VALUES:
            trace_path = Path(trace_raw).expanduser()

        dry_run = str(env.get("DAEMON_HUNTER_DRY_RUN", "")).strip().lower() in _TRUE_VALUES
        run_id = "run_" + datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        uid = os.getuid() if hasattr(os, "getuid") else 0
        return cls(run_id=run_id, home=home, uid=uid, dry_run=dry_run, trace_path=trace_path)
