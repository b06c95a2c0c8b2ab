from __future__ import annotations

import re
from typing import Any, Dict, Optional

from ._proc import LAUNCHCTL, run_command

_PID_RE = re.compile(r'"PID"\s*=\s*(-?\d+)\s*;')


def parse_pid(stdout: str) -> Optional[int]:
    """
    Extract the process id from `launchctl list <label>` output.

    The per-label form prints a dictionary (`"PID" = 123;`); the key is absent
    when the job is registered but idle. A tabular `PID Status Label` line is
    accepted too.
    """
    m = _PID_RE.search(stdout)
    if m:
        return int(m.group(1))
    for line in stdout.splitlines():
        parts = line.split()
        if len(parts) >= 3 and parts[0].lstrip("-").isdigit():
            return int(parts[0])
    return None


def run(args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
    """
    Query launchd registration for a label (read-only; dry-run identical).
    args:
      - label: string
    output:
      - registered: bool (false when launchctl does not know the label)
      - pid: int | None
    """
    label = args.get("label")
    if not isinstance(label, str) or not label:
        raise ValueError("launchctl.list: 'label' must be a non-empty string")

    proc = run_command([LAUNCHCTL, "list", label])
    if proc.returncode != 0:
        return {"label": label, "registered": False, "pid": None, "dry_run": dry_run}
    return {"label": label, "registered": True, "pid": parse_pid(proc.stdout), "dry_run": dry_run}
