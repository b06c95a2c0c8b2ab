from __future__ import annotations

import re
import subprocess
from typing import List, Sequence

LAUNCHCTL = "launchctl"

# launchctl load/unload may exit 0 while reporting the failure on stderr.
_REPORTED_FAILURE_RE = re.compile(r"\b(load|unload)\s+failed\b", re.IGNORECASE)


def build_argv(argv: Sequence[str], *, privileged: bool = False) -> List[str]:
    cmd = [str(a) for a in argv]
    if privileged:
        return ["sudo"] + cmd
    return cmd


def run_command(argv: Sequence[str], *, privileged: bool = False) -> subprocess.CompletedProcess:
    # No timeout: a hung launchd hangs the session.
    return subprocess.run(build_argv(argv, privileged=privileged), capture_output=True, text=True, check=False)


def reported_failure(proc: subprocess.CompletedProcess) -> bool:
    if proc.returncode != 0:
        return True
    return bool(_REPORTED_FAILURE_RE.search(proc.stderr or "") or _REPORTED_FAILURE_RE.search(proc.stdout or ""))


def describe_failure(tool_id: str, proc: subprocess.CompletedProcess) -> str:
    detail = (proc.stderr or proc.stdout or "").strip().splitlines()
    tail = detail[-1] if detail else "no output"
    return f"{tool_id}: exit {proc.returncode}: {tail}"
