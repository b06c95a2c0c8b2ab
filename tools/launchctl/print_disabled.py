from __future__ import annotations

import re
from typing import Any, Dict

from ._proc import LAUNCHCTL, describe_failure, run_command

_LINE_RE = re.compile(r'^\s*"(?P<label>[^"]+)"\s*=>\s*(?P<value>true|false|disabled|enabled)\s*$')


def parse_disabled(stdout: str) -> Dict[str, bool]:
    """
    Parse `launchctl print-disabled <domain>` into {label: disabled}.

    Older releases print `=> true` for disabled; newer ones print `=> disabled`.
    """
    out: Dict[str, bool] = {}
    for line in stdout.splitlines():
        m = _LINE_RE.match(line)
        if not m:
            continue
        out[m.group("label")] = m.group("value") in ("true", "disabled")
    return out


def run(args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
    """
    Read the boot-enablement override registry of a launchd domain (read-only).
    args:
      - domain: string ("system" or "gui/<uid>")
    """
    domain = args.get("domain")
    if not isinstance(domain, str) or not domain:
        raise ValueError("launchctl.print_disabled: 'domain' must be a non-empty string")

    proc = run_command([LAUNCHCTL, "print-disabled", domain])
    if proc.returncode != 0:
        raise RuntimeError(describe_failure("launchctl.print_disabled", proc))
    return {"domain": domain, "disabled": parse_disabled(proc.stdout), "dry_run": dry_run}
