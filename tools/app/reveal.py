from __future__ import annotations

from typing import Any

from tools.fs._path import expand_user_path
from tools.launchctl._proc import describe_failure, run_command


def run(args: dict[str, Any], dry_run: bool) -> dict[str, Any]:
    """
    Reveal a file in the Finder (`open -R`).

    A path that no longer exists is reported, not raised.
    """
    target = args.get("target")
    if not isinstance(target, str) or not target:
        raise ValueError("app.reveal: 'target' must be a non-empty string")

    path = expand_user_path(target)
    if not path.exists():
        return {"target": str(path), "revealed": False, "reason": "not_found", "dry_run": dry_run}

    if dry_run:
        return {
            "target": str(path),
            "revealed": False,
            "dry_run": True,
            "expected_effects": [{"kind": "app", "summary": f"Reveal: {path}", "resources": [str(path)]}],
        }

    proc = run_command(["open", "-R", str(path)])
    if proc.returncode != 0:
        raise RuntimeError(describe_failure("app.reveal", proc))
    return {"target": str(path), "revealed": True, "dry_run": False}
