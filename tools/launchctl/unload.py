from __future__ import annotations

from typing import Any, Dict

from tools.fs._path import expand_user_path

from ._proc import LAUNCHCTL, build_argv, describe_failure, reported_failure, run_command


def run(args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
    """
    Unregister a descriptor from launchd without touching its boot override.
    args:
      - path: string
      - privileged: bool (optional; run through sudo)
    """
    path_raw = args.get("path")
    if not isinstance(path_raw, str) or not path_raw:
        raise ValueError("launchctl.unload: 'path' must be a non-empty string")
    privileged = bool(args.get("privileged", False))

    path = expand_user_path(path_raw)
    argv = [LAUNCHCTL, "unload", str(path)]

    if dry_run:
        return {
            "path": str(path),
            "dry_run": True,
            "argv": build_argv(argv, privileged=privileged),
            "expected_effects": [{"kind": "launchd_unload", "summary": f"Unload {path}", "resources": [str(path)]}],
        }

    proc = run_command(argv, privileged=privileged)
    if reported_failure(proc):
        raise RuntimeError(describe_failure("launchctl.unload", proc))
    return {"path": str(path), "dry_run": False}
