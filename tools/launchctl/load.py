from __future__ import annotations

from typing import Any, Dict

from tools.fs._path import expand_user_path

from ._proc import LAUNCHCTL, build_argv, describe_failure, reported_failure, run_command


def run(args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
    """
    Register a descriptor with launchd.
    args:
      - path: string
      - persistent: bool (optional; `-w` also clears the disabled override)
      - privileged: bool (optional; run through sudo)
    """
    path_raw = args.get("path")
    if not isinstance(path_raw, str) or not path_raw:
        raise ValueError("launchctl.load: 'path' must be a non-empty string")
    persistent = bool(args.get("persistent", False))
    privileged = bool(args.get("privileged", False))

    path = expand_user_path(path_raw)
    argv = [LAUNCHCTL, "load"] + (["-w"] if persistent else []) + [str(path)]

    if dry_run:
        return {
            "path": str(path),
            "dry_run": True,
            "argv": build_argv(argv, privileged=privileged),
            "expected_effects": [
                {
                    "kind": "launchd_load",
                    "summary": f"Load {path}" + (" (persistent)" if persistent else ""),
                    "resources": [str(path)],
                }
            ],
        }

    proc = run_command(argv, privileged=privileged)
    if reported_failure(proc):
        raise RuntimeError(describe_failure("launchctl.load", proc))
    return {"path": str(path), "dry_run": False, "persistent": persistent}
