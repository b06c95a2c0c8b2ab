from __future__ import annotations

from typing import Any, Dict

from tools.launchctl._proc import run_command

from ._path import expand_user_path


def run(args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
    """
    Remove a single file. Missing files are not an error (rm -f semantics).
    args:
      - path: string
      - privileged: bool (optional; run `rm -f` through sudo)
    """
    path_raw = args.get("path")
    if not isinstance(path_raw, str) or not path_raw:
        raise ValueError("fs.remove: 'path' must be a non-empty string")
    privileged = bool(args.get("privileged", False))

    path = expand_user_path(path_raw)
    if path.is_dir():
        raise IsADirectoryError(f"fs.remove: refusing to remove a directory: {path}")

    if dry_run:
        return {
            "path": str(path),
            "dry_run": True,
            "exists": path.exists(),
            "expected_effects": [{"kind": "fs_remove", "summary": f"Remove {path}", "resources": [str(path)]}],
        }

    existed = path.exists()
    if privileged:
        proc = run_command(["rm", "-f", str(path)], privileged=True)
        if proc.returncode != 0:
            raise PermissionError(f"fs.remove: rm exited {proc.returncode}: {proc.stderr.strip()}")
    else:
        path.unlink(missing_ok=True)
    return {"path": str(path), "dry_run": False, "removed": existed}
