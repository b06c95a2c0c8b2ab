from __future__ import annotations

from typing import Any

from ._path import expand_user_path


def run(args: dict[str, Any], dry_run: bool) -> dict[str, Any]:
    """
    List regular files directly inside a directory (read-only; dry-run identical).
    args:
      - path: string
      - suffix: string (optional; e.g. ".plist")
    """
    path_raw = args.get("path")
    if not isinstance(path_raw, str) or not path_raw:
        raise ValueError("fs.list: 'path' must be a non-empty string")
    suffix = args.get("suffix", "")
    if not isinstance(suffix, str):
        raise ValueError("fs.list: 'suffix' must be a string")

    path = expand_user_path(path_raw)
    if not path.exists():
        return {"path": str(path), "entries": [], "exists": False, "readable": False, "dry_run": dry_run}
    if not path.is_dir():
        raise ValueError("fs.list: path is not a directory")

    try:
        children = sorted(path.iterdir(), key=lambda p: p.name)
    except PermissionError:
        return {"path": str(path), "entries": [], "exists": True, "readable": False, "dry_run": dry_run}

    entries = [p.name for p in children if p.name.endswith(suffix) and p.is_file()]
    return {"path": str(path), "entries": entries, "exists": True, "readable": True, "dry_run": dry_run}
