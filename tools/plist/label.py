from __future__ import annotations

import plistlib
from typing import Any, Optional
from xml.parsers.expat import ExpatError

from tools.fs._path import expand_user_path


def read_label(data: bytes) -> Optional[str]:
    try:
        doc = plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError):
        return None
    if not isinstance(doc, dict):
        return None
    label = doc.get("Label")
    if not isinstance(label, str):
        return None
    label = label.strip()
    return label or None


def run(args: dict[str, Any], dry_run: bool) -> dict[str, Any]:
    """
    Read the `Label` key of a launchd descriptor (read-only; dry-run identical).
    Unreadable or malformed descriptors yield label=None rather than an error.
    args:
      - path: string
    """
    path_raw = args.get("path")
    if not isinstance(path_raw, str) or not path_raw:
        raise ValueError("plist.label: 'path' must be a non-empty string")

    path = expand_user_path(path_raw)
    try:
        data = path.read_bytes()
    except OSError:
        return {"path": str(path), "label": None, "readable": False, "dry_run": dry_run}
    return {"path": str(path), "label": read_label(data), "readable": True, "dry_run": dry_run}
