from __future__ import annotations

import os
from pathlib import Path


def expand_user_path(p: str) -> Path:
    # Expand ~ and environment vars; symlinks are left alone so the descriptor path stays the one launchd sees.
    return Path(os.path.abspath(os.path.expandvars(os.path.expanduser(p))))
