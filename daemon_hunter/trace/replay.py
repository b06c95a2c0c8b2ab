from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


class Replay:
    """
    Minimal JSONL replay reader.
    """

    def __init__(self, path: Path):
        self._path = path

    def iter_events(self, event_type: Optional[str] = None) -> Iterator[Dict[str, Any]]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                event = json.loads(line)
                if event_type is None or event.get("event_type") == event_type:
                    yield event

    def event_types(self) -> List[str]:
        return [e.get("event_type", "") for e in self.iter_events()]
