from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DaemonHunterError(Exception):
    code: str
    message: str
    data: dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ValidationError(DaemonHunterError):
    pass


class ToolNotFound(DaemonHunterError):
    pass


class ToolExecutionError(DaemonHunterError):
    pass


class StaleSelectionError(DaemonHunterError):
    pass
