from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from .errors import StaleSelectionError


class Scope(enum.Enum):
    # Declaration order is the scan and render order.
    USER_AGENT = "user_agent"
    GLOBAL_AGENT = "global_agent"
    GLOBAL_DAEMON = "global_daemon"


class Status(enum.Enum):
    RUNNING = "Running"
    LOADED = "Loaded"
    UNLOADED = "Unloaded"

    @property
    def is_loaded(self) -> bool:
        return self is not Status.UNLOADED


@dataclass(frozen=True)
class Entry:
    scope: Scope
    label: str
    status: Status
    path: Path


@dataclass(frozen=True)
class Registration:
    label: str
    pid: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self.pid is not None and self.pid > 0


@dataclass(frozen=True)
class Inventory:
    """
    One scan snapshot. Replaced wholesale on every rebuild, never patched.
    """

    entries: Tuple[Entry, ...] = ()
    generation: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def labels(self) -> list[str]:
        return [e.label for e in self.entries]

    def successor(self, entries: Iterable[Entry]) -> "Inventory":
        return Inventory(entries=tuple(entries), generation=self.generation + 1)


class DisplayMapping:
    """
    Display number -> inventory index, valid only for the render that produced it.
    """

    def __init__(self, generation: int, indices: Dict[int, int] | None = None) -> None:
        self._generation = generation
        self._indices: Dict[int, int] = dict(indices or {})

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        return len(self._indices)

    def numbers(self) -> list[int]:
        return sorted(self._indices.keys())

    def add(self, inventory_index: int) -> int:
        number = len(self._indices) + 1
        self._indices[number] = inventory_index
        return number

    def resolve(self, inventory: Inventory, number: int) -> Optional[Entry]:
        if inventory.generation != self._generation:
            raise StaleSelectionError(
                code="selection.stale",
                message="Display numbers belong to an older listing",
                data={"mapping_generation": self._generation, "inventory_generation": inventory.generation},
            )
        idx = self._indices.get(number)
        if idx is None:
            return None
        return inventory.entries[idx]
