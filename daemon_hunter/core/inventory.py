from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .model import Entry, Inventory, Scope
from .scanner import DescriptorScanner
from .scope_table import ScopeTable
from ..trace.trace_emitter import TraceEmitter


class InventoryBuilder:
    def __init__(self, scanner: DescriptorScanner, scopes: ScopeTable, trace: TraceEmitter, *, home: Path):
        self._scanner = scanner
        self._scopes = scopes
        self._trace = trace
        self._home = home

    def directories(self) -> List[Tuple[Scope, Path]]:
        return [(spec.scope, spec.resolve_directory(self._home)) for spec in self._scopes.ordered()]

    def rebuild(self, previous: Optional[Inventory] = None) -> Inventory:
        """
        Scan every directory from scratch; statuses are re-resolved, never carried over.
        """
        entries: List[Entry] = []
        counts: Dict[str, int] = {}
        for scope, directory in self.directories():
            found = self._scanner.scan(directory, scope)
            counts[scope.value] = len(found)
            entries.extend(found)

        base = previous if previous is not None else Inventory()
        inventory = base.successor(entries)
        self._trace.emit(
            "inventory_rebuilt",
            message=f"{len(inventory)} entries",
            data={"generation": inventory.generation, "counts": counts},
        )
        return inventory
