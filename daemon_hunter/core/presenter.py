from __future__ import annotations

from typing import List, Tuple

from .model import DisplayMapping, Inventory
from .scope_table import ScopeTable
from .status import StatusResolver

SEPARATOR = "--------------------------------------"
ENABLED_MARKER = " *"


class Presenter:
    """
    Renders the inventory as six sections (scope x loaded/unloaded) and numbers
    every visible entry from 1, contiguously, in section order.

    Enablement is queried per entry at render time; it is never cached on the Entry.
    """

    def __init__(self, resolver: StatusResolver, scopes: ScopeTable):
        self._resolver = resolver
        self._scopes = scopes

    def render(self, inventory: Inventory) -> Tuple[str, DisplayMapping]:
        mapping = DisplayMapping(generation=inventory.generation)
        lines: List[str] = [""]

        for group_no, spec in enumerate(self._scopes.ordered()):
            if group_no > 0:
                lines.append(SEPARATOR)
            for loaded in (True, False):
                lines.append(f"{spec.title} | {'Loaded' if loaded else 'Unloaded'}:")
                for idx, entry in enumerate(inventory.entries):
                    if entry.scope is not spec.scope or entry.status.is_loaded is not loaded:
                        continue
                    number = mapping.add(idx)
                    marker = ENABLED_MARKER if self._resolver.is_enabled_at_boot(entry.label, entry.scope) else ""
                    lines.append(f"[{number}] {entry.label}{marker}")
                lines.append("")

        return "\n".join(lines) + "\n", mapping
