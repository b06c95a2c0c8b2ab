from __future__ import annotations

from pathlib import Path
from typing import List

from .control_plane import FileStore
from .errors import DaemonHunterError
from .model import Entry, Scope
from .scope_table import ScopeTable
from .status import StatusResolver


class DescriptorScanner:
    """
    Turns the descriptor files of one directory into Entries.

    Skipped silently: missing/unreadable directories, files without a Label,
    labels under an excluded vendor prefix.
    """

    def __init__(self, file_store: FileStore, resolver: StatusResolver, scopes: ScopeTable):
        self._files = file_store
        self._resolver = resolver
        self._scopes = scopes

    def scan(self, directory: Path, scope: Scope) -> List[Entry]:
        try:
            paths = self._files.list_descriptors(directory)
        except DaemonHunterError:
            return []

        entries: List[Entry] = []
        for path in paths:
            try:
                label = self._files.read_label(path)
            except DaemonHunterError:
                continue
            if not label or self._scopes.is_excluded(label):
                continue
            entries.append(Entry(scope=scope, label=label, status=self._resolver.resolve_status(label), path=path))
        return entries
