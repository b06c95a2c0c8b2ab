from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from .executor import Executor
from .model import Entry, Registration, Scope
from .scope_table import ScopeTable


class ControlPlane:
    """
    Typed view of launchd: registration lookup, the disabled registry, load and unload.
    """

    def __init__(self, executor: Executor, scopes: ScopeTable, *, uid: int):
        self._exec = executor
        self._scopes = scopes
        self._uid = uid

    def domain_for(self, scope: Scope) -> str:
        return self._scopes.get(scope).resolve_domain(self._uid)

    def query(self, label: str) -> Optional[Registration]:
        out = self._exec.call("launchctl.list", {"label": label})
        if not out.get("registered"):
            return None
        pid = out.get("pid")
        return Registration(label=label, pid=pid if isinstance(pid, int) else None)

    def disabled_registry(self, scope: Scope) -> Dict[str, bool]:
        out = self._exec.call("launchctl.print_disabled", {"domain": self.domain_for(scope)})
        disabled = out.get("disabled")
        return dict(disabled) if isinstance(disabled, dict) else {}

    def load(self, entry: Entry, *, persistent: bool) -> Dict[str, Any]:
        args = {
            "path": str(entry.path),
            "persistent": persistent,
            "privileged": self._scopes.get(entry.scope).privileged,
        }
        return self._exec.call("launchctl.load", args, entry=entry)

    def unload(self, entry: Entry) -> Dict[str, Any]:
        args = {"path": str(entry.path), "privileged": self._scopes.get(entry.scope).privileged}
        return self._exec.call("launchctl.unload", args, entry=entry)


class FileStore:
    """
    Descriptor files on disk.
    """

    def __init__(self, executor: Executor, scopes: ScopeTable):
        self._exec = executor
        self._scopes = scopes

    def list_descriptors(self, directory: Path) -> List[Path]:
        out = self._exec.call("fs.list", {"path": str(directory), "suffix": self._scopes.descriptor_suffix})
        names = out.get("entries") or []
        return [directory / n for n in names if isinstance(n, str)]

    def read_label(self, path: Path) -> Optional[str]:
        out = self._exec.call("plist.label", {"path": str(path)})
        label = out.get("label")
        return label if isinstance(label, str) and label else None

    def delete(self, entry: Entry) -> Dict[str, Any]:
        args = {"path": str(entry.path), "privileged": self._scopes.get(entry.scope).privileged}
        return self._exec.call("fs.remove", args, entry=entry)


class Revealer:
    def __init__(self, executor: Executor):
        self._exec = executor

    def reveal(self, entry: Entry) -> Dict[str, Any]:
        return self._exec.call("app.reveal", {"target": str(entry.path)}, entry=entry)
