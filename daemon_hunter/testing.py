from __future__ import annotations

import dataclasses
import io
import plistlib
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from daemon_hunter.bootstrap_tools import build_tool_registry
from daemon_hunter.core.console import Console
from daemon_hunter.core.model import Scope
from daemon_hunter.core.runtime_context import RuntimeContext
from daemon_hunter.core.scope_table import ScopeTable, load_scope_table
from daemon_hunter.core.session import Session, Wiring, build_session, wire
from daemon_hunter.registry.tool_registry import ToolFunc, ToolRegistry
from daemon_hunter.trace.trace_emitter import TraceEmitter
from daemon_hunter.trace.trace_store_jsonl import MemoryTraceStore
from tools.plist.label import read_label


def write_descriptor(directory: Path, filename: str, label: Optional[str], **extra: Any) -> Path:
    """
    Write a launchd descriptor. label=None writes a plist without a Label key.
    """
    directory.mkdir(parents=True, exist_ok=True)
    doc: Dict[str, Any] = {"ProgramArguments": ["/usr/bin/true"]}
    if label is not None:
        doc["Label"] = label
    doc.update(extra)
    path = directory / filename
    path.write_bytes(plistlib.dumps(doc))
    return path


def sandbox_scopes(root: Path) -> ScopeTable:
    """
    The shipped scope table with the system-wide directories moved under `root`.
    The user scope keeps its ~-relative directory; point RuntimeContext.home into `root` as well.
    """
    table = load_scope_table()
    specs = []
    for spec in table.specs:
        if spec.directory.startswith("~"):
            specs.append(spec)
        else:
            specs.append(dataclasses.replace(spec, directory=str(root / spec.directory.lstrip("/"))))
    return dataclasses.replace(table, specs=tuple(specs))


def sandbox_context(home: Path, *, uid: int = 501, dry_run: bool = False) -> RuntimeContext:
    return RuntimeContext(run_id="run_test", home=home, uid=uid, dry_run=dry_run, trace_path=None)


def scripted_input(answers: Iterable[str]) -> Callable[[str], str]:
    """
    input() replacement that replays `answers` and raises EOFError when exhausted.
    """
    it = iter(list(answers))

    def _input(_prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError() from None

    return _input


def scripted_console(answers: Iterable[str]) -> Tuple[Console, io.StringIO]:
    out = io.StringIO()
    return Console(input_func=scripted_input(answers), out=out), out


class FakeLaunchd:
    """
    Deterministic stand-in for launchctl, the Finder and privileged rm.

    State:
    - registered: label -> pid (None or 0 means loaded but idle)
    - disabled: domain -> {label: disabled}
    Descriptor files themselves live on the real (temporary) filesystem.
    """

    def __init__(self, *, uid: int = 501) -> None:
        self.uid = uid
        self.registered: Dict[str, Optional[int]] = {}
        self.disabled: Dict[str, Dict[str, bool]] = {}
        self.failing_domains: Set[str] = set()
        self.fail_load: Set[str] = set()
        self.fail_unload: Set[str] = set()
        self.fail_remove: Set[str] = set()
        self.revealed: List[str] = []
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def register(self, label: str, pid: Optional[int] = None) -> None:
        self.registered[label] = pid

    def set_disabled(self, domain: str, label: str, disabled: bool = True) -> None:
        self.disabled.setdefault(domain, {})[label] = disabled

    def calls_to(self, tool_id: str) -> List[Dict[str, Any]]:
        return [args for tid, args in self.calls if tid == tool_id]

    def _domain(self, privileged: bool) -> str:
        return "system" if privileged else f"gui/{self.uid}"

    def _list(self, args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
        self.calls.append(("launchctl.list", dict(args)))
        label = args["label"]
        if label not in self.registered:
            return {"label": label, "registered": False, "pid": None, "dry_run": dry_run}
        return {"label": label, "registered": True, "pid": self.registered[label], "dry_run": dry_run}

    def _print_disabled(self, args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
        self.calls.append(("launchctl.print_disabled", dict(args)))
        domain = args["domain"]
        if domain in self.failing_domains:
            raise RuntimeError(f"launchctl.print_disabled: exit 113: Could not find domain for {domain}")
        return {"domain": domain, "disabled": dict(self.disabled.get(domain, {})), "dry_run": dry_run}

    def _load(self, args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
        self.calls.append(("launchctl.load", dict(args)))
        path = args["path"]
        if path in self.fail_load:
            raise RuntimeError(f"launchctl.load: exit 0: Load failed: 5: Input/output error ({path})")
        if dry_run:
            return {"path": path, "dry_run": True, "expected_effects": [{"kind": "launchd_load", "summary": f"Load {path}"}]}
        label = read_label(Path(path).read_bytes())
        if label is None:
            raise RuntimeError(f"launchctl.load: no Label in {path}")
        self.registered[label] = None
        if args.get("persistent"):
            self.set_disabled(self._domain(bool(args.get("privileged"))), label, False)
        return {"path": path, "dry_run": False, "persistent": bool(args.get("persistent"))}

    def _unload(self, args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
        self.calls.append(("launchctl.unload", dict(args)))
        path = args["path"]
        if path in self.fail_unload:
            raise RuntimeError(f"launchctl.unload: exit 0: Unload failed: 5: Input/output error ({path})")
        if dry_run:
            return {"path": path, "dry_run": True, "expected_effects": [{"kind": "launchd_unload", "summary": f"Unload {path}"}]}
        p = Path(path)
        label = read_label(p.read_bytes()) if p.exists() else None
        if label is not None:
            self.registered.pop(label, None)
        return {"path": path, "dry_run": False}

    def _remove(self, args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
        self.calls.append(("fs.remove", dict(args)))
        path = args["path"]
        if path in self.fail_remove:
            raise PermissionError(f"fs.remove: rm exited 1: Operation not permitted ({path})")
        if dry_run:
            return {"path": path, "dry_run": True, "expected_effects": [{"kind": "fs_remove", "summary": f"Remove {path}"}]}
        p = Path(path)
        existed = p.exists()
        p.unlink(missing_ok=True)
        return {"path": path, "dry_run": False, "removed": existed}

    def _reveal(self, args: Dict[str, Any], dry_run: bool) -> Dict[str, Any]:
        self.calls.append(("app.reveal", dict(args)))
        target = args["target"]
        if not Path(target).exists():
            return {"target": target, "revealed": False, "reason": "not_found", "dry_run": dry_run}
        self.revealed.append(target)
        return {"target": target, "revealed": True, "dry_run": dry_run}

    def tools(self) -> Dict[str, ToolFunc]:
        """
        Overrides for build_tool_registry(); fs.list and plist.label stay real.
        """
        return {
            "launchctl.list": self._list,
            "launchctl.print_disabled": self._print_disabled,
            "launchctl.load": self._load,
            "launchctl.unload": self._unload,
            "fs.remove": self._remove,
            "app.reveal": self._reveal,
        }


class Sandbox:
    """
    Temporary launchd world for tests: the three scope directories live under
    `root`, launchctl/Finder/privileged rm are served by a FakeLaunchd, and
    trace events are kept in memory.
    """

    def __init__(self, root: Path, *, dry_run: bool = False) -> None:
        self.root = root
        self.home = root / "home"
        self.fake = FakeLaunchd()
        self.ctx = sandbox_context(self.home, uid=self.fake.uid, dry_run=dry_run)
        self.scopes = sandbox_scopes(root)
        self.trace_store = MemoryTraceStore()
        self.trace = TraceEmitter(self.trace_store, self.ctx.run_id)
        self.registry: ToolRegistry = build_tool_registry(self.fake.tools())

    def dir_for(self, scope: Scope) -> Path:
        return self.scopes.get(scope).resolve_directory(self.home)

    def domain_for(self, scope: Scope) -> str:
        return self.scopes.get(scope).resolve_domain(self.fake.uid)

    def add(self, scope: Scope, filename: str, label: Optional[str], **extra: Any) -> Path:
        return write_descriptor(self.dir_for(scope), filename, label, **extra)

    def wiring(self) -> Wiring:
        return wire(self.ctx, self.registry, self.trace, self.scopes)

    def session(self, answers: Iterable[str] = ()) -> Tuple[Session, io.StringIO]:
        console, out = scripted_console(answers)
        session = build_session(self.ctx, self.registry, console=console, trace=self.trace, scopes=self.scopes)
        return session, out

    def event_types(self) -> List[str]:
        return [e["event_type"] for e in self.trace_store.events]
