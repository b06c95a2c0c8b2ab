from __future__ import annotations

import enum
from typing import Any, Callable, Dict

from .console import Console
from .control_plane import ControlPlane, FileStore, Revealer
from .errors import DaemonHunterError
from .model import Entry
from .scope_table import ScopeTable
from .status import StatusResolver
from ..trace.trace_emitter import TraceEmitter

DETAIL_RULE = "----------------------------------"

MENU = (
    "1) Reveal in Finder",
    "2) Load (once only)",
    "3) Load (persistent)",
    "4) Delete (unload + remove file)",
    "5) Return to main list",
    "6) Quit",
)


class Outcome(enum.Enum):
    RETURN_TO_LIST = "return"
    QUIT = "quit"


class ActionDispatcher:
    """
    Detail view for one Entry.

    Every load/delete calls `on_mutation` (an inventory rebuild) before control
    returns to the operator. Delete always leaves the detail view; declining the
    confirmation changes nothing and skips the rebuild.
    """

    def __init__(
        self,
        *,
        control_plane: ControlPlane,
        file_store: FileStore,
        revealer: Revealer,
        resolver: StatusResolver,
        scopes: ScopeTable,
        console: Console,
        trace: TraceEmitter,
        on_mutation: Callable[[], None],
    ):
        self._cp = control_plane
        self._files = file_store
        self._revealer = revealer
        self._resolver = resolver
        self._scopes = scopes
        self._console = console
        self._trace = trace
        self._on_mutation = on_mutation

    def show_details(self, entry: Entry) -> None:
        # Live status: the inventory snapshot may be stale by now.
        status = self._resolver.resolve_status(entry.label)
        c = self._console
        c.print()
        c.print(DETAIL_RULE)
        c.print(f"Category:  {self._scopes.get(entry.scope).category}")
        c.print(f"Label:     {entry.label}")
        c.print(f"Status:    {status.value}")
        c.print(f"File path: {entry.path}")
        c.print(DETAIL_RULE)
        for line in MENU:
            c.print(line)

    def manage(self, entry: Entry) -> Outcome:
        while True:
            self.show_details(entry)
            choice = self._console.prompt("Choose an option: ")

            if choice == "1":
                self.reveal(entry)
            elif choice == "2":
                self.load(entry, persistent=False)
            elif choice == "3":
                self.load(entry, persistent=True)
            elif choice == "4":
                self.delete(entry)
                return Outcome.RETURN_TO_LIST
            elif choice == "5":
                return Outcome.RETURN_TO_LIST
            elif choice == "6":
                self._console.print("Exiting script.")
                return Outcome.QUIT
            else:
                self._console.print("Invalid choice.")

    def _report_dry_run(self, out: Dict[str, Any]) -> None:
        if not out.get("dry_run"):
            return
        for effect in out.get("expected_effects") or []:
            self._console.print(f"[dry-run] {effect.get('summary')}")

    def reveal(self, entry: Entry) -> bool:
        self._trace.emit("action_started", action="reveal", entry=entry)
        try:
            out = self._revealer.reveal(entry)
        except DaemonHunterError as e:
            self._trace.emit("action_failed", action="reveal", entry=entry, message=str(e))
            self._console.print(f"Failed to reveal file: {entry.path}")
            return False
        if out.get("reason") == "not_found":
            self._trace.emit("action_failed", action="reveal", entry=entry, message="not_found")
            self._console.print(f"File not found: {entry.path}")
            return False
        self._report_dry_run(out)
        self._trace.emit("action_finished", action="reveal", entry=entry)
        return True

    def load(self, entry: Entry, *, persistent: bool) -> bool:
        action = "load_persistent" if persistent else "load_once"
        self._trace.emit("action_started", action=action, entry=entry)
        ok = True
        try:
            out = self._cp.load(entry, persistent=persistent)
            self._report_dry_run(out)
            self._trace.emit("action_finished", action=action, entry=entry)
        except DaemonHunterError as e:
            ok = False
            self._trace.emit("action_failed", action=action, entry=entry, message=str(e))
            self._console.print(self._load_failure_message(entry, persistent=persistent))
        self._on_mutation()
        return ok

    def _load_failure_message(self, entry: Entry, *, persistent: bool) -> str:
        how = "persistently" if persistent else "once"
        if self._scopes.get(entry.scope).privileged:
            return f"Failed to load system agent/daemon {how}."
        return f"Failed to load agent {how}."

    def delete(self, entry: Entry) -> bool:
        c = self._console
        c.print("WARNING: This will unload (once) and remove the file:")
        c.print(f"  {entry.path}")
        answer = c.prompt("Are you sure? (y/N): ")
        if answer not in ("y", "Y"):
            c.print("Delete canceled.")
            return False

        self._trace.emit("action_started", action="delete", entry=entry)
        try:
            self._report_dry_run(self._cp.unload(entry))
        except DaemonHunterError as e:
            # Advisory cleanup; the file is removed regardless.
            self._trace.emit("action_failed", action="unload", entry=entry, message=str(e))

        ok = True
        try:
            out = self._files.delete(entry)
            self._report_dry_run(out)
            self._trace.emit("action_finished", action="delete", entry=entry)
            if not out.get("dry_run"):
                c.print("File removed.")
        except DaemonHunterError as e:
            ok = False
            self._trace.emit("action_failed", action="delete", entry=entry, message=str(e))
            c.print("Failed to remove file.")
        self._on_mutation()
        return ok
