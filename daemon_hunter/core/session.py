from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .console import Console
from .control_plane import ControlPlane, FileStore, Revealer
from .dispatcher import ActionDispatcher, Outcome
from .executor import Executor
from .inventory import InventoryBuilder
from .model import DisplayMapping, Entry, Inventory
from .presenter import Presenter
from .runtime_context import RuntimeContext
from .scanner import DescriptorScanner
from .scope_table import ScopeTable, load_scope_table
from .status import StatusResolver
from ..registry.tool_registry import ToolRegistry
from ..trace.trace_emitter import TraceEmitter
from ..trace.trace_store_jsonl import NullTraceStore, TraceStoreJSONL

MAIN_PROMPT = "Select an item by number, or 'q' to quit: "

_NUMBER_RE = re.compile(r"^[0-9]+$")


class Session:
    """
    Owns the session state: the current Inventory and the DisplayMapping of the
    last render. Both are replaced wholesale, never patched.

    Flow per iteration: render -> select -> (dispatcher) -> maybe rebuild.
    """

    def __init__(
        self,
        *,
        builder: InventoryBuilder,
        presenter: Presenter,
        console: Console,
        trace: TraceEmitter,
    ):
        self._builder = builder
        self._presenter = presenter
        self._console = console
        self._trace = trace
        self.inventory = Inventory()
        self.mapping: Optional[DisplayMapping] = None
        self.dispatcher: Optional[ActionDispatcher] = None

    def reload(self) -> Inventory:
        self.inventory = self._builder.rebuild(self.inventory)
        # Numbers printed before a rebuild must never select anything afterwards.
        self.mapping = None
        return self.inventory

    def render(self) -> str:
        text, self.mapping = self._presenter.render(self.inventory)
        return text

    def select(self, raw: str) -> Optional[Entry]:
        if self.mapping is None or not _NUMBER_RE.match(raw):
            return None
        return self.mapping.resolve(self.inventory, int(raw))

    def run(self) -> int:
        if self.dispatcher is None:
            raise RuntimeError("Session.dispatcher must be attached before run()")
        self._trace.emit("session_started")
        self._console.clear()
        self.reload()
        try:
            while True:
                self._console.write(self.render())
                raw = self._console.prompt(MAIN_PROMPT)
                if raw in ("q", "Q"):
                    self._console.print("Exiting.")
                    break
                entry = self.select(raw)
                if entry is None:
                    self._trace.emit("selection_invalid", data={"input": raw})
                    self._console.print("Invalid selection.")
                    continue
                if self.dispatcher.manage(entry) is Outcome.QUIT:
                    break
        except (EOFError, KeyboardInterrupt):
            self._console.print()
            self._console.print("Exiting.")
        self._trace.emit("session_finished", data={"generation": self.inventory.generation})
        return 0


@dataclass(frozen=True)
class Wiring:
    executor: Executor
    control_plane: ControlPlane
    file_store: FileStore
    resolver: StatusResolver
    scanner: DescriptorScanner
    builder: InventoryBuilder
    presenter: Presenter


def build_trace(ctx: RuntimeContext, store=None) -> TraceEmitter:
    if store is None:
        store = TraceStoreJSONL(ctx.trace_path) if ctx.trace_path is not None else NullTraceStore()
    return TraceEmitter(store=store, run_id=ctx.run_id)


def wire(ctx: RuntimeContext, registry: ToolRegistry, trace: TraceEmitter, scopes: ScopeTable) -> Wiring:
    executor = Executor(registry, trace, dry_run=ctx.dry_run)
    control_plane = ControlPlane(executor, scopes, uid=ctx.uid)
    file_store = FileStore(executor, scopes)
    resolver = StatusResolver(control_plane)
    scanner = DescriptorScanner(file_store, resolver, scopes)
    builder = InventoryBuilder(scanner, scopes, trace, home=ctx.home)
    presenter = Presenter(resolver, scopes)
    return Wiring(
        executor=executor,
        control_plane=control_plane,
        file_store=file_store,
        resolver=resolver,
        scanner=scanner,
        builder=builder,
        presenter=presenter,
    )


def build_session(
    ctx: RuntimeContext,
    registry: ToolRegistry,
    *,
    console: Optional[Console] = None,
    trace: Optional[TraceEmitter] = None,
    scopes: Optional[ScopeTable] = None,
) -> Session:
    console = console or Console()
    trace = trace or build_trace(ctx)
    scopes = scopes or load_scope_table()
    w = wire(ctx, registry, trace, scopes)

    session = Session(builder=w.builder, presenter=w.presenter, console=console, trace=trace)
    session.dispatcher = ActionDispatcher(
        control_plane=w.control_plane,
        file_store=w.file_store,
        revealer=Revealer(w.executor),
        resolver=w.resolver,
        scopes=scopes,
        console=console,
        trace=trace,
        on_mutation=session.reload,
    )
    return session
