from .errors import DaemonHunterError, StaleSelectionError, ToolExecutionError, ToolNotFound, ValidationError
from .model import DisplayMapping, Entry, Inventory, Registration, Scope, Status
from .runtime_context import RuntimeContext
from .scope_table import ScopeSpec, ScopeTable, load_scope_table
from .executor import Executor
from .control_plane import ControlPlane, FileStore, Revealer
from .status import StatusResolver
from .scanner import DescriptorScanner
from .inventory import InventoryBuilder
from .presenter import Presenter
from .console import Console
from .dispatcher import ActionDispatcher, Outcome
from .session import Session, build_session

__all__ = [
  "DaemonHunterError",
  "StaleSelectionError",
  "ToolExecutionError",
  "ToolNotFound",
  "ValidationError",
  "DisplayMapping",
  "Entry",
  "Inventory",
  "Registration",
  "Scope",
  "Status",
  "RuntimeContext",
  "ScopeSpec",
  "ScopeTable",
  "load_scope_table",
  "Executor",
  "ControlPlane",
  "FileStore",
  "Revealer",
  "StatusResolver",
  "DescriptorScanner",
  "InventoryBuilder",
  "Presenter",
  "Console",
  "ActionDispatcher",
  "Outcome",
  "Session",
  "build_session",
]
