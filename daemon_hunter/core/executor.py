from __future__ import annotations

from typing import Any, Dict, Optional

import jsonschema

from .errors import ToolExecutionError, ToolNotFound, ValidationError
from .model import Entry
from ..registry.tool_registry import ToolRegistry
from ..trace.trace_emitter import TraceEmitter


class Executor:
    """
    Single choke point for tool calls.

    - args are validated against the tool's args_schema before the call
    - calls to tools with side effects are traced; failures are always traced
    - any tool exception surfaces as ToolExecutionError
    """

    def __init__(self, tool_registry: ToolRegistry, trace: TraceEmitter, *, dry_run: bool = False):
        self._tools = tool_registry
        self._trace = trace
        self._dry_run = dry_run

    def call(self, tool_id: str, args: Dict[str, Any], *, entry: Optional[Entry] = None) -> Dict[str, Any]:
        tool_def = self._tools.get(tool_id)
        if tool_def is None:
            raise ToolNotFound(code="tool.unknown", message=f"Unknown tool: {tool_id}", data={"tool_id": tool_id})

        try:
            jsonschema.Draft202012Validator(tool_def.get("args_schema", {})).validate(args)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                code="tool.args_invalid",
                message="Tool args validation failed",
                data={"tool_id": tool_id, "error": e.message},
            ) from e

        read_only = self._tools.is_read_only(tool_id)
        if not read_only:
            self._trace.emit("tool_called", tool_id=tool_id, entry=entry, data={"args": args, "dry_run": self._dry_run})
        try:
            out = self._tools.call(tool_id, args, dry_run=self._dry_run)
        except Exception as e:  # noqa: BLE001
            self._trace.emit("tool_failed", tool_id=tool_id, entry=entry, message=str(e), data={"error": repr(e)})
            raise ToolExecutionError(
                code="tool.error",
                message=str(e) or "Tool execution error",
                data={"tool_id": tool_id},
            ) from e
        return out
