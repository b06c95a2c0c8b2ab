from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from daemon_hunter.registry.tool_registry import ToolFunc, ToolRegistry
from tools.app.reveal import run as app_reveal
from tools.fs.list import run as fs_list
from tools.fs.remove import run as fs_remove
from tools.launchctl.list import run as launchctl_list
from tools.launchctl.load import run as launchctl_load
from tools.launchctl.print_disabled import run as launchctl_print_disabled
from tools.launchctl.unload import run as launchctl_unload
from tools.plist.label import run as plist_label


def _path_schema(**extra: Dict[str, Any]) -> Dict[str, Any]:
    props: Dict[str, Any] = {"path": {"type": "string", "minLength": 1}}
    props.update(extra)
    return {"type": "object", "additionalProperties": False, "properties": props, "required": ["path"]}


def build_tool_registry(overrides: Optional[Mapping[str, ToolFunc]] = None) -> ToolRegistry:
    """
    Register the built-in tools. `overrides` swaps implementations by tool_id
    (tests register fakes this way).
    """
    reg = ToolRegistry()

    def reg_tool(tool_id: str, title: str, side_effects: str, destructive: bool, args_schema: Dict[str, Any], impl):
        reg.register(
            {
                "tool_id": tool_id,
                "version": "0.1.0",
                "title": title,
                "side_effects": side_effects,
                "destructive": destructive,
                "supports_dry_run": True,
                "args_schema": args_schema,
            },
            impl,
        )

    reg_tool(
        "fs.list",
        "List descriptor files in a directory",
        "none",
        False,
        _path_schema(suffix={"type": "string"}),
        fs_list,
    )
    reg_tool(
        "fs.remove",
        "Remove a descriptor file",
        "filesystem",
        True,
        _path_schema(privileged={"type": "boolean"}),
        fs_remove,
    )
    reg_tool(
        "plist.label",
        "Read the Label of a descriptor",
        "none",
        False,
        _path_schema(),
        plist_label,
    )
    reg_tool(
        "launchctl.list",
        "Query launchd registration for a label",
        "none",
        False,
        {
            "type": "object",
            "additionalProperties": False,
            "properties": {"label": {"type": "string", "minLength": 1}},
            "required": ["label"],
        },
        launchctl_list,
    )
    reg_tool(
        "launchctl.print_disabled",
        "Read the disabled-at-boot registry of a domain",
        "none",
        False,
        {
            "type": "object",
            "additionalProperties": False,
            "properties": {"domain": {"type": "string", "minLength": 1}},
            "required": ["domain"],
        },
        launchctl_print_disabled,
    )
    reg_tool(
        "launchctl.load",
        "Register a descriptor with launchd",
        "launchd",
        False,
        _path_schema(persistent={"type": "boolean"}, privileged={"type": "boolean"}),
        launchctl_load,
    )
    reg_tool(
        "launchctl.unload",
        "Unregister a descriptor from launchd",
        "launchd",
        False,
        _path_schema(privileged={"type": "boolean"}),
        launchctl_unload,
    )
    reg_tool(
        "app.reveal",
        "Reveal a file in the Finder",
        "app",
        False,
        {
            "type": "object",
            "additionalProperties": False,
            "properties": {"target": {"type": "string", "minLength": 1}},
            "required": ["target"],
        },
        app_reveal,
    )

    for tool_id, impl in (overrides or {}).items():
        reg.replace_impl(tool_id, impl)
    return reg
