from __future__ import annotations

import json
import sys

from daemon_hunter.bootstrap_tools import build_tool_registry
from daemon_hunter.core.errors import DaemonHunterError
from daemon_hunter.core.runtime_context import RuntimeContext
from daemon_hunter.core.session import build_session


def _format_cli_error(e: Exception) -> str:
    """
    Print-friendly error formatting.
    - Always includes code/message (via __str__) when it's a DaemonHunterError
    - Includes structured `data` payload when present
    """
    if isinstance(e, DaemonHunterError) and isinstance(e.data, dict) and e.data:
        return str(e) + "\n" + json.dumps(e.data, ensure_ascii=False, indent=2)
    return str(e)


def main(argv=None) -> int:
    """
    Interactive entry point. Takes no flags; settings come from DAEMON_HUNTER_* variables.
    """
    _ = argv
    try:
        ctx = RuntimeContext.from_env()
        session = build_session(ctx, build_tool_registry())
        return session.run()
    except DaemonHunterError as e:
        print(_format_cli_error(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
