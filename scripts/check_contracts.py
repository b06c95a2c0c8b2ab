from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from daemon_hunter.contract_store import ContractStore  # noqa: E402
from daemon_hunter.core.errors import DaemonHunterError  # noqa: E402
from daemon_hunter.core.scope_table import load_scope_table  # noqa: E402
from daemon_hunter.resources import schemas_dir  # noqa: E402


def main(argv=None) -> int:
    """
    Check the shipped schemas and scope table. Any extra arguments are trace
    files (JSONL) to validate against trace_event.schema.json.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    store = ContractStore(schemas_dir())
    store.load()

    schema_errors = store.check_schemas()
    if schema_errors:
        print("Schema validation failed:")
        for name, err in schema_errors:
            print("- {}: {}".format(name, err))
        return 1

    try:
        load_scope_table()
    except DaemonHunterError as e:
        print("Scope table failed validation: {}".format(e))
        for msg in (e.data or {}).get("errors", []):
            print("  - {}".format(msg))
        return 1

    ok = True
    for raw in args:
        p = Path(raw)
        if not p.exists():
            ok = False
            print("Trace {} not found".format(p))
            continue
        errs = store.validate_jsonl_file("trace_event.schema.json", p)
        if errs:
            ok = False
            print("Trace {} failed validation:".format(p))
            for e in errs:
                print("  - {}".format(e))

    if not ok:
        return 1

    print("Contracts OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
