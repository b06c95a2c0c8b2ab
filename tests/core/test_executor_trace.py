import dataclasses
import io
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path

from daemon_hunter.contract_store import shipped_contracts
from daemon_hunter.core.errors import ToolExecutionError, ToolNotFound, ValidationError
from daemon_hunter.core.executor import Executor
from daemon_hunter.core.model import Scope
from daemon_hunter.core.session import build_session, build_trace
from daemon_hunter.testing import Sandbox, sandbox_context, scripted_console
from daemon_hunter.trace.replay import Replay
from daemon_hunter.trace.trace_store_jsonl import TraceStoreJSONL


class TestExecutor(unittest.TestCase):
    def setUp(self) -> None:
        td = tempfile.TemporaryDirectory()
        self.addCleanup(td.cleanup)
        self.sb = Sandbox(Path(td.name))
        self.executor = Executor(self.sb.registry, self.sb.trace)

    def test_unknown_tool(self) -> None:
        with self.assertRaises(ToolNotFound) as ctx:
            self.executor.call("launchctl.bootout", {"label": "x"})
        self.assertEqual(ctx.exception.code, "tool.unknown")

    def test_args_are_validated_against_schema(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.executor.call("launchctl.load", {"path": "/tmp/x.plist", "sudo": True})
        self.assertEqual(ctx.exception.code, "tool.args_invalid")
        self.assertEqual(self.sb.fake.calls, [])

    def test_tool_exception_becomes_tool_execution_error(self) -> None:
        path = self.sb.add(Scope.USER_AGENT, "a.plist", "com.example.foo")
        self.sb.fake.fail_load.add(str(path))
        with self.assertRaises(ToolExecutionError) as ctx:
            self.executor.call("launchctl.load", {"path": str(path)})
        self.assertEqual(ctx.exception.data, {"tool_id": "launchctl.load"})
        self.assertEqual(self.sb.event_types(), ["tool_called", "tool_failed"])

    def test_read_only_calls_are_not_traced(self) -> None:
        self.executor.call("launchctl.list", {"label": "com.example.foo"})
        self.assertEqual(self.sb.event_types(), [])

    def test_str_includes_code(self) -> None:
        err = ToolExecutionError(code="tool.error", message="boom")
        self.assertEqual(str(err), "tool.error: boom")


class TestTraceFile(unittest.TestCase):
    def test_session_trace_validates_against_schema(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sb = Sandbox(Path(td))
            doomed = sb.add(Scope.USER_AGENT, "a.plist", "com.example.foo")
            sb.add(Scope.GLOBAL_AGENT, "b.plist", "com.example.bar")
            sb.fake.fail_load.add(str(sb.dir_for(Scope.GLOBAL_AGENT) / "b.plist"))

            trace_path = Path(td) / "logs" / "trace.jsonl"
            ctx = sandbox_context(sb.home)
            ctx = dataclasses.replace(ctx, run_id="run_trace", trace_path=trace_path)
            console, _ = scripted_console(["2", "2", "5", "1", "1", "4", "y", "q"])
            session = build_session(ctx, sb.registry, console=console, trace=build_trace(ctx), scopes=sb.scopes)
            self.assertEqual(session.run(), 0)
            self.assertFalse(doomed.exists())

            self.assertEqual(shipped_contracts().validate_jsonl_file("trace_event.schema.json", trace_path), [])
            replay = Replay(trace_path)
            types = replay.event_types()
            self.assertEqual(types[0], "session_started")
            self.assertEqual(types[-1], "session_finished")
            failed = list(replay.iter_events("action_failed"))
            self.assertEqual([e["action"] for e in failed], ["load_once"])
            self.assertEqual(failed[0]["entry"]["label"], "com.example.bar")
            self.assertTrue(all(e["run_id"] == "run_trace" for e in replay.iter_events()))

    def test_unwritable_trace_path_does_not_end_session(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sb = Sandbox(Path(td))
            sb.add(Scope.USER_AGENT, "a.plist", "com.example.foo")
            blocker = Path(td) / "blocker"
            blocker.write_text("not a directory", encoding="utf-8")

            ctx = dataclasses.replace(sandbox_context(sb.home), trace_path=blocker / "logs" / "trace.jsonl")
            console, out = scripted_console(["1", "2", "5", "q"])
            err = io.StringIO()
            with redirect_stderr(err):
                session = build_session(ctx, sb.registry, console=console, trace=build_trace(ctx), scopes=sb.scopes)
                rc = session.run()

            self.assertEqual(rc, 0)
            self.assertIn("com.example.foo", sb.fake.registered)
            self.assertIn("User Agents | Loaded:", out.getvalue())
            self.assertTrue(out.getvalue().rstrip().endswith("Exiting."))
            self.assertEqual(err.getvalue().count("Warning: trace disabled"), 1)

    def test_store_switches_off_after_first_failure(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            blocker = Path(td) / "blocker"
            blocker.write_text("x", encoding="utf-8")
            warn = io.StringIO()
            store = TraceStoreJSONL(blocker / "trace.jsonl", warn_to=warn)
            store.append({"event_type": "session_started"})
            store.append({"event_type": "session_finished"})
            self.assertTrue(store.failed)
            self.assertEqual(len(warn.getvalue().splitlines()), 1)
            self.assertIn(str(blocker / "trace.jsonl"), warn.getvalue())

    def test_replay_of_missing_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(Replay(Path(td) / "none.jsonl").event_types(), [])


if __name__ == "__main__":
    unittest.main()
