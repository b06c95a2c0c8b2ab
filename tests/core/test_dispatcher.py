import tempfile
import unittest
from pathlib import Path

from daemon_hunter.core.dispatcher import Outcome
from daemon_hunter.core.model import Scope, Status
from daemon_hunter.testing import Sandbox


class DispatcherCase(unittest.TestCase):
    dry_run = False

    def setUp(self) -> None:
        td = tempfile.TemporaryDirectory()
        self.addCleanup(td.cleanup)
        self.sb = Sandbox(Path(td.name), dry_run=self.dry_run)

    def manage(self, scope, label, answers, *, filename="a.plist"):
        path = self.sb.add(scope, filename, label)
        session, out = self.sb.session(answers)
        session.reload()
        self.generation_before = session.inventory.generation
        entry = next(e for e in session.inventory if e.label == label)
        outcome = session.dispatcher.manage(entry)
        return outcome, out.getvalue(), session, path


class TestDetailView(DispatcherCase):
    def test_detail_block_and_menu(self) -> None:
        outcome, text, _, path = self.manage(Scope.GLOBAL_DAEMON, "com.example.d", ["5"])
        self.assertIs(outcome, Outcome.RETURN_TO_LIST)
        self.assertIn("Category:  Global Daemon\n", text)
        self.assertIn("Label:     com.example.d\n", text)
        self.assertIn("Status:    Unloaded\n", text)
        self.assertIn(f"File path: {path}\n", text)
        for item in (
            "1) Reveal in Finder",
            "2) Load (once only)",
            "3) Load (persistent)",
            "4) Delete (unload + remove file)",
            "5) Return to main list",
            "6) Quit",
        ):
            self.assertIn(item, text)
        self.assertIn("Choose an option: ", text)

    def test_status_is_resolved_live(self) -> None:
        path = self.sb.add(Scope.USER_AGENT, "a.plist", "com.example.foo")
        session, out = self.sb.session(["5"])
        session.reload()
        entry = session.inventory.entries[0]
        self.assertIs(entry.status, Status.UNLOADED)

        self.sb.fake.register("com.example.foo", 808)
        session.dispatcher.manage(entry)
        self.assertIn("Status:    Running\n", out.getvalue())
        self.assertTrue(path.exists())

    def test_return_does_not_rebuild(self) -> None:
        _, _, session, _ = self.manage(Scope.USER_AGENT, "com.example.foo", ["5"])
        self.assertEqual(session.inventory.generation, self.generation_before)

    def test_quit_from_detail_view(self) -> None:
        outcome, text, _, _ = self.manage(Scope.USER_AGENT, "com.example.foo", ["6"])
        self.assertIs(outcome, Outcome.QUIT)
        self.assertIn("Exiting script.", text)

    def test_unknown_choice_reprompts(self) -> None:
        outcome, text, _, _ = self.manage(Scope.USER_AGENT, "com.example.foo", ["9", "", "5"])
        self.assertIs(outcome, Outcome.RETURN_TO_LIST)
        self.assertEqual(text.count("Invalid choice."), 2)
        self.assertEqual(text.count("Choose an option: "), 3)


class TestReveal(DispatcherCase):
    def test_reveal_existing_file(self) -> None:
        _, text, _, path = self.manage(Scope.USER_AGENT, "com.example.foo", ["1", "5"])
        self.assertEqual(self.sb.fake.revealed, [str(path)])
        self.assertNotIn("File not found", text)

    def test_reveal_missing_file_reports_and_stays(self) -> None:
        path = self.sb.add(Scope.USER_AGENT, "a.plist", "com.example.foo")
        session, out = self.sb.session(["1", "5"])
        session.reload()
        entry = session.inventory.entries[0]
        path.unlink()

        outcome = session.dispatcher.manage(entry)
        self.assertIs(outcome, Outcome.RETURN_TO_LIST)
        self.assertIn(f"File not found: {path}", out.getvalue())
        self.assertEqual(self.sb.fake.revealed, [])


class TestLoad(DispatcherCase):
    def test_load_once_user_scope(self) -> None:
        _, _, session, path = self.manage(Scope.USER_AGENT, "com.example.foo", ["2", "5"])
        calls = self.sb.fake.calls_to("launchctl.load")
        self.assertEqual(calls, [{"path": str(path), "persistent": False, "privileged": False}])
        self.assertEqual(session.inventory.generation, self.generation_before + 1)
        self.assertIs(session.inventory.entries[0].status, Status.LOADED)

    def test_load_stays_in_detail_view_with_fresh_status(self) -> None:
        _, text, _, _ = self.manage(Scope.USER_AGENT, "com.example.foo", ["2", "5"])
        self.assertIn("Status:    Unloaded\n", text)
        self.assertIn("Status:    Loaded\n", text)
        self.assertEqual(text.count("Choose an option: "), 2)

    def test_load_persistent_system_scope_is_privileged(self) -> None:
        _, _, _, path = self.manage(Scope.GLOBAL_AGENT, "com.example.g", ["3", "5"])
        calls = self.sb.fake.calls_to("launchctl.load")
        self.assertEqual(calls, [{"path": str(path), "persistent": True, "privileged": True}])
        self.assertEqual(self.sb.fake.disabled["system"]["com.example.g"], False)

    def test_load_once_failure_user_scope(self) -> None:
        path = self.sb.add(Scope.USER_AGENT, "a.plist", "com.example.foo")
        self.sb.fake.fail_load.add(str(path))
        session, out = self.sb.session(["2", "5"])
        session.reload()
        before = session.inventory.generation

        outcome = session.dispatcher.manage(session.inventory.entries[0])
        self.assertIs(outcome, Outcome.RETURN_TO_LIST)
        self.assertIn("Failed to load agent once.", out.getvalue())
        self.assertEqual(session.inventory.generation, before + 1)
        self.assertIn("action_failed", self.sb.event_types())

    def test_load_failure_messages_for_system_scope(self) -> None:
        path = self.sb.add(Scope.GLOBAL_DAEMON, "a.plist", "com.example.d")
        self.sb.fake.fail_load.add(str(path))
        session, out = self.sb.session(["2", "3", "5"])
        session.reload()
        session.dispatcher.manage(session.inventory.entries[0])
        text = out.getvalue()
        self.assertIn("Failed to load system agent/daemon once.", text)
        self.assertIn("Failed to load system agent/daemon persistently.", text)


class TestDelete(DispatcherCase):
    def test_declined_delete_changes_nothing(self) -> None:
        for answer in ("n", "", "yes", "N"):
            with self.subTest(answer=answer):
                td = tempfile.TemporaryDirectory()
                self.addCleanup(td.cleanup)
                self.sb = Sandbox(Path(td.name))
                outcome, text, session, path = self.manage(Scope.USER_AGENT, "com.example.foo", ["4", answer])
                self.assertIs(outcome, Outcome.RETURN_TO_LIST)
                self.assertIn("WARNING: This will unload (once) and remove the file:", text)
                self.assertIn(f"  {path}\n", text)
                self.assertIn("Are you sure? (y/N): ", text)
                self.assertIn("Delete canceled.", text)
                self.assertTrue(path.exists())
                self.assertEqual(session.inventory.generation, self.generation_before)
                self.assertEqual(self.sb.fake.calls_to("launchctl.unload"), [])
                self.assertEqual(self.sb.fake.calls_to("fs.remove"), [])

    def test_confirmed_delete_unloads_removes_and_rebuilds(self) -> None:
        self.sb.fake.register("com.example.foo", 55)
        outcome, text, session, path = self.manage(Scope.USER_AGENT, "com.example.foo", ["4", "Y"])
        self.assertIs(outcome, Outcome.RETURN_TO_LIST)
        self.assertFalse(path.exists())
        self.assertIn("File removed.", text)
        self.assertEqual(self.sb.fake.calls_to("launchctl.unload"), [{"path": str(path), "privileged": False}])
        self.assertNotIn("com.example.foo", self.sb.fake.registered)
        self.assertEqual(session.inventory.generation, self.generation_before + 1)
        self.assertNotIn("com.example.foo", session.inventory.labels())

    def test_unload_failure_does_not_block_removal(self) -> None:
        path = self.sb.add(Scope.GLOBAL_DAEMON, "a.plist", "com.example.d")
        self.sb.fake.fail_unload.add(str(path))
        session, out = self.sb.session(["4", "y"])
        session.reload()
        session.dispatcher.manage(session.inventory.entries[0])
        self.assertFalse(path.exists())
        self.assertIn("File removed.", out.getvalue())
        self.assertEqual(self.sb.fake.calls_to("fs.remove"), [{"path": str(path), "privileged": True}])

    def test_remove_failure_is_reported_and_returns_to_list(self) -> None:
        path = self.sb.add(Scope.GLOBAL_AGENT, "a.plist", "com.example.g")
        self.sb.fake.fail_remove.add(str(path))
        session, out = self.sb.session(["4", "y"])
        session.reload()
        before = session.inventory.generation

        outcome = session.dispatcher.manage(session.inventory.entries[0])
        text = out.getvalue()
        self.assertIs(outcome, Outcome.RETURN_TO_LIST)
        self.assertIn("Failed to remove file.", text)
        self.assertNotIn("File removed.", text)
        self.assertTrue(path.exists())
        self.assertEqual(session.inventory.generation, before + 1)


class TestDryRun(DispatcherCase):
    dry_run = True

    def test_dry_run_reports_effects_without_acting(self) -> None:
        _, text, _, path = self.manage(Scope.USER_AGENT, "com.example.foo", ["2", "4", "y"])
        self.assertIn(f"[dry-run] Load {path}", text)
        self.assertIn(f"[dry-run] Remove {path}", text)
        self.assertTrue(path.exists())
        self.assertNotIn("com.example.foo", self.sb.fake.registered)
        self.assertNotIn("File removed.", text)


if __name__ == "__main__":
    unittest.main()
