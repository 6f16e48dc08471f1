import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

import curses

from command_manager.cli import cmd_tui, main
from command_manager.log import teardown_logging
from command_manager.paths import ENV_CM_DB, ENV_CM_HOME
from command_manager.store import SqliteStore


class _CliCase(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.home = Path(self._td.name)
        self._env = patch.dict(os.environ, {ENV_CM_HOME: str(self.home)}, clear=True)
        self._env.start()

    def tearDown(self) -> None:
        teardown_logging()
        self._env.stop()
        self._td.cleanup()

    def run_main(self, argv):
        out = io.StringIO()
        err = io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            rc = main(argv)
        return rc, out.getvalue(), err.getvalue()


class TestCliList(_CliCase):
    def test_list_seeds_fresh_db(self) -> None:
        rc, out, _ = self.run_main(["list"])
        self.assertEqual(rc, 0)
        payload = json.loads(out)
        self.assertEqual(
            payload,
            [{"namespace": "navigation", "commands": [{"command": "cd ~/ && $SHELL", "tag": "nav:home"}]}],
        )
        self.assertTrue((self.home / "command_manager.db").is_file())
        self.assertTrue((self.home / "cm.log").is_file())

    def test_list_pretty(self) -> None:
        rc, out, _ = self.run_main(["list", "--pretty"])
        self.assertEqual(rc, 0)
        self.assertIn("\n  ", out)

    def test_missing_explicit_db_is_usage_error(self) -> None:
        rc, _, err = self.run_main(["--db", str(self.home / "missing.db"), "list"])
        self.assertEqual(rc, 2)
        self.assertIn("not found", err)

    def test_env_db_used(self) -> None:
        db = self.home / "other.db"
        store = SqliteStore(db)
        store.init(with_fixtures=False)
        store.create_namespace("only")
        with patch.dict(os.environ, {ENV_CM_DB: str(db)}):
            rc, out, _ = self.run_main(["list"])
        self.assertEqual(rc, 0)
        self.assertEqual(json.loads(out), [{"namespace": "only", "commands": []}])

    def test_corrupt_db_reports_failure(self) -> None:
        db = self.home / "bad.db"
        db.write_bytes(b"garbage" * 100)
        rc, _, err = self.run_main(["--db", str(db), "list"])
        self.assertEqual(rc, 1)
        self.assertIn("Error:", err)


class TestCliRun(_CliCase):
    def test_run_dry_run_prints_argv(self) -> None:
        rc, out, _ = self.run_main(["run", "nav:home", "--dry-run"])
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), "sh -c 'cd ~/ && $SHELL'")

    def test_run_execs_command(self) -> None:
        with patch("command_manager.cli.exec_command") as exec_command:
            rc, _, _ = self.run_main(["run", "nav:home"])
        self.assertEqual(rc, 0)
        exec_command.assert_called_once_with("cd ~/ && $SHELL")

    def test_run_unknown_tag(self) -> None:
        rc, _, err = self.run_main(["run", "nope"])
        self.assertEqual(rc, 1)
        self.assertIn("nope", err)


class TestCliDoctor(_CliCase):
    def test_doctor_without_db(self) -> None:
        rc, out, _ = self.run_main(["doctor"])
        self.assertEqual(rc, 0)
        self.assertIn("Command Manager doctor", out)
        self.assertIn(str(self.home / "command_manager.db"), out)
        self.assertFalse((self.home / "command_manager.db").exists())

    def test_doctor_counts_rows(self) -> None:
        self.run_main(["list"])
        rc, out, _ = self.run_main(["doctor"])
        self.assertEqual(rc, 0)
        self.assertIn("Namespaces: 1", out)
        self.assertIn("Commands: 1", out)

    def test_doctor_missing_explicit_db(self) -> None:
        rc, _, _ = self.run_main(["--db", str(self.home / "x.db"), "doctor"])
        self.assertEqual(rc, 1)


class TestCliTui(_CliCase):
    def test_tui_is_default_and_quit_exits_zero(self) -> None:
        with patch("command_manager.cli._run_tui", return_value=None) as run_tui, patch(
            "command_manager.cli.exec_command"
        ) as exec_command:
            rc, _, _ = self.run_main([])
        self.assertEqual(rc, 0)
        run_tui.assert_called_once()
        exec_command.assert_not_called()

    def test_tui_selection_is_executed(self) -> None:
        with patch("command_manager.cli._run_tui", return_value=("echo hi", "e:hi")), patch(
            "command_manager.cli.exec_command"
        ) as exec_command:
            rc, _, _ = self.run_main(["tui"])
        self.assertEqual(rc, 0)
        exec_command.assert_called_once_with("echo hi")

    def test_curses_failure_prints_tips(self) -> None:
        store = SqliteStore(self.home / "cm.db")
        store.init()
        err = io.StringIO()
        with patch("command_manager.cli._run_tui", side_effect=curses.error("setupterm: could not find terminal")), redirect_stderr(err):
            rc = cmd_tui(store)
        self.assertEqual(rc, 2)
        self.assertIn("failed to initialize terminal UI", err.getvalue())
        self.assertIn("TERM", err.getvalue())


if __name__ == "__main__":
    unittest.main()
