import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from command_manager.paths import (
    ENV_CM_DB,
    ENV_CM_HOME,
    ENV_CM_LOG_LEVEL,
    CmDirs,
    ConfigError,
    get_cm_dirs,
    get_db_path,
    get_log_level,
    log_path,
)


class TestPaths(unittest.TestCase):
    def test_default_base_dir_under_home(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with patch("pathlib.Path.home", return_value=Path("/home/test")):
                d = get_cm_dirs()
        self.assertEqual(d, CmDirs(Path("/home/test/.cm")))
        self.assertEqual(d.db_path, Path("/home/test/.cm/command_manager.db"))
        self.assertEqual(d.log_path, Path("/home/test/.cm/cm.log"))

    def test_cm_home_override_creates_dir(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            base = Path(td) / "nested" / "cm"
            with patch.dict(os.environ, {ENV_CM_HOME: str(base)}, clear=True):
                p = get_db_path()
                self.assertEqual(p, base / "command_manager.db")
                self.assertTrue(base.is_dir())
                self.assertEqual(log_path(), base / "cm.log")

    def test_env_db_must_exist(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            missing = Path(td) / "nope.db"
            with patch.dict(os.environ, {ENV_CM_DB: str(missing)}, clear=True):
                with self.assertRaises(ConfigError):
                    get_db_path()
            missing.write_bytes(b"")
            with patch.dict(os.environ, {ENV_CM_DB: str(missing)}, clear=True):
                self.assertEqual(get_db_path(), missing)

    def test_explicit_beats_env(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            a = Path(td) / "a.db"
            b = Path(td) / "b.db"
            a.write_bytes(b"")
            b.write_bytes(b"")
            with patch.dict(os.environ, {ENV_CM_DB: str(a)}, clear=True):
                self.assertEqual(get_db_path(str(b)), b)

    def test_log_level(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(get_log_level(), logging.INFO)
        with patch.dict(os.environ, {ENV_CM_LOG_LEVEL: "debug"}, clear=True):
            self.assertEqual(get_log_level(), logging.DEBUG)
        with patch.dict(os.environ, {ENV_CM_LOG_LEVEL: "chatty"}, clear=True):
            with self.assertRaises(ConfigError):
                get_log_level()


if __name__ == "__main__":
    unittest.main()
