import logging
import tempfile
import unittest
from pathlib import Path

from command_manager.log import LOGGER_NAME, setup_logging, teardown_logging


class TestLogging(unittest.TestCase):
    def tearDown(self) -> None:
        teardown_logging()

    def test_writes_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "logs" / "cm.log"
            setup_logging(path, logging.DEBUG)
            logging.getLogger(f"{LOGGER_NAME}.engine").debug("hello from engine")
            teardown_logging()
            self.assertIn("hello from engine", path.read_text(encoding="utf-8"))

    def test_setup_is_idempotent(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            setup_logging(Path(td) / "a.log")
            setup_logging(Path(td) / "b.log")
            handlers = [h for h in logging.getLogger(LOGGER_NAME).handlers if isinstance(h, logging.FileHandler)]
            self.assertEqual(len(handlers), 1)
            self.assertTrue(handlers[0].baseFilename.endswith("b.log"))
            teardown_logging()

    def test_level_filters(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "cm.log"
            setup_logging(path, logging.WARNING)
            logger = logging.getLogger(f"{LOGGER_NAME}.store")
            logger.info("quiet")
            logger.warning("loud")
            teardown_logging()
            text = path.read_text(encoding="utf-8")
            self.assertNotIn("quiet", text)
            self.assertIn("loud", text)


if __name__ == "__main__":
    unittest.main()
