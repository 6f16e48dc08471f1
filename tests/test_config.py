import unittest

from command_manager.config import DEFAULT_CONFIG, Config
from command_manager.state import AddField


class TestConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        self.assertEqual(DEFAULT_CONFIG.name, "Command Manager")
        self.assertEqual(DEFAULT_CONFIG.tabs, ("Tab 1", "Tab 2", "Tab 3"))
        self.assertEqual(DEFAULT_CONFIG.highlight_symbol, "⟩")

    def test_prompt_per_field(self) -> None:
        cfg = Config()
        self.assertEqual(cfg.prompt_for(AddField.NAMESPACE), "New namespace")
        self.assertEqual(cfg.prompt_for(AddField.COMMAND_TAG), "Tag for the command")
        self.assertEqual(cfg.prompt_for(AddField.NONE), "")


if __name__ == "__main__":
    unittest.main()
