from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from command_manager.state import AddField


@dataclass(frozen=True)
class Config:
    """Static UI text. Nothing here is read from disk."""

    name: str = "Command Manager"
    tabs: Tuple[str, ...] = ("Tab 1", "Tab 2", "Tab 3")
    highlight_symbol: str = "⟩"
    run_prompt: str = "Run this command?"
    run_confirm: str = "[ Enter: run ]   [ Esc: back ]"
    delete_prompt: str = "Delete the selected entry?"
    delete_confirm: str = "[ Enter: delete ]   [ Esc: cancel ]"
    add_confirm: str = "Press Enter to save, Esc to discard."
    prompts: Dict[AddField, str] = field(
        default_factory=lambda: {
            AddField.NAMESPACE: "New namespace",
            AddField.COMMAND_VALUE: "New command",
            AddField.COMMAND_TAG: "Tag for the command",
        }
    )

    def prompt_for(self, add_field: AddField) -> str:
        return self.prompts.get(add_field, "")


DEFAULT_CONFIG = Config()
