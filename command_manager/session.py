from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

from command_manager.cursor import TextCursor
from command_manager.lists import SelectableList
from command_manager.state import AddField, InteractionState
from command_manager.store import StoreError

logger = logging.getLogger(__name__)


class DataStore(Protocol):
    def list_namespaces(self) -> List[str]: ...

    def find_namespace(self, name: str) -> Optional[str]: ...

    def create_namespace(self, name: str) -> None: ...

    def delete_namespace(self, name: str) -> None: ...

    def list_commands_and_tags(self, namespace: str) -> Tuple[List[str], List[str]]: ...

    def create_command_and_tag(self, command: str, tag: str, namespace: str) -> None: ...

    def delete_command(self, command: str, namespace: str) -> None: ...


@dataclass(frozen=True)
class InputField:
    """Top-left corner and width of the on-screen text input."""

    x: int
    y: int
    width: int


DEFAULT_INPUT_FIELD = InputField(x=0, y=0, width=40)


class Session:
    """
    Everything the UI shows and the engine mutates, owned in one place.

    Reloads are all-or-nothing: new lists are fetched from the store first and
    only swapped in once every fetch succeeded. A `StoreError` leaves the current
    lists untouched.
    """

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.namespaces: SelectableList[str] = SelectableList()
        self.commands: SelectableList[str] = SelectableList()
        self.tags: SelectableList[str] = SelectableList()
        self.state = InteractionState()
        self.cursor: Optional[TextCursor] = None
        self.inputs: Dict[AddField, str] = {}
        self.error: Optional[str] = None
        self.tabs_focused = True
        self.input_field = DEFAULT_INPUT_FIELD

    @classmethod
    def load(cls, store: DataStore) -> "Session":
        """
        Build a session with the namespaces list and the first namespace's commands.

        Nothing is selected or focused yet except the tab bar.
        """
        session = cls(store)
        names = store.list_namespaces()
        session.namespaces = SelectableList(names)
        if names:
            session.commands, session.tags = session._fetch_commands(names[0])
        return session

    # Focus

    @property
    def commands_focused(self) -> bool:
        return self.commands.focused

    @property
    def namespaces_focused(self) -> bool:
        return self.namespaces.focused

    @property
    def focus(self) -> str:
        if self.commands.focused:
            return "commands"
        if self.namespaces.focused:
            return "namespaces"
        if self.tabs_focused:
            return "tabs"
        return "none"

    def selected_namespace(self) -> Optional[str]:
        if self.namespaces.selected is None or self.namespaces.is_empty:
            return None
        return self.namespaces.current_item()

    def selected_command(self) -> Optional[Tuple[str, str]]:
        if self.commands.selected is None or self.commands.is_empty:
            return None
        return self.commands.current_item(), self.tags.current_item()

    def focus_commands(self) -> None:
        self.tabs_focused = False
        self.namespaces.focused = False
        self.commands.focused = True
        self.tags.focused = True
        self.commands.select_first()
        self.tags.select_first()

    def set_commands_focus(self, value: bool) -> None:
        self.commands.focused = value
        self.tags.focused = value

    def leave_commands(self) -> None:
        self.set_commands_focus(False)
        self.commands.clear_selection()
        self.tags.clear_selection()
        self.namespaces.focused = True

    def focus_tabs(self) -> None:
        self.set_commands_focus(False)
        self.commands.clear_selection()
        self.tags.clear_selection()
        self.namespaces.focused = False
        self.namespaces.clear_selection()
        self.tabs_focused = True

    # Reloads

    def _fetch_commands(self, namespace: str) -> Tuple[SelectableList[str], SelectableList[str]]:
        commands, tags = self.store.list_commands_and_tags(namespace)
        if len(commands) != len(tags):
            raise StoreError(
                f"{namespace}: {len(commands)} commands but {len(tags)} tags; the store is inconsistent"
            )
        return SelectableList(commands), SelectableList(tags)

    def _swap_commands(self, commands: SelectableList[str], tags: SelectableList[str]) -> None:
        focused = self.commands.focused
        commands.focused = focused
        tags.focused = focused
        if focused:
            commands.select_first()
            tags.select_first()
        self.commands = commands
        self.tags = tags

    def select_namespace(self, index: int) -> None:
        """Select namespace `index` and cascade-reload its commands and tags."""
        name = self.namespaces.items[index]
        commands, tags = self._fetch_commands(name)
        self.namespaces.select(index)
        self._swap_commands(commands, tags)
        logger.debug("namespace %r selected (%d commands)", name, len(commands))

    def reload_commands(self) -> None:
        """Re-read commands and tags of the selected namespace (or clear them)."""
        name = self.selected_namespace()
        if name is None:
            self._swap_commands(SelectableList(), SelectableList())
            return
        commands, tags = self._fetch_commands(name)
        self._swap_commands(commands, tags)

    def reload_namespaces(self) -> None:
        """
        Re-read the namespaces list, keeping the current selection by name.

        Commands and tags are left alone: the selected namespace is unchanged.
        """
        keep = self.selected_namespace()
        fresh = SelectableList(self.store.list_namespaces(), focused=self.namespaces.focused)
        if keep is not None and keep in fresh.items:
            fresh.select(fresh.items.index(keep))
        self.namespaces = fresh

    def reload_all(self) -> None:
        """
        Re-read namespaces, select the first one and reload its commands and tags.
        """
        fresh = SelectableList(self.store.list_namespaces(), focused=self.namespaces.focused)
        if fresh.is_empty:
            commands: SelectableList[str] = SelectableList()
            tags: SelectableList[str] = SelectableList()
        else:
            commands, tags = self._fetch_commands(fresh.items[0])
            fresh.select_first()
        self.namespaces = fresh
        self._swap_commands(commands, tags)

    # Text input

    def input_text(self, field: AddField) -> str:
        return self.inputs.get(field, "")

    def clear_input(self) -> None:
        self.inputs.clear()
        self.cursor = None
