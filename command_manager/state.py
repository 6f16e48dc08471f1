from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Tab(Enum):
    PRIMARY = 0
    SECONDARY = 1
    TERTIARY = 2

    def next(self) -> "Tab":
        members = list(Tab)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> "Tab":
        members = list(Tab)
        return members[(members.index(self) - 1) % len(members)]


class Mode(Enum):
    NORMAL = "normal"
    ADD = "add"
    DELETE = "delete"


class AddField(Enum):
    """Which piece of text the add wizard is currently capturing."""

    NONE = "none"
    NAMESPACE = "namespace"
    COMMAND_VALUE = "command"
    COMMAND_TAG = "tag"


class Confirm(Enum):
    HIDDEN = "hidden"
    AWAITING_CONFIRM = "awaiting"
    CONFIRMED = "confirmed"


@dataclass
class InteractionState:
    """
    The mode/gate record driven by the navigation engine.

    Holds no list data. Only `NavigationEngine` moves it between states.
    """

    tab: Tab = Tab.PRIMARY
    mode: Mode = Mode.NORMAL
    add_field: AddField = AddField.NONE
    confirm: Confirm = Confirm.HIDDEN

    def reset(self) -> None:
        """Back to (tab, NORMAL, NONE, HIDDEN); the active tab is kept."""
        self.mode = Mode.NORMAL
        self.add_field = AddField.NONE
        self.confirm = Confirm.HIDDEN

    def enter_add(self, field: AddField) -> None:
        self.mode = Mode.ADD
        self.add_field = field
        self.confirm = Confirm.HIDDEN

    def enter_delete(self) -> None:
        self.mode = Mode.DELETE
        self.add_field = AddField.NONE
        self.confirm = Confirm.AWAITING_CONFIRM

    @property
    def awaiting_confirm(self) -> bool:
        return self.confirm is Confirm.AWAITING_CONFIRM

    @property
    def is_consistent(self) -> bool:
        if self.add_field is not AddField.NONE and self.mode is not Mode.ADD:
            return False
        if self.confirm is Confirm.AWAITING_CONFIRM and self.mode is Mode.ADD:
            return self.add_field is AddField.COMMAND_TAG
        return True

    def as_tuple(self) -> Tuple[Tab, Mode, AddField, Confirm]:
        return self.tab, self.mode, self.add_field, self.confirm
