from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from command_manager.cursor import TextCursor
from command_manager.session import Session
from command_manager.state import AddField, Confirm, Mode, Tab
from command_manager.store import StoreError

logger = logging.getLogger(__name__)

# Named keys. Printable characters are passed through as themselves.
KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_ENTER = "enter"
KEY_ESC = "esc"
KEY_BACKSPACE = "backspace"

QUIT_KEY = "q"
ADD_NAMESPACE_KEY = "n"
ADD_COMMAND_KEY = "a"
DELETE_KEY = "d"

# Normal-mode aliases (vi-style); in add mode these are plain text.
_NORMAL_ALIASES = {
    "h": KEY_LEFT,
    "j": KEY_DOWN,
    "k": KEY_UP,
    "l": KEY_RIGHT,
    " ": KEY_ENTER,
}

_NEXT_FIELD = {
    AddField.COMMAND_VALUE: AddField.COMMAND_TAG,
}

_EMPTY_INPUT_MESSAGES = {
    AddField.NAMESPACE: "Namespace name cannot be empty.",
    AddField.COMMAND_VALUE: "Command cannot be empty.",
    AddField.COMMAND_TAG: "Tag cannot be empty.",
}


@dataclass(frozen=True)
class Step:
    """
    Outcome of handling one key.

    `selection` is set exactly once per session: when the run-command gate is
    committed. `quit` asks the outer loop to stop without running anything.
    """

    quit: bool = False
    selection: Optional[Tuple[str, str]] = None

    @property
    def done(self) -> bool:
        return self.quit or self.selection is not None


CONTINUE = Step()
QUIT = Step(quit=True)


def is_text_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class NavigationEngine:
    """
    Key handling for the command browser.

    Pure logic over a `Session`: the engine never draws and never reads the
    terminal. Store failures are caught here, reported through
    `session.error`, and leave the interaction state as it was. A write that
    has committed still completes its transition even when the reload after it
    fails; the lists then stay as they were until the next successful read.
    """

    def handle_key(self, session: Session, key: str) -> Step:
        session.error = None
        state = session.state

        if key == QUIT_KEY and state.mode in (Mode.NORMAL, Mode.DELETE):
            logger.debug("quit requested in %s mode", state.mode.value)
            return QUIT

        try:
            if state.mode is Mode.ADD:
                return self._add_mode(session, key)
            if state.mode is Mode.DELETE:
                return self._delete_mode(session, _NORMAL_ALIASES.get(key, key))
            return self._normal_mode(session, _NORMAL_ALIASES.get(key, key))
        except StoreError as e:
            session.error = str(e)
            logger.warning("store error while handling %r: %s", key, e)
            return CONTINUE

    # Normal mode

    def _normal_mode(self, session: Session, key: str) -> Step:
        state = session.state
        if state.tab is not Tab.PRIMARY:
            return self._other_tab(session, key)

        if key == KEY_ENTER:
            return self._enter(session)
        if key == KEY_ESC:
            self._esc(session)
            return CONTINUE

        # While the run gate is armed only Enter/Esc mean anything.
        if state.awaiting_confirm:
            return CONTINUE

        if key == KEY_RIGHT:
            self._move_right(session)
        elif key == KEY_LEFT:
            self._move_left(session)
        elif key == KEY_DOWN:
            self._move_vertical(session, down=True)
        elif key == KEY_UP:
            self._move_vertical(session, down=False)
        elif key == ADD_NAMESPACE_KEY:
            session.clear_input()
            state.enter_add(AddField.NAMESPACE)
            logger.debug("add namespace")
        elif key == ADD_COMMAND_KEY:
            if session.selected_namespace() is None:
                return CONTINUE
            session.clear_input()
            state.enter_add(AddField.COMMAND_VALUE)
            logger.debug("add command to %r", session.selected_namespace())
        elif key == DELETE_KEY:
            self._enter_delete(session)
        return CONTINUE

    def _other_tab(self, session: Session, key: str) -> Step:
        # Secondary tabs have no content yet: only tab switching.
        if key == KEY_RIGHT:
            session.state.tab = session.state.tab.next()
        elif key == KEY_LEFT:
            session.state.tab = session.state.tab.previous()
        return CONTINUE

    def _move_right(self, session: Session) -> None:
        if session.namespaces.is_empty or session.commands_focused:
            return
        if session.namespaces.selected is not None:
            session.focus_commands()
            return
        if session.tabs_focused:
            session.state.tab = session.state.tab.next()

    def _move_left(self, session: Session) -> None:
        if session.commands_focused:
            session.leave_commands()
        elif session.namespaces_focused:
            session.focus_tabs()
        elif session.tabs_focused:
            session.state.tab = session.state.tab.previous()

    def _move_vertical(self, session: Session, *, down: bool) -> None:
        if session.commands_focused:
            # Commands and tags are index-aligned: always move them together.
            if down:
                session.commands.next()
                session.tags.next()
            else:
                session.commands.previous()
                session.tags.previous()
            return

        namespaces = session.namespaces
        if namespaces.is_empty:
            return
        if session.namespaces_focused:
            target = namespaces.peek_next() if down else namespaces.peek_previous()
            if target is not None:
                session.select_namespace(target)
            return

        session.select_namespace(0)
        session.tabs_focused = False
        namespaces.focused = True

    def _enter(self, session: Session) -> Step:
        state = session.state
        if state.awaiting_confirm:
            selection = session.selected_command()
            if selection is None:
                state.reset()
                return CONTINUE
            state.confirm = Confirm.CONFIRMED
            logger.info("run confirmed: %r (%s)", selection[0], selection[1])
            return Step(selection=selection)

        if session.commands_focused:
            if session.commands.is_empty:
                return CONTINUE
            # The prompt replaces the list highlight.
            session.set_commands_focus(False)
            state.confirm = Confirm.AWAITING_CONFIRM
            return CONTINUE

        if session.namespaces_focused and session.namespaces.selected is not None:
            session.focus_commands()
        return CONTINUE

    def _esc(self, session: Session) -> None:
        state = session.state
        state.mode = Mode.NORMAL
        if state.awaiting_confirm:
            session.set_commands_focus(True)
            state.confirm = Confirm.HIDDEN
        elif session.commands_focused or session.namespaces_focused:
            session.focus_tabs()

    def _enter_delete(self, session: Session) -> None:
        if session.commands_focused:
            if session.commands.is_empty:
                return
        elif not (session.namespaces_focused and session.namespaces.selected is not None):
            return
        session.state.enter_delete()
        logger.debug("delete armed on %s", session.focus)

    # Delete mode

    def _delete_mode(self, session: Session, key: str) -> Step:
        state = session.state
        if key == KEY_ESC:
            state.reset()
            return CONTINUE
        if key != KEY_ENTER or not state.awaiting_confirm:
            return CONTINUE

        namespace = session.selected_namespace()
        if session.commands_focused and namespace is not None and not session.commands.is_empty:
            command = session.commands.current_item()
            session.store.delete_command(command, namespace)
            self._refresh(session, session.reload_commands)
        elif session.namespaces_focused and namespace is not None:
            session.store.delete_namespace(namespace)
            if self._refresh(session, session.reload_all) and session.namespaces.is_empty:
                session.focus_tabs()
        state.reset()
        return CONTINUE

    def _refresh(self, session: Session, reload: Callable[[], None]) -> bool:
        # Called once a write has committed: a failed read must not re-arm it.
        try:
            reload()
        except StoreError as e:
            session.error = str(e)
            logger.warning("reload after write failed: %s", e)
            return False
        return True

    # Add mode

    def _add_mode(self, session: Session, key: str) -> Step:
        state = session.state
        field = state.add_field

        if key == KEY_ESC:
            session.clear_input()
            state.reset()
            logger.debug("add abandoned")
            return CONTINUE

        if key == KEY_ENTER:
            return self._submit(session, field)

        # The final confirmation accepts no more typing.
        if state.awaiting_confirm:
            return CONTINUE

        if key == KEY_BACKSPACE:
            text = session.input_text(field)
            if text:
                session.inputs[field] = text[:-1]
                if session.cursor is not None:
                    session.cursor.pop()
            return CONTINUE

        if is_text_key(key):
            session.inputs[field] = session.input_text(field) + key
            if session.cursor is None:
                f = session.input_field
                session.cursor = TextCursor(f.x, f.y, f.width)
            session.cursor.push(key)
        return CONTINUE

    def _submit(self, session: Session, field: AddField) -> Step:
        state = session.state
        text = session.input_text(field).strip()
        if not text:
            session.error = _EMPTY_INPUT_MESSAGES.get(field, "Input cannot be empty.")
            logger.info("rejected empty %s", field.value)
            return CONTINUE

        if field is AddField.NAMESPACE:
            if session.store.find_namespace(text) is not None:
                session.error = f"Namespace '{text}' already exists."
                logger.info("rejected duplicate namespace %r", text)
                return CONTINUE
            session.store.create_namespace(text)
            session.clear_input()
            state.reset()
            self._refresh(session, session.reload_namespaces)
            return CONTINUE

        if field in _NEXT_FIELD:
            state.add_field = _NEXT_FIELD[field]
            # A new field starts a new entry session.
            session.cursor = None
            return CONTINUE

        if field is AddField.COMMAND_TAG:
            if not state.awaiting_confirm:
                state.confirm = Confirm.AWAITING_CONFIRM
                return CONTINUE
            namespace = session.selected_namespace()
            if namespace is None:
                session.error = "No namespace selected."
                return CONTINUE
            command = session.input_text(AddField.COMMAND_VALUE).strip()
            session.store.create_command_and_tag(command, text, namespace)
            session.clear_input()
            state.reset()
            self._refresh(session, session.reload_commands)
        return CONTINUE
