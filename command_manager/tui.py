from __future__ import annotations

import curses
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from command_manager.config import DEFAULT_CONFIG, Config
from command_manager.cursor import TextCursor
from command_manager.engine import (
    KEY_BACKSPACE,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_UP,
    NavigationEngine,
)
from command_manager.formatting import chunk_text, clamp, pad_to_width, truncate_to_width, wrap_text
from command_manager.session import InputField, Session
from command_manager.state import Mode, Tab

logger = logging.getLogger(__name__)

# Key poll interval; the loop redraws at least this often.
POLL_MS = 100


@dataclass(frozen=True)
class Theme:
    focused_selected_attr: int
    unfocused_selected_attr: int
    accent_attr: int
    button_attr: int
    error_attr: int


def _init_theme() -> Theme:
    # Fallback theme (no color support).
    focused = curses.A_REVERSE | curses.A_BOLD
    unfocused = curses.A_REVERSE | curses.A_DIM
    fallback = Theme(
        focused_selected_attr=focused,
        unfocused_selected_attr=unfocused,
        accent_attr=curses.A_BOLD,
        button_attr=curses.A_REVERSE | curses.A_BOLD,
        error_attr=curses.A_BOLD,
    )

    if not curses.has_colors():
        return fallback

    try:
        curses.start_color()
    except curses.error:
        return fallback

    try:
        curses.use_default_colors()
    except curses.error:
        pass

    colors = getattr(curses, "COLORS", 0) or 0
    if colors < 8:
        return fallback

    try:
        curses.init_pair(1, curses.COLOR_BLACK, curses.COLOR_WHITE)
        curses.init_pair(2, curses.COLOR_WHITE, curses.COLOR_BLUE)
        curses.init_pair(3, curses.COLOR_RED, -1)
        curses.init_pair(4, curses.COLOR_RED, curses.COLOR_WHITE)
        curses.init_pair(5, curses.COLOR_YELLOW, -1)
        return Theme(
            focused_selected_attr=curses.color_pair(1) | curses.A_BOLD,
            unfocused_selected_attr=curses.color_pair(2),
            accent_attr=curses.color_pair(3),
            button_attr=curses.color_pair(4) | curses.A_BOLD,
            error_attr=curses.color_pair(5) | curses.A_BOLD,
        )
    except curses.error:
        return fallback


@dataclass(frozen=True)
class Rect:
    y: int
    x: int
    h: int
    w: int


@dataclass(frozen=True)
class Layout:
    tabs: Rect
    namespaces: Rect
    commands: Rect
    tags: Rect
    details: Rect
    popup: Rect
    input: Rect
    status_y: int

    def input_field(self) -> InputField:
        """The text area inside the add-entry popup (inside its border)."""
        return InputField(x=self.input.x + 1, y=self.input.y + 1, width=max(1, self.input.w - 2))


def compute_layout(max_y: int, max_x: int) -> Layout:
    # Reserve last line for status bar.
    usable_h = max(1, max_y - 1)
    tabs_h = min(3, usable_h)
    body_y = tabs_h
    body_h = max(0, usable_h - tabs_h)

    # Lists on top, command details below.
    lists_h = body_h if body_h < 6 else max(3, int(body_h * 0.70))
    details_h = body_h - lists_h

    ns_w = max_x * 15 // 100
    cmd_w = max_x * 75 // 100
    tags_w = max_x - ns_w - cmd_w
    commands = Rect(body_y, ns_w, lists_h, cmd_w)

    popup_h = min(5, lists_h)
    popup_w = min(cmd_w, max(20, cmd_w // 2))
    popup = Rect(
        body_y + (lists_h - popup_h) // 2,
        commands.x + (cmd_w - popup_w) // 2,
        popup_h,
        popup_w,
    )

    input_h = min(lists_h, max(3, lists_h // 2))
    input_rect = Rect(body_y + (lists_h - input_h) // 2, commands.x, input_h, cmd_w)

    return Layout(
        tabs=Rect(0, 0, tabs_h, max_x),
        namespaces=Rect(body_y, 0, lists_h, ns_w),
        commands=commands,
        tags=Rect(body_y, ns_w + cmd_w, lists_h, tags_w),
        details=Rect(body_y + lists_h, 0, details_h, max_x),
        popup=popup,
        input=input_rect,
        status_y=max_y - 1,
    )


_CURSES_KEYS = {
    curses.KEY_UP: KEY_UP,
    curses.KEY_DOWN: KEY_DOWN,
    curses.KEY_LEFT: KEY_LEFT,
    curses.KEY_RIGHT: KEY_RIGHT,
    curses.KEY_ENTER: KEY_ENTER,
    10: KEY_ENTER,
    13: KEY_ENTER,
    27: KEY_ESC,
    curses.KEY_BACKSPACE: KEY_BACKSPACE,
    127: KEY_BACKSPACE,
    8: KEY_BACKSPACE,
}


def translate_key(ch: int) -> Optional[str]:
    """Map a `getch()` code to an engine key name (None for keys we ignore)."""
    named = _CURSES_KEYS.get(ch)
    if named is not None:
        return named
    if 32 <= ch <= 126:
        return chr(ch)
    return None


def _safe_addstr(win: "curses.window", y: int, x: int, s: str, attr: int = 0) -> None:
    try:
        win.addstr(y, x, s, attr)
    except curses.error:
        # Ignore drawing errors at borders / tiny terminals.
        return


def _draw_box(win: "curses.window", rect: Rect, title: str, *, focused: bool, clear: bool = False) -> None:
    if rect.h < 2 or rect.w < 2:
        return
    if clear:
        blank = " " * rect.w
        for row in range(rect.h):
            _safe_addstr(win, rect.y + row, rect.x, blank)
    bottom = rect.y + rect.h - 1
    right = rect.x + rect.w - 1
    border_attr = curses.A_BOLD if focused else 0
    win.attron(border_attr)
    try:
        win.hline(rect.y, rect.x + 1, curses.ACS_HLINE, rect.w - 2)
        win.hline(bottom, rect.x + 1, curses.ACS_HLINE, rect.w - 2)
        win.vline(rect.y + 1, rect.x, curses.ACS_VLINE, rect.h - 2)
        win.vline(rect.y + 1, right, curses.ACS_VLINE, rect.h - 2)
        win.addch(rect.y, rect.x, curses.ACS_ULCORNER)
        win.addch(rect.y, right, curses.ACS_URCORNER)
        win.addch(bottom, rect.x, curses.ACS_LLCORNER)
        win.addch(bottom, right, curses.ACS_LRCORNER)
    except curses.error:
        # Ignore drawing errors at borders / tiny terminals.
        pass
    finally:
        win.attroff(border_attr)
    if title and rect.w > 4:
        t = truncate_to_width(f" {title} ", rect.w - 4)
        _safe_addstr(win, rect.y, rect.x + 2, t, curses.A_BOLD if focused else 0)


def _list_rows(
    rect: Rect,
    items: List[str],
    selected: Optional[int],
    *,
    focused: bool,
    theme: Theme,
    symbol: str = "",
) -> List[Tuple[str, int]]:
    """
    Build the visible rows for a list pane. Each row is (text, attr).

    The selected row is kept in view; the highlight symbol is drawn in front of it.
    """
    if rect.h < 3 or rect.w < 4:
        return []
    inner_h = rect.h - 2
    inner_w = rect.w - 2

    start = 0
    if selected is not None and selected >= inner_h:
        start = selected - inner_h + 1
    end = min(len(items), start + inner_h)

    prefix_w = len(symbol) + 1 if symbol else 0
    out: List[Tuple[str, int]] = []
    for idx in range(start, end):
        if symbol:
            lead = f"{symbol} " if idx == selected else " " * prefix_w
        else:
            lead = ""
        line = pad_to_width(truncate_to_width(lead + items[idx], inner_w), inner_w)
        if idx == selected:
            attr = theme.focused_selected_attr if focused else theme.unfocused_selected_attr
        else:
            attr = 0
        out.append((line, attr))
    return out


def _draw_list(
    win: "curses.window",
    rect: Rect,
    title: str,
    items: List[str],
    selected: Optional[int],
    *,
    focused: bool,
    theme: Theme,
    symbol: str = "",
) -> None:
    _draw_box(win, rect, title, focused=focused)
    for i, (line, attr) in enumerate(_list_rows(rect, items, selected, focused=focused, theme=theme, symbol=symbol)):
        _safe_addstr(win, rect.y + 1 + i, rect.x + 1, line, attr)


def _draw_tabs(win: "curses.window", rect: Rect, session: Session, config: Config, theme: Theme) -> None:
    _draw_box(win, rect, config.name, focused=session.tabs_focused)
    if rect.h < 3:
        return
    x = rect.x + 2
    limit = rect.x + rect.w - 2
    for i, title in enumerate(config.tabs):
        if x >= limit or not title:
            break
        active = session.state.tab.value == i
        base = theme.focused_selected_attr if active else 0
        _safe_addstr(win, rect.y + 1, x, title[:1], base | theme.accent_attr)
        _safe_addstr(win, rect.y + 1, x + 1, truncate_to_width(title[1:], max(0, limit - x - 1)), base)
        x += len(title) + 1
        if i < len(config.tabs) - 1 and x < limit:
            _safe_addstr(win, rect.y + 1, x, "|")
            x += 2


def _draw_details(win: "curses.window", rect: Rect, session: Session) -> None:
    _draw_box(win, rect, "Command details", focused=False)
    if rect.h < 3 or rect.w < 4:
        return
    selected = session.selected_command()
    if selected is None:
        return
    lines = wrap_text(selected[0], rect.w - 2)
    for i, ln in enumerate(lines[: rect.h - 2]):
        _safe_addstr(win, rect.y + 1 + i, rect.x + 1, ln, curses.A_BOLD)


def _draw_confirm(win: "curses.window", rect: Rect, message: str, button: str, theme: Theme) -> None:
    _draw_box(win, rect, "", focused=True, clear=True)
    inner_w = rect.w - 2
    if rect.h < 3 or inner_w <= 0:
        return
    msg = truncate_to_width(message, inner_w)
    _safe_addstr(win, rect.y + 1, rect.x + 1 + max(0, (inner_w - len(msg)) // 2), msg)
    if rect.h >= 5:
        btn = truncate_to_width(button, inner_w)
        _safe_addstr(win, rect.y + 3, rect.x + 1 + max(0, (inner_w - len(btn)) // 2), btn, theme.button_attr)


def _draw_input(
    win: "curses.window",
    layout: Layout,
    session: Session,
    config: Config,
    theme: Theme,
) -> None:
    state = session.state
    rect = layout.input
    _draw_box(win, rect, config.prompt_for(state.add_field), focused=True, clear=True)
    field = layout.input_field()
    rows = max(0, rect.h - 2)

    # Same chunk size as TextCursor uses, so the cursor lands after the last glyph.
    text = session.input_text(state.add_field)
    lines = chunk_text(text, field.width - 1)
    for i, ln in enumerate(lines[:rows]):
        _safe_addstr(win, field.y + i, field.x, ln)

    if state.awaiting_confirm and rows >= 2:
        _safe_addstr(win, rect.y + rect.h - 2, field.x, truncate_to_width(config.add_confirm, field.width), theme.button_attr)


def _status_text(session: Session) -> str:
    state = session.state
    if state.mode is Mode.ADD:
        if state.awaiting_confirm:
            return "Enter: save   Esc: discard"
        return "Type text   Backspace: delete   Enter: next   Esc: cancel"
    if state.mode is Mode.DELETE:
        return "Enter/Space: delete   Esc: cancel   q: quit"
    if state.awaiting_confirm:
        return "Enter/Space: run   Esc: back"
    if state.tab is not Tab.PRIMARY:
        return "←/→: switch tab   q: quit"
    return "↑↓←→/hjkl: move   Enter: select   n: namespace   a: command   d: delete   q: quit"


def _draw_status(win: "curses.window", y: int, max_x: int, session: Session, theme: Theme) -> None:
    if max_x <= 0:
        return
    if session.error:
        bar = pad_to_width(truncate_to_width(f"Error: {session.error}", max_x - 1), max_x - 1)
        _safe_addstr(win, y, 0, bar, curses.A_REVERSE | theme.error_attr)
        return
    bar = pad_to_width(truncate_to_width(_status_text(session), max_x - 1), max_x - 1)
    _safe_addstr(win, y, 0, bar, curses.A_REVERSE)


def draw(
    stdscr: "curses.window",
    layout: Layout,
    session: Session,
    *,
    config: Config = DEFAULT_CONFIG,
    theme: Theme,
) -> None:
    stdscr.erase()
    max_y, max_x = stdscr.getmaxyx()
    _draw_tabs(stdscr, layout.tabs, session, config, theme)

    state = session.state
    if state.tab is Tab.PRIMARY:
        _draw_list(
            stdscr,
            layout.namespaces,
            "Namespaces",
            session.namespaces.items,
            session.namespaces.selected,
            focused=session.namespaces_focused,
            theme=theme,
            symbol=config.highlight_symbol,
        )
        _draw_list(
            stdscr,
            layout.commands,
            "Commands",
            session.commands.items,
            session.commands.selected,
            focused=session.commands_focused,
            theme=theme,
            symbol=config.highlight_symbol,
        )
        _draw_list(
            stdscr,
            layout.tags,
            "Tags",
            session.tags.items,
            session.tags.selected,
            focused=session.commands_focused,
            theme=theme,
        )
        _draw_details(stdscr, layout.details, session)

        if state.mode is Mode.ADD:
            _draw_input(stdscr, layout, session, config, theme)
        elif state.mode is Mode.DELETE:
            _draw_confirm(stdscr, layout.popup, config.delete_prompt, config.delete_confirm, theme)
        elif state.awaiting_confirm:
            _draw_confirm(stdscr, layout.popup, config.run_prompt, config.run_confirm, theme)
    else:
        body = Rect(
            layout.namespaces.y,
            0,
            layout.namespaces.h + layout.details.h,
            max_x,
        )
        _draw_box(stdscr, body, config.tabs[state.tab.value], focused=False)

    _draw_status(stdscr, layout.status_y, max_x, session, theme)
    _place_cursor(stdscr, session, layout, max_y, max_x)
    stdscr.noutrefresh()


def _place_cursor(stdscr: "curses.window", session: Session, layout: Layout, max_y: int, max_x: int) -> None:
    if session.state.mode is not Mode.ADD or session.state.awaiting_confirm:
        _set_cursor_visibility(0)
        return
    if session.cursor is not None:
        y, x = session.cursor.y, session.cursor.x
    else:
        field = layout.input_field()
        y, x = field.y, field.x
    _set_cursor_visibility(1)
    try:
        stdscr.move(clamp(y, 0, max_y - 1), clamp(x, 0, max_x - 1))
    except curses.error:
        return


def _set_cursor_visibility(v: int) -> None:
    try:
        curses.curs_set(v)
    except curses.error:
        # Some terminals (or TERM/terminfo combinations) don't support this.
        pass


def sync_input_field(session: Session, field: InputField) -> None:
    """
    Anchor text entry at `field`.

    After a resize the live cursor is rebuilt at the new anchor by replaying the
    typed text, so its position always matches what `_draw_input` shows.
    """
    if session.input_field == field:
        return
    session.input_field = field
    if session.cursor is None:
        return
    cursor = TextCursor(field.x, field.y, field.width)
    for ch in session.cursor.text:
        cursor.push(ch)
    session.cursor = cursor


def run_session(
    stdscr: "curses.window",
    session: Session,
    engine: NavigationEngine,
    *,
    config: Config = DEFAULT_CONFIG,
) -> Optional[Tuple[str, str]]:
    """
    Drive the render / poll / handle loop until the user quits or commits a command.

    Returns `(command, tag)` for a committed run, or None on quit.
    """
    _set_cursor_visibility(0)
    stdscr.keypad(True)
    stdscr.timeout(POLL_MS)
    theme = _init_theme()
    logger.debug("tui started with %d namespace(s)", len(session.namespaces))

    while True:
        max_y, max_x = stdscr.getmaxyx()
        layout = compute_layout(max_y, max_x)
        sync_input_field(session, layout.input_field())
        draw(stdscr, layout, session, config=config, theme=theme)
        curses.doupdate()

        ch = stdscr.getch()
        if ch == -1 or ch == curses.KEY_RESIZE:
            continue
        key = translate_key(ch)
        if key is None:
            continue

        step = engine.handle_key(session, key)
        if step.quit:
            return None
        if step.selection is not None:
            return step.selection
