from __future__ import annotations

import argparse
import json
import logging
import os
import shlex
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import curses

from command_manager import __version__
from command_manager.engine import NavigationEngine
from command_manager.log import setup_logging
from command_manager.paths import (
    ENV_CM_DB,
    ENV_CM_HOME,
    ENV_CM_LOG_LEVEL,
    ConfigError,
    get_cm_dirs,
    get_db_path,
    get_log_level,
    log_path,
)
from command_manager.runner import build_command, exec_command
from command_manager.session import Session
from command_manager.store import SqliteStore, StoreError
from command_manager.tui import run_session

logger = logging.getLogger(__name__)


def _namespace_to_json(store: SqliteStore, namespace: str) -> Dict[str, Any]:
    commands, tags = store.list_commands_and_tags(namespace)
    return {
        "namespace": namespace,
        "commands": [{"command": c, "tag": t} for c, t in zip(commands, tags)],
    }


def cmd_list(store: SqliteStore, *, pretty: bool) -> int:
    payload: List[Dict[str, Any]] = [_namespace_to_json(store, ns) for ns in store.list_namespaces()]
    txt = json.dumps(payload, ensure_ascii=False, indent=2 if pretty else None)
    sys.stdout.write(txt + "\n")
    return 0


def cmd_doctor(explicit_db: Optional[str]) -> int:
    print("Command Manager doctor")
    print("")
    dirs = get_cm_dirs()
    print(f"Base dir: {dirs.base_dir}")
    print(f"- Exists: {dirs.base_dir.exists()}")

    chosen = explicit_db or os.environ.get(ENV_CM_DB)
    db_path = Path(chosen).expanduser() if chosen else dirs.db_path
    print(f"Database: {db_path}")
    print(f"- Exists: {db_path.is_file()}")
    print(f"Log file: {dirs.log_path}")
    print(f"- Tip: set ${ENV_CM_DB} or pass --db to use another database")
    print(f"- Tip: set ${ENV_CM_HOME} to move {dirs.base_dir}")
    print(f"- Tip: set ${ENV_CM_LOG_LEVEL}=DEBUG for verbose logs")

    if not db_path.is_file():
        return 1 if chosen else 0

    # Doctor only reads: no schema creation, no fixtures.
    try:
        n_ns, n_cmd = SqliteStore(db_path).counts()
    except StoreError as e:
        print("")
        print(f"Database check failed: {e}")
        return 1
    print("")
    print(f"Namespaces: {n_ns}")
    print(f"Commands: {n_cmd}")
    return 0


def cmd_run(store: SqliteStore, tag: str, *, dry_run: bool) -> int:
    found = store.find_command_by_tag(tag)
    if found is None:
        print(f"Error: no command tagged {tag!r}.", file=sys.stderr)
        return 1
    command, namespace = found
    if dry_run:
        print(" ".join(shlex.quote(a) for a in build_command(command)))
        return 0
    logger.info("running %r from %r by tag %r", command, namespace, tag)
    exec_command(command)
    return 0  # unreachable


def _run_tui(session: Session) -> Optional[Tuple[str, str]]:
    # Esc must feel immediate; curses waits a full second by default.
    os.environ.setdefault("ESCDELAY", "25")
    engine = NavigationEngine()

    def _inner(stdscr: "curses.window") -> Optional[Tuple[str, str]]:
        return run_session(stdscr, session, engine)

    return curses.wrapper(_inner)


def cmd_tui(store: SqliteStore) -> int:
    try:
        session = Session.load(store)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        selection = _run_tui(session)
    except curses.error as e:
        term = os.environ.get("TERM")
        msg = str(e) or "curses error"
        print(f"Error: failed to initialize terminal UI: {msg}", file=sys.stderr)
        if term:
            print(f"Tip: your TERM is {term!r}. If this system lacks terminfo for it, try:", file=sys.stderr)
        else:
            print("Tip: TERM is not set. Try:", file=sys.stderr)
        print("  TERM=xterm-256color cm", file=sys.stderr)
        print("Tip: if you are running without a TTY, use `cm list` or `cm run <tag>`.", file=sys.stderr)
        return 2

    if not selection:
        return 0
    command, tag = selection
    logger.info("running %r (tag %r)", command, tag)
    exec_command(command)
    return 0  # unreachable


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="cm", description="Command Manager (terminal-only)")
    parser.add_argument(
        "--db",
        dest="db",
        default=None,
        help=f"SQLite database file (or set ${ENV_CM_DB}).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("tui", help="Start the interactive TUI (default).")

    p_list = sub.add_parser("list", help="Print namespaces, commands and tags as JSON.")
    p_list.add_argument("--pretty", action="store_true", help="Pretty-print JSON.")

    sub.add_parser("doctor", help="Print diagnostics.")

    p_run = sub.add_parser("run", help="Run the command with the given tag.")
    p_run.add_argument("tag")
    p_run.add_argument("--dry-run", action="store_true", help="Print the command instead of executing it.")

    args = parser.parse_args(argv)
    cmd = args.command or "tui"

    if cmd == "doctor":
        return cmd_doctor(args.db)

    try:
        db_path = get_db_path(args.db)
        setup_logging(log_path(), get_log_level())
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    store = SqliteStore(db_path)
    try:
        store.init()
        if cmd == "tui":
            return cmd_tui(store)
        if cmd == "list":
            return cmd_list(store, pretty=bool(args.pretty))
        if cmd == "run":
            return cmd_run(store, args.tag, dry_run=bool(args.dry_run))
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 2
