from __future__ import annotations

import os
import sys
from typing import List, NoReturn


def build_command(line: str) -> List[str]:
    """
    Turn a stored command line into an argv.

    A line that already starts with `sh` is split on whitespace and used as is;
    anything else goes through `sh -c` so pipes, `&&` and variables work.
    """
    words = line.split()
    if not words:
        raise ValueError("command line is empty")
    if words[0] == "sh":
        return words
    return ["sh", "-c", line.strip()]


def exec_command(line: str) -> NoReturn:
    """Replace the current process with the command."""
    cmd = build_command(line)
    try:
        print(f"Running: {line.strip()}", file=sys.stderr, flush=True)
    except OSError:
        pass
    os.execvp(cmd[0], cmd)
