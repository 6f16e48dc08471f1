from __future__ import annotations

import unicodedata
from typing import List


def clamp(v: int, lo: int, hi: int) -> int:
    if hi < lo:
        return lo
    return max(lo, min(hi, v))


def _char_width(ch: str) -> int:
    if not ch:
        return 0
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


def display_width(s: str) -> int:
    """
    Terminal column width of `s` (wide CJK glyphs count as 2, combining marks as 0).
    """
    return sum(_char_width(ch) for ch in s)


def truncate_to_width(s: str, width: int) -> str:
    if width <= 0:
        return ""
    if display_width(s) <= width:
        return s
    out: List[str] = []
    used = 0
    # Leave room for the ellipsis.
    limit = max(0, width - 1)
    for ch in s:
        w = _char_width(ch)
        if used + w > limit:
            break
        out.append(ch)
        used += w
    return "".join(out) + ("…" if width >= 1 else "")


def pad_to_width(s: str, width: int) -> str:
    if width <= 0:
        return ""
    s = truncate_to_width(s, width)
    return s + " " * max(0, width - display_width(s))


def _take_width(s: str, width: int) -> str:
    out: List[str] = []
    used = 0
    for ch in s:
        w = _char_width(ch)
        if out and used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)


def wrap_text(text: str, width: int) -> List[str]:
    """
    Wrap `text` on word boundaries to lines of at most `width` columns.

    Words longer than the width are hard-split. Blank input lines are kept.
    """
    if width <= 0:
        return []
    lines: List[str] = []
    for raw in text.splitlines() or [""]:
        cur = ""
        for word in raw.split(" "):
            if display_width(word) > width:
                if cur:
                    lines.append(cur)
                while display_width(word) > width:
                    head = _take_width(word, width)
                    lines.append(head)
                    word = word[len(head) :]
                cur = word
                continue
            cand = word if not cur else f"{cur} {word}"
            if display_width(cand) <= width:
                cur = cand
            else:
                lines.append(cur)
                cur = word
        if cur or not lines or raw == "":
            lines.append(cur)
    return lines


def chunk_text(text: str, size: int) -> List[str]:
    """
    Split `text` into fixed-size character chunks.

    Used for the input field so rendered lines wrap at the same character count
    the text cursor uses.
    """
    if size <= 0:
        return [ch for ch in text] or [""]
    if not text:
        return [""]
    return [text[i : i + size] for i in range(0, len(text), size)]
