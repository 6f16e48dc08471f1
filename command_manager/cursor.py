from __future__ import annotations

from typing import List, Optional, Tuple


class TextCursor:
    """
    Track where the terminal cursor sits while text is typed into a fixed-width field.

    Each line of the field holds `field_width - 1` characters; the last column is
    left free for the cursor itself. Positions are derived from the character
    count only, so wide (CJK) glyphs and combining marks are not accounted for.
    """

    def __init__(self, anchor_x: int, anchor_y: int, field_width: int) -> None:
        self.anchor_x = anchor_x
        self.anchor_y = anchor_y
        self.x = anchor_x
        self.y = anchor_y
        self.field_width = field_width
        self.buffer: List[str] = []

    def __repr__(self) -> str:
        return (
            f"TextCursor(x={self.x}, y={self.y}, anchor=({self.anchor_x}, {self.anchor_y}), "
            f"field_width={self.field_width}, text={self.text!r})"
        )

    @property
    def text(self) -> str:
        return "".join(self.buffer)

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    def _span(self) -> int:
        # Characters per line. 0 means "no horizontal room": every glyph wraps.
        return max(0, self.field_width - 1)

    def push(self, ch: str) -> None:
        self.buffer.append(ch)
        span = self._span()
        if span > 0 and len(self.buffer) % span != 0:
            self.x += 1
        else:
            self.x = self.anchor_x
            self.y += 1

    def pop(self) -> Optional[str]:
        if not self.buffer:
            return None
        ch = self.buffer.pop()
        n = len(self.buffer)
        span = self._span()
        if n == 0:
            self.x = self.anchor_x
            self.y = self.anchor_y
        elif span == 0 or (n + 1) % span == 0:
            # The removed glyph had wrapped onto a new line: go back to the end of the previous one.
            self.y = max(self.anchor_y, self.y - 1)
            self.x = self.anchor_x + max(0, span - 1)
        else:
            self.x = max(self.anchor_x, self.x - 1)
        return ch
