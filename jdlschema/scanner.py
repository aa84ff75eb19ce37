# File: jdlschema/scanner.py
"""
jdlschema - Low-level text scanning
===================================
Comment stripping and the brace-depth cursor used to find the extent of
``relationship TYPE { ... }`` blocks.

The cursor is iterative and only ever moves forward, so scanning any input
terminates in at most ``len(text)`` steps.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.scanner")

# ---------------------------------------------------------------------------
# Comment patterns
# ---------------------------------------------------------------------------

_BLOCK_COMMENT_RE: re.Pattern[str] = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE: re.Pattern[str] = re.compile(r"//[^\n\r]*")


def strip_comments(text: str) -> str:
    """
    Remove ``/* ... */`` and ``// ...`` comments.

    Block comments go first so a ``//`` inside a block comment cannot eat the
    line that closes it. Markers inside quoted strings are not recognized.
    """
    if not text:
        return ""
    without_blocks: str = _BLOCK_COMMENT_RE.sub("", text)
    return _LINE_COMMENT_RE.sub("", without_blocks)


# ---------------------------------------------------------------------------
# Brace-depth cursor
# ---------------------------------------------------------------------------


class BraceCursor:
    """
    Forward-only cursor tracking ``{``/``}`` nesting depth.

    Usage::

        cursor = BraceCursor(text, start=index_after_open_brace)
        end = cursor.find_closing()
        if end is None:
            ...  # unterminated
        body = text[start:end]
    """

    __slots__ = ("text", "position", "depth")

    def __init__(self, text: str, start: int, depth: int = 1) -> None:
        self.text: str = text
        self.position: int = start
        self.depth: int = depth

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.text)

    def step(self) -> str:
        """Consume one character and update the depth."""
        ch: str = self.text[self.position]
        if ch == "{":
            self.depth += 1
        elif ch == "}":
            self.depth -= 1
        self.position += 1
        return ch

    def find_closing(self) -> Optional[int]:
        """
        Advance until the depth returns to zero.

        Returns the index of the matching ``}``, or ``None`` when the input
        ends first. ``position`` is left just past the closing brace.
        """
        while self.depth > 0 and not self.exhausted:
            self.step()
        if self.depth != 0:
            return None
        return self.position - 1

    def __repr__(self) -> str:
        return f"<BraceCursor pos={self.position} depth={self.depth}>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "strip_comments",
    "BraceCursor",
]

logger.debug("jdlschema.scanner loaded — %d public symbols.", len(__all__))
