"""
Indentation-aware text accumulator for imperative code emission.
"""

from contextlib import contextmanager
from typing import List


class CodeBuffer:
    """Collects lines of source text at a tracked indentation level."""

    def __init__(self, indent_size: int = 4, level: int = 0):
        self.indent_size = indent_size
        self.level = level
        self._lines: List[str] = []
        self._partial = ""

    @property
    def _prefix(self) -> str:
        return " " * (self.indent_size * self.level)

    def push(self, text: str) -> "CodeBuffer":
        """Append text to the current, unfinished line."""
        if not self._partial:
            self._partial = self._prefix
        self._partial += text
        return self

    def line(self, text: str = "") -> "CodeBuffer":
        """Finish the current line, appending ``text`` first."""
        if text:
            self.push(text)
        self._lines.append(self._partial.rstrip())
        self._partial = ""
        return self

    def lines(self, *texts: str) -> "CodeBuffer":
        for text in texts:
            self.line(text)
        return self

    @contextmanager
    def indent(self, levels: int = 1):
        """Indent every line emitted inside the block."""
        self.level += levels
        try:
            yield self
        finally:
            self.level -= levels

    def getvalue(self) -> str:
        lines = list(self._lines)
        if self._partial:
            lines.append(self._partial.rstrip())
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.getvalue()
