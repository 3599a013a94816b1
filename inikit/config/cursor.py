"""
Buffered character cursor over a text stream.

The cursor reads its source in chunks into an append-only buffer and
exposes it through an explicit position index. Reading past the end
yields ``EOF``, an empty string, which never matches a real character
set, so it can be compared safely at any position.

Read failures (``OSError``, ``UnicodeDecodeError``) do not propagate:
the cursor records the message in ``error`` and behaves as if the
input ended there.
"""

from typing import TextIO

EOF = ""

BLANKS = frozenset(" \t")
NEWLINES = frozenset("\r\n")


class Cursor:
    """Position index over a lazily filled text buffer."""

    CHUNK_SIZE = 8192

    def __init__(self, source: str | TextIO, line_offset: int = 0):
        if isinstance(source, str):
            self._buffer = source
            self._stream: TextIO | None = None
        else:
            self._buffer = ""
            self._stream = source

        self.pos = 0
        self.line = 1 + line_offset
        self.line_start = 0
        self.error: str | None = None

    def _fill(self, pos: int) -> bool:
        """Read chunks until ``pos`` is buffered. Returns False at end of input."""
        while pos >= len(self._buffer):
            if self._stream is None:
                return False
            try:
                chunk = self._stream.read(self.CHUNK_SIZE)
            except (OSError, UnicodeDecodeError) as e:
                self.error = str(e)
                self._stream = None
                return False
            if not chunk:
                self._stream = None
                return False
            self._buffer += chunk
        return True

    def char_at(self, pos: int) -> str:
        """Character at an absolute position, or ``EOF``."""
        if pos >= len(self._buffer) and not self._fill(pos):
            return EOF
        return self._buffer[pos]

    @property
    def current(self) -> str:
        return self.char_at(self.pos)

    def peek(self, offset: int = 1) -> str:
        return self.char_at(self.pos + offset)

    def lookahead(self, count: int) -> str:
        """Up to ``count`` characters starting at the current position."""
        self._fill(self.pos + count - 1)
        return self._buffer[self.pos:self.pos + count]

    def startswith(self, text: str) -> bool:
        return self.lookahead(len(text)) == text

    @property
    def column(self) -> int:
        return self.pos - self.line_start + 1

    def advance(self, count: int = 1) -> str:
        """Consume ``count`` characters on the current line and return them."""
        consumed = self.lookahead(count)
        self.pos += len(consumed)
        return consumed

    def handle_newline(self) -> str:
        """
        Consume a line terminator at the current position.

        A bare CR, a bare LF and CRLF each count as one logical newline.

        Returns:
            The terminator text consumed, or "" if there was none
        """
        char = self.current
        if char == "\r":
            self.pos += 1
            if self.current == "\n":
                self.pos += 1
                terminator = "\r\n"
            else:
                terminator = "\r"
        elif char == "\n":
            self.pos += 1
            terminator = "\n"
        else:
            return ""

        self.line += 1
        self.line_start = self.pos
        return terminator

    def mark(self) -> tuple[int, int, int]:
        """Snapshot the position for a later ``reset``."""
        return self.pos, self.line, self.line_start

    def reset(self, mark: tuple[int, int, int]) -> None:
        self.pos, self.line, self.line_start = mark
