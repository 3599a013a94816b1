"""
Event lexer for INI-like configuration files.

Supports:
- ``[section]`` headers
- ``key = value`` and ``key: value`` pairs
- ``--option: value`` entries
- Bare, quoted (``"..."`` with escapes), raw (``r"..."``) and
  triple-quoted (``\"\"\"...\"\"\"``) values
- Whole-line and trailing comments with configurable separators

The lexer is not line based in the usual sense: each call to
``next_event`` reads exactly one logical entry and keeps every blank,
bracket and comment around it so the entry can be written back
unchanged. Malformed lines are not errors; they degrade to comment
entries.
"""

from typing import Callable, Iterable, Iterator, TextIO

from ..const import DEFAULT_COMMENT_SEPARATORS, DEFAULT_STREAM_NAME, OPTION_PREFIX
from ..logging import get_logger
from .cursor import BLANKS, EOF, NEWLINES, Cursor
from .events import (
    EndOfInput,
    Error,
    KeyValue,
    KeyValueTrivia,
    Option,
    ParseEvent,
    SectionStart,
    SectionTrivia,
)
from .literals import MAX_ESCAPE_LENGTH, QUOTE, RAW_PREFIXES, TRIPLE_QUOTE, escape_extent


logger = get_logger("config.lexer")

SEPARATORS = frozenset("=:")


def split_trailing_blank(text: str) -> tuple[str, str]:
    """
    Split text into its content and its trailing blank.

    Scans backward for the last non-blank character, so internal runs
    of spaces stay with the content.

        "name  "   -> ("name", "  ")
        "a  b\\t"   -> ("a  b", "\\t")
        "   "      -> ("", "   ")
    """
    end = len(text)
    while end > 0 and text[end - 1] in BLANKS:
        end -= 1
    return text[:end], text[end:]


class Lexer:
    """
    Turns a character stream into parse events.

    Example input:
        charset="utf-8"
        [Package]
        name="hello"
        --threads:"on"

    Produces: KeyValue(charset), SectionStart(Package),
    KeyValue(name), Option(--threads), EndOfInput.
    """

    def __init__(
        self,
        source: str | TextIO,
        filename: str = DEFAULT_STREAM_NAME,
        comment_separators: Iterable[str] = DEFAULT_COMMENT_SEPARATORS,
        line_offset: int = 0,
    ):
        self.cursor = Cursor(source, line_offset)
        self.filename = filename
        self.comment_separators = frozenset(comment_separators)

    @property
    def line(self) -> int:
        return self.cursor.line

    @property
    def column(self) -> int:
        return self.cursor.column

    # Diagnostics

    def error_str(self, msg: str) -> str:
        """Error message with the current file, line and column."""
        return f"{self.filename}({self.line}, {self.column}) Error: {msg}"

    def warning_str(self, msg: str) -> str:
        """Warning message with the current file, line and column."""
        return f"{self.filename}({self.line}, {self.column}) Warning: {msg}"

    def ignore_msg(self, event: ParseEvent) -> str:
        """Warning text telling that the entry of ``event`` is ignored."""
        if isinstance(event, SectionStart):
            return self.warning_str(f"section ignored: {event.name}")
        if isinstance(event, KeyValue):
            return self.warning_str(f"key ignored: {event.key}")
        if isinstance(event, Option):
            return self.warning_str(f"command ignored: {event.key}: {event.trivia.value}")
        if isinstance(event, Error):
            return event.message
        return ""

    # Character classes

    def _is_comment_start(self, char: str) -> bool:
        return char in self.comment_separators

    def _at_line_end(self) -> bool:
        char = self.cursor.current
        return char == EOF or char in NEWLINES

    # Raw readers

    def _read_while(self, accept: Callable[[str], bool]) -> str:
        chars = []
        char = self.cursor.current
        while char != EOF and accept(char):
            chars.append(char)
            self.cursor.advance()
            char = self.cursor.current
        return "".join(chars)

    def _read_blank(self) -> str:
        return self._read_while(lambda char: char in BLANKS)

    def _read_comment(self) -> str:
        """Everything up to the end of the line."""
        return self._read_while(lambda char: char not in NEWLINES)

    def _read_section_name(self) -> str:
        return self._read_while(lambda char: char != "]" and char not in NEWLINES)

    def _read_key(self) -> str:
        return self._read_while(
            lambda char: char not in SEPARATORS
            and char not in NEWLINES
            and not self._is_comment_start(char)
        )

    def _read_bare_value(self) -> str:
        return self._read_while(
            lambda char: char not in NEWLINES and not self._is_comment_start(char)
        )

    def _read_block_literal(self) -> str:
        """
        Read a triple-quoted literal including both delimiters.

        Line terminators inside become a single line feed. End of input
        before the closing delimiter ends the literal where it stands.
        """
        chars = [self.cursor.advance(len(TRIPLE_QUOTE))]

        while True:
            char = self.cursor.current
            if char == EOF:
                break
            if char == QUOTE and self.cursor.startswith(TRIPLE_QUOTE):
                chars.append(self.cursor.advance(len(TRIPLE_QUOTE)))
                break
            if char in NEWLINES:
                self.cursor.handle_newline()
                chars.append("\n")
            else:
                chars.append(self.cursor.advance())

        return "".join(chars)

    def _read_quoted_literal(self, raw_mode: bool) -> str:
        """
        Read a quoted literal including its quotes and raw prefix.

        Escape sequences are kept as written; they are only scanned so
        that an escaped quote does not close the literal. In raw mode
        a backslash is an ordinary character. An unterminated literal
        ends at the end of the line.
        """
        chars = []
        if self.cursor.current in RAW_PREFIXES:
            chars.append(self.cursor.advance())
        chars.append(self.cursor.advance())  # opening quote

        while True:
            char = self.cursor.current
            if char == EOF or char in NEWLINES:
                break
            if char == QUOTE:
                chars.append(self.cursor.advance())
                break
            if char == "\\" and not raw_mode:
                length = escape_extent(self.cursor.lookahead(MAX_ESCAPE_LENGTH))
                chars.append(self.cursor.advance(length))
            else:
                chars.append(self.cursor.advance())

        return "".join(chars)

    def _read_value(self) -> str:
        cursor = self.cursor
        if cursor.startswith(TRIPLE_QUOTE):
            return self._read_block_literal()
        if cursor.current == QUOTE:
            return self._read_quoted_literal(raw_mode=False)
        if cursor.current in RAW_PREFIXES and cursor.peek() == QUOTE:
            return self._read_quoted_literal(raw_mode=True)
        return self._read_bare_value()

    def _block_on_next_line(self) -> str | None:
        """
        Look past a line that ends right after its separator.

        Returns:
            The terminator and following blank if the next line opens a
            triple-quoted literal, else None with the cursor unmoved
        """
        mark = self.cursor.mark()
        newline = self.cursor.handle_newline()
        blank = self._read_blank()
        if self.cursor.startswith(TRIPLE_QUOTE):
            return newline + blank
        self.cursor.reset(mark)
        return None

    # Entries

    def _comment_line(self, blank_before: str, prefix: str = "", line: int = 0) -> KeyValue:
        """Treat the rest of the line as a comment entry."""
        comment = prefix + self._read_comment()
        trivia = KeyValueTrivia(
            blank_before_key=blank_before,
            comment=comment,
            newline=self.cursor.handle_newline(),
        )
        return KeyValue(key="", trivia=trivia, line=line or self.line)

    def _section_or_comment(self, blank_before: str) -> ParseEvent:
        line = self.line
        self.cursor.advance()  # skip [
        blank_before_name = self._read_blank()
        prefix = "[" + blank_before_name

        char = self.cursor.current
        if self._is_comment_start(char) or char == "]" or self._at_line_end():
            return self._comment_line(blank_before, prefix, line)

        text = self._read_section_name()
        if self.cursor.current != "]":
            logger.debug(f"{self.filename}:{line}: unclosed section header kept as comment")
            return self._comment_line(blank_before, prefix + text, line)

        name, blank_after_name = split_trailing_blank(text)
        self.cursor.advance()  # skip ]
        blank_after = self._read_blank()
        comment = self._read_comment()

        trivia = SectionTrivia(
            blank_before=blank_before,
            bracket_open="[",
            blank_before_name=blank_before_name,
            blank_after_name=blank_after_name,
            bracket_close="]",
            blank_after=blank_after,
            comment=comment,
            newline=self.cursor.handle_newline(),
        )
        return SectionStart(name=name, trivia=trivia, line=line)

    def _key_value(self, blank_before: str) -> ParseEvent:
        line = self.line
        text = self._read_key()
        key, blank_after_key = split_trailing_blank(text)
        is_option = key.startswith(OPTION_PREFIX)

        separator = self.cursor.current
        if separator not in SEPARATORS:
            if not is_option:
                return self._comment_line(blank_before, text, line)
            trivia = KeyValueTrivia(
                blank_before_key=blank_before,
                blank_after_key=blank_after_key,
                comment=self._read_comment(),
                newline=self.cursor.handle_newline(),
            )
            return Option(key=key, trivia=trivia, line=line)

        self.cursor.advance()
        blank_before_value = self._read_blank()

        value_text = ""
        if self.cursor.current in NEWLINES:
            continuation = self._block_on_next_line()
            if continuation is not None:
                blank_before_value += continuation
                value_text = self._read_value()
        else:
            value_text = self._read_value()

        value, blank_after_value = split_trailing_blank(value_text)
        trivia = KeyValueTrivia(
            blank_before_key=blank_before,
            blank_after_key=blank_after_key,
            separator=separator,
            blank_before_value=blank_before_value,
            value=value,
            blank_after_value=blank_after_value,
            comment=self._read_comment(),
            newline=self.cursor.handle_newline(),
        )

        if is_option:
            return Option(key=key, trivia=trivia, line=line)
        return KeyValue(key=key, trivia=trivia, line=line)

    def next_event(self) -> ParseEvent:
        """Read the next event from the source."""
        blank_before = self._read_blank()
        char = self.cursor.current

        if char == EOF:
            if blank_before:
                return self._comment_line(blank_before)
            if self.cursor.error is not None:
                return Error(
                    message=self.error_str(self.cursor.error),
                    line=self.line,
                    column=self.column,
                )
            return EndOfInput()

        if self._is_comment_start(char) or char in NEWLINES:
            return self._comment_line(blank_before)

        if char == "[":
            return self._section_or_comment(blank_before)

        return self._key_value(blank_before)

    def events(self) -> Iterator[ParseEvent]:
        """Generate all events, ending with EndOfInput or Error."""
        while True:
            event = self.next_event()
            yield event
            if isinstance(event, (EndOfInput, Error)):
                break

    def __iter__(self) -> Iterator[ParseEvent]:
        """Allow iteration over events."""
        return self.events()


def tokenize(
    source: str | TextIO,
    filename: str = DEFAULT_STREAM_NAME,
    comment_separators: Iterable[str] = DEFAULT_COMMENT_SEPARATORS,
) -> list[ParseEvent]:
    """Convenience function to lex a whole source into a list of events."""
    return list(Lexer(source, filename, comment_separators))
