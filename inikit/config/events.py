"""
Parse events produced by the lexer.

Every event that describes a line carries trivia: the exact blanks,
punctuation, comment text and line terminator around its semantic
tokens. Concatenating a trivia record with its name or key reproduces
the source line byte for byte.
"""

from dataclasses import dataclass


@dataclass
class SectionTrivia:
    """Formatting around a ``[section]`` header."""

    blank_before: str = ""
    bracket_open: str = ""
    blank_before_name: str = ""
    blank_after_name: str = ""
    bracket_close: str = ""
    blank_after: str = ""
    comment: str = ""
    newline: str = ""

    def render(self, name: str) -> str:
        """Rebuild the header line (without its terminator)."""
        return (
            f"{self.blank_before}{self.bracket_open}{self.blank_before_name}"
            f"{name}{self.blank_after_name}{self.bracket_close}"
            f"{self.blank_after}{self.comment}"
        )


@dataclass
class KeyValueTrivia:
    """
    Formatting around a ``key = value`` line.

    ``value`` is the stored value: the value text exactly as written,
    including quote characters, raw prefix or triple-quote delimiters.
    A comment-only or blank line has an empty key, no separator and
    its text in ``comment``.
    """

    blank_before_key: str = ""
    blank_after_key: str = ""
    separator: str = ""
    blank_before_value: str = ""
    value: str = ""
    blank_after_value: str = ""
    comment: str = ""
    newline: str = ""

    def render(self, key: str) -> str:
        """Rebuild the entry text (without its final terminator)."""
        return (
            f"{self.blank_before_key}{key}{self.blank_after_key}"
            f"{self.separator}{self.blank_before_value}{self.value}"
            f"{self.blank_after_value}{self.comment}"
        )


@dataclass
class EndOfInput:
    """The cursor reached the end of the input."""


@dataclass
class SectionStart:
    """A ``[section]`` header has been read."""

    name: str
    trivia: SectionTrivia
    line: int = 0


@dataclass
class KeyValue:
    """An ordinary ``key=value`` pair, or a comment/blank line when ``key`` is empty."""

    key: str
    trivia: KeyValueTrivia
    line: int = 0

    @property
    def is_comment(self) -> bool:
        return not self.key and not self.trivia.separator


@dataclass
class Option:
    """A ``--key: value`` entry."""

    key: str
    trivia: KeyValueTrivia
    line: int = 0


@dataclass
class Error:
    """The input could not be read any further."""

    message: str
    line: int = 0
    column: int = 0


ParseEvent = EndOfInput | SectionStart | KeyValue | Option | Error
