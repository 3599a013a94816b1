"""
Tests for the event lexer.
"""

import pytest

from inikit.config.events import (
    EndOfInput,
    Error,
    KeyValue,
    KeyValueTrivia,
    Option,
    SectionStart,
    SectionTrivia,
)
from inikit.config.lexer import Lexer, split_trailing_blank, tokenize


def test_section_header_trivia() -> None:
    events = tokenize("  [ Package  ]  ; main\n")

    assert isinstance(events[0], SectionStart)
    assert events[0].name == "Package"
    assert events[0].trivia == SectionTrivia(
        blank_before="  ",
        bracket_open="[",
        blank_before_name=" ",
        blank_after_name="  ",
        bracket_close="]",
        blank_after="  ",
        comment="; main",
        newline="\n",
    )
    assert isinstance(events[1], EndOfInput)


def test_section_name_keeps_internal_spaces() -> None:
    events = tokenize("[My  Section ]\n")

    assert events[0].name == "My  Section"
    assert events[0].trivia.blank_after_name == " "


def test_key_value_trivia() -> None:
    events = tokenize(' name  =  "hello world"  # note\n')

    assert isinstance(events[0], KeyValue)
    assert events[0].key == "name"
    assert events[0].trivia == KeyValueTrivia(
        blank_before_key=" ",
        blank_after_key="  ",
        separator="=",
        blank_before_value="  ",
        value='"hello world"',
        blank_after_value="",
        comment="  # note",
        newline="\n",
    )


def test_bare_value_splits_trailing_blank() -> None:
    event = tokenize("path = /usr/local  ; c\n")[0]

    assert event.trivia.value == "/usr/local"
    assert event.trivia.blank_after_value == "  "
    assert event.trivia.comment == "; c"


def test_bare_value_keeps_internal_spaces() -> None:
    event = tokenize("name = Li  haifeng\n")[0]

    assert event.trivia.value == "Li  haifeng"


def test_colon_separator() -> None:
    event = tokenize("key: value\n")[0]

    assert event.key == "key"
    assert event.trivia.separator == ":"
    assert event.trivia.value == "value"


def test_option_is_classified() -> None:
    event = tokenize('--threads:"on"\n')[0]

    assert isinstance(event, Option)
    assert event.key == "--threads"
    assert event.trivia.separator == ":"
    assert event.trivia.value == '"on"'


def test_option_without_value() -> None:
    event = tokenize("--verbose  # flag\n")[0]

    assert isinstance(event, Option)
    assert event.key == "--verbose"
    assert event.trivia.blank_after_key == "  "
    assert event.trivia.separator == ""
    assert event.trivia.value == ""
    assert event.trivia.comment == "# flag"


def test_key_without_separator_becomes_comment() -> None:
    event = tokenize("just some words\n")[0]

    assert isinstance(event, KeyValue)
    assert event.is_comment
    assert event.trivia.comment == "just some words"


def test_comment_line() -> None:
    event = tokenize("  # hello\n")[0]

    assert event.is_comment
    assert event.trivia.blank_before_key == "  "
    assert event.trivia.comment == "# hello"
    assert event.trivia.newline == "\n"


def test_blank_line() -> None:
    event = tokenize("\n")[0]

    assert event.is_comment
    assert event.trivia == KeyValueTrivia(newline="\n")


@pytest.mark.parametrize(
    "line, comment",
    [
        ("[broken\n", "[broken"),
        ("[ ; not a section]\n", "[ ; not a section]"),
        ("[]\n", "[]"),
        ("  [  \n", "[  "),
    ],
)
def test_malformed_section_falls_back_to_comment(line: str, comment: str) -> None:
    event = tokenize(line)[0]

    assert isinstance(event, KeyValue)
    assert event.is_comment
    assert event.trivia.comment == comment


def test_custom_comment_separators() -> None:
    events = tokenize("& note\nkey=a#b\n", comment_separators="&")

    assert events[0].is_comment
    assert events[0].trivia.comment == "& note"
    assert events[1].key == "key"
    assert events[1].trivia.value == "a#b"


def test_line_terminators_are_recorded() -> None:
    events = tokenize("a=1\r\nb=2\rc=3")

    assert [e.trivia.newline for e in events[:3]] == ["\r\n", "\r", ""]
    assert [e.trivia.value for e in events[:3]] == ["1", "2", "3"]
    assert isinstance(events[3], EndOfInput)


def test_triple_quoted_value() -> None:
    event = tokenize('text = """line one\r\nline two"""  # end\n')[0]

    assert event.trivia.value == '"""line one\nline two"""'
    assert event.trivia.comment == "  # end"
    assert event.trivia.newline == "\n"


def test_unterminated_triple_quoted_value() -> None:
    event = tokenize('text = """open\nstill open')[0]

    assert event.trivia.value == '"""open\nstill open'
    assert event.trivia.newline == ""


def test_triple_quoted_value_on_next_line() -> None:
    events = tokenize('text =\n  """abc"""\nnext=1\n')

    assert events[0].key == "text"
    assert events[0].trivia.blank_before_value == "\n  "
    assert events[0].trivia.value == '"""abc"""'
    assert events[1].key == "next"


def test_empty_value_does_not_consume_next_line() -> None:
    events = tokenize("empty =  \nnext=1\n")

    assert events[0].key == "empty"
    assert events[0].trivia.value == ""
    assert events[0].trivia.blank_before_value == "  "
    assert events[0].trivia.newline == "\n"
    assert events[1].key == "next"
    assert events[1].trivia.value == "1"


def test_escaped_quote_does_not_close_string() -> None:
    event = tokenize('k="a\\"b" # c\n')[0]

    assert event.trivia.value == '"a\\"b"'
    assert event.trivia.comment == " # c"


def test_unterminated_string_ends_at_line_end() -> None:
    events = tokenize('k="abc\nx=1\n')

    assert events[0].trivia.value == '"abc'
    assert events[1].key == "x"


def test_raw_string_may_contain_comment_characters() -> None:
    event = tokenize('p = r"C:\\dir # x" ; c\n')[0]

    assert event.trivia.value == 'r"C:\\dir # x"'
    assert event.trivia.comment == " ; c"


def test_trailing_blank_at_end_of_input() -> None:
    events = tokenize("a=1\n   ")

    assert events[1].is_comment
    assert events[1].trivia.blank_before_key == "   "
    assert events[1].trivia.newline == ""
    assert isinstance(events[2], EndOfInput)


def test_read_failure_becomes_error_event(failing_stream) -> None:
    events = list(Lexer(failing_stream("a=1\n"), filename="broken.ini"))

    assert events[0].key == "a"
    assert isinstance(events[-1], Error)
    assert events[-1].message == "broken.ini(2, 1) Error: disk gone"


def test_line_numbers_and_offset() -> None:
    events = tokenize("[s]\n\na=1\n")
    assert [e.line for e in events[:3]] == [1, 2, 3]

    lexer = Lexer("a=1\n", line_offset=10)
    assert lexer.next_event().line == 11


def test_diagnostic_messages() -> None:
    lexer = Lexer("a=1\n", filename="app.ini")

    assert lexer.error_str("boom") == "app.ini(1, 1) Error: boom"
    assert lexer.warning_str("hmm") == "app.ini(1, 1) Warning: hmm"
    assert lexer.ignore_msg(SectionStart("S", SectionTrivia())) == (
        "app.ini(1, 1) Warning: section ignored: S"
    )
    assert lexer.ignore_msg(Option("--x", KeyValueTrivia(value="1"))) == (
        "app.ini(1, 1) Warning: command ignored: --x: 1"
    )
    assert lexer.ignore_msg(Error("bad")) == "bad"
    assert lexer.ignore_msg(EndOfInput()) == ""


@pytest.mark.parametrize(
    "text, expected",
    [
        ("name  ", ("name", "  ")),
        ("a  b\t", ("a  b", "\t")),
        ("   ", ("", "   ")),
        ("", ("", "")),
    ],
)
def test_split_trailing_blank(text: str, expected: tuple[str, str]) -> None:
    assert split_trailing_blank(text) == expected
