"""
String literal decoding and quoting.

Stored values keep the form they were written in. Four kinds exist:

- bare text:              ``value``
- quoted string:          ``"line\\n"`` (backslash escapes)
- raw string:             ``r"C:\\path"`` or ``R"..."`` (no escapes)
- triple-quoted block:    ``\"\"\"...\"\"\"`` (verbatim, may span lines)

Escape sequences inside quoted strings:

    \\n \\N \\l \\L     line feed
    \\r \\R \\c \\C     carriage return
    \\f \\F           form feed
    \\e \\E           escape
    \\a \\A           bell
    \\b \\B           backspace
    \\v \\V           vertical tab
    \\t \\T           tab
    \\' \\" \\\\        the character itself
    \\xHH           one character from two hex digits
    \\DDD           one character from up to three decimal digits (<= 255)

Unknown escapes, and decimal escapes above 255, decode to nothing.
"""

from enum import Enum, auto

TRIPLE_QUOTE = '"""'
QUOTE = '"'
RAW_PREFIXES = ("r", "R")

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
DEC_DIGITS = frozenset("0123456789")

SIMPLE_ESCAPES = {
    "n": "\n", "N": "\n",
    "l": "\n", "L": "\n",
    "r": "\r", "R": "\r",
    "c": "\r", "C": "\r",
    "f": "\f", "F": "\f",
    "e": "\x1b", "E": "\x1b",
    "a": "\a", "A": "\a",
    "b": "\b", "B": "\b",
    "v": "\v", "V": "\v",
    "t": "\t", "T": "\t",
    "'": "'",
    '"': '"',
    "\\": "\\",
}

# Longest escape: backslash plus three decimal digits
MAX_ESCAPE_LENGTH = 4


class LiteralKind(Enum):
    """Lexical form of a stored value."""

    BARE = auto()
    QUOTED = auto()
    RAW = auto()
    BLOCK = auto()


def literal_kind(stored: str) -> LiteralKind:
    """Classify a stored value by its delimiters."""
    if stored.startswith(TRIPLE_QUOTE):
        return LiteralKind.BLOCK
    if (
        len(stored) >= 3
        and stored[0] in RAW_PREFIXES
        and stored[1] == QUOTE
        and stored.endswith(QUOTE)
    ):
        return LiteralKind.RAW
    if len(stored) >= 2 and stored.startswith(QUOTE) and stored.endswith(QUOTE):
        return LiteralKind.QUOTED
    return LiteralKind.BARE


def escape_extent(text: str) -> int:
    """
    Length of the escape sequence at the start of ``text``.

    ``text`` starts with the backslash. A backslash followed by a line
    terminator or nothing is a sequence of length one.
    """
    if len(text) < 2 or text[1] in "\r\n":
        return 1

    char = text[1]
    if char in "xX":
        length = 2
        while length < 4 and length < len(text) and text[length] in HEX_DIGITS:
            length += 1
        return length

    if char in DEC_DIGITS:
        length = 2
        while length < MAX_ESCAPE_LENGTH and length < len(text) and text[length] in DEC_DIGITS:
            length += 1
        return length

    return 2


def decode_escape(sequence: str) -> str:
    """Decode one complete escape sequence as measured by ``escape_extent``."""
    if len(sequence) < 2:
        return ""

    char = sequence[1]
    if char in SIMPLE_ESCAPES:
        return SIMPLE_ESCAPES[char]

    if char in "xX":
        digits = sequence[2:]
        return chr(int(digits, 16)) if digits else "\x00"

    if char in DEC_DIGITS:
        code = int(sequence[1:])
        return chr(code) if code <= 255 else ""

    return ""


def unescape(body: str) -> str:
    """Decode every escape sequence in the body of a quoted string."""
    result = []
    pos = 0

    while pos < len(body):
        index = body.find("\\", pos)
        if index < 0:
            result.append(body[pos:])
            break

        result.append(body[pos:index])
        length = escape_extent(body[index:index + MAX_ESCAPE_LENGTH])
        result.append(decode_escape(body[index:index + length]))
        pos = index + length

    return "".join(result)


def decode_value(stored: str) -> str:
    """
    Strip the delimiters of a stored value and decode it.

    Block literals drop one line feed directly after the opening
    delimiter; an unterminated block keeps everything after it.
    """
    kind = literal_kind(stored)

    if kind is LiteralKind.BLOCK:
        body = stored[len(TRIPLE_QUOTE):]
        if len(body) >= len(TRIPLE_QUOTE) and body.endswith(TRIPLE_QUOTE):
            body = body[:-len(TRIPLE_QUOTE)]
        if body.startswith("\n"):
            body = body[1:]
        return body

    if kind is LiteralKind.RAW:
        return stored[2:-1]

    if kind is LiteralKind.QUOTED:
        return unescape(stored[1:-1])

    return stored


def escape(text: str) -> str:
    """Escape text so it reads back unchanged inside a quoted string."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )


def quote(text: str) -> str:
    """Wrap text in double quotes, escaping what needs it."""
    return f'{QUOTE}{escape(text)}{QUOTE}'
