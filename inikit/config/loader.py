"""
Configuration loader: drives the lexer and builds the model.
"""

import io
from pathlib import Path
from typing import Iterable, TextIO

import chardet

from ..const import (
    DEFAULT_COMMENT_SEPARATORS,
    DEFAULT_ENCODING,
    DEFAULT_SECTION,
    DEFAULT_STREAM_NAME,
    ENCODING_CONFIDENCE,
    FALLBACK_ENCODING,
)
from ..logging import get_logger
from .events import EndOfInput, Error, KeyValue, Option, SectionStart
from .lexer import Lexer
from .model import Config, Entry


logger = get_logger("config.loader")


class IniError(Exception):
    """Base exception for configuration file errors."""

    pass


class IniFileError(IniError):
    """Exception raised when a configuration file cannot be opened."""

    pass


def detect_encoding(raw: bytes) -> str:
    """
    Guess the text encoding of raw file content.

    Low-confidence guesses fall back to UTF-8; plain ASCII is widened
    to UTF-8 so that later edits can add any character.
    """
    guess = chardet.detect(raw)
    encoding = guess.get("encoding")
    if not encoding or (guess.get("confidence") or 0) < ENCODING_CONFIDENCE:
        return DEFAULT_ENCODING
    if encoding.lower() == "ascii":
        return DEFAULT_ENCODING
    return encoding.lower()


def decode_bytes(raw: bytes, encoding: str | None = None) -> tuple[str, str]:
    """
    Decode file content, detecting the encoding if none is given.

    Returns:
        (text, encoding actually used)
    """
    if encoding is None:
        encoding = detect_encoding(raw)

    try:
        return raw.decode(encoding), encoding
    except (UnicodeDecodeError, LookupError):
        logger.debug(f"Cannot decode as {encoding}, falling back to {FALLBACK_ENCODING}")
        return raw.decode(FALLBACK_ENCODING), FALLBACK_ENCODING


class ConfigLoader:
    """
    Loads configuration from files, streams or strings.

    Usage:
        loader = ConfigLoader()
        config = loader.load_file("config.ini")
        # or
        config = loader.load_string(config_text)

    Loading never fails on malformed lines. If the input cannot be
    read to the end, loading stops at the first ``Error`` event and the
    entries read so far are returned; ``last_error`` holds the message.
    """

    def __init__(
        self,
        comment_separators: Iterable[str] = DEFAULT_COMMENT_SEPARATORS,
        encoding: str | None = None,
    ):
        self.comment_separators = "".join(comment_separators)
        self.encoding = encoding
        self.last_error: str | None = None

    def load_stream(self, stream: TextIO | str, filename: str = DEFAULT_STREAM_NAME) -> Config:
        """
        Load configuration from a text stream.

        Args:
            stream: Open text stream (or source text)
            filename: Name used in diagnostics

        Returns:
            Populated Config
        """
        self.last_error = None
        lexer = Lexer(stream, filename, self.comment_separators)
        config = Config(filename=filename)
        current = DEFAULT_SECTION
        count = 0

        for event in lexer:
            if isinstance(event, SectionStart):
                current = event.name
                config.ensure_section(current, event.trivia)
            elif isinstance(event, (KeyValue, Option)):
                config.ensure_section(current).entries.append(Entry(event.key, event.trivia))
            elif isinstance(event, Error):
                logger.warning(event.message)
                self.last_error = event.message
                break
            elif isinstance(event, EndOfInput):
                break
            count += 1

        logger.debug(f"Loaded {count} entries in {len(config)} sections from {filename}")
        return config

    def load_string(self, source: str, filename: str = DEFAULT_STREAM_NAME) -> Config:
        """Load configuration from source text."""
        return self.load_stream(io.StringIO(source, newline=""), filename)

    def load_file(self, path: str | Path) -> Config:
        """
        Load configuration from a file.

        Without an explicit encoding the content is read as bytes and
        its encoding detected; otherwise the file is streamed as text
        and a decoding failure ends loading like any read error.

        Args:
            path: Path to the configuration file

        Returns:
            Populated Config, remembering the encoding for writing

        Raises:
            IniFileError: If the file does not exist or cannot be opened
        """
        path = Path(path)

        if not path.exists():
            raise IniFileError(f"Configuration file not found: {path}")

        if not path.is_file():
            raise IniFileError(f"Not a file: {path}")

        try:
            if self.encoding is None:
                text, encoding = decode_bytes(path.read_bytes())
                config = self.load_string(text, str(path))
            else:
                encoding = self.encoding
                with path.open("r", encoding=encoding, newline="") as fp:
                    config = self.load_stream(fp, str(path))
        except (OSError, LookupError) as e:
            raise IniFileError(f"Failed to open configuration: {e}") from e

        config.encoding = encoding
        return config


def load_config(
    source: TextIO | str,
    filename: str = DEFAULT_STREAM_NAME,
    comment_separators: Iterable[str] = DEFAULT_COMMENT_SEPARATORS,
) -> Config:
    """
    Convenience function to load configuration from a stream or text.

    Args:
        source: Open text stream, or the configuration text itself
        filename: Name used in diagnostics
        comment_separators: Characters that start a comment

    Returns:
        Populated Config
    """
    loader = ConfigLoader(comment_separators)
    if isinstance(source, str):
        return loader.load_string(source, filename)
    return loader.load_stream(source, filename)


def load_config_file(
    path: str | Path,
    comment_separators: Iterable[str] = DEFAULT_COMMENT_SEPARATORS,
    encoding: str | None = None,
) -> Config:
    """
    Convenience function to load configuration from a file.

    Args:
        path: Path to the configuration file
        comment_separators: Characters that start a comment
        encoding: File encoding (default: detect)

    Returns:
        Populated Config
    """
    loader = ConfigLoader(comment_separators, encoding)
    return loader.load_file(path)
