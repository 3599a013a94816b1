"""
Writer that turns a configuration model back into text.

Every header and entry is rebuilt from its trivia, so an unmodified
model reproduces its source exactly. Stored values are written as they
are: quoted values already carry their escapes, raw and triple-quoted
values carry none.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, TextIO

from ..const import DEFAULT_ENCODING, DEFAULT_NEWLINE, DEFAULT_SECTION
from ..logging import get_logger

if TYPE_CHECKING:
    from .model import Config


logger = get_logger("config.writer")


def iter_lines(config: Config) -> Iterator[tuple[str, str]]:
    """Yield (text, terminator) for every header and entry in output order."""
    for name, section in config.iter_sections():
        if name != DEFAULT_SECTION:
            yield section.trivia.render(name), section.trivia.newline
        for entry in section.entries:
            yield entry.trivia.render(entry.key), entry.trivia.newline


def write_config(config: Config, stream: TextIO) -> None:
    """
    Write the configuration to a text stream.

    A line that had no terminator (the last line of a file without a
    final newline) gets one if anything is written after it.
    """
    pending = ""
    count = 0
    for text, newline in iter_lines(config):
        stream.write(pending)
        stream.write(text)
        if newline:
            stream.write(newline)
            pending = ""
        else:
            pending = DEFAULT_NEWLINE
        count += 1

    logger.debug(f"Wrote {count} lines")


def dumps(config: Config) -> str:
    """Render the configuration as text."""
    buffer = io.StringIO(newline="")
    write_config(config, buffer)
    return buffer.getvalue()


def write_config_file(config: Config, path: str | Path, encoding: str | None = None) -> None:
    """
    Write the configuration to a file.

    Args:
        config: Configuration to write
        path: Destination path (overwritten)
        encoding: Text encoding (default: UTF-8)
    """
    path = Path(path)
    with path.open("w", encoding=encoding or DEFAULT_ENCODING, newline="") as fp:
        write_config(config, fp)
    logger.debug(f"Saved configuration to {path}")
