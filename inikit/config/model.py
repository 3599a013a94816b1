"""
Ordered, multi-valued configuration model.

A ``Config`` maps section names to ``Section`` objects in insertion
order. Each section holds its header trivia and an ordered list of
entries; keys may repeat, which is how a key carries several values.
Comment and blank lines are entries too (empty key, no separator) so
that the writer can put them back where they were.

Stored values keep their quoting. Only the accessors (``get``,
``gets``, ``items``) decode them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, TextIO

from ..const import (
    DEFAULT_NEWLINE,
    DEFAULT_OPTION_SEPARATOR,
    DEFAULT_SECTION,
    DEFAULT_SEPARATOR,
    OPTION_PREFIX,
)
from .events import KeyValueTrivia, SectionTrivia
from .literals import QUOTE, decode_value, quote
from .writer import dumps, write_config, write_config_file


@dataclass
class Entry:
    """One line (or triple-quoted block) inside a section."""

    key: str
    trivia: KeyValueTrivia

    @property
    def is_comment(self) -> bool:
        return not self.key and not self.trivia.separator

    @property
    def is_option(self) -> bool:
        return self.key.startswith(OPTION_PREFIX)

    @property
    def value(self) -> str:
        """Decoded value."""
        return decode_value(self.trivia.value)


@dataclass
class Section:
    """
    A section: header trivia plus an ordered multimap of entries.

    The default section ``""`` keeps an empty trivia and is written
    without a header.
    """

    trivia: SectionTrivia = field(default_factory=SectionTrivia)
    entries: list[Entry] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Section(entries={len(self.entries)})"

    def find(self, key: str) -> list[Entry]:
        """
        All entries for ``key`` in order.

        Falls back to a key stored with literal quotes around it,
        e.g. ``"name"=value``.
        """
        found = [e for e in self.entries if e.key == key and not e.is_comment]
        if not found:
            quoted = f"{QUOTE}{key}{QUOTE}"
            found = [e for e in self.entries if e.key == quoted]
        return found

    def has_entries(self) -> bool:
        """True if any entry other than a comment or blank line remains."""
        return any(not e.is_comment for e in self.entries)

    def insert(self, entry: Entry) -> None:
        """
        Add an entry after the last key of the section.

        Comment and blank lines that trail the last key stay after the
        new entry, so spacing before the next header is kept.
        """
        index = len(self.entries)
        for pos in range(len(self.entries) - 1, -1, -1):
            if not self.entries[pos].is_comment:
                index = pos + 1
                break
        self.entries.insert(index, entry)


def _new_entry(key: str, value: str, quoted: bool) -> Entry:
    separator = DEFAULT_OPTION_SEPARATOR if key.startswith(OPTION_PREFIX) else DEFAULT_SEPARATOR
    trivia = KeyValueTrivia(
        separator=separator,
        value=quote(value) if quoted else value,
        newline=DEFAULT_NEWLINE,
    )
    return Entry(key=key, trivia=trivia)


def _new_section(name: str) -> Section:
    if name == DEFAULT_SECTION:
        return Section()
    return Section(
        trivia=SectionTrivia(bracket_open="[", bracket_close="]", newline=DEFAULT_NEWLINE)
    )


class Config:
    """
    Configuration document with format-preserving accessors.

    Usage:
        config = Config()
        config.set("", "charset", "utf-8")
        config.set("Package", "--threads", "on")
        config.add("Author", "name", "a")
        config.add("Author", "name", "b")
        config.gets("Author", "name")   # ["a", "b"]
        config.get("Author", "name")    # "b"
        print(config)
    """

    def __init__(self, filename: str | None = None, encoding: str | None = None):
        self.filename = filename
        self.encoding = encoding
        self._sections: dict[str, Section] = {}

    def __repr__(self) -> str:
        return f"Config({self.filename!r}, sections={len(self._sections)})"

    def __str__(self) -> str:
        return dumps(self)

    def __contains__(self, section: object) -> bool:
        return section in self._sections

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    # Structure

    def section(self, name: str) -> Section | None:
        """Get a section by name."""
        return self._sections.get(name)

    def ensure_section(self, name: str, trivia: SectionTrivia | None = None) -> Section:
        """
        Get a section, creating it if needed.

        ``trivia`` only applies when the section is created; the first
        header seen for a name keeps its formatting.
        """
        section = self._sections.get(name)
        if section is None:
            section = Section(trivia=trivia) if trivia is not None else _new_section(name)
            self._sections[name] = section
        return section

    def sections(self) -> list[str]:
        """Section names in order."""
        return list(self._sections)

    def iter_sections(self) -> Iterator[tuple[str, Section]]:
        """Sections in output order: the default section first."""
        default = self._sections.get(DEFAULT_SECTION)
        if default is not None:
            yield DEFAULT_SECTION, default
        for name, section in self._sections.items():
            if name != DEFAULT_SECTION:
                yield name, section

    def keys(self, section: str) -> list[str]:
        """Distinct keys of a section in order of first appearance."""
        sect = self._sections.get(section)
        if sect is None:
            return []
        return list(dict.fromkeys(e.key for e in sect.entries if not e.is_comment))

    def items(self, section: str) -> list[tuple[str, str]]:
        """All (key, decoded value) pairs of a section, repeats included."""
        sect = self._sections.get(section)
        if sect is None:
            return []
        return [(e.key, e.value) for e in sect.entries if not e.is_comment]

    def has_section(self, section: str) -> bool:
        return section in self._sections

    def has_key(self, section: str, key: str) -> bool:
        sect = self._sections.get(section)
        return sect is not None and bool(sect.find(key))

    # Accessors

    def get(self, section: str, key: str, default: str = "") -> str:
        """
        Get the value of a key.

        Returns the last value when the key repeats. A missing section,
        a missing key or an empty stored value gives ``default``.
        """
        sect = self._sections.get(section)
        if sect is None:
            return default

        found = sect.find(key)
        if not found or not found[-1].trivia.value:
            return default
        return found[-1].value

    def gets(self, section: str, key: str) -> list[str]:
        """Get every value of a key in file order."""
        sect = self._sections.get(section)
        if sect is None:
            return []
        return [e.value for e in sect.entries if e.key == key and not e.is_comment]

    def set(self, section: str, key: str, value: str, quoted: bool = True) -> None:
        """
        Set the value of a key.

        Overwrites the first existing entry in place, keeping its
        formatting; otherwise adds a new entry. With ``quoted`` the value
        is stored as a double-quoted string.
        """
        sect = self.ensure_section(section)
        found = sect.find(key)
        if found:
            entry = found[0]
            trivia = entry.trivia
            if not trivia.separator:
                # A bare ``--flag`` line gains a separator; its blank moves
                # behind the value so a trailing comment stays apart.
                trivia.separator = (
                    DEFAULT_OPTION_SEPARATOR if entry.is_option else DEFAULT_SEPARATOR
                )
                trivia.blank_after_value = trivia.blank_after_key + trivia.blank_after_value
                trivia.blank_after_key = ""
            trivia.value = quote(value) if quoted else value
        else:
            sect.insert(_new_entry(key, value, quoted))

    def add(self, section: str, key: str, value: str, quoted: bool = True) -> None:
        """Add a value for a key, keeping existing ones."""
        self.ensure_section(section).insert(_new_entry(key, value, quoted))

    def delete_section(self, section: str) -> None:
        """Delete a section with all its keys."""
        self._sections.pop(section, None)

    def delete_key(self, section: str, key: str) -> None:
        """
        Delete the first entry of a key.

        Deleting the last key of a section deletes the section.
        """
        sect = self._sections.get(section)
        if sect is None:
            return

        for index, entry in enumerate(sect.entries):
            if entry.key == key and not entry.is_comment:
                del sect.entries[index]
                break
        else:
            return

        if not sect.has_entries():
            del self._sections[section]

    def delete(self, section: str, key: str | None = None) -> None:
        """Delete a key, or the whole section when no key is given."""
        if key is None:
            self.delete_section(section)
        else:
            self.delete_key(section, key)

    # Output

    def write(self, target: str | Path | TextIO) -> None:
        """Write the configuration to a path or an open text stream."""
        if isinstance(target, (str, Path)):
            write_config_file(self, target, encoding=self.encoding)
        else:
            write_config(self, target)


def new_config() -> Config:
    """Create an empty configuration."""
    return Config()
