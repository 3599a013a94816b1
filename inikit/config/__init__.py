"""
Format-preserving INI parsing with quoted, raw and triple-quoted values.
"""

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
from .lexer import Lexer
from .loader import ConfigLoader, IniError, IniFileError, load_config, load_config_file
from .model import Config, Entry, Section, new_config
from .writer import dumps, write_config, write_config_file

__all__ = [
    "Lexer",
    "ParseEvent",
    "EndOfInput",
    "SectionStart",
    "KeyValue",
    "Option",
    "Error",
    "SectionTrivia",
    "KeyValueTrivia",
    "Config",
    "Section",
    "Entry",
    "new_config",
    "ConfigLoader",
    "IniError",
    "IniFileError",
    "load_config",
    "load_config_file",
    "dumps",
    "write_config",
    "write_config_file",
]
