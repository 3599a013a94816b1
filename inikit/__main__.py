"""
Entry point for inikit.

Usage:
    python -m inikit get config.ini Package name
    python -m inikit set config.ini Package -- --threads on
    python -m inikit check config.ini
    python -m inikit --help

Section "" is the default section before the first header.
"""

import argparse
import difflib
import sys
from pathlib import Path

from . import __version__
from .config.loader import ConfigLoader, IniError, decode_bytes
from .config.model import Config
from .config.writer import dumps
from .const import APP_NAME, DEFAULT_COMMENT_SEPARATORS
from .logging import get_logger, setup_logging_from_args


logger = get_logger("cli")


def _load(args: argparse.Namespace) -> tuple[ConfigLoader, Config]:
    loader = ConfigLoader(args.comment_chars, args.encoding)
    config = loader.load_file(args.file)
    if loader.last_error:
        logger.warning(f"Partial read of {args.file}")
    return loader, config


def _load_for_update(args: argparse.Namespace) -> Config:
    """Load a file that is about to be rewritten; a partial read is refused."""
    loader, config = _load(args)
    if loader.last_error:
        raise IniError(f"{args.file} was not read completely, not saving: {loader.last_error}")
    return config


def _save(config: Config, args: argparse.Namespace) -> None:
    config.write(args.file)
    logger.info(f"Updated {args.file}")


def cmd_get(args: argparse.Namespace) -> int:
    """Print the last value of a key."""
    _, config = _load(args)

    if not config.has_key(args.section, args.key) and args.default is None:
        print(f"Key not found: [{args.section}] {args.key}", file=sys.stderr)
        return 1

    print(config.get(args.section, args.key, args.default or ""))
    return 0


def cmd_gets(args: argparse.Namespace) -> int:
    """Print every value of a key, one per line."""
    _, config = _load(args)
    for value in config.gets(args.section, args.key):
        print(value)
    return 0


def cmd_set(args: argparse.Namespace) -> int:
    """Set (or overwrite) a value and save the file."""
    config = _load_for_update(args)
    config.set(args.section, args.key, args.value, quoted=not args.raw)
    _save(config, args)
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """Add another value for a key and save the file."""
    config = _load_for_update(args)
    config.add(args.section, args.key, args.value, quoted=not args.raw)
    _save(config, args)
    return 0


def cmd_del(args: argparse.Namespace) -> int:
    """Delete a key, or a whole section, and save the file."""
    config = _load_for_update(args)
    config.delete(args.section, args.key)
    _save(config, args)
    return 0


def cmd_fmt(args: argparse.Namespace) -> int:
    """Print the file as the writer renders it."""
    _, config = _load(args)
    sys.stdout.write(dumps(config))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Verify that the file is read completely and written back unchanged."""
    loader, config = _load(args)

    if loader.last_error:
        print(loader.last_error, file=sys.stderr)
        return 1

    original, _ = decode_bytes(Path(args.file).read_bytes(), config.encoding)
    rendered = dumps(config)

    if rendered == original:
        print(f"{args.file}: OK ({len(config)} sections)")
        return 0

    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        rendered.splitlines(keepends=True),
        fromfile=args.file,
        tofile=f"{args.file} (rewritten)",
    )
    sys.stdout.writelines(diff)
    return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Read and edit INI-like configuration files without losing formatting",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (INFO level)",
    )

    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only errors)",
    )

    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to file",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--comment-chars",
        metavar="CHARS",
        default=DEFAULT_COMMENT_SEPARATORS,
        help=f"Characters that start a comment (default: {DEFAULT_COMMENT_SEPARATORS!r})",
    )

    parser.add_argument(
        "--encoding",
        metavar="NAME",
        help="File encoding (default: detect)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    def add_command(
        name: str, handler, help_text: str, with_key: bool = True
    ) -> argparse.ArgumentParser:
        sub = commands.add_parser(name, help=help_text, description=help_text)
        sub.add_argument("file", help="Configuration file")
        sub.add_argument("section", help='Section name ("" for the default section)')
        if with_key:
            sub.add_argument("key", help="Key name")
        sub.set_defaults(handler=handler)
        return sub

    get_cmd = add_command("get", cmd_get, "Print the value of a key")
    get_cmd.add_argument("--default", help="Value printed when the key is missing")

    add_command("gets", cmd_gets, "Print all values of a repeated key")

    for name, handler, help_text in (
        ("set", cmd_set, "Set a value, overwriting the first existing one"),
        ("add", cmd_add, "Add a value, keeping existing ones"),
    ):
        sub = add_command(name, handler, help_text)
        sub.add_argument("value", help="Value to store")
        sub.add_argument(
            "--raw",
            action="store_true",
            help="Store the value as written, without double quotes",
        )

    del_cmd = add_command(
        "del", cmd_del, "Delete a key, or a section when no key is given", with_key=False
    )
    del_cmd.add_argument("key", nargs="?", help="Key name")

    for name, handler, help_text in (
        ("fmt", cmd_fmt, "Print the file as rewritten by inikit"),
        ("check", cmd_check, "Check that the file round-trips unchanged"),
    ):
        sub = commands.add_parser(name, help=help_text, description=help_text)
        sub.add_argument("file", help="Configuration file")
        sub.set_defaults(handler=handler)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging_from_args(
        verbose=args.verbose,
        debug=args.debug,
        quiet=args.quiet,
        log_file=args.log_file,
        colors=not args.no_color,
    )

    try:
        return args.handler(args)
    except IniError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
