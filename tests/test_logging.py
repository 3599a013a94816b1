"""
Tests for logging setup.
"""

import logging
from pathlib import Path

from inikit.logging import (
    LogConfig,
    get_log_level,
    get_logger,
    setup_logging,
    setup_logging_from_args,
)


def test_get_logger_prefixes_component() -> None:
    assert get_logger("config.loader").name == "inikit.config.loader"
    assert get_logger("inikit.cli").name == "inikit.cli"


def test_get_log_level() -> None:
    assert get_log_level("warn") == logging.WARNING
    assert get_log_level("DEBUG") == logging.DEBUG
    assert get_log_level("unknown") == logging.INFO


def test_setup_logging_from_args_levels() -> None:
    assert setup_logging_from_args(debug=True).console_level == "DEBUG"
    assert setup_logging_from_args(verbose=True).console_level == "INFO"
    assert setup_logging_from_args(quiet=True).console_level == "ERROR"
    assert setup_logging_from_args().console_level == "WARNING"


def test_file_logging(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "inikit.log"
    setup_logging(LogConfig(file_enabled=True, file_path=str(log_path)))

    get_logger("test").debug("written to file")
    for handler in logging.getLogger("inikit").handlers:
        handler.flush()

    assert "written to file" in log_path.read_text()

    for handler in logging.getLogger("inikit").handlers:
        handler.close()
    setup_logging()
