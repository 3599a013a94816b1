"""
inikit: lossless reading and editing of INI-like configuration files.
"""

from .const import APP_VERSION
from .config import (
    Config,
    ConfigLoader,
    IniError,
    IniFileError,
    dumps,
    load_config,
    load_config_file,
    new_config,
    write_config,
    write_config_file,
)

__version__ = APP_VERSION

__all__ = [
    "__version__",
    "Config",
    "ConfigLoader",
    "IniError",
    "IniFileError",
    "dumps",
    "load_config",
    "load_config_file",
    "new_config",
    "write_config",
    "write_config_file",
]
