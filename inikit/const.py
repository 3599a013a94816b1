"""
Application constants and metadata.
"""

# Application info
APP_NAME = "inikit"
APP_VERSION = "0.1.0"

# Parser defaults
DEFAULT_COMMENT_SEPARATORS = "#;"
DEFAULT_STREAM_NAME = "[stream]"
DEFAULT_SECTION = ""
OPTION_PREFIX = "--"

# Writer defaults
DEFAULT_NEWLINE = "\n"
DEFAULT_SEPARATOR = "="
DEFAULT_OPTION_SEPARATOR = ":"

# File encoding
DEFAULT_ENCODING = "utf-8"
FALLBACK_ENCODING = "latin-1"
ENCODING_CONFIDENCE = 0.8
