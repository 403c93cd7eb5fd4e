"""
Colored logging configuration for the resource executables.

stdout carries the JSON response to the pipeline, so every log line goes to
stderr.
"""

import logging
import os
import sys
from typing import IO, Optional, Union

LOG_LEVEL_ENV = "RESULTS_RESOURCE_LOG_LEVEL"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    CYAN = '\033[36m'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors level names and storage component logger names.

    Color scheme:
    - DEBUG: Cyan
    - INFO: Green
    - WARNING: Yellow
    - ERROR: Red
    - CRITICAL: Bold Red
    - Storage backend logs (``results_resource.storage.*``): Blue
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    STORAGE_PREFIX = "results_resource.storage"

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
        stream: Optional[IO[str]] = None,
    ):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)

    @staticmethod
    def _supports_color(stream: IO[str]) -> bool:
        if os.environ.get('NO_COLOR'):
            return False
        if os.environ.get('FORCE_COLOR'):
            return True
        isatty = getattr(stream, 'isatty', None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        levelname_orig = record.levelname
        name_orig = record.name

        level_color = self.LEVEL_COLORS.get(record.levelno, '')
        record.levelname = f"{level_color}{record.levelname}{Colors.RESET}"
        if record.name.startswith(self.STORAGE_PREFIX):
            record.name = f"{Colors.BLUE}{record.name}{Colors.RESET}"

        try:
            return super().format(record)
        finally:
            record.levelname = levelname_orig
            record.name = name_orig


def resolve_level(level: Union[int, str, None]) -> int:
    """Turn a level name, number or None (read from the environment) into a level."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_colored_logging(
    level: Union[int, str, None] = None,
    stream: Optional[IO[str]] = None,
    format_string: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    use_colors: bool = True,
) -> None:
    """
    Configure the root logger with a single colored stderr handler.

    Args:
        level: Logging level or level name. Reads RESULTS_RESOURCE_LOG_LEVEL if None.
        stream: Output stream (default: stderr)
        format_string: Log format string
        date_format: Date format string
        use_colors: Whether to use colors (auto-detects TTY support)
    """
    resolved_level = resolve_level(level)
    stream = stream or sys.stderr

    formatter = ColoredFormatter(
        fmt=format_string,
        datefmt=date_format,
        use_colors=use_colors,
        stream=stream,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # boto logs every retry at INFO; keep it out of pipeline output.
    for noisy in ("botocore", "boto3", "urllib3", "s3transfer"):
        logging.getLogger(noisy).setLevel(max(resolved_level, logging.WARNING))
