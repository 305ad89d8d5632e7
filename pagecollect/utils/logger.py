# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging for pagecollect.

The package logs through a single ``pagecollect`` logger whose one handler
writes to stderr, so stdout carries nothing but the collection output.
``PAGECOLLECT_LOG_LEVEL`` and ``PAGECOLLECT_LOG_FORMAT`` (json, human, text)
set the defaults; the CLI reconfigures through ``configure_logging``.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Union

__all__ = [
    "logger",
    "setup_logger",
    "configure_logging",
    "LogFormat",
]


class LogFormat(str, Enum):
    """Supported log output formats."""

    JSON = "json"
    HUMAN = "human"
    TEXT = "text"


# Anything on a record beyond these came in through ``extra=``
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with caller-supplied extras under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "source": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}
        if extra:
            data["extra"] = extra
        return json.dumps(data, default=str)


class HumanFormatter(logging.Formatter):
    """
    ``HH:MM:SS [   LEVEL] message`` lines for reading in a terminal.

    Levels are colored only when stderr is a TTY.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = f"[{record.levelname:>8}]"
        if self.use_colors:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"
        line = f"{datetime.now():%H:%M:%S} {level} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class TextFormatter(logging.Formatter):
    """Plain ``asctime - name - LEVEL - message`` lines."""

    def __init__(self):
        super().__init__(fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def get_log_level(level_str: str) -> int:
    """Map a level name (``WARN`` included) to its constant; INFO if unknown."""
    level = logging.getLevelName(level_str.upper())
    return level if isinstance(level, int) else logging.INFO


def get_formatter(log_format: Union[LogFormat, str], use_colors: bool = True) -> logging.Formatter:
    """Return the formatter for ``log_format``; unknown names get JSON."""
    if not isinstance(log_format, LogFormat):
        try:
            log_format = LogFormat(str(log_format).lower())
        except ValueError:
            log_format = LogFormat.JSON
    if log_format == LogFormat.HUMAN:
        return HumanFormatter(use_colors=use_colors)
    if log_format == LogFormat.TEXT:
        return TextFormatter()
    return JsonFormatter()


def _attach_stderr_handler(log: logging.Logger, level: int, formatter: logging.Formatter) -> None:
    log.setLevel(level)
    log.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    log.addHandler(handler)


def configure_logging(
    level: str = "WARNING",
    log_format: LogFormat = LogFormat.JSON,
    human_readable: bool = False,
) -> None:
    """
    Reconfigure the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format
        human_readable: Use the human format whatever ``log_format`` says
    """
    if human_readable:
        log_format = LogFormat.HUMAN
    _attach_stderr_handler(logger, get_log_level(level), get_formatter(log_format))


def setup_logger(name: str = "pagecollect", level: int = logging.WARNING) -> logging.Logger:
    """Create or reset ``name`` with a stderr handler, honouring the environment."""
    env_level = os.environ.get("PAGECOLLECT_LOG_LEVEL", "")
    if env_level:
        level = get_log_level(env_level)
    env_format = os.environ.get("PAGECOLLECT_LOG_FORMAT", LogFormat.JSON.value)

    log = logging.getLogger(name)
    _attach_stderr_handler(log, level, get_formatter(env_format))
    return log


logger = setup_logger()
