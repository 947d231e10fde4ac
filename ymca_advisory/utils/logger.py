"""
Logging setup for the advisory engine.

Modules log through `logging.getLogger(__name__)`; entry points call
`configure_logging` once to install a unified, millisecond-precision format.
"""

import logging
import sys
from datetime import datetime

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(filename)s:%(lineno)d | %(message)s"

# Chatty third-party loggers, kept at WARNING unless DEBUG is requested
NOISY_LOGGERS = ["LiteLLM", "LiteLLM Router", "LiteLLM Proxy", "httpx", "httpcore", "openai"]


class MillisecondsFormatter(logging.Formatter):
    """Formatter that appends milliseconds to timestamps."""

    def formatTime(self, record, datefmt=None):  # noqa: N802 - must match parent class method name
        ct = datetime.fromtimestamp(record.created)
        if datefmt:
            return ct.strftime(datefmt) + f",{int(record.msecs):03d}"
        return ct.strftime("%Y-%m-%d %H:%M:%S") + f",{int(record.msecs):03d}"


def configure_logging(log_level: str = "INFO") -> None:
    """Configure the root logger and quiet third-party libraries.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(MillisecondsFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    third_party_level = level if level <= logging.DEBUG else logging.WARNING
    for lib_name in NOISY_LOGGERS:
        lib_logger = logging.getLogger(lib_name)
        lib_logger.handlers.clear()
        lib_logger.propagate = True
        lib_logger.setLevel(third_party_level)
