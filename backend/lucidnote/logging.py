"""
Logging for LucidNote: one stdout handler, module loggers under ``lucidnote.``.
"""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Request-level chatter from these is only useful when debugging.
_NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite", "engineio.server", "socketio.server")


def _level_number(level: str) -> int:
    number = logging.getLevelName(str(level).upper())
    return number if isinstance(number, int) else logging.INFO


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the stdout handler and quiet third-party loggers.

    Safe to call more than once; the handler is only installed the first time.

    :param level: Level name such as ``"DEBUG"``; unknown names fall back to INFO
    :type level: str
    :return: The ``lucidnote`` package logger
    :rtype: logging.Logger
    """
    number = _level_number(level)
    logging.basicConfig(level=number, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])

    third_party = logging.DEBUG if number <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party)

    app_logger = logging.getLogger('lucidnote')
    app_logger.setLevel(number)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    if name == 'lucidnote' or name.startswith('lucidnote.'):
        return logging.getLogger(name)
    return logging.getLogger(f'lucidnote.{name}')
