"""
Logging setup for the E-Hentai client scripts.

The library itself only creates module loggers; scripts call
``setup_logging`` once to route them to the console and, optionally, a
log file such as ``logs/eh_search.log``.
"""

import logging
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Transport libraries that log every pooled connection or charset guess
NOISY_LOGGERS = ('urllib3', 'charset_normalizer')


def _resolve_level(log_level):
    """Map a level name to its number, reading config.LOG_LEVEL when unset."""
    if log_level is None:
        try:
            from config import LOG_LEVEL
            log_level = LOG_LEVEL
        except ImportError:
            log_level = 'INFO'
    return getattr(logging, str(log_level).upper(), logging.INFO)


def setup_logging(log_file=None, log_level=None):
    """
    Route every ``ehentai`` logger to the console and an optional file

    Args:
        log_file: Log file path; its directory is created and the file is
            appended to across runs
        log_level: Level name; defaults to LOG_LEVEL from config.py, then
            INFO.  Unknown names fall back to INFO.

    Returns:
        The configured root logger
    """
    level = _resolve_level(log_level)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler()]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return root_logger


def get_logger(name):
    """Return the logger for *name* (usually ``__name__``)."""
    return logging.getLogger(name)
