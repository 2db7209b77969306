"""Logger setup for nmwifi.

The curses screen owns the terminal in interactive mode, so log output
goes to a rotating file there and additionally to stderr otherwise.
"""

import os
import sys

from loguru import logger

from .config import LOG_FILE, LOG_LEVEL_ENV, LOG_RETENTION, LOG_ROTATION

CONSOLE_LOGFORMAT = '<level>{level: <8}</level> | {message}'
FILE_LOGFORMAT = '{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}'


def setup_logging(verbose: bool = False, interactive: bool = False,
                  log_file: str = LOG_FILE) -> None:
    """Replace loguru's default handler with the nmwifi sinks.

    Args:
        verbose: Lower the stderr sink to DEBUG.
        interactive: Skip the stderr sink (curses is drawing).
        log_file: Destination of the rotating DEBUG log.
    """
    logger.remove()

    try:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        logger.add(log_file, level='DEBUG', format=FILE_LOGFORMAT,
                   rotation=LOG_ROTATION, retention=LOG_RETENTION)
    except OSError as e:
        # Read-only home: keep going with stderr only
        if interactive:
            return
        print(f'[nmwifi] Cannot write log file {log_file}: {e}', file=sys.stderr)

    if not interactive:
        level = os.environ.get(LOG_LEVEL_ENV) or ('DEBUG' if verbose else 'WARNING')
        try:
            logger.add(sys.stderr, level=level.upper(), format=CONSOLE_LOGFORMAT)
        except ValueError:
            logger.add(sys.stderr, level='WARNING', format=CONSOLE_LOGFORMAT)
            logger.warning(f'Unknown {LOG_LEVEL_ENV} {level!r}, using WARNING')
