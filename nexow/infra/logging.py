import sys
from typing import Optional

from loguru import logger

from nexow.config import settings


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None):
    level = (level or settings.LOG_LEVEL).upper()
    logger.remove()
    logger.add(
        log_file or settings.LOG_FILE,
        rotation="10 MB",
        retention="10 days",
        enqueue=True,
        backtrace=True,
        diagnose=False,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {thread.name} | {message}",
    )
    # stderr so that `simulate --json` keeps stdout clean
    logger.add(sys.stderr, level=level, format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {message}")
    return logger
