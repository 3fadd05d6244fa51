# -*- coding: utf-8 -*-
"""
Logging setup for the CBT admin front end, built on loguru.
"""
import logging
import sys

from loguru import logger

from cbt_admin.config.settings import settings

# Drop loguru's default handler
logger.remove()

_SILENCED_PREFIXES = ("httpx", "httpcore", "urllib3", "certifi")


class InterceptHandler(logging.Handler):
    """Routes standard library log records into loguru."""

    def emit(self, record):
        # uvicorn startup chatter
        if record.name.startswith("uvicorn") and record.levelno == logging.INFO:
            return

        # per-request HTTP client logs
        if record.name.startswith(_SILENCED_PREFIXES):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = sys._getframe(6), 6
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

log_level = settings.log_level.upper()
debug_mode = settings.debug

console_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

system_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>SYSTEM</cyan> | "
    "<level>{message}</level>"
)

logger.add(
    sys.stdout,
    format=console_format,
    level="DEBUG" if debug_mode else log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
    filter=lambda record: record["extra"].get("system") is not True
    and (record["level"].name != "DEBUG" or debug_mode),
)

logger.add(
    sys.stdout,
    format=system_format,
    level=log_level,
    colorize=True,
    backtrace=False,
    diagnose=False,
    filter=lambda record: record["extra"].get("system") is True,
)


def configure_logger(name: str = "cbt_admin"):
    """
    Returns the configured logger bound to a component name.

    Args:
        name: Component name, shown in ``extra`` for filtering

    Returns:
        loguru.Logger: Configured logger
    """
    return logger.bind(component=name)


def get_system_logger():
    """
    Logger for system messages printed without file locations.

    Returns:
        loguru.Logger: Logger bound with ``system=True``
    """
    return logger.bind(system=True)
