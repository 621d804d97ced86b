import sys
import logging
from typing import Any, Optional

from loguru import logger

from standings_kiosk.config.settings import settings

# Third-party loggers that are chatty at INFO (one line per HTTP request)
QUIET_LOGGERS = ("httpx", "httpcore")


def quiet_library_filter(record: dict[str, Any]) -> bool:
    """Drop INFO-and-below records coming from noisy HTTP libraries."""
    name = record.get("name") or ""
    if name.startswith(QUIET_LOGGERS):
        return record["level"].no >= logger.level("WARNING").no
    return True


class InterceptHandler(logging.Handler):
    """Routes standard logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(level: Optional[str] = None) -> None:
    """Configures Loguru logger based on application settings."""
    level = (level or settings.log_level).upper()
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=False,
        filter=quiet_library_filter,
    )

    logger.info(f"Logging initialized with level: {level}")

    # httpx logs through the standard library
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug("Standard logging intercepted.")
