import logging
import sys
from typing import Optional
from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are noisy at INFO and add nothing to relay logs
QUIET_LOGGERS = ("uvicorn", "asyncio", "slack_sdk", "urllib3")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure application logging.

    The root level comes from LOG_LEVEL; an unknown name falls back to INFO.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

