"""Logging configuration.

Transitions, rejections and reconciliation warnings from the workflow
engine go through module loggers obtained with get_logger(__name__).
"""

import logging
import sys

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    """Configure root logging to stdout.

    Level is DEBUG when settings.debug is True, otherwise INFO. SQLAlchemy
    engine logging stays at WARNING unless DATABASE_ECHO is set.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass __name__)."""
    return logging.getLogger(name)
