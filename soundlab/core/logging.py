"""Logging configuration for the filter and analysis pipeline."""
import logging
import sys
from typing import Optional
from soundlab.core.config import settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure pipeline logging on stdout.

    Args:
        level: Log level name (defaults to config value)
    """
    if level is None:
        level = settings.log_level
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


logger = logging.getLogger("soundlab")
