"""
Logging setup for the users API service
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure loguru sinks

    Args:
        level: Minimum level for the stderr sink
        log_file: Optional path of a rotating DEBUG log file
    """
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=level)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level="DEBUG", rotation="100 MB")
        logger.info(f"Logging to: {log_file}")
