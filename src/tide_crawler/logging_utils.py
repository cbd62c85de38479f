"""
Logging setup for the tide crawler.

Library modules only ask for a module logger:

    import logging
    logger = logging.getLogger(__name__)

The ``tide-crawler`` entry point is the one place that calls
setup_logging() and decides where the progress lines go.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Loggers that are too chatty at DEBUG for a crawl run
QUIET_LOGGERS = ('urllib3', 'sqlalchemy.engine')


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure the root logger for a crawler run.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to also write the log to
        format_string: Optional custom format string
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_string or DEFAULT_FORMAT,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
