"""
Centralized logging configuration for the service.
"""

import logging
import sys
from typing import Optional

from semantic_store.core.config import ApiSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Optional[ApiSettings] = None) -> None:
    """
    Configure the root logger to write to stdout.

    Args:
        settings: ApiSettings instance, read from the environment if None
    """
    if settings is None:
        settings = ApiSettings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # chromadb is chatty at INFO
    logging.getLogger("chromadb").setLevel(logging.WARNING)
