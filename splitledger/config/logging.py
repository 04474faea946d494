"""Logging setup shared by embedding applications and scripts."""

import logging
from typing import Optional

from splitledger.config.settings import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: Optional[Settings] = None) -> None:
    """Configure root logging at the configured level."""
    config = config or default_settings
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
