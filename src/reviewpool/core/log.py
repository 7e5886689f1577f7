"""Logging setup driven by ReviewPoolConfig."""
import logging
from typing import Optional

from .config.settings import ReviewPoolConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: Optional[ReviewPoolConfig] = None) -> None:
    """Configure root logging from the given configuration.

    Args:
        config: Configuration to read ``log_level`` and ``log_file`` from.
                Defaults to INFO on stderr when omitted.
    """
    level = logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config is not None:
        level = getattr(logging, config.log_level.upper(), logging.INFO)
        if config.log_file:
            handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
