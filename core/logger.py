"""
Service logger setup

Configures the root logger once per process from LoggingConfig and returns
the service's named logger.
"""

import logging
import sys
from typing import Optional

from core.config.logging_config import LoggingConfig

_configured = False


def setup_service_logger(
    service_name: str,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure logging for a service process.

    Args:
        service_name: Logger name, usually the service package name
        config: Logging settings (defaults to LoggingConfig.from_env())

    Returns:
        Logger named after the service
    """
    global _configured

    config = config or LoggingConfig.from_env()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    if not _configured:
        handlers = []
        if config.enable_console:
            handlers.append(logging.StreamHandler(sys.stdout))
        if config.log_file:
            handlers.append(logging.FileHandler(config.log_file))

        logging.basicConfig(
            level=level,
            format=config.log_format,
            handlers=handlers or None,
            force=True,
        )
        # nats-py is chatty on reconnects
        logging.getLogger("nats").setLevel(max(level, logging.WARNING))
        _configured = True

    logger = logging.getLogger(service_name)
    logger.setLevel(level)
    return logger
