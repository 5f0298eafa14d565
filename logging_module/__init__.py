"""Logging Module for the stream watcher.

Console output plus a rotating JSON log file for every component.

Main Components:
    - setup_logging: Configures console and file handlers
    - JsonFormatter: JSON lines formatter for the log file
    - LoggingConfig: Configuration management

Example:
    >>> from logging_module import LoggingConfig, setup_logging
    >>> config = LoggingConfig.from_env()
    >>> logger = setup_logging(config)
    >>> logger.info("Bot started")
"""

from logging_module.config import LoggingConfig
from logging_module.logger import JsonFormatter, setup_logging

__version__ = "1.0.0"
__all__ = ["LoggingConfig", "JsonFormatter", "setup_logging"]
