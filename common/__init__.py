"""Common utilities for the trivia bot."""
from .config import ConfigError, configure_logger, get_config, setup_logging

__all__ = ['ConfigError', 'get_config', 'configure_logger', 'setup_logging']
