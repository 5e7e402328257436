#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import copy
import json
import logging
import os
from pathlib import Path

import yaml


DEFAULT_LOG_FORMAT = '[%(asctime).19s] [%(name)s] [%(levelname)s] %(message)s'

DEFAULT_CONFIG = {
    'nats_url': 'nats://localhost:4222',
    'trivia': {
        'api_url': 'https://api.mindstudio.ai/developer/v2/apps/run',
        'api_key': '',
        'app_id': '',
        'workflow': 'NewportTrivia.flow',
        'timeout': 30.0,
        'directives': {
            'first': 'All things Newport',
            'next': 'next',
        },
        'emit_events': True,
    },
    'logging': {
        'level': 'info',
        'format': DEFAULT_LOG_FORMAT,
        'file': None,
    },
}

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    'NEWPORT_TRIVIA_API_KEY': ('trivia', 'api_key'),
    'NEWPORT_TRIVIA_API_URL': ('trivia', 'api_url'),
    'NEWPORT_TRIVIA_APP_ID': ('trivia', 'app_id'),
}


class ConfigError(Exception):
    """Configuration file missing required structure or unreadable."""
    pass


class RobustFileHandler(logging.FileHandler):
    """FileHandler that gracefully handles flush errors on Windows"""

    def flush(self):
        """Flush the stream, catching OSError on Windows file handles"""
        try:
            super().flush()
        except OSError as e:
            # EINVAL from a handle in an inconsistent state
            if e.errno != 22:
                raise


def configure_logger(logger,
                     log_file=None,
                     log_format=None,
                     log_level=logging.INFO):
    """Configure a logger with a file or stream handler

    Args:
        logger: Logger instance or logger name string
        log_file: File path string or file-like object (None for stderr)
        log_format: Format string for log messages
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)

    Returns:
        Configured logger instance
    """
    if isinstance(log_file, str):
        handler = RobustFileHandler(
            log_file,
            mode='a',
            encoding='utf-8',
            errors='replace'
        )
    else:
        handler = logging.StreamHandler(log_file)  # Default to stderr if None

    formatter = logging.Formatter(log_format or DEFAULT_LOG_FORMAT)

    if isinstance(logger, str):
        logger = logging.getLogger(logger)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(log_level)

    return logger


def parse_log_level(level):
    """Turn 'debug'/'INFO'/10 into a logging level constant"""
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    if not isinstance(value, int):
        raise ConfigError(f'Unknown log level: {level}')
    return value


def setup_logging(conf):
    """Configure the root logger from the 'logging' config section

    Args:
        conf: Full configuration dictionary

    Returns:
        The root logger
    """
    log_conf = conf.get('logging', {})
    return configure_logger(
        logging.getLogger(),
        log_file=log_conf.get('file'),
        log_format=log_conf.get('format', DEFAULT_LOG_FORMAT),
        log_level=parse_log_level(log_conf.get('level', 'info')),
    )


def merge_config(base, overrides):
    """Recursively merge overrides into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_env_overrides(conf, environ=None):
    """Apply NEWPORT_TRIVIA_* environment variables over the config"""
    environ = os.environ if environ is None else environ
    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            conf.setdefault(section, {})[key] = value
    return conf


def load_config_file(config_file):
    """Load a JSON or YAML configuration file

    Args:
        config_file: Path to a .json, .yaml or .yml file

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigError: If the file cannot be parsed or is not a mapping
    """
    path = Path(config_file)
    try:
        with open(path, 'r', encoding='utf-8') as fp:
            if path.suffix in ('.yaml', '.yml'):
                conf = yaml.safe_load(fp) or {}
            else:
                conf = json.load(fp)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f'Invalid config file {path}: {e}') from e
    except OSError as e:
        raise ConfigError(f'Cannot read config file {path}: {e}') from e

    if not isinstance(conf, dict):
        raise ConfigError(f'Config file {path} must contain a mapping')
    return conf


def get_config(config_file=None, environ=None):
    """Load configuration, merged over defaults, with env overrides

    A missing file is not an error: defaults (plus environment) are used.

    Args:
        config_file: Optional path to a JSON or YAML config file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Configuration dictionary
    """
    conf = {}
    if config_file and Path(config_file).exists():
        conf = load_config_file(config_file)
    elif config_file:
        logging.getLogger(__name__).warning(
            f'Config file {config_file} not found, using defaults')

    return apply_env_overrides(merge_config(DEFAULT_CONFIG, conf), environ)
