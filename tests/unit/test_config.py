"""
Tests for configuration loading and logging setup
"""

import json
import logging

import pytest

from common.config import (
    DEFAULT_CONFIG,
    ConfigError,
    apply_env_overrides,
    configure_logger,
    get_config,
    merge_config,
    parse_log_level,
)


class TestMergeConfig:
    """Test recursive config merging"""

    def test_nested_override(self):
        merged = merge_config(DEFAULT_CONFIG, {'trivia': {'directives': {'next': 'more'}}})

        assert merged['trivia']['directives']['next'] == 'more'
        assert merged['trivia']['directives']['first'] == 'All things Newport'
        assert merged['trivia']['workflow'] == 'NewportTrivia.flow'

    def test_base_untouched(self):
        merge_config(DEFAULT_CONFIG, {'trivia': {'api_key': 'changed'}})
        assert DEFAULT_CONFIG['trivia']['api_key'] == ''


class TestGetConfig:
    """Test config file loading"""

    def test_json_file(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'nats_url': 'nats://bus:4222'}))

        conf = get_config(str(path), environ={})

        assert conf['nats_url'] == 'nats://bus:4222'
        assert conf['trivia']['timeout'] == 30.0

    def test_yaml_file(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('trivia:\n  app_id: newport\n  emit_events: false\n')

        conf = get_config(str(path), environ={})

        assert conf['trivia']['app_id'] == 'newport'
        assert conf['trivia']['emit_events'] is False

    def test_missing_file_uses_defaults(self, tmp_path):
        conf = get_config(str(tmp_path / 'nope.json'), environ={})
        assert conf == DEFAULT_CONFIG

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{not json')

        with pytest.raises(ConfigError):
            get_config(str(path), environ={})

    def test_non_mapping(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('- just\n- a list\n')

        with pytest.raises(ConfigError):
            get_config(str(path), environ={})


class TestEnvOverrides:
    """Test NEWPORT_TRIVIA_* environment variables"""

    def test_api_key_from_env(self, tmp_path):
        conf = get_config(None, environ={'NEWPORT_TRIVIA_API_KEY': 'sk-env'})
        assert conf['trivia']['api_key'] == 'sk-env'

    def test_env_wins_over_file(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'trivia': {'api_url': 'http://file'}}))

        conf = get_config(str(path), environ={'NEWPORT_TRIVIA_API_URL': 'http://env'})

        assert conf['trivia']['api_url'] == 'http://env'

    def test_empty_env_ignored(self):
        conf = apply_env_overrides({'trivia': {'app_id': 'kept'}}, {'NEWPORT_TRIVIA_APP_ID': ''})
        assert conf['trivia']['app_id'] == 'kept'


class TestLogging:
    """Test logging helpers"""

    @pytest.mark.parametrize('level,expected', [
        ('debug', logging.DEBUG),
        ('INFO', logging.INFO),
        (logging.WARNING, logging.WARNING),
    ])
    def test_parse_log_level(self, level, expected):
        assert parse_log_level(level) == expected

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError):
            parse_log_level('chatty')

    def test_configure_logger_file(self, tmp_path):
        log_file = tmp_path / 'trivia.log'
        logger = configure_logger('test.trivia.config', log_file=str(log_file),
                                  log_level=logging.DEBUG)
        try:
            logger.debug('hello from the test')
            for handler in logger.handlers:
                handler.flush()

            assert logger.level == logging.DEBUG
            assert 'hello from the test' in log_file.read_text(encoding='utf-8')
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
