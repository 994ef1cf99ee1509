"""Tests for structured logging configuration."""
import json
import logging
import os
from unittest.mock import MagicMock, patch

import pytest

from teamboard.logging_config import configure_logging, JSONFormatter
from teamboard.services.exchange_rate import RateResolver


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Reset root logger state after each test."""
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    root.setLevel(original_level)
    root.handlers = original_handlers


class TestConfigureLogging:

    def test_default_level_is_info(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop('LOG_LEVEL', None)
            configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_log_level_case_insensitive(self):
        with patch.dict(os.environ, {'LOG_LEVEL': 'debug'}):
            configure_logging()
        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize('value', ['NONSENSE', 'BASIC_FORMAT'])
    def test_invalid_log_level_defaults_to_info(self, value):
        with patch.dict(os.environ, {'LOG_LEVEL': value}):
            configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_text_format(self, capsys):
        with patch.dict(os.environ, {'LOG_FORMAT': 'text', 'LOG_LEVEL': 'INFO'}):
            configure_logging()
        logging.getLogger('services.exchange_rate').info("rate 35.1")
        output = capsys.readouterr().err
        assert 'services.exchange_rate' in output
        assert 'rate 35.1' in output
        assert 'INFO' in output

    def test_json_format(self, capsys):
        with patch.dict(os.environ, {'LOG_FORMAT': 'json', 'LOG_LEVEL': 'INFO'}):
            configure_logging()
        logging.getLogger('routes.overview').warning("ทีม A")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['level'] == 'WARNING'
        assert parsed['logger'] == 'routes.overview'
        assert parsed['message'] == 'ทีม A'
        assert 'timestamp' in parsed

    def test_json_format_includes_exception(self, capsys):
        with patch.dict(os.environ, {'LOG_FORMAT': 'json', 'LOG_LEVEL': 'INFO'}):
            configure_logging()
        try:
            raise ValueError("boom")
        except ValueError:
            logging.getLogger('test.exc').error("failed", exc_info=True)
        parsed = json.loads(capsys.readouterr().err.strip())
        assert 'ValueError' in parsed['exception']

    def test_third_party_loggers_quieted(self):
        configure_logging()
        for name in ['urllib3', 'requests', 'sqlalchemy.engine', 'werkzeug']:
            assert logging.getLogger(name).level == logging.WARNING

    def test_flask_app_logger_follows_level(self):
        app = MagicMock()
        with patch.dict(os.environ, {'LOG_LEVEL': 'WARNING'}):
            configure_logging(app)
        app.logger.setLevel.assert_called_once_with(logging.WARNING)

    def test_rate_fallback_warning_is_json(self, capsys):
        with patch.dict(os.environ, {'LOG_FORMAT': 'json', 'LOG_LEVEL': 'INFO'}):
            configure_logging()
        RateResolver([], default_rate=36.5).resolve(now=0.0)
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['logger'] == 'services.exchange_rate'
        assert parsed['level'] == 'WARNING'
        assert 'using default 36.50' in parsed['message']

    def test_request_logs_hidden_at_info(self, capsys):
        with patch.dict(os.environ, {'LOG_LEVEL': 'INFO'}):
            configure_logging()
        logging.getLogger('werkzeug').info('GET /api/overview 200')
        logging.getLogger('sqlalchemy.engine').info('SELECT daily_metrics')
        assert capsys.readouterr().err == ''

    def test_no_duplicate_handlers_on_repeated_calls(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


class TestJSONFormatter:

    def test_format_basic_record(self):
        record = logging.LogRecord(
            name='test', level=logging.INFO, pathname='', lineno=0,
            msg='hello %s', args=('world',), exc_info=None,
        )
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed['message'] == 'hello world'
        assert parsed['level'] == 'INFO'
