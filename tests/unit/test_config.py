import logging

import pytest

from stackshape import config
from stackshape.logging.format import AddFormattedAttributes, DefaultFormatter
from stackshape.logging.setup import get_log_level_from_config, setup_logging, setup_logging_from_config


class TestEnvParsing:
    @pytest.mark.parametrize("value", ["1", "true", "True", " true "])
    def test_true_values(self, monkeypatch, value):
        monkeypatch.setenv("STACKSHAPE_TEST_FLAG", value)

        assert config.is_env_true("STACKSHAPE_TEST_FLAG")
        assert config.is_env_not_false("STACKSHAPE_TEST_FLAG")
        assert config.parse_boolean_env("STACKSHAPE_TEST_FLAG") is True

    @pytest.mark.parametrize("value", ["0", "false", "False"])
    def test_false_values(self, monkeypatch, value):
        monkeypatch.setenv("STACKSHAPE_TEST_FLAG", value)

        assert not config.is_env_true("STACKSHAPE_TEST_FLAG")
        assert not config.is_env_not_false("STACKSHAPE_TEST_FLAG")
        assert config.parse_boolean_env("STACKSHAPE_TEST_FLAG") is False

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("STACKSHAPE_TEST_FLAG", raising=False)

        assert not config.is_env_true("STACKSHAPE_TEST_FLAG")
        assert config.is_env_not_false("STACKSHAPE_TEST_FLAG")
        assert config.parse_boolean_env("STACKSHAPE_TEST_FLAG") is None

    def test_other_value(self, monkeypatch):
        monkeypatch.setenv("STACKSHAPE_TEST_FLAG", "maybe")

        assert not config.is_env_true("STACKSHAPE_TEST_FLAG")
        assert config.is_env_not_false("STACKSHAPE_TEST_FLAG")
        assert config.parse_boolean_env("STACKSHAPE_TEST_FLAG") is None

    @pytest.mark.parametrize(
        "value,expected",
        [("debug", "debug"), (" TRACE ", "trace"), ("warn", "warn"), ("verbose", False), ("", False)],
    )
    def test_eval_log_type(self, monkeypatch, value, expected):
        monkeypatch.setenv("STACKSHAPE_TEST_LOG", value)
        assert config.eval_log_type("STACKSHAPE_TEST_LOG") == expected


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    levels = {
        name: logging.getLogger(name).level
        for name in ["stackshape", "stackshape.engine.nodes", "stackshape.engine.parsing"]
    }
    root_level = root.level

    yield

    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(root_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class TestLogLevel:
    @pytest.mark.parametrize(
        "log_type,expected",
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warn", logging.WARNING),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("trace", logging.DEBUG),
        ],
    )
    def test_level_from_log_type(self, monkeypatch, log_type, expected):
        monkeypatch.setattr(config, "STACKSHAPE_LOG", log_type)
        assert get_log_level_from_config() == expected

    def test_level_from_debug(self, monkeypatch):
        monkeypatch.setattr(config, "STACKSHAPE_LOG", False)

        monkeypatch.setattr(config, "DEBUG", True)
        assert get_log_level_from_config() == logging.DEBUG

        monkeypatch.setattr(config, "DEBUG", False)
        assert get_log_level_from_config() == logging.INFO

    def test_trace_logging_enabled(self, monkeypatch):
        monkeypatch.setattr(config, "STACKSHAPE_LOG", "trace")
        assert config.is_trace_logging_enabled()

        monkeypatch.setattr(config, "STACKSHAPE_LOG", "debug")
        assert not config.is_trace_logging_enabled()


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    def test_setup_logging(self):
        setup_logging(logging.DEBUG)

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, DefaultFormatter)
        assert any(isinstance(f, AddFormattedAttributes) for f in handler.filters)
        assert logging.getLogger("stackshape").level == logging.DEBUG
        # chatty loggers are kept at INFO unless trace logging is enabled
        assert logging.getLogger("stackshape.engine.nodes").level == logging.INFO

    def test_setup_logging_with_higher_level(self):
        setup_logging(logging.ERROR)

        assert logging.getLogger("stackshape").level == logging.ERROR
        assert logging.getLogger("stackshape.engine.parsing").level == logging.ERROR

    def test_setup_logging_from_config_with_trace(self, monkeypatch):
        monkeypatch.setattr(config, "STACKSHAPE_LOG", "trace")

        setup_logging_from_config()

        assert logging.getLogger("stackshape").level == logging.DEBUG
        assert logging.getLogger("stackshape.engine.nodes").level == logging.DEBUG
