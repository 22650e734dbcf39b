"""Tests for configuration and logging setup."""
import logging

import pytest

import paramfilter.config as config_module
from paramfilter import FieldCodec, FilterConfig, LoggingConfig, configure_logging, get_config, set_config


class TestFilterConfig:

    def test_defaults(self):
        config = FilterConfig()
        assert config.array_separator == ","
        assert config.escape_array_items is False
        assert config.allow_cycles is False
        assert config.logging.level == "WARNING"

    def test_empty_separator_rejected(self):
        with pytest.raises(ValueError):
            FilterConfig(array_separator="")

    def test_from_dict(self):
        config = FilterConfig.from_dict({
            "array_separator": ";",
            "allow_cycles": True,
            "logging": {"level": "DEBUG", "unknown": 1},
        })
        assert config.array_separator == ";"
        assert config.allow_cycles is True
        assert config.logging.level == "DEBUG"
        assert not hasattr(config.logging, "unknown")

    def test_from_dict_validates(self):
        with pytest.raises(ValueError):
            FilterConfig.from_dict({"array_separator": ""})

    def test_to_dict_round_trip(self):
        config = FilterConfig(array_separator="|", escape_array_items=True)
        assert FilterConfig.from_dict(config.to_dict()) == config

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PARAMFILTER_ARRAY_SEPARATOR", "|")
        monkeypatch.setenv("PARAMFILTER_ESCAPE_ARRAYS", "true")
        monkeypatch.setenv("PARAMFILTER_ALLOW_CYCLES", "false")
        monkeypatch.setenv("PARAMFILTER_LOG_LEVEL", "debug")

        config = FilterConfig.from_environment()

        assert config.array_separator == "|"
        assert config.escape_array_items is True
        assert config.allow_cycles is False
        assert config.logging.level == "DEBUG"

    def test_make_codec(self):
        codec = FilterConfig(array_separator=";", escape_array_items=True).make_codec()
        assert isinstance(codec, FieldCodec)
        assert codec.separator == ";"
        assert codec.escape is True


class TestGlobalConfig:

    def test_set_and_get(self):
        config = FilterConfig(allow_cycles=True)
        set_config(config)
        assert get_config() is config

    def test_created_from_environment_when_unset(self, monkeypatch):
        monkeypatch.setenv("PARAMFILTER_ALLOW_CYCLES", "true")
        config_module._current_config = None
        assert get_config().allow_cycles is True


class TestConfigureLogging:

    def test_single_handler_and_level(self):
        logger = configure_logging(LoggingConfig(level="DEBUG"))
        configure_logging(LoggingConfig(level="INFO"))

        handlers = [h for h in logger.handlers if getattr(h, "_paramfilter", False)]
        assert logger.name == "paramfilter"
        assert len(handlers) == 1
        assert logger.level == logging.INFO

        logger.removeHandler(handlers[0])
        logger.setLevel(logging.NOTSET)

    def test_uses_global_config(self):
        set_config(FilterConfig(logging=LoggingConfig(level="ERROR")))
        logger = configure_logging()
        assert logger.level == logging.ERROR

        for handler in [h for h in logger.handlers if getattr(h, "_paramfilter", False)]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
