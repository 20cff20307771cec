"""Tests for entityspine.logging."""

import json
import logging

import structlog

from entities import SampleRecord
from entityspine.drivers import SqliteDriver
from entityspine.logging import HANDLER_NAME, configure_logging, get_logger
from entityspine.repository import Repository


class TestConfigureLogging:
    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("tests").info("repository_operation", schema="post")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "repository_operation"
        assert payload["schema"] == "post"
        assert payload["log.level"] == "info"
        assert "@timestamp" in payload

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        get_logger("tests").info("quiet")
        assert capsys.readouterr().err == ""

    def test_without_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        get_logger("tests").warning("hydration_failed")
        payload = json.loads(capsys.readouterr().err.strip())
        assert "@timestamp" not in payload

    def test_reconfigure_replaces_handler(self):
        configure_logging(level="INFO", json_format=True)
        configure_logging(level="DEBUG", json_format=False)
        ours = [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]
        assert len(ours) == 1

    def test_library_debug_events(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        Repository(SqliteDriver(), SampleRecord).create_schema()
        captured = capsys.readouterr()
        assert captured.out == ""
        events = [json.loads(line)["event"] for line in captured.err.splitlines()]
        assert "schema_generated" in events
        assert "repository_operation" in events


class TestGetLogger:
    def test_returns_bindable_logger(self):
        logger = get_logger(__name__)
        assert hasattr(logger, "bind")

    def test_unconfigured_default(self):
        structlog.reset_defaults()
        assert get_logger() is not None

    def test_unconfigured_library_is_silent(self, capsys):
        structlog.reset_defaults()
        Repository(SqliteDriver(), SampleRecord).create_schema()
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
