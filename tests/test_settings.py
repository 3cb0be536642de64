"""Tests for settings persistence and logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from stepstimer import settings as settings_module
from stepstimer.settings import Settings, load_settings, save_settings
from stepstimer.logger import get_logger, LOG_FORMAT


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.tick_interval_ms == 100
        assert s.demo_step_ids == ["A", "B"]
        assert s.always_on_top is False
        assert s.log_level == "INFO"
        assert s.log_to_file is False

    def test_missing_file_gives_defaults(self):
        assert load_settings() == Settings()

    def test_round_trip(self):
        original = Settings(
            tick_interval_ms=50, demo_step_ids=["load", "parse"],
            window_width=600, always_on_top=True,
        )
        save_settings(original)
        loaded = load_settings()
        assert loaded == original

    def test_unknown_keys_ignored(self):
        settings_module.SETTINGS_PATH.write_text(
            json.dumps({"tick_interval_ms": 200, "theme": "dark"}),
            encoding="utf-8",
        )
        loaded = load_settings()
        assert loaded.tick_interval_ms == 200
        assert not hasattr(loaded, "theme")

    def test_corrupt_file_falls_back(self, caplog):
        settings_module.SETTINGS_PATH.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="stepstimer.settings"):
            loaded = load_settings()
        assert loaded == Settings()
        assert "using defaults" in caplog.text

    def test_invalid_tick_interval_replaced(self, caplog):
        settings_module.SETTINGS_PATH.write_text(
            json.dumps({"tick_interval_ms": -3}), encoding="utf-8",
        )
        with caplog.at_level(logging.WARNING, logger="stepstimer.settings"):
            loaded = load_settings()
        assert loaded.tick_interval_ms == 100
        assert "tick_interval_ms" in caplog.text

    def test_step_ids_coerced_to_strings(self):
        settings_module.SETTINGS_PATH.write_text(
            json.dumps({"demo_step_ids": [1, "b"]}), encoding="utf-8",
        )
        assert load_settings().demo_step_ids == ["1", "b"]

    def test_duplicate_step_ids_removed(self):
        settings_module.SETTINGS_PATH.write_text(
            json.dumps({"demo_step_ids": ["A", "B", "A"]}), encoding="utf-8",
        )
        assert load_settings().demo_step_ids == ["A", "B"]

    @pytest.mark.parametrize("field_name, bad_value", [
        ("log_level", "LOUD"),
        ("log_level", 10),
        ("window_width", "wide"),
        ("window_width", 0),
        ("window_height", -1),
        ("window_height", True),
        ("always_on_top", "yes"),
        ("log_to_file", 1),
        ("demo_step_ids", "A,B"),
    ])
    def test_invalid_field_reset_to_default(self, caplog, field_name, bad_value):
        settings_module.SETTINGS_PATH.write_text(
            json.dumps({field_name: bad_value}), encoding="utf-8",
        )
        with caplog.at_level(logging.WARNING, logger="stepstimer.settings"):
            loaded = load_settings()
        assert getattr(loaded, field_name) == getattr(Settings(), field_name)
        assert field_name in caplog.text

    def test_lowercase_log_level_normalized(self):
        settings_module.SETTINGS_PATH.write_text(
            json.dumps({"log_level": "debug"}), encoding="utf-8",
        )
        assert load_settings().log_level == "DEBUG"

    def test_bad_log_level_still_configures_logger(self):
        settings_module.SETTINGS_PATH.write_text(
            json.dumps({"log_level": "LOUD"}), encoding="utf-8",
        )
        loaded = load_settings()
        log = get_logger("stepstimer-test-loaded", loaded.log_level, console=False)
        assert log.level == logging.INFO

    @pytest.mark.usefixtures("qapp")
    def test_bad_window_size_still_builds_window(self, engine):
        from stepstimer.app import StepsTimerWindow

        settings_module.SETTINGS_PATH.write_text(
            json.dumps({"window_width": "wide", "window_height": 300}),
            encoding="utf-8",
        )
        loaded = load_settings()
        assert loaded.window_width == Settings().window_width
        assert loaded.window_height == 300
        win = StepsTimerWindow(engine, loaded)
        assert win.steps_widget.engine is engine


# ═══════════════════════════════════════════════════════════════════════
#  LOGGER
# ═══════════════════════════════════════════════════════════════════════


class TestLogger:
    def test_console_handler_installed_once(self):
        log = get_logger("stepstimer-test-console", logging.DEBUG)
        get_logger("stepstimer-test-console", logging.DEBUG)
        names = [h.get_name() for h in log.handlers]
        assert names.count("stepstimer-test-console:console") == 1
        assert log.level == logging.DEBUG
        assert log.handlers[0].formatter._fmt == LOG_FORMAT

    def test_file_handler_writes(self, tmp_path):
        log = get_logger("stepstimer-test-file", console=False, log_dir=tmp_path)
        log.info("hello file")
        for handler in log.handlers:
            handler.flush()
        text = (tmp_path / "stepstimer-test-file.log").read_text(encoding="utf-8")
        assert "hello file" in text
        assert "INFO" in text
        for handler in list(log.handlers):
            handler.close()
            log.removeHandler(handler)

    def test_string_level_accepted(self):
        log = get_logger("stepstimer-test-level", "WARNING", console=False)
        assert log.level == logging.WARNING
