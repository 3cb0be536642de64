"""Shared pytest fixtures for StepsTimer tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from stepstimer.timer.engine import StepsTimer

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def clock():
    """Fake millisecond clock starting at 2023-01-01T00:00:00Z."""
    return FakeClock(1_672_531_200_000)


@pytest.fixture
def engine(qapp, clock):
    """Fresh StepsTimer driven by the fake clock."""
    timer = StepsTimer(parent=None, clock=clock)
    yield timer
    timer.shutdown()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real settings file."""
    monkeypatch.setattr("stepstimer.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr("stepstimer.settings.SETTINGS_PATH", tmp_path / "settings.json")
    yield
