"""Main application window for StepsTimer."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QMainWindow, QWidget, QVBoxLayout

from .timer.engine import StepsTimer, RunState
from .timer.provider import use_steps_timer
from .ui.steps_widget import StepsTimerWidget
from .settings import Settings, load_settings, save_settings


class StepsTimerWindow(QMainWindow):
    """Hosts a StepsTimerWidget.

    Space toggles start/pause/resume, Escape stops all steps.
    """

    def __init__(
        self,
        engine: StepsTimer | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings if settings is not None else load_settings()
        self._engine = engine if engine is not None else use_steps_timer()

        self.setWindowTitle("Steps Timer")
        self.resize(self._settings.window_width, self._settings.window_height)
        if self._settings.always_on_top:
            self.setWindowFlags(self.windowFlags() | Qt.WindowType.WindowStaysOnTopHint)

        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)

        self._steps_widget = StepsTimerWidget(
            self._engine, self._settings.demo_step_ids, central,
        )
        layout.addWidget(self._steps_widget)

    @property
    def steps_widget(self) -> StepsTimerWidget:
        return self._steps_widget

    # ── keyboard ──────────────────────────────────────────────────────────

    def _on_space(self) -> None:
        state = self._engine.state
        if state == RunState.RUNNING:
            self._engine.pause()
        elif state == RunState.PAUSED:
            self._engine.resume()
        else:
            self._engine.start()

    def _on_escape(self) -> None:
        self._engine.stop()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._on_escape()
            event.accept()
            return
        super().keyPressEvent(event)

    # ── window events ─────────────────────────────────────────────────────

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Remember the window size, then let the provider release the engine."""
        size = self.size()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        save_settings(self._settings)
        event.accept()
