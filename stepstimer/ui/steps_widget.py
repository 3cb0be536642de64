"""Steps timer card: total clock, controls and step lists.

Layout (top → bottom):
    - Total elapsed + RUNNING / PAUSED caption
    - Session controls (Start, Pause, Resume, Stop, Reset)
    - One start/end button pair per step id
    - Active steps, then completed steps
"""

from __future__ import annotations

from typing import Iterable

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QPlainTextEdit, QFrame,
)

from ..timer.engine import StepsTimer, RunState, CompletedStep
from ..timer.provider import use_steps_timer


STATE_LABELS: dict[RunState, str] = {
    RunState.IDLE:    "READY",
    RunState.RUNNING: "RUNNING",
    RunState.PAUSED:  "PAUSED",
}


def format_duration(ms: int) -> str:
    """Render milliseconds as ``M:SS.t`` (or ``H:MM:SS.t`` past an hour)."""
    ms = max(0, int(ms))
    tenths = (ms // 100) % 10
    hours, rem = divmod(ms // 1000, 3600)
    minutes, seconds = divmod(rem, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}.{tenths}"
    return f"{minutes}:{seconds:02d}.{tenths}"


class StepsTimerWidget(QWidget):
    """Renders a StepsTimer and forwards button clicks to it.

    With no ``engine`` the widget binds to the one installed by the
    enclosing ``StepsTimerProvider``.
    """

    def __init__(
        self,
        engine: StepsTimer | None = None,
        step_ids: Iterable[str] = ("A", "B"),
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine if engine is not None else use_steps_timer()
        self._step_ids: list[str] = list(dict.fromkeys(step_ids))
        self._step_buttons: dict[str, tuple[QPushButton, QPushButton]] = {}
        self._build_ui()
        self._connect_signals()

        self._on_total_changed(self._engine.total_time)
        self._on_active_steps_changed(self._engine.active_steps)
        self._on_step_times_changed(self._engine.step_times)
        self._on_state_changed(self._engine.state)

    @property
    def engine(self) -> StepsTimer:
        return self._engine

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(10)

        # ── total clock ──────────────────────────────────────────────
        self._total_label = QLabel(format_duration(0), card)
        self._total_label.setObjectName("totalLabel")
        self._total_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._total_label)

        self._state_label = QLabel(STATE_LABELS[RunState.IDLE], card)
        self._state_label.setObjectName("stateLabel")
        self._state_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._state_label)

        # ── session controls ─────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(8)
        self._start_btn = QPushButton("Start", card)
        self._pause_btn = QPushButton("Pause", card)
        self._resume_btn = QPushButton("Resume", card)
        self._stop_btn = QPushButton("Stop All Steps", card)
        self._reset_btn = QPushButton("Reset", card)
        for btn in (
            self._start_btn, self._pause_btn, self._resume_btn,
            self._stop_btn, self._reset_btn,
        ):
            btn_row.addWidget(btn)
        layout.addLayout(btn_row)

        # ── step controls ────────────────────────────────────────────
        grid = QGridLayout()
        grid.setSpacing(8)
        for row, step_id in enumerate(self._step_ids):
            start_btn = QPushButton(f"Start Step {step_id}", card)
            end_btn = QPushButton(f"End Step {step_id}", card)
            grid.addWidget(start_btn, row, 0)
            grid.addWidget(end_btn, row, 1)
            self._step_buttons[step_id] = (start_btn, end_btn)
        layout.addLayout(grid)

        # ── step lists ───────────────────────────────────────────────
        layout.addWidget(QLabel("Active Steps", card))
        self._active_view = QPlainTextEdit(card)
        self._active_view.setReadOnly(True)
        layout.addWidget(self._active_view)

        layout.addWidget(QLabel("Completed Steps", card))
        self._completed_view = QPlainTextEdit(card)
        self._completed_view.setReadOnly(True)
        layout.addWidget(self._completed_view)

    def _connect_signals(self) -> None:
        engine = self._engine
        self._start_btn.clicked.connect(engine.start)
        self._pause_btn.clicked.connect(engine.pause)
        self._resume_btn.clicked.connect(engine.resume)
        self._stop_btn.clicked.connect(engine.stop)
        self._reset_btn.clicked.connect(engine.reset)
        for step_id, (start_btn, end_btn) in self._step_buttons.items():
            start_btn.clicked.connect(
                lambda _checked=False, s=step_id: engine.start_step(s)
            )
            end_btn.clicked.connect(
                lambda _checked=False, s=step_id: engine.end_step(s)
            )

        engine.total_time_changed.connect(self._on_total_changed)
        engine.state_changed.connect(self._on_state_changed)
        engine.active_steps_changed.connect(self._on_active_steps_changed)
        engine.step_times_changed.connect(self._on_step_times_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_total_changed(self, total_ms: int) -> None:
        self._total_label.setText(format_duration(total_ms))

    def _on_state_changed(self, state: RunState) -> None:
        self._state_label.setText(STATE_LABELS[state])
        running = state == RunState.RUNNING
        self._pause_btn.setEnabled(running)
        self._resume_btn.setEnabled(state == RunState.PAUSED)
        self._stop_btn.setEnabled(state != RunState.IDLE)
        for start_btn, _end_btn in self._step_buttons.values():
            start_btn.setEnabled(running)

    def _on_active_steps_changed(self, steps: dict[str, int]) -> None:
        self._active_view.setPlainText("\n".join(
            f"{step_id}  {format_duration(ms)}" for step_id, ms in steps.items()
        ))

    def _on_step_times_changed(self, records: list[CompletedStep]) -> None:
        self._completed_view.setPlainText("\n".join(
            f"{r.id}  {format_duration(r.duration)}" for r in records
        ))
