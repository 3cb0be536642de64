"""Session/step timer state machine for StepsTimer.

States
------
IDLE      Nothing timed yet (or just reset).
RUNNING   Session clock advancing; active steps advance with it.
PAUSED    Session clock frozen; every active step frozen with it.

Transitions
-----------
IDLE | PAUSED → RUNNING      (start; wipes previous session data)
RUNNING → RUNNING           (start; no-op)
RUNNING → PAUSED            (pause)
PAUSED → RUNNING            (resume)
RUNNING | PAUSED → PAUSED   (stop; ends every active step)
Any → IDLE                  (reset)

Elapsed values are integer milliseconds read from an injectable
monotonic clock.  Steps have no pause control of their own: a pause
freezes all of them and the matching resume unfreezes all of them.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

log = logging.getLogger(__name__)


# ── enums / records ───────────────────────────────────────────────────────


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class CompletedStep:
    """A finished step.  ``start`` is the step's original start time."""

    id: str
    start: int
    end: int
    duration: int


@dataclass
class _StepEntry:
    original_start: int
    start_epoch: int | None  # None while frozen
    offset: int = 0

    def elapsed(self, now: int) -> int:
        if self.start_epoch is None:
            return self.offset
        return self.offset + (now - self.start_epoch)

    def freeze(self, now: int) -> None:
        if self.start_epoch is not None:
            self.offset += now - self.start_epoch
            self.start_epoch = None


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_TICK_INTERVAL_MS = 100


def monotonic_ms() -> int:
    """Default time source: monotonic clock in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000


# ── engine ────────────────────────────────────────────────────────────────


class StepsTimer(QObject):
    """Qt-based session timer with named, overlapping steps.

    Signals
    -------
    total_time_changed(total_ms: int)
        Emitted on every tick while running, and whenever a command
        changes the published total.
    running_changed(running: bool)
        Emitted when the engine enters or leaves RUNNING.
    state_changed(new_state: RunState)
        Emitted on every state transition.
    active_steps_changed(steps: dict)
        ``{step_id: elapsed_ms}`` for every active step.  Ticks only emit
        it when some value differs from the last published map.
    step_times_changed(records: list)
        The full list of ``CompletedStep`` records, in completion order.
    step_started(step_id: str)
    step_ended(record: CompletedStep)

    Emitted containers are copies; mutating them does not affect the
    engine.
    """

    total_time_changed = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    state_changed = pyqtSignal(object)
    active_steps_changed = pyqtSignal(object)
    step_times_changed = pyqtSignal(object)
    step_started = pyqtSignal(str)
    step_ended = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Callable[[], int] | None = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)

        if not isinstance(tick_interval_ms, int) or tick_interval_ms <= 0:
            raise ValueError(
                f"tick_interval_ms must be a positive integer, got {tick_interval_ms!r}"
            )

        self._clock: Callable[[], int] = clock if clock is not None else monotonic_ms
        self._tick_interval_ms: int = tick_interval_ms

        # ── session clock ─────────────────────────────────────────────
        self._state: RunState = RunState.IDLE
        self._start_epoch: int | None = None
        self._offset: int = 0

        # ── step registry ─────────────────────────────────────────────
        self._entries: dict[str, _StepEntry] = {}
        self._completed: list[CompletedStep] = []

        # ── last published snapshot ───────────────────────────────────
        self._total_time: int = 0
        self._active_steps: dict[str, int] = {}

        # ── Qt timer (child object: dies with the engine) ─────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(tick_interval_ms)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state == RunState.RUNNING

    @property
    def total_time(self) -> int:
        """Session elapsed (ms) as of the last publish."""
        return self._total_time

    @property
    def active_steps(self) -> dict[str, int]:
        """Active step elapsed values (ms) as of the last publish."""
        return dict(self._active_steps)

    @property
    def step_times(self) -> list[CompletedStep]:
        return list(self._completed)

    @property
    def tick_interval_ms(self) -> int:
        return self._tick_interval_ms

    def elapsed(self) -> int:
        """Live session elapsed in ms, independent of the tick cadence."""
        if self._state == RunState.RUNNING and self._start_epoch is not None:
            return self._offset + (self._clock() - self._start_epoch)
        return self._offset

    def step_elapsed(self, step_id: str) -> int | None:
        """Live elapsed of an active step, or ``None`` if it isn't active."""
        entry = self._entries.get(step_id)
        if entry is None:
            return None
        return entry.elapsed(self._clock())

    # ══════════════════════════════════════════════════════════════════
    #  SESSION CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start a fresh session from zero.  No-op while running."""
        if self._state == RunState.RUNNING:
            log.debug("start() ignored: already running")
            return

        self._disarm()
        self._offset = 0
        self._entries.clear()
        had_records = bool(self._completed)
        self._completed.clear()
        self._start_epoch = self._clock()

        self._publish_total(0)
        self._publish_active_steps({})
        if had_records:
            self.step_times_changed.emit([])

        self._set_state(RunState.RUNNING)
        self._arm()

    def pause(self) -> None:
        """Freeze the session and every active step."""
        if self._state != RunState.RUNNING:
            log.debug("pause() ignored: state is %s", self._state.value)
            return

        self._disarm()
        now = self._clock()
        if self._start_epoch is not None:
            self._offset += now - self._start_epoch
            self._start_epoch = None
        for entry in self._entries.values():
            entry.freeze(now)

        self._set_state(RunState.PAUSED)
        self._publish_total(self._offset)
        self._publish_active_steps(self._snapshot_steps(now))

    def resume(self) -> None:
        """Continue the session and every step frozen by the last pause."""
        if self._state != RunState.PAUSED:
            log.debug("resume() ignored: state is %s", self._state.value)
            return

        now = self._clock()
        self._start_epoch = now
        for entry in self._entries.values():
            if entry.start_epoch is None:
                entry.start_epoch = now

        self._set_state(RunState.RUNNING)
        self._arm()

    def stop(self) -> None:
        """Pause, then end every active step (recording each one)."""
        self.pause()
        for step_id in list(self._entries):
            self.end_step(step_id)

    def reset(self) -> None:
        """Discard everything and return to IDLE.  Valid from any state."""
        self._disarm()
        self._start_epoch = None
        self._offset = 0
        self._entries.clear()
        had_records = bool(self._completed)
        self._completed.clear()

        self._set_state(RunState.IDLE)
        self._publish_total(0)
        self._publish_active_steps({})
        if had_records:
            self.step_times_changed.emit([])

    # ══════════════════════════════════════════════════════════════════
    #  STEP CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start_step(self, step_id: str) -> None:
        """Begin timing ``step_id``.  Only while running; ignores duplicates."""
        if self._state != RunState.RUNNING:
            log.debug("start_step(%r) ignored: not running", step_id)
            return
        if step_id in self._entries:
            log.debug("start_step(%r) ignored: already active", step_id)
            return

        now = self._clock()
        self._entries[step_id] = _StepEntry(original_start=now, start_epoch=now)

        updated = dict(self._active_steps)
        updated[step_id] = 0
        self._publish_active_steps(updated)
        self.step_started.emit(step_id)

    def end_step(self, step_id: str) -> None:
        """Finish ``step_id`` and append its record.  Unknown ids are ignored."""
        entry = self._entries.pop(step_id, None)
        if entry is None:
            log.debug("end_step(%r) ignored: not active", step_id)
            return

        now = self._clock()
        record = CompletedStep(
            id=step_id,
            start=entry.original_start,
            end=now,
            duration=entry.elapsed(now),
        )
        self._completed.append(record)
        log.debug("Step %r ended after %d ms", step_id, record.duration)

        updated = dict(self._active_steps)
        updated.pop(step_id, None)
        self._publish_active_steps(updated)
        self.step_times_changed.emit(list(self._completed))
        self.step_ended.emit(record)

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def shutdown(self) -> None:
        """Stop the background tick.  Call when the owner is done with us."""
        self._disarm()

    def __enter__(self) -> StepsTimer:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if self._state != RunState.RUNNING or self._start_epoch is None:
            return

        now = self._clock()
        self._publish_total(self._offset + (now - self._start_epoch), force=True)
        self._publish_active_steps(self._snapshot_steps(now))

    def _snapshot_steps(self, now: int) -> dict[str, int]:
        return {
            step_id: entry.elapsed(now)
            for step_id, entry in self._entries.items()
        }

    def _publish_total(self, value: int, *, force: bool = False) -> None:
        if value == self._total_time and not force:
            return
        self._total_time = value
        self.total_time_changed.emit(value)

    def _publish_active_steps(self, steps: dict[str, int]) -> None:
        if steps == self._active_steps:
            return
        self._active_steps = steps
        self.active_steps_changed.emit(dict(steps))

    def _arm(self) -> None:
        self._qt_timer.start()

    def _disarm(self) -> None:
        if self._qt_timer.isActive():
            self._qt_timer.stop()

    def _set_state(self, new_state: RunState) -> None:
        old_state = self._state
        if new_state == old_state:
            return
        self._state = new_state
        log.debug("State %s -> %s", old_state.value, new_state.value)
        self.state_changed.emit(new_state)
        if (old_state == RunState.RUNNING) != (new_state == RunState.RUNNING):
            self.running_changed.emit(new_state == RunState.RUNNING)
