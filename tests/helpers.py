"""Shared test helpers for StepsTimer."""

from stepstimer.timer.engine import StepsTimer


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def advance(engine: StepsTimer, clock: FakeClock, ms: int) -> None:
    """Move ``clock`` forward by ``ms``, firing a tick at every full
    interval while the engine's Qt timer is armed."""
    interval = engine.tick_interval_ms
    remaining = ms
    while remaining > 0:
        delta = min(interval, remaining)
        clock.advance(delta)
        remaining -= delta
        if delta == interval and engine._qt_timer.isActive():
            engine._on_tick()
