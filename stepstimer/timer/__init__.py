"""Timer package."""

from .engine import (
    StepsTimer,
    RunState,
    CompletedStep,
    DEFAULT_TICK_INTERVAL_MS,
    monotonic_ms,
)
from .provider import (
    StepsTimerProvider,
    StepsTimerUsageError,
    use_steps_timer,
)

__all__ = [
    "StepsTimer",
    "RunState",
    "CompletedStep",
    "DEFAULT_TICK_INTERVAL_MS",
    "monotonic_ms",
    "StepsTimerProvider",
    "StepsTimerUsageError",
    "use_steps_timer",
]
