"""Scoped access to a StepsTimer.

Wrap consumers in a provider; anything inside the ``with`` block (Qt
slots included, since they run on the same thread) can reach the engine
through ``use_steps_timer()``::

    with StepsTimerProvider() as timer:
        window = StepsTimerWindow()
        app.exec()

Providers nest.  The innermost one wins and the outer engine is
restored on exit.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token

from .engine import StepsTimer

log = logging.getLogger(__name__)

_current: ContextVar[StepsTimer | None] = ContextVar(
    "stepstimer_current", default=None,
)


class StepsTimerUsageError(RuntimeError):
    """Raised when the timer API is used without a provider in scope."""


class StepsTimerProvider:
    """Install a StepsTimer as the current engine for a block.

    Pass an existing ``engine`` to share it, or keyword arguments to have
    the provider build (and later shut down) its own.
    """

    def __init__(self, engine: StepsTimer | None = None, **engine_kwargs) -> None:
        if engine is not None and engine_kwargs:
            raise TypeError("pass either an engine or engine kwargs, not both")
        self._engine = engine
        self._engine_kwargs = engine_kwargs
        self._owns_engine = engine is None
        self._token: Token | None = None

    @property
    def engine(self) -> StepsTimer | None:
        return self._engine

    def __enter__(self) -> StepsTimer:
        if self._token is not None:
            raise StepsTimerUsageError("StepsTimerProvider is not re-entrant")
        if self._engine is None:
            self._engine = StepsTimer(**self._engine_kwargs)
        self._token = _current.set(self._engine)
        return self._engine

    def __exit__(self, exc_type, exc, tb) -> None:
        _current.reset(self._token)
        self._token = None
        if self._owns_engine and self._engine is not None:
            self._engine.shutdown()
            log.debug("Provider released its engine")


def use_steps_timer() -> StepsTimer:
    """Return the engine installed by the innermost StepsTimerProvider."""
    engine = _current.get()
    if engine is None:
        raise StepsTimerUsageError(
            "use_steps_timer must be used within a StepsTimerProvider"
        )
    return engine
