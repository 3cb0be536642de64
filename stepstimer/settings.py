"""Application settings with JSON persistence.

Settings are stored at:
    ~/.stepstimer/settings.json

Usage::

    settings = load_settings()
    settings.tick_interval_ms = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path

from .timer.engine import DEFAULT_TICK_INTERVAL_MS

log = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / ".stepstimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    demo_step_ids: list[str] = field(default_factory=lambda: ["A", "B"])

    # ── window ────────────────────────────────────────────────────────
    window_width: int = 480
    window_height: int = 560
    always_on_top: bool = False

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_to_file: bool = False


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_level_name(value) -> bool:
    return isinstance(value, str) and isinstance(logging.getLevelName(value.upper()), int)


_VALIDATORS = {
    "tick_interval_ms": _is_positive_int,
    "window_width": _is_positive_int,
    "window_height": _is_positive_int,
    "always_on_top": lambda v: isinstance(v, bool),
    "log_to_file": lambda v: isinstance(v, bool),
    "log_level": _is_level_name,
    "demo_step_ids": lambda v: isinstance(v, list),
}


def _sanitize(settings: Settings) -> Settings:
    """Reset every malformed field to its default, with a warning."""
    defaults = Settings()
    for name, is_valid in _VALIDATORS.items():
        value = getattr(settings, name)
        if not is_valid(value):
            log.warning("Ignoring invalid %s %r", name, value)
            setattr(settings, name, getattr(defaults, name))

    settings.log_level = settings.log_level.upper()
    # Duplicate ids would share one pair of demo buttons
    settings.demo_step_ids = list(dict.fromkeys(str(s) for s in settings.demo_step_ids))
    return settings


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return _sanitize(Settings(**filtered))
    except (OSError, ValueError, TypeError, AttributeError):
        log.warning(
            "Could not read settings from '%s', using defaults",
            SETTINGS_PATH, exc_info=True,
        )
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
