"""Allow running StepsTimer as a module: python -m stepstimer."""

import sys

from PyQt6.QtWidgets import QApplication

from .app import StepsTimerWindow
from .logger import get_logger
from .settings import APP_SUPPORT_DIR, load_settings
from .timer.provider import StepsTimerProvider


def main() -> None:
    settings = load_settings()
    log = get_logger(
        level=settings.log_level,
        log_dir=APP_SUPPORT_DIR / "logs" if settings.log_to_file else None,
    )

    app = QApplication(sys.argv)
    app.setApplicationName("StepsTimer")

    with StepsTimerProvider(tick_interval_ms=settings.tick_interval_ms):
        window = StepsTimerWindow(settings=settings)
        window.show()
        log.info("StepsTimer ready")
        code = app.exec()

    sys.exit(code)


if __name__ == "__main__":
    main()
