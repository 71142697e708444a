"""Allow running Pushover Notifier as a module: python -m pushnotifier."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import NotifierWindow
from .settings import APP_DIR, APP_NAME


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_PATH = APP_DIR / "notifier.log"


def configure_logging(level: int = logging.INFO) -> None:
    """Log to stderr and to ``notifier.log`` in the app-data directory."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    try:
        APP_DIR.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(LOG_PATH, encoding="utf-8"))
    except OSError as exc:
        print(f"File logging disabled: {exc}", file=sys.stderr)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


def main() -> None:
    configure_logging()
    logging.getLogger(__name__).info("Pushover Notifier starting")

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_NAME)

    window = NotifierWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
