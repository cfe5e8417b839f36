import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

APP_LOGGER = "posttime_ai"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
NOISY_LOGGERS = ("urllib3", "requests")


def _console_handler() -> logging.Handler:
    # stderr keeps stdout clean for `analyze --json`
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(log_file: str = None, level: str = "INFO") -> logging.Logger:
    """Route posttime_ai logs to a rich stderr console and, optionally, a file.

    Safe to call more than once: later calls only change the level.
    """
    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if not app_logger.handlers:
        app_logger.addHandler(_console_handler())
        if log_file:
            app_logger.addHandler(_file_handler(log_file))

    return app_logger
