from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, just_fix_windows_console

DEFAULT_LOG_PATH = os.path.join(tempfile.gettempdir(), "offline-bundle-installer.log")

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_LEVEL_COLORS = {
    logging.DEBUG: Style.DIM,
    logging.INFO: Fore.CYAN,
    SUCCESS: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ConsoleFormatter(logging.Formatter):
    """Message-only console lines, colored by severity."""

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno, "")
        if not color:
            return msg
        return f"{color}{msg}{Style.RESET_ALL}"


def log_success(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(SUCCESS, msg, *args)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    The log file gets the full record (time, level, logger); the console
    only gets the message, colored by level.

    Notes:
    - If the requested log file cannot be opened we fall back to a file in
      the current working directory.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_bundle_installer_configured", False):
        return getattr(logger, "_bundle_installer_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        chosen_path = str(Path.cwd() / "offline-bundle-installer.log")
        file_handler = logging.FileHandler(chosen_path, encoding="utf-8")
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        just_fix_windows_console()
        console = logging.StreamHandler()
        console.setFormatter(ConsoleFormatter("%(message)s"))
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_bundle_installer_configured", True)
    setattr(logger, "_bundle_installer_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
