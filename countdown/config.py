import logging
import os
import platform
from pathlib import Path
from typing import Optional

APP_NAME = "countdown"
EVENTS_FILE_NAME = "events.json"
DEBUG_LOG_NAME = "debug.log"

CONFIG_DIR_ENV = "COUNTDOWN_CONFIG_DIR"
DEBUG_ENV = "COUNTDOWN_DEBUG"

TICK_INTERVAL = 1.0
FRAME_DELAY = 1.0 / 24.0


def get_config_base() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    system = platform.system().lower()
    if system == "darwin":
        return Path.home() / "Library" / "Application Support"
    if system == "windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


def get_config_dir() -> Path:
    return get_config_base() / APP_NAME


def get_events_path() -> Path:
    return get_config_dir() / EVENTS_FILE_NAME


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV) == "1"


def setup_logging(path: Optional[Path] = None) -> Optional[logging.Handler]:
    """Send package logs to a file when COUNTDOWN_DEBUG=1.

    curses owns the terminal, so nothing is ever written to stderr.
    """
    if not debug_enabled():
        return None
    if path is None:
        path = get_config_dir() / DEBUG_LOG_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return handler
