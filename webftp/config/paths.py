"""Filesystem locations used by webftp.

Settings and logs share one data directory. WEBFTP_HOME overrides
it; otherwise a per-user platform directory is used.
"""

import os
import sys
from pathlib import Path


APP_NAME = "webftp"

# Environment variable that pins the data directory
HOME_ENV = "WEBFTP_HOME"

SETTINGS_FILE = "settings.json"
LOG_FILE = "webftp.log"


def _platform_config_root() -> Path:
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def get_app_data_dir() -> Path:
    """
    Get the data directory, creating it if needed.

    Returns:
        $WEBFTP_HOME if set, else webftp/ under %APPDATA%,
        ~/Library/Application Support or $XDG_CONFIG_HOME
    """
    override = os.environ.get(HOME_ENV)
    app_dir = Path(override) if override else _platform_config_root() / APP_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_settings_path() -> Path:
    return get_app_data_dir() / SETTINGS_FILE


def get_log_dir() -> Path:
    """Directory for log files, created if needed."""
    log_dir = get_app_data_dir() / "logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir


def get_log_file_path() -> Path:
    return get_log_dir() / LOG_FILE
