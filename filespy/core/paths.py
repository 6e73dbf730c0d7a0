# filespy/core/paths.py

import logging
import os
from pathlib import Path

from PySide6.QtCore import QStandardPaths

logger = logging.getLogger(__name__)

APP_NAME = "FileSpy"
# Overrides the support directory, mainly for tests and the CLI's --home option.
HOME_ENV_VAR = "FILESPY_HOME"

SESSION_FILE_NAME = "StoredState.txt"
SETTINGS_FILE_NAME = "settings.json"
LOG_FILE_NAME = "filespy.log"


def support_dir() -> Path:
    """
    Returns the application's private support directory, creating it on demand.

    This lives under the platform's generic data location, e.g.
    ~/Library/Application Support/FileSpy on macOS or ~/.local/share/FileSpy
    on Linux.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        folder = Path(override).expanduser()
    else:
        base = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.GenericDataLocation)
        folder = Path(base or Path.home()) / APP_NAME

    if not folder.is_dir():
        try:
            folder.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created support directory at: {folder}")
        except OSError as e:
            logger.error(f"Could not create support directory '{folder}': {e}")
    return folder


def session_file_path() -> Path:
    return support_dir() / SESSION_FILE_NAME


def settings_file_path() -> Path:
    return support_dir() / SETTINGS_FILE_NAME


def log_file_path() -> Path:
    return support_dir() / LOG_FILE_NAME
