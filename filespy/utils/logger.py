# filespy/utils/logger.py

import logging
import logging.handlers
from pathlib import Path

from filespy.core.paths import log_file_path


class LoggerManager:
    """
    Configures the application-wide logging system.

    Two handlers are attached to the root logger:
    1. Console Handler: short, INFO-and-above messages for whoever launched
       the app from a terminal.
    2. Rotating File Handler: DEBUG-and-above with module and line details,
       written to filespy.log inside the support directory.
    """

    def __init__(self, log_file: Path | None = None, log_level=logging.DEBUG):
        """
        Args:
            log_file: Where to write the log. Defaults to the support directory.
            log_level: The base logging level to capture (e.g., DEBUG, INFO).
        """
        self.log_file_path = log_file if log_file is not None else log_file_path()
        self.log_level = log_level
        self.root_logger = logging.getLogger()

    def setup(self):
        """Attaches the handlers to the root logger, once."""
        # Calling setup twice must not duplicate every log line.
        if self.root_logger.hasHandlers():
            return

        self.root_logger.setLevel(self.log_level)
        self.root_logger.addHandler(self._create_console_handler())

        try:
            self.root_logger.addHandler(self._create_file_handler())
        except OSError as e:
            logging.warning(f"File logging disabled, cannot open '{self.log_file_path}': {e}")

        logging.info("Logging configured successfully.")

    def _create_console_handler(self) -> logging.StreamHandler:
        """Creates a handler for logging messages to the console."""
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        formatter = logging.Formatter(
            '%(asctime)s - [%(levelname)s] - %(message)s',
            datefmt='%H:%M:%S'
        )
        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self) -> logging.handlers.RotatingFileHandler:
        """Creates a rotating file handler for persistent logging."""
        handler = logging.handlers.RotatingFileHandler(
            self.log_file_path, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(message)s'
        )
        handler.setFormatter(formatter)
        return handler


def setup_logging():
    """Initializes and configures the application-wide logging system."""
    manager = LoggerManager()
    manager.setup()
