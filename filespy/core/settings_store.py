# filespy/core/settings_store.py

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

from .report import write_text_atomically

logger = logging.getLogger(__name__)


class SettingsStore(ABC):
    """A small process-wide key/value preference store."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any):
        pass


class MemorySettingsStore(SettingsStore):
    """Keeps preferences in a dict. Used by tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, Any] | None = None):
        self._values = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any):
        self._values[key] = value


class JsonSettingsStore(SettingsStore):
    """
    Preferences persisted as a flat JSON object (settings.json).

    Every `set` is a read-modify-write of the whole file, so the last writer
    wins. A missing or corrupt file reads as empty.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        try:
            if self.path.exists():
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.warning(f"Ignoring settings file with unexpected content: {self.path}")
        except (IOError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read settings file '{self.path}': {e}")
        return {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any):
        settings = self._read_all()
        settings[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            write_text_atomically(self.path, json.dumps(settings, indent=2))
            logger.debug(f"Saved setting '{key}' to: {self.path}")
        except OSError as e:
            logger.error(f"Could not write to settings file at '{self.path}': {e}")
