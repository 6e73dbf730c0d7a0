# filespy/core/session_store.py

import logging
from pathlib import Path
from typing import Optional, Tuple

from .errors import FailureReason, SessionRecordMissing
from .filesystem import FilesystemEntry
from .report import write_text_atomically

logger = logging.getLogger(__name__)


class SessionStateStore:
    """
    Remembers which folder was open and which entry was selected.

    The record is two lines of text, "<folder>\\n<selection>\\n", with an
    empty line for a missing value. It is overwritten as a whole every time.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, folder: Optional[Path], selection: Optional[FilesystemEntry]):
        """Writes the record. Failures are logged and otherwise ignored."""
        folder_line = self._line_for(folder, "folder")
        selection_line = self._line_for(selection.path if selection is not None else None, "selection")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            write_text_atomically(self.path, f"{folder_line}\n{selection_line}\n")
            logger.debug(f"Session saved to '{self.path}': folder='{folder_line}', selection='{selection_line}'")
        except OSError as e:
            logger.warning(f"Could not save session state to '{self.path}': {e}")

    @staticmethod
    def _line_for(path: Optional[Path], label: str) -> str:
        # One path per line: a name containing a newline cannot be stored.
        if path is None:
            return ""
        line = str(path)
        if "\n" in line:
            logger.warning(f"Not remembering {label} '{line!r}': the session record cannot hold a newline.")
            return ""
        return line

    def load(self) -> Tuple[str, str]:
        """
        Returns the (folder, selection) lines of the record.

        Raises:
            SessionRecordMissing: The record does not exist, cannot be read,
                or does not hold two lines.
        """
        try:
            stored = self.path.read_text(encoding='utf-8')
        except FileNotFoundError as e:
            raise SessionRecordMissing(self.path, FailureReason.NOT_FOUND) from e
        except (OSError, UnicodeDecodeError) as e:
            raise SessionRecordMissing(self.path, FailureReason.UNREADABLE) from e

        lines = stored.split("\n")
        if len(lines) < 2:
            raise SessionRecordMissing(self.path, FailureReason.UNREADABLE)
        return lines[0], lines[1]
