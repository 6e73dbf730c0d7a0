# filespy/core/navigation.py

import logging
from pathlib import Path
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from .bookmark_store import BookmarkStore
from .errors import BookmarkUnresolvable, DirectoryUnreadable, ExportWriteFailed, SessionRecordMissing
from .filesystem import DEFAULT_ACCESS, FilesystemEntry, ScopedAccess, scan_directory
from .paths import APP_NAME, session_file_path, settings_file_path
from .report import describe, export_report
from .session_store import SessionStateStore
from .settings_store import JsonSettingsStore, SettingsStore

logger = logging.getLogger(__name__)


class PostRenderQueue:
    """
    Callbacks to run once the display has finished its current render pass.

    The display drains the queue after it has rebuilt its rows, so anything
    queued here sees the new rows but runs before the next user input.
    """

    def __init__(self):
        self._callbacks: List[Callable[[], None]] = []

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def enqueue(self, callback: Callable[[], None]):
        self._callbacks.append(callback)

    def clear(self):
        self._callbacks = []

    def drain(self):
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()


def _is_within(folder: Path, root: Path) -> bool:
    folder = folder.resolve()
    return folder == root or root in folder.parents


class NavigationController(QObject):
    """
    The non-visual brain of the browser window.

    It owns the current folder, the entries listed in it, the selected entry
    and the hidden-file flag, and is the only thing allowed to change them.
    Every change is finished before any signal is emitted, so a slot never
    sees a selection that is not part of the current entry list.
    """
    folder_changed = Signal(object)
    entries_changed = Signal()
    selection_changed = Signal(object)
    status_updated = Signal(str, bool)

    def __init__(self, settings: SettingsStore, session_store: SessionStateStore,
                 access: ScopedAccess = DEFAULT_ACCESS, render_queue: PostRenderQueue | None = None,
                 parent: QObject | None = None):
        super().__init__(parent)
        self.settings = settings
        self.bookmark_store = BookmarkStore(settings)
        self.session_store = session_store
        self.access = access
        self.render_queue = render_queue if render_queue is not None else PostRenderQueue()

        self._current_folder: Optional[Path] = None
        self._selected_entry: Optional[FilesystemEntry] = None
        self._show_hidden = False
        self._entries: List[FilesystemEntry] = []

    @classmethod
    def with_default_stores(cls, parent: QObject | None = None) -> "NavigationController":
        """Builds a controller backed by the files in the support directory."""
        return cls(JsonSettingsStore(settings_file_path()), SessionStateStore(session_file_path()), parent=parent)

    # --- Read-only state ---

    @property
    def current_folder(self) -> Optional[Path]:
        return self._current_folder

    @property
    def selected_entry(self) -> Optional[FilesystemEntry]:
        return self._selected_entry

    @property
    def show_hidden(self) -> bool:
        return self._show_hidden

    @property
    def entries(self) -> List[FilesystemEntry]:
        return list(self._entries)

    @property
    def can_navigate_up(self) -> bool:
        return self._current_folder is not None

    @property
    def can_export(self) -> bool:
        return self._selected_entry is not None

    @property
    def window_title(self) -> str:
        return str(self._current_folder) if self._current_folder is not None else APP_NAME

    # --- Navigation ---

    def _load_entries(self) -> Optional[str]:
        """Recomputes the entry list; returns an error message if the read failed."""
        if self._current_folder is None:
            self._entries = []
            return None
        try:
            self._entries = scan_directory(self._current_folder, self._show_hidden, self.access)
        except DirectoryUnreadable as e:
            logger.warning(f"{e} ({e.reason.name})")
            self._entries = []
            return f"Could not read the contents of {self._current_folder}"
        return None

    def set_folder(self, path: Path | None) -> bool:
        """
        Makes `path` the current folder, or clears it when `path` is None.

        Returns False, leaving everything untouched, if `path` names an
        existing item that is not a folder.
        """
        if path is not None:
            path = Path(path).absolute()
            if path.exists() and not path.is_dir():
                logger.warning(f"Refusing to open '{path}': not a directory.")
                return False

        # A queued selection belongs to the folder being left.
        self.render_queue.clear()
        self._selected_entry = None
        self._current_folder = path
        error = self._load_entries()

        logger.info(f"Current folder: {path if path is not None else '(none)'}")
        self.entries_changed.emit()
        self.folder_changed.emit(path)
        self.selection_changed.emit(None)
        if error:
            self.status_updated.emit(error, True)
        return True

    def set_selection(self, entry: FilesystemEntry | None):
        """Selects one of the listed entries, or clears the selection."""
        if entry is not None and entry not in self._entries:
            raise ValueError(f"'{entry.path}' is not listed in the current folder.")
        self._selected_entry = entry
        self.selection_changed.emit(entry)

    def select_path(self, path: Path) -> bool:
        """Selects the listed entry at `path`; False if it is not listed."""
        path = Path(path)
        for entry in self._entries:
            if entry.path == path:
                self.set_selection(entry)
                return True
        return False

    def toggle_show_hidden(self, show: bool):
        self._show_hidden = bool(show)
        if self._current_folder is None:
            return

        self.render_queue.clear()
        self._selected_entry = None
        error = self._load_entries()

        self.entries_changed.emit()
        self.selection_changed.emit(None)
        if error:
            self.status_updated.emit(error, True)

    def navigate_into(self, entry: FilesystemEntry) -> bool:
        if not entry.is_directory:
            return False
        return self.set_folder(entry.path)

    def navigate_up(self) -> bool:
        folder = self._current_folder
        if folder is None or folder.parent == folder:
            return False
        return self.set_folder(folder.parent)

    def choose_folder(self, path: Path) -> bool:
        """An explicit pick from the folder dialog; also bookmarks the folder."""
        if not self.set_folder(path):
            return False
        try:
            self.bookmark_store.create(path)
        except OSError as e:
            logger.error(f"Failed to save bookmark data for '{path}': {e}")
        return True

    # --- Reports ---

    def describe(self, entry: FilesystemEntry) -> str:
        return describe(entry.path)

    def export_selection(self, destination: Path) -> Path:
        """
        Writes the selected entry's report to `destination`.

        Raises:
            ExportWriteFailed: Nothing is selected or the write failed.
        """
        if self._selected_entry is None:
            raise ExportWriteFailed(destination, "No entry is selected.")
        return export_report(self._selected_entry.path, destination)

    # --- Session persistence ---

    def save_session(self):
        self.session_store.save(self._current_folder, self._selected_entry)

    def restore_session(self) -> bool:
        """
        Reopens the folder and selection from the last session.

        The stored bookmark decides which folder is trusted: the recorded
        folder is used when it lies inside the bookmarked one, otherwise the
        bookmarked folder itself. The selection is applied only after the
        display has rendered the restored folder.
        """
        try:
            folder_line, selection_line = self.session_store.load()
        except SessionRecordMissing as e:
            logger.info(f"No prior session to restore: {e}")
            return False

        if not folder_line:
            return False

        folder = Path(folder_line)
        try:
            bookmarked = self.bookmark_store.resolve_stored()
        except BookmarkUnresolvable as e:
            logger.warning(f"Error resolving bookmark: {e}")
            self.set_folder(None)
            return False

        if bookmarked is not None and not _is_within(folder, bookmarked):
            folder = bookmarked

        if not self.set_folder(folder):
            return False

        if selection_line:
            target = Path(selection_line)
            self.render_queue.enqueue(lambda: self._restore_selection(target))
        return True

    def _restore_selection(self, path: Path):
        if not self.select_path(path):
            logger.info(f"Previously selected '{path}' is no longer listed.")
