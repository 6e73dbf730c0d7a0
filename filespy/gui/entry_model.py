# filespy/gui/entry_model.py

from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from filespy.core.filesystem import FilesystemEntry
from .resources import entry_icon


class EntryTableModel(QAbstractTableModel):
    """
    Table model over the folder listing held by the NavigationController.

    It never edits the list itself: the controller hands over a fresh list
    after every recomputation and the model is reset wholesale.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._entries: List[FilesystemEntry] = []
        self._headers = ["Name"]

    def rowCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self._entries)

    def columnCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid():
            return None

        entry = self._entries[index.row()]

        if role == Qt.DisplayRole:
            return entry.name
        if role == Qt.DecorationRole:
            return entry_icon(entry)
        if role == Qt.ToolTipRole:
            return str(entry.path)
        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            return self._headers[section]
        return None

    # --- Custom Public Methods ---

    def set_entries(self, entries: List[FilesystemEntry]):
        self.beginResetModel()
        self._entries = list(entries)
        self.endResetModel()

    def entry_at(self, row: int) -> Optional[FilesystemEntry]:
        if 0 <= row < len(self._entries):
            return self._entries[row]
        return None

    def row_of(self, path: Path) -> int:
        """Row index of the entry at `path`, or -1 if it is not listed."""
        for row, entry in enumerate(self._entries):
            if entry.path == path:
                return row
        return -1
