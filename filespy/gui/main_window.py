# filespy/gui/main_window.py

import logging
import sys
from pathlib import Path

from PySide6.QtCore import Slot, QModelIndex, QTimer, QItemSelection
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QAbstractItemView, QApplication, QCheckBox, QFileDialog, QHBoxLayout, QHeaderView,
    QMainWindow, QMessageBox, QPushButton, QSplitter, QTableView, QVBoxLayout, QWidget
)

from filespy.core.errors import ExportWriteFailed
from filespy.core.navigation import NavigationController
from filespy.core.paths import APP_NAME
from filespy.core.report import default_export_name
from filespy.utils.logger import setup_logging
from .entry_model import EntryTableModel
from .resources import ICON_SIZE, get_icon
from .widgets import DetailPanel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    The browser window: a folder table on the left, the attribute report of
    the selected entry on the right.

    All state lives in the NavigationController; this class forwards user
    events to it and redraws itself from its signals.
    """

    def __init__(self, controller: NavigationController | None = None):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.setWindowIcon(get_icon("app_icon"))
        self.setGeometry(100, 100, 900, 600)

        self.controller = controller if controller is not None else NavigationController.with_default_stores(self)
        # Set while the table selection is being changed from code.
        self._syncing_selection = False

        self._create_widgets()
        self._create_menus()
        self._connect_signals()
        self._connect_controller_signals()
        self._refresh_button_states()

    def _create_widgets(self):
        self.select_folder_button = QPushButton(" Select Folder...")
        self.select_folder_button.setIcon(get_icon("folder-open"))
        self.select_folder_button.setIconSize(ICON_SIZE)

        self.move_up_button = QPushButton(" Move Up")
        self.move_up_button.setIcon(get_icon("move-up"))
        self.move_up_button.setIconSize(ICON_SIZE)

        self.show_hidden_checkbox = QCheckBox("Show Invisibles")

        self.save_info_button = QPushButton(" Save Info...")
        self.save_info_button.setIcon(get_icon("save"))
        self.save_info_button.setIconSize(ICON_SIZE)

        self.entry_model = EntryTableModel(self)
        self.table_view = QTableView()
        self.table_view.setModel(self.entry_model)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table_view.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table_view.setIconSize(ICON_SIZE)
        self.table_view.verticalHeader().setVisible(False)
        self.table_view.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)

        self.detail_panel = DetailPanel()

        button_layout = QHBoxLayout()
        button_layout.addWidget(self.select_folder_button)
        button_layout.addWidget(self.move_up_button)
        button_layout.addWidget(self.show_hidden_checkbox)
        button_layout.addStretch()
        button_layout.addWidget(self.save_info_button)

        splitter = QSplitter()
        splitter.addWidget(self.table_view)
        splitter.addWidget(self.detail_panel)
        splitter.setSizes([350, 550])

        central = QWidget()
        main_layout = QVBoxLayout(central)
        main_layout.addLayout(button_layout)
        main_layout.addWidget(splitter)
        self.setCentralWidget(central)

    def _create_menus(self):
        """File menu mirroring the buttons, with keyboard shortcuts."""
        file_menu = self.menuBar().addMenu("&File")

        self.select_folder_action = QAction(get_icon("folder-open"), "Select Folder...", self)
        self.select_folder_action.setShortcut(QKeySequence.Open)
        self.select_folder_action.triggered.connect(self._on_select_folder_clicked)

        self.move_up_action = QAction(get_icon("move-up"), "Move Up", self)
        self.move_up_action.setShortcut(QKeySequence("Alt+Up"))
        self.move_up_action.triggered.connect(self._on_move_up_clicked)

        self.save_info_action = QAction(get_icon("save"), "Save Info...", self)
        self.save_info_action.setShortcut(QKeySequence.Save)
        self.save_info_action.triggered.connect(self._on_save_info_clicked)

        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.Quit)
        quit_action.triggered.connect(self.close)

        file_menu.addAction(self.select_folder_action)
        file_menu.addAction(self.move_up_action)
        file_menu.addAction(self.save_info_action)
        file_menu.addSeparator()
        file_menu.addAction(quit_action)

    def _connect_signals(self):
        """Connects widget signals to their handler slots."""
        self.select_folder_button.clicked.connect(self._on_select_folder_clicked)
        self.move_up_button.clicked.connect(self._on_move_up_clicked)
        self.save_info_button.clicked.connect(self._on_save_info_clicked)
        self.show_hidden_checkbox.toggled.connect(self.controller.toggle_show_hidden)
        self.table_view.doubleClicked.connect(self._on_row_double_clicked)
        self.table_view.selectionModel().selectionChanged.connect(self._on_table_selection_changed)

    def _connect_controller_signals(self):
        """Connects signals FROM the controller TO this window's slots."""
        self.controller.entries_changed.connect(self._on_entries_changed)
        self.controller.folder_changed.connect(self._on_folder_changed)
        self.controller.selection_changed.connect(self._on_selection_changed)
        self.controller.status_updated.connect(self._on_status_updated)

    def _refresh_button_states(self):
        can_move_up = self.controller.can_navigate_up
        can_export = self.controller.can_export
        self.move_up_button.setEnabled(can_move_up)
        self.move_up_action.setEnabled(can_move_up)
        self.save_info_button.setEnabled(can_export)
        self.save_info_action.setEnabled(can_export)

    # --- Controller -> view ---

    @Slot()
    def _on_entries_changed(self):
        self.entry_model.set_entries(self.controller.entries)
        self.table_view.scrollToTop()
        # Runs after this render pass, before the next user input.
        QTimer.singleShot(0, self.controller.render_queue.drain)

    @Slot(object)
    def _on_folder_changed(self, folder):
        self.setWindowTitle(self.controller.window_title)
        self.statusBar().clearMessage()
        self._refresh_button_states()

    @Slot(object)
    def _on_selection_changed(self, entry):
        self.detail_panel.show_report(self.controller.describe(entry) if entry is not None else "")
        self._refresh_button_states()
        self._select_row_for(entry)

    @Slot(str, bool)
    def _on_status_updated(self, message: str, is_error: bool):
        if is_error:
            logger.warning(message)
        self.statusBar().showMessage(message)

    def _select_row_for(self, entry):
        """Makes the table's highlighted row match the controller's selection."""
        row = self.entry_model.row_of(entry.path) if entry is not None else -1
        current = self.table_view.selectionModel().selectedRows()
        if (row < 0 and not current) or (current and current[0].row() == row):
            return

        self._syncing_selection = True
        try:
            if row < 0:
                self.table_view.clearSelection()
            else:
                self.table_view.selectRow(row)
                self.table_view.scrollTo(self.entry_model.index(row, 0))
        finally:
            self._syncing_selection = False

    # --- View -> controller ---

    @Slot(QItemSelection, QItemSelection)
    def _on_table_selection_changed(self, selected, deselected):
        if self._syncing_selection:
            return
        rows = self.table_view.selectionModel().selectedRows()
        entry = self.entry_model.entry_at(rows[0].row()) if rows else None
        if entry != self.controller.selected_entry:
            self.controller.set_selection(entry)

    @Slot(QModelIndex)
    def _on_row_double_clicked(self, index: QModelIndex):
        entry = self.entry_model.entry_at(index.row())
        if entry is not None:
            self.controller.navigate_into(entry)

    @Slot()
    def _on_select_folder_clicked(self):
        start_dir = self.controller.current_folder or Path.home()
        dir_path = QFileDialog.getExistingDirectory(self, "Select Folder", str(start_dir))
        if dir_path:
            self.controller.choose_folder(Path(dir_path))

    @Slot()
    def _on_move_up_clicked(self):
        self.controller.navigate_up()

    @Slot()
    def _on_save_info_clicked(self):
        entry = self.controller.selected_entry
        if entry is None:
            return

        suggested = Path.home() / default_export_name(entry.path)
        file_path, _ = QFileDialog.getSaveFileName(self, "Save Info", str(suggested), "Text Files (*.txt)")
        if not file_path:
            return

        try:
            self.controller.export_selection(Path(file_path))
        except ExportWriteFailed as e:
            self.show_error_message("Unable to save file", e.description)
            return
        self.statusBar().showMessage(f"Saved info to {file_path}", 5000)

    def show_error_message(self, title: str, message: str):
        """A simple helper for displaying errors."""
        QMessageBox.critical(self, title, message)

    # --- Lifecycle ---

    def showEvent(self, event):
        super().showEvent(event)
        # Spontaneous shows come from the window system (e.g. un-minimizing).
        if not event.spontaneous():
            self.controller.restore_session()

    def closeEvent(self, event):
        """Remembers the folder and selection before the window goes away."""
        self.controller.save_session()
        event.accept()


def run_gui():
    """Entry point for the GUI application."""
    setup_logging()

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    window = MainWindow()
    window.show()

    sys.exit(app.exec())
