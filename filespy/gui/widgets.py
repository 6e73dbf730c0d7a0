# filespy/gui/widgets.py

from PySide6.QtGui import QFont, QTextBlockFormat, QTextCursor
from PySide6.QtWidgets import QTextEdit

from .resources import DETAIL_FONT_POINT_SIZE, DETAIL_MIN_LINE_HEIGHT, DETAIL_TAB_STOP


class DetailPanel(QTextEdit):
    """
    Read-only panel showing the attribute report of the selected entry.

    Reports are `key:<TAB> value` lines, so a wide tab stop keeps the values
    lined up in one column.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setAcceptRichText(False)
        self.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)

        font = QFont(self.font())
        font.setPointSize(DETAIL_FONT_POINT_SIZE)
        self.setFont(font)
        self.setTabStopDistance(DETAIL_TAB_STOP)

    def show_report(self, text: str):
        """Replaces the panel's content with `text` (empty string clears it)."""
        self.setPlainText(text)
        if not text:
            return

        block_format = QTextBlockFormat()
        block_format.setLineHeight(DETAIL_MIN_LINE_HEIGHT, QTextBlockFormat.LineHeightTypes.MinimumHeight.value)

        cursor = QTextCursor(self.document())
        cursor.select(QTextCursor.SelectionType.Document)
        cursor.mergeBlockFormat(block_format)

    def report(self) -> str:
        return self.toPlainText()
