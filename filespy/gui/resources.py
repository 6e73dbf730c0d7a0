# filespy/gui/resources.py

import logging
from typing import Dict

from PySide6.QtCore import QFileInfo, QSize
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication, QFileIconProvider, QStyle

from filespy.core.filesystem import FilesystemEntry

# Icon lookups hit the platform theme, so misses are worth a log line.
logger = logging.getLogger(__name__)

ICON_SIZE = QSize(16, 16)

# Detail panel typography.
DETAIL_FONT_POINT_SIZE = 14
DETAIL_MIN_LINE_HEIGHT = 24
DETAIL_TAB_STOP = 240

# Named toolbar/menu icons, mapped onto the style's built-in pixmaps.
STANDARD_ICONS = {
    "app_icon": QStyle.StandardPixmap.SP_DirIcon,
    "folder-open": QStyle.StandardPixmap.SP_DirOpenIcon,
    "move-up": QStyle.StandardPixmap.SP_FileDialogToParent,
    "save": QStyle.StandardPixmap.SP_DialogSaveButton,
}

_icon_provider: QFileIconProvider | None = None
# Regular files share an icon per extension; folders are looked up one by one
# because the platform may give special folders their own icon.
_file_icon_cache: Dict[str, QIcon] = {}


def _provider() -> QFileIconProvider:
    global _icon_provider
    if _icon_provider is None:
        _icon_provider = QFileIconProvider()
    return _icon_provider


def get_icon(name: str) -> QIcon:
    """Returns one of the named standard icons, or an empty icon if unknown."""
    pixmap = STANDARD_ICONS.get(name)
    if pixmap is None:
        logger.warning(f"Unknown icon '{name}'. Using an empty icon.")
        return QIcon()
    return QApplication.style().standardIcon(pixmap)


def entry_icon(entry: FilesystemEntry) -> QIcon:
    """The icon the platform shows for this file or folder."""
    if entry.is_directory:
        return _provider().icon(QFileInfo(str(entry.path)))

    key = entry.path.suffix.lower()
    if key not in _file_icon_cache:
        icon = _provider().icon(QFileInfo(str(entry.path)))
        if icon.isNull():
            icon = _provider().icon(QFileIconProvider.IconType.File)
        _file_icon_cache[key] = icon
    return _file_icon_cache[key]
