# filespy/core/report.py

import logging
import os
import tempfile
from pathlib import Path

from .errors import AttributesUnreadable, ExportWriteFailed
from .filesystem import EXTENDED_ATTRIBUTES_KEY, read_attributes

logger = logging.getLogger(__name__)

EXPORT_SUFFIX = ".fs.txt"
NO_INFORMATION = "No information available for {path}"


def describe(path: Path) -> str:
    """
    Builds the plain-text attribute report shown in the detail panel.

    The report starts with the entry's path and a blank line, followed by one
    `key:<TAB> value` line per attribute. A read failure produces the
    "No information available" sentence instead; this function never raises.
    """
    path = Path(path)
    try:
        attributes = read_attributes(path)
    except AttributesUnreadable as e:
        logger.info(f"{e}")
        return NO_INFORMATION.format(path=path)

    report = [str(path), ""]
    for key, value in attributes.items():
        if key == EXTENDED_ATTRIBUTES_KEY:
            continue
        report.append(f"{key}:\t {value}")
    return "\n".join(report)


def default_export_name(path: Path) -> str:
    """'notes.md' -> 'notes.fs.txt'; only the last extension is replaced."""
    path = Path(path)
    return f"{path.stem}{EXPORT_SUFFIX}"


def write_text_atomically(destination: Path, text: str):
    """Writes `text` as UTF-8 next to `destination`, then swaps it into place."""
    destination = Path(destination)
    fd, tmp_name = tempfile.mkstemp(dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        os.replace(tmp_name, destination)
    except BaseException:
        # Never leave the half-written temp file behind.
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def export_report(path: Path, destination: Path) -> Path:
    """
    Writes describe(path) to `destination`.

    Raises:
        ExportWriteFailed: Carries the underlying OS error's description.
    """
    destination = Path(destination)
    text = describe(path)
    try:
        write_text_atomically(destination, text)
    except OSError as e:
        logger.error(f"Failed to export report for '{path}' to '{destination}': {e}")
        raise ExportWriteFailed(destination, e.strerror or str(e)) from e

    logger.info(f"Exported report for '{path}' to '{destination}'.")
    return destination
