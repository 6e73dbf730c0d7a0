# filespy/core/filesystem.py

import datetime
import logging
import os
import stat
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .errors import AttributesUnreadable, DirectoryUnreadable, FailureReason

# The Navigation Controller and the CLI both read the disk through this module.
logger = logging.getLogger(__name__)

HIDDEN_MARKER = "."
# A nested mapping of every extended attribute; too noisy for the report.
EXTENDED_ATTRIBUTES_KEY = "ExtendedAttributes"

_FILE_TYPES = [
    (stat.S_ISDIR, "Directory"),
    (stat.S_ISREG, "Regular"),
    (stat.S_ISLNK, "SymbolicLink"),
    (stat.S_ISSOCK, "Socket"),
    (stat.S_ISCHR, "CharacterSpecial"),
    (stat.S_ISBLK, "BlockSpecial"),
    (stat.S_ISFIFO, "FIFO"),
]


@dataclass(frozen=True)
class FilesystemEntry:
    """One row of a folder listing: a full path and whether it can be entered."""
    path: Path
    is_directory: bool

    @property
    def name(self) -> str:
        return self.path.name


class ScopedAccess:
    """
    Grants temporary read access to a location and takes it back afterwards.

    Sandboxed platforms require access to a user-chosen folder to be
    acquired before it is read and released after. The host filesystem has no
    such concept, so acquiring is a no-op here; subclasses can hook real grants
    in. Callers should always go through `grant()`.
    """

    def acquire(self, path: Path) -> bool:
        """Returns True when a grant was actually taken for `path`."""
        logger.debug(f"No scoped access needed for '{path}'.")
        return False

    def release(self, path: Path):
        logger.debug(f"Released scoped access for '{path}'.")

    @contextmanager
    def grant(self, path: Path):
        self.acquire(path)
        try:
            yield path
        finally:
            # Released on every exit path, including a failed listing.
            self.release(path)


DEFAULT_ACCESS = ScopedAccess()


def is_hidden(name: str) -> bool:
    """Dotfiles are hidden from the default listing."""
    return name.startswith(HIDDEN_MARKER)


def scan_directory(path: Path, show_hidden: bool = False,
                   access: ScopedAccess = DEFAULT_ACCESS) -> List[FilesystemEntry]:
    """
    Lists the immediate children of `path` in enumeration order.

    Args:
        path: The folder to read.
        show_hidden: When False, names starting with a period are left out.
        access: The scoped-access provider wrapped around the read.

    Returns:
        One FilesystemEntry per child. Symlinks to folders count as folders.

    Raises:
        DirectoryUnreadable: If the folder cannot be enumerated.
    """
    path = Path(path)
    with access.grant(path):
        try:
            with os.scandir(path) as it:
                entries = []
                for child in it:
                    if not show_hidden and is_hidden(child.name):
                        continue
                    try:
                        is_dir = child.is_dir()
                    except OSError:
                        is_dir = False
                    entries.append(FilesystemEntry(path / child.name, is_dir))
        except FileNotFoundError as e:
            raise DirectoryUnreadable(path, FailureReason.NOT_FOUND) from e
        except OSError as e:
            raise DirectoryUnreadable(path, FailureReason.UNREADABLE) from e

    logger.debug(f"Listed {len(entries)} entries in '{path}' (show_hidden={show_hidden}).")
    return entries


def list_directory(path: Path, show_hidden: bool = False,
                   access: ScopedAccess = DEFAULT_ACCESS) -> List[FilesystemEntry]:
    """Same as scan_directory, but an unreadable folder simply lists as empty."""
    try:
        return scan_directory(path, show_hidden, access)
    except DirectoryUnreadable as e:
        logger.warning(f"{e} ({e.reason.name}); showing it as empty.")
        return []


def _format_timestamp(value: float) -> str:
    return datetime.datetime.fromtimestamp(value).astimezone().strftime("%Y-%m-%d %H:%M:%S %z")


def _file_type(mode: int) -> str:
    for check, label in _FILE_TYPES:
        if check(mode):
            return label
    return "Unknown"


def _extended_attributes(path: Path) -> Dict[str, bytes]:
    listxattr = getattr(os, "listxattr", None)
    if listxattr is None:
        return {}
    try:
        return {name: os.getxattr(path, name, follow_symlinks=False)
                for name in listxattr(path, follow_symlinks=False)}
    except OSError as e:
        logger.debug(f"Could not read extended attributes of '{path}': {e}")
        return {}


def read_attributes(path: Path, include_extended: bool = False) -> Dict[str, Any]:
    """
    Reads the raw metadata of a single entry without following a final symlink.

    Raises:
        AttributesUnreadable: NOT_FOUND when nothing exists at `path`,
            UNREADABLE for any other failure.
    """
    path = Path(path)
    try:
        st = os.lstat(path)
    except FileNotFoundError as e:
        raise AttributesUnreadable(path, FailureReason.NOT_FOUND) from e
    except OSError as e:
        raise AttributesUnreadable(path, FailureReason.UNREADABLE) from e

    attributes: Dict[str, Any] = {
        "Type": _file_type(st.st_mode),
        "Size": st.st_size,
        "PosixPermissions": format(stat.S_IMODE(st.st_mode), "04o"),
        "ModificationDate": _format_timestamp(st.st_mtime),
        "AccessDate": _format_timestamp(st.st_atime),
        "StatusChangeDate": _format_timestamp(st.st_ctime),
        "ReferenceCount": st.st_nlink,
        "OwnerAccountID": st.st_uid,
        "GroupOwnerAccountID": st.st_gid,
        "SystemNumber": st.st_dev,
        "SystemFileNumber": st.st_ino,
    }

    birthtime = getattr(st, "st_birthtime", None)
    if birthtime is not None:
        attributes["CreationDate"] = _format_timestamp(birthtime)

    # Account names need a lookup that is not available everywhere. The lookup
    # follows symlinks, so a link reports ids only.
    if not stat.S_ISLNK(st.st_mode):
        try:
            attributes["OwnerAccountName"] = path.owner()
            attributes["GroupOwnerAccountName"] = path.group()
        except (KeyError, NotImplementedError, OSError):
            pass

    if include_extended:
        attributes[EXTENDED_ATTRIBUTES_KEY] = _extended_attributes(path)

    return attributes
