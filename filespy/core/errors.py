# filespy/core/errors.py

from enum import Enum, auto


class FailureReason(Enum):
    """Why a read of the filesystem or a persisted record did not succeed."""
    NOT_FOUND = auto()
    UNREADABLE = auto()


class FileSpyError(Exception):
    """Base class for every failure the application knows how to absorb."""


class DirectoryUnreadable(FileSpyError):
    """The contents of a folder could not be enumerated."""

    def __init__(self, path, reason: FailureReason = FailureReason.UNREADABLE):
        super().__init__(f"Cannot read directory: {path}")
        self.path = path
        self.reason = reason


class AttributesUnreadable(FileSpyError):
    """The metadata of an entry could not be read."""

    def __init__(self, path, reason: FailureReason):
        super().__init__(f"Cannot read attributes of: {path} ({reason.name})")
        self.path = path
        self.reason = reason


class BookmarkUnresolvable(FileSpyError):
    """A stored bookmark token could not be turned back into a usable path."""


class SessionRecordMissing(FileSpyError):
    """There is no usable session record (first run or corrupted state)."""

    def __init__(self, path, reason: FailureReason):
        super().__init__(f"No session record at: {path} ({reason.name})")
        self.path = path
        self.reason = reason


class ExportWriteFailed(FileSpyError):
    """Writing an exported report to the chosen destination failed."""

    def __init__(self, destination, description: str):
        super().__init__(description)
        self.destination = destination
        self.description = description
