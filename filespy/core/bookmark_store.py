# filespy/core/bookmark_store.py

import base64
import binascii
import json
import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from .errors import BookmarkUnresolvable
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

# The single "working directory" slot in the preference store.
BOOKMARK_KEY = "workingDirectoryBookmark"
# Tokens written by an older format are refreshed the next time they resolve.
BOOKMARK_VERSION = 1


class BookmarkStore:
    """
    Turns a folder into a durable token and back again.

    A token remembers the folder's path together with its identity on disk
    (device and inode numbers). That lets a folder that was renamed in place
    still be found, and lets us notice when the path now points at something
    else. Either way the token is "stale" and is silently re-created for the
    location it resolved to.
    """

    def __init__(self, settings: SettingsStore, key: str = BOOKMARK_KEY):
        self.settings = settings
        self.key = key

    # --- Encoding ---

    @staticmethod
    def _encode(path: Path, identity: Tuple[int, int]) -> str:
        payload = {"v": BOOKMARK_VERSION, "path": str(path), "dev": identity[0], "ino": identity[1]}
        return base64.urlsafe_b64encode(json.dumps(payload).encode('utf-8')).decode('ascii')

    @staticmethod
    def _decode(token: str) -> Tuple[int, Path, Tuple[int, int]]:
        try:
            payload = json.loads(base64.urlsafe_b64decode(token.encode('ascii')).decode('utf-8'))
            return int(payload["v"]), Path(payload["path"]), (int(payload["dev"]), int(payload["ino"]))
        except (AttributeError, binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
            raise BookmarkUnresolvable(f"Bookmark token cannot be decoded: {e}") from e

    # --- Public API ---

    def create(self, path: Path) -> str:
        """
        Captures a token for `path` and stores it, replacing any earlier one.

        Raises:
            OSError: If `path` cannot be examined.
        """
        path = Path(path).resolve()
        st = os.stat(path)
        token = self._encode(path, (st.st_dev, st.st_ino))
        self.settings.set(self.key, token)
        logger.info(f"Saved bookmark for working directory: {path}")
        return token

    def load(self) -> Optional[str]:
        """Returns the stored token, or None if no folder was ever bookmarked."""
        token = self.settings.get(self.key)
        return token if token else None

    def resolve(self, token: str) -> Path:
        """
        Reconstitutes the folder a token points at.

        Raises:
            BookmarkUnresolvable: The token is garbage or the folder is gone.
        """
        version, path, identity = self._decode(token)
        stale = version < BOOKMARK_VERSION

        try:
            st = os.stat(path)
        except OSError:
            st = None

        if st is not None:
            if (st.st_dev, st.st_ino) != identity:
                logger.debug(f"Bookmarked path '{path}' now refers to a different item.")
                stale = True
        else:
            moved_to = self._find_moved(path.parent, identity)
            if moved_to is None:
                raise BookmarkUnresolvable(f"Bookmarked folder no longer exists: {path}")
            logger.debug(f"Bookmarked folder '{path}' was renamed to '{moved_to}'.")
            path = moved_to
            stale = True

        if stale:
            logger.info("Bookmark is stale, saving a new one...")
            try:
                self.create(path)
            except OSError as e:
                logger.error(f"Failed to save bookmark data for '{path}': {e}")

        return path

    def resolve_stored(self) -> Optional[Path]:
        """Resolves the stored token; None when there is nothing stored."""
        token = self.load()
        if token is None:
            return None
        return self.resolve(token)

    @staticmethod
    def _find_moved(parent: Path, identity: Tuple[int, int]) -> Optional[Path]:
        """Looks for an item with the same identity among the old siblings."""
        try:
            with os.scandir(parent) as it:
                for child in it:
                    try:
                        st = child.stat(follow_symlinks=False)
                    except OSError:
                        continue
                    if (st.st_dev, st.st_ino) == identity:
                        return Path(child.path)
        except OSError:
            return None
        return None
