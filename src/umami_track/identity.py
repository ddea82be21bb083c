# src/umami_track/identity.py
"""File-backed storage for the persistent user identifier.

Each key is stored in its own file under a state directory. First creation
is race-free: the new identifier is fully written to a temp file, then
hard-linked into place, which fails if another process got there first.
"""

from __future__ import annotations

import os
import tempfile
import threading
import uuid
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_USER_ID_KEY = "umami_track.user_id"
STATE_HOME_ENV = "XDG_STATE_HOME"


def default_state_dir() -> Path:
    """Directory holding persisted identifiers.

    Follows the XDG base directory convention: $XDG_STATE_HOME/umami-track,
    falling back to ~/.local/state/umami-track.
    """
    state_home = os.environ.get(STATE_HOME_ENV)
    base = Path(state_home) if state_home else Path.home() / ".local" / "state"
    return base / "umami-track"


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class FileIdentifierStore:
    """Identifier store persisting one UUID string per key.

    Values that do not parse as a UUID are treated as missing and replaced.

    Example:
        store = FileIdentifierStore()
        user_id = store.get_or_create(DEFAULT_USER_ID_KEY)
    """

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory if directory is not None else default_state_dir()
        self._lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File that stores the value for key."""
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise ValueError(f"Invalid identifier key: {key!r}")
        return self._directory / key

    def get_or_create(self, key: str) -> str:
        """Return the stored identifier for key, generating one if needed.

        Raises:
            ValueError: If key cannot be used as a file name
            OSError: If the state directory is not writable
        """
        path = self.path_for(key)
        with self._lock:
            existing = self._read(path)
            if existing is not None and _is_uuid(existing):
                return existing

            new_id = str(uuid.uuid4())
            self._directory.mkdir(parents=True, exist_ok=True)
            if existing is None:
                winner = self._create_exclusive(path, new_id)
            else:
                logger.warning("Replacing malformed stored identifier", key=key, path=str(path))
                self._replace(path, new_id)
                winner = new_id

            logger.debug("Identifier created", key=key, reused=winner != new_id)
            return winner

    def _read(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None

    def _write_temp(self, value: str) -> Path:
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".id-")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(value)
        return Path(tmp_name)

    def _create_exclusive(self, path: Path, value: str) -> str:
        tmp = self._write_temp(value)
        try:
            os.link(tmp, path)
        except FileExistsError:
            # Another process created it between our read and link
            current = self._read(path)
            if current is not None and _is_uuid(current):
                return current
            os.replace(tmp, path)
            return value
        finally:
            tmp.unlink(missing_ok=True)
        return value

    def _replace(self, path: Path, value: str) -> None:
        tmp = self._write_temp(value)
        os.replace(tmp, path)
