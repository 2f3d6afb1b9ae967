# entwine/app/path_store.py
from __future__ import annotations
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from entwine.app.paths import userDataDir
from entwine.app.state_file import StateFile
from entwine.core.errors import FileSystemError, InvalidGameDirectoryError
from entwine.core.locks import GAME_PATH_LOCKS, KeyedLocks, pathKey
from entwine.game.steam import detectGamePath, gameExecutables, looksLikeGameDir

logger = logging.getLogger(__name__)

__all__ = ["PathStore", "MODS_SUBDIR", "modsPathFor"]

MODS_SUBDIR = Path("Silk") / "Mods"
_GAME_PATH_KEY = "gamePath"



class PathStore:
    """
    The validated game directory, persisted across runs.

    Loaded once at startup; changed only through setGamePath, which validates
    first and leaves the previous path alone when validation fails. Readers
    get the stored value as-is, with no re-validation.
    """

    def __init__(
        self,
        statePath: str | Path | None = None,
        *,
        detector: Callable[[], Path | None] | None = detectGamePath,
        locks: KeyedLocks = GAME_PATH_LOCKS,
    ) -> None:
        self._file = StateFile(statePath or userDataDir() / "state.json")
        self._detector = detector
        self._locks = locks
        self._mutex = threading.Lock()
        self._gamePath: Path | None = None

    def load(self) -> Path | None:
        """Reads the stored path; falls back to Steam auto-detection when none is stored."""
        stored = self._file.get(_GAME_PATH_KEY)
        with self._mutex:
            self._gamePath = Path(stored) if isinstance(stored, str) and stored else None

        if self._gamePath is None and self._detector is not None:
            detected = self._detector()
            if detected is not None:
                try:
                    self.setGamePath(detected)
                except (InvalidGameDirectoryError, FileSystemError) as err:
                    logger.warning("Ignoring detected game path '%s': %s", detected, err)

        logger.info("Game path: %s", self._gamePath or "<not set>")
        return self._gamePath

    @property
    def gamePath(self) -> Path | None:
        with self._mutex:
            return self._gamePath

    @property
    def modsPath(self) -> Path | None:
        gamePath = self.gamePath
        return modsPathFor(gamePath) if gamePath is not None else None

    def validate(self, path: str | Path) -> Path:
        candidate = Path(path).expanduser()
        if not candidate.is_dir():
            raise InvalidGameDirectoryError(
                f"'{candidate}' does not exist or is not a directory",
                details={"path": str(candidate)},
            )
        if not looksLikeGameDir(candidate):
            raise InvalidGameDirectoryError(
                f"'{candidate}' does not look like a game installation",
                details={"path": str(candidate), "expected": gameExecutables()},
            )
        return candidate.resolve()

    def setGamePath(self, path: str | Path) -> Path:
        with self._locks.hold(pathKey(path)):
            validated = self.validate(path)
            with self._mutex:
                self._file.set(_GAME_PATH_KEY, str(validated))
                try:
                    self._file.save()
                except OSError as err:
                    # Keep memory and disk in agreement
                    self._file.set(_GAME_PATH_KEY, str(self._gamePath) if self._gamePath else None)
                    raise FileSystemError(f"Failed to persist game path: {err}", details={"path": str(validated)}) from err
                self._gamePath = validated

        logger.info("Game path set to '%s'", validated)
        return validated



def modsPathFor(gamePath: str | Path) -> Path:
    return Path(gamePath) / MODS_SUBDIR
