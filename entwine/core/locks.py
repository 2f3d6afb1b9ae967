# entwine/core/locks.py
from __future__ import annotations
import os
import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from pathlib import Path

__all__ = [
    "KeyedLocks", "pathKey",
    "GAME_PATH_LOCKS", "MODS_PATH_LOCKS", "MOD_CONFIG_LOCKS",
]



def pathKey(path: str | os.PathLike[str]) -> str:
    """Normalises a filesystem path so two spellings of one directory share a lock."""
    return os.path.normcase(os.path.abspath(os.fspath(Path(path).expanduser())))



class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0



class KeyedLocks:
    """
    One mutex per key, created on first use and dropped once nobody holds or waits on it.

    Example:
        with MODS_PATH_LOCKS.hold(pathKey(modsPath)):
            ...
    """
    def __init__(self, name: str) -> None:
        self.name = name
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.users -= 1
                if entry.users == 0 and self._entries.get(key) is entry:
                    del self._entries[key]

    def activeKeys(self) -> list[Hashable]:
        with self._guard:
            return list(self._entries.keys())

    def __repr__(self) -> str:
        return f"KeyedLocks(name={self.name!r}, active={len(self._entries)})"



# Framework installs/uninstalls and game path validation
GAME_PATH_LOCKS = KeyedLocks("gamePath")
# Mod install/uninstall/toggle and the metadata sidecar
MODS_PATH_LOCKS = KeyedLocks("modsPath")
# Per (gamePath, modId) config read-modify-write
MOD_CONFIG_LOCKS = KeyedLocks("modConfig")
