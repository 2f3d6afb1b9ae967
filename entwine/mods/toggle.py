# entwine/mods/toggle.py
from __future__ import annotations
import logging
import os
from pathlib import Path

from entwine.core.errors import FileSystemError, PathNotFoundError
from entwine.core.locks import KeyedLocks, MODS_PATH_LOCKS, pathKey
from entwine.mods.naming import canonicalName, checkPlainName, disabledName
from entwine.mods.scanner import ModScanner

logger = logging.getLogger(__name__)

__all__ = ["ModToggle"]



class ModToggle:
    def __init__(self, *, scanner: ModScanner | None = None, locks: KeyedLocks = MODS_PATH_LOCKS) -> None:
        self._scanner = scanner or ModScanner()
        self._locks = locks

    def toggleMod(self, modsPath: str | Path, fileName: str, enable: bool) -> None:
        """
        Moves a mod between "<name>" and "<name>.disabled".

        Asking for the state it is already in is a no-op. `fileName` may be
        given in either form.
        """
        modsDir = Path(modsPath)
        canonical = canonicalName(checkPlainName(fileName))

        with self._locks.hold(pathKey(modsDir)):
            entry = self._scanner.findEntry(modsDir, canonical)
            if entry is None:
                raise PathNotFoundError(
                    f"Mod '{fileName}' not found in '{modsDir}'",
                    details={"fileName": fileName, "modsPath": str(modsDir)},
                )

            if entry.enabled == bool(enable):
                logger.debug("Mod '%s' already %s", canonical, "enabled" if enable else "disabled")
                return

            target = modsDir / (canonical if enable else disabledName(canonical))
            if target.exists():
                raise FileSystemError(
                    f"Cannot {'enable' if enable else 'disable'} '{canonical}': '{target.name}' is in the way",
                    details={"fileName": fileName, "target": target.name},
                )
            try:
                os.rename(entry.path, target)
            except OSError as err:
                raise FileSystemError(
                    f"Failed to rename '{entry.fileName}': {err}",
                    details={"fileName": fileName, "modsPath": str(modsDir)},
                ) from err

        logger.info("%s mod '%s'", "Enabled" if enable else "Disabled", canonical)
