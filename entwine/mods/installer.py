# entwine/mods/installer.py
from __future__ import annotations
import logging
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from entwine.catalog.client import resolveCatalogUrl, resolveIconUrl
from entwine.catalog.models import Mod
from entwine.core.archives import extractZip
from entwine.core.errors import AlreadyInstalledError, EntwineError, FileSystemError, PathNotFoundError
from entwine.core.fsutils import TEMP_PREFIX, atomicWriteBytes, removePath
from entwine.core.locks import KeyedLocks, MODS_PATH_LOCKS, pathKey
from entwine.http.client import download
from entwine.mods.metadata import readSidecar, recordKeyFor, writeSidecar
from entwine.mods.models import ModRecord
from entwine.mods.naming import ARCHIVE_EXTENSIONS, canonicalName, checkPlainName, installedNameFor
from entwine.mods.scanner import ModScanner

logger = logging.getLogger(__name__)

__all__ = ["ModInstaller"]

Downloader = Callable[[str], bytes]



class ModInstaller:
    """
    Puts catalog mods into a mods directory and takes them out again.

    Every mutation holds the per-modsPath lock and publishes with a rename:
    a crash mid-install leaves at most a hidden `.entwine-*` temp artifact,
    never a truncated file under the final name.
    """

    def __init__(
        self,
        *,
        scanner: ModScanner | None = None,
        downloader: Downloader | None = None,
        locks: KeyedLocks = MODS_PATH_LOCKS,
    ) -> None:
        self._scanner = scanner or ModScanner()
        self._download = downloader or download
        self._locks = locks

    # ----- Helpers -----

    def _checkNotInstalled(self, modsPath: Path, targetName: str) -> None:
        for installed in self._scanner.getInstalledMods(modsPath):
            if canonicalName(installed.fileName) == targetName:
                raise AlreadyInstalledError(
                    f"'{targetName}' is already installed",
                    details={"fileName": targetName, "modsPath": str(modsPath), "enabled": installed.enabled},
                )
        # Same name present but not recognised as a mod: still refuse to clobber it
        for candidate in (targetName, targetName + ".disabled"):
            if (modsPath / candidate).exists():
                raise AlreadyInstalledError(
                    f"'{candidate}' already exists in the mods directory",
                    details={"fileName": candidate, "modsPath": str(modsPath)},
                )

    def _placeFile(self, modsPath: Path, targetName: str, data: bytes) -> Path:
        target = modsPath / targetName
        atomicWriteBytes(target, data)
        return target

    def _placeArchive(self, modsPath: Path, targetName: str, data: bytes) -> Path:
        target = modsPath / targetName
        staging = Path(tempfile.mkdtemp(prefix=f"{TEMP_PREFIX}mod-", dir=modsPath))
        try:
            extractZip(data, staging)
            staging.rename(target)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        return target

    def _moveLegacyRecord(self, records: dict[str, Any], targetName: str) -> None:
        # An old sidecar may hold "Cool.dll" under "Cool"; give it its own key before "Cool" is reused
        raw = records.get(targetName)
        if not isinstance(raw, dict):
            return
        owner = canonicalName(str(raw.get("fileName") or ""))
        if owner and owner != targetName and owner not in records:
            records[owner] = records.pop(targetName)
            logger.debug("Moved metadata record of '%s' to its own key", owner)

    def _recordFor(self, mod: Mod, targetName: str) -> ModRecord:
        return ModRecord(
            id=mod.id,
            name=mod.name,
            fileName=targetName,
            version=mod.version or "Unknown",
            author=mod.author or "Unknown",
            description=mod.description,
            iconPath=resolveIconUrl(mod.iconPath),
            silkVersion=mod.silkVersion,
            minSilkVersion=mod.minSilkVersion,
            maxSilkVersion=mod.maxSilkVersion,
        )

    # ----- Public API -----

    def installMod(self, mod: Mod, modsPath: str | Path) -> None:
        modsDir = Path(modsPath)
        targetName = installedNameFor(mod.fileName)
        isArchive = mod.fileName.lower().endswith(ARCHIVE_EXTENSIONS)

        # Checked again under the lock once the bytes are in
        self._checkNotInstalled(modsDir, targetName)

        url = resolveCatalogUrl(mod.filePath)
        logger.info("Downloading mod '%s' from %s", mod.name, url)
        data = self._download(url)

        with self._locks.hold(pathKey(modsDir)):
            self._checkNotInstalled(modsDir, targetName)
            try:
                modsDir.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                raise FileSystemError(f"Cannot create mods directory '{modsDir}': {err}", details={"modsPath": str(modsDir)}) from err

            placed: Path | None = None
            try:
                if isArchive:
                    placed = self._placeArchive(modsDir, targetName, data)
                else:
                    placed = self._placeFile(modsDir, targetName, data)

                records = readSidecar(modsDir)
                self._moveLegacyRecord(records, targetName)
                records[targetName] = self._recordFor(mod, targetName).model_dump(by_alias=True)
                writeSidecar(modsDir, records)
            except (OSError, EntwineError) as err:
                if placed is not None:
                    try:
                        removePath(placed)
                    except OSError:
                        logger.exception("Could not roll back '%s' after failed install", placed)
                if isinstance(err, EntwineError):
                    raise
                raise FileSystemError(
                    f"Failed to install '{mod.name}': {err}",
                    details={"fileName": targetName, "modsPath": str(modsDir)},
                ) from err

        logger.info("Installed mod '%s' as '%s'", mod.name, targetName)

    def uninstallMod(self, modsPath: str | Path, fileName: str) -> None:
        """
        Deletes the mod in whichever form (enabled/disabled) it is on disk.

        The mod's configuration documents are left alone.
        """
        modsDir = Path(modsPath)
        canonical = canonicalName(checkPlainName(fileName))

        with self._locks.hold(pathKey(modsDir)):
            entry = self._scanner.findEntry(modsDir, canonical)
            if entry is None:
                raise PathNotFoundError(
                    f"Mod '{fileName}' is not installed",
                    details={"fileName": fileName, "modsPath": str(modsDir)},
                )
            try:
                removePath(entry.path)
                records = readSidecar(modsDir)
                key = recordKeyFor(records, entry.canonical)
                if key is not None:
                    del records[key]
                    writeSidecar(modsDir, records)
            except OSError as err:
                raise FileSystemError(
                    f"Failed to uninstall '{fileName}': {err}",
                    details={"fileName": fileName, "modsPath": str(modsDir)},
                ) from err

        logger.info("Uninstalled mod '%s'", entry.fileName)
