# entwine/mods/scanner.py
from __future__ import annotations
import logging
import os
from pathlib import Path

from entwine.core.errors import FileSystemError
from entwine.mods.metadata import parseRecord, readSidecar, recordKeyFor
from entwine.mods.models import InstalledMod
from entwine.mods.naming import ModEntry, classifyEntry

logger = logging.getLogger(__name__)

__all__ = ["ModScanner"]



class ModScanner:
    """
    Rebuilds InstalledMod records from the mods directory on every call.

    Read-only: takes no lock. Writers always publish with a rename, so a scan
    sees either the old or the new entry, never a half-written one.
    """

    def entries(self, modsPath: str | Path) -> list[ModEntry]:
        modsDir = Path(modsPath)
        if not modsDir.is_dir():
            return []
        try:
            with os.scandir(modsDir) as it:
                names = [entry.name for entry in it]
        except FileNotFoundError:
            return []
        except OSError as err:
            raise FileSystemError(f"Failed to read mods directory '{modsDir}': {err}", details={"modsPath": str(modsDir)}) from err

        out: list[ModEntry] = []
        for name in names:
            entry = classifyEntry(modsDir / name)
            if entry is not None:
                out.append(entry)
        return out

    def getInstalledMods(self, modsPath: str | Path) -> list[InstalledMod]:
        records = readSidecar(modsPath)
        mods: list[InstalledMod] = []

        for entry in self.entries(modsPath):
            key = recordKeyFor(records, entry.canonical)
            raw = records.get(key) if key is not None else None
            if raw is None:
                mods.append(InstalledMod(
                    id=entry.baseName,
                    name=entry.baseName,
                    fileName=entry.fileName,
                    enabled=entry.enabled,
                    version="Unknown",
                    author="Unknown",
                    description="Locally installed mod",
                    iconPath="",
                ))
                continue

            record = parseRecord(raw)
            if record is None:
                logger.warning("Skipping '%s': its metadata record is unreadable", entry.fileName)
                continue

            mods.append(InstalledMod(
                id=record.id,
                name=record.name,
                fileName=entry.fileName,
                enabled=entry.enabled,
                version=record.version,
                author=record.author,
                description=record.description,
                iconPath=record.iconPath,
            ))

        logger.debug("Scanned '%s': %d mods", modsPath, len(mods))
        return mods

    def findEntry(self, modsPath: str | Path, canonical: str) -> ModEntry | None:
        for entry in self.entries(modsPath):
            if entry.canonical == canonical:
                return entry
        return None
