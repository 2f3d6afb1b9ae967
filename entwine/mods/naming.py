# entwine/mods/naming.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from entwine.core.fsutils import isTempArtifact

__all__ = [
    "DISABLED_SUFFIX", "MOD_FILE_EXTENSIONS", "ARCHIVE_EXTENSIONS",
    "ModEntry", "canonicalName", "disabledName", "baseName",
    "installedNameFor", "checkPlainName", "classifyEntry",
]



# Enabled: "Cool.dll" or folder "Cool"; disabled: same name + ".disabled"
DISABLED_SUFFIX = ".disabled"
MOD_FILE_EXTENSIONS = (".dll",)
# Catalog files with these extensions are unpacked into a folder named by the stem
ARCHIVE_EXTENSIONS = (".zip", ".silkmod")



@dataclass(frozen=True)
class ModEntry:
    path: Path
    fileName: str       # as it currently is on disk
    canonical: str      # enabled form of the name
    enabled: bool
    isDir: bool

    @property
    def baseName(self) -> str:
        return baseName(self.canonical)



def canonicalName(fileName: str) -> str:
    if fileName.lower().endswith(DISABLED_SUFFIX):
        return fileName[: -len(DISABLED_SUFFIX)]
    return fileName



def disabledName(fileName: str) -> str:
    return canonicalName(fileName) + DISABLED_SUFFIX



def baseName(fileName: str) -> str:
    """Enabled name without the mod file extension; the default id of a mod without a record."""
    name = canonicalName(fileName)
    for ext in MOD_FILE_EXTENSIONS:
        if name.lower().endswith(ext):
            return name[: -len(ext)]
    return name



def checkPlainName(fileName: str) -> str:
    """Rejects names that are empty, hidden, or would leave the mods directory."""
    fileName = str(fileName or "").strip()
    if (
        not fileName
        or fileName in (".", "..")
        or fileName.startswith(".")
        or any(sep in fileName for sep in ("/", "\\", "\0"))
    ):
        raise ValueError(f"Invalid mod file name {fileName!r}")
    return fileName



def installedNameFor(catalogFileName: str) -> str:
    """
    Name a catalog file ends up with in the mods directory.

      "Cool.dll"     -> "Cool.dll"
      "Cool.zip"     -> "Cool"        (unpacked folder)
      "Cool.silkmod" -> "Cool"
    """
    name = checkPlainName(catalogFileName)
    lower = name.lower()
    for ext in ARCHIVE_EXTENSIONS:
        if lower.endswith(ext) and len(name) > len(ext):
            return name[: -len(ext)]
    for ext in MOD_FILE_EXTENSIONS:
        if lower.endswith(ext):
            return name
    raise ValueError(f"Unsupported mod file type {catalogFileName!r}")



def classifyEntry(path: Path) -> ModEntry | None:
    """Recognises a mods-directory entry, or None for anything that is not a mod."""
    name = path.name
    if name.startswith(".") or isTempArtifact(name):
        return None

    lower = name.lower()
    enabled = not lower.endswith(DISABLED_SUFFIX)
    canonical = canonicalName(name)

    if path.is_dir():
        return ModEntry(path=path, fileName=name, canonical=canonical, enabled=enabled, isDir=True)

    if path.is_file() and canonical.lower().endswith(MOD_FILE_EXTENSIONS):
        return ModEntry(path=path, fileName=name, canonical=canonical, enabled=enabled, isDir=False)

    return None
