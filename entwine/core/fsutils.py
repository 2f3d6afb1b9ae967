# entwine/core/fsutils.py
from __future__ import annotations
import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = [
    "TEMP_PREFIX", "atomicWriteBytes", "atomicWriteText",
    "removePath", "isTempArtifact",
]

# Every temp file/dir this project creates next to its target starts with this
TEMP_PREFIX = ".entwine-"



def isTempArtifact(name: str) -> bool:
    return name.startswith(TEMP_PREFIX)



def atomicWriteBytes(path: Path | str, data: bytes) -> None:
    """
    Writes `data` to `path` so readers only ever see the old or the new content.

    The bytes go to a temp file in the same directory (same filesystem), are
    fsynced, then moved over the target with os.replace. On any failure the
    temp file is removed and the OSError propagates.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmpName = tempfile.mkstemp(prefix=f"{TEMP_PREFIX}{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fl:
            fl.write(data)
            fl.flush()
            os.fsync(fl.fileno())
        os.replace(tmpName, path)
    except BaseException:
        try:
            os.unlink(tmpName)
        except FileNotFoundError:
            pass
        raise



def atomicWriteText(path: Path | str, text: str) -> None:
    if not text.endswith("\n"):
        text += "\n"
    atomicWriteBytes(path, text.encode("utf-8"))



def removePath(path: Path | str) -> bool:
    """Removes a file, symlink or directory tree. Returns False when nothing was there."""
    path = Path(path)
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False
