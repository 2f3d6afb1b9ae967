# entwine/core/archives.py
from __future__ import annotations
import io
import logging
import shutil
import zipfile
from collections.abc import Callable
from pathlib import Path, PurePosixPath

from entwine.core.errors import FileSystemError

logger = logging.getLogger(__name__)

__all__ = ["extractZip"]



def _memberTarget(dest: Path, memberName: str) -> Path | None:
    """
    Maps an archive member onto `dest`, or None when it would escape it.

    Backslashes are treated as separators (archives built on Windows), and
    absolute paths, drive letters and '..' segments are refused.
    """
    normalized = memberName.replace("\\", "/")
    pure = PurePosixPath(normalized)
    if pure.is_absolute() or ".." in pure.parts or (pure.parts and ":" in pure.parts[0]):
        return None
    parts = [part for part in pure.parts if part not in ("", ".")]
    if not parts:
        return None
    return dest.joinpath(*parts)



def extractZip(
    data: bytes,
    dest: Path,
    *,
    memberFilter: Callable[[str], bool] | None = None,
) -> list[str]:
    """
    Extracts zip `data` into the existing directory `dest`.

    memberFilter gets the member name with '/' separators and decides whether
    it is extracted. Returns the extracted file names (relative, '/'-joined).

    Raises FileSystemError for a corrupt archive or a member escaping `dest`.
    """
    extracted: list[str] = []
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            for info in archive.infolist():
                name = info.filename.replace("\\", "/")
                if memberFilter is not None and not memberFilter(name):
                    continue

                target = _memberTarget(dest, name)
                if target is None:
                    raise FileSystemError(
                        f"Archive member '{info.filename}' points outside the extraction directory",
                        details={"member": info.filename},
                    )

                if info.is_dir() or name.endswith("/"):
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, open(target, "wb") as out:
                    shutil.copyfileobj(src, out)
                extracted.append(target.relative_to(dest).as_posix())
    except zipfile.BadZipFile as err:
        raise FileSystemError(f"Downloaded archive is not a valid zip file: {err}") from err
    except OSError as err:
        raise FileSystemError(f"Failed to extract archive into '{dest}': {err}", details={"dest": str(dest)}) from err

    logger.debug("Extracted %d files into '%s'", len(extracted), dest)
    return extracted
