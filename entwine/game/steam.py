# entwine/game/steam.py
from __future__ import annotations
import logging
import os
import string
import sys
from collections.abc import Callable
from pathlib import Path

from entwine.app.settings import settings

logger = logging.getLogger(__name__)

__all__ = ["steamLibraryPaths", "gameExecutables", "looksLikeGameDir", "detectGamePath"]



def _mountedDrives(mountRoot: Path) -> list[Path]:
    # /run/media/<user>/<drive> and /media/<user>/<drive>
    drives: list[Path] = []
    try:
        users = [p for p in mountRoot.iterdir() if p.is_dir()]
    except OSError:
        return drives
    for user in users:
        try:
            drives.extend(p for p in user.iterdir() if p.is_dir())
        except OSError:
            continue
    return drives



def steamLibraryPaths(platform: str | None = None, home: Path | None = None) -> list[Path]:
    """Usual `steamapps/common` locations for the current platform, most likely first."""
    platform = platform or sys.platform
    home = home or Path.home()
    paths: list[Path] = []

    if platform.startswith("linux"):
        paths += [
            home / ".steam/steam/steamapps/common",
            home / ".local/share/Steam/steamapps/common",
            home / ".var/app/com.valvesoftware.Steam/.steam/steam/steamapps/common",
            home / ".var/app/com.valvesoftware.Steam/.local/share/Steam/steamapps/common",
        ]
        for mountRoot in (Path("/run/media"), Path("/media")):
            for drive in _mountedDrives(mountRoot):
                paths += [drive / "SteamLibrary/steamapps/common", drive / "steamapps/common"]
    elif platform.startswith("win"):
        paths += [
            Path("C:\\Program Files (x86)\\Steam\\steamapps\\common"),
            Path("C:\\Program Files\\Steam\\steamapps\\common"),
        ]
        for letter in string.ascii_uppercase[3:]:
            paths += [
                Path(f"{letter}:\\SteamLibrary\\steamapps\\common"),
                Path(f"{letter}:\\Steam\\steamapps\\common"),
            ]
    elif platform == "darwin":
        paths.append(home / "Library/Application Support/Steam/steamapps/common")

    extra = os.environ.get("ENTWINE_STEAM_LIBRARY")
    if extra:
        paths.insert(0, Path(extra).expanduser())
    return paths



def gameExecutables() -> list[str]:
    return list(settings("game.executables", ["SpiderHeck.exe", "SpiderHeck.x86_64", "SpiderHeck"]))



def looksLikeGameDir(path: str | Path) -> bool:
    """A directory holding one of the game's known executables."""
    gameDir = Path(path)
    if not gameDir.is_dir():
        return False
    # The macOS build ships "SpiderHeck" as an app bundle directory
    return any((gameDir / name).exists() for name in gameExecutables())



def detectGamePath(
    libraries: list[Path] | None = None,
    accept: Callable[[Path], bool] = looksLikeGameDir,
) -> Path | None:
    installDirName = str(settings("game.installDirName", "SpiderHeck"))
    for library in libraries if libraries is not None else steamLibraryPaths():
        candidate = library / installDirName
        if accept(candidate):
            logger.info("Detected game installation at '%s'", candidate)
            return candidate
    logger.debug("No game installation found in Steam libraries")
    return None
