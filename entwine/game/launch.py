# entwine/game/launch.py
from __future__ import annotations
import logging
import subprocess
import sys
from pathlib import Path

from entwine.app.app_settings import LaunchMethod
from entwine.app.settings import settings
from entwine.core.errors import LaunchError, PathNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["steamRunUrl", "openerCommand", "launchGame"]



def steamRunUrl() -> str:
    return f"steam://rungameid/{settings('game.steamAppId', '1329500')}"



def openerCommand(target: str, platform: str | None = None) -> list[str]:
    """Command that hands `target` (URL or file) to the desktop's default handler."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return ["cmd", "/C", "start", "", target]
    if platform == "darwin":
        return ["open", target]
    return ["xdg-open", target]



def launchGame(gamePath: str | Path, method: LaunchMethod) -> list[str]:
    """
    Starts the game detached and returns the command that was spawned.

    The process is not waited on; its lifetime is the user's business.
    """
    if method is LaunchMethod.STEAM:
        command = openerCommand(steamRunUrl())
        cwd = None
    else:
        gameDir = Path(gamePath)
        exe = gameDir / str(settings("game.launchExecutable", "SpiderHeckApp.exe"))
        if not exe.is_file():
            raise PathNotFoundError(f"Game executable not found at '{exe}'", details={"path": str(exe)})
        command = openerCommand(str(exe)) if sys.platform == "darwin" else [str(exe)]
        cwd = str(gameDir)

    try:
        subprocess.Popen(command, cwd=cwd, stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as err:
        raise LaunchError(f"Failed to launch the game: {err}", details={"command": command}) from err

    logger.info("Launched game via %s: %s", method.value, command)
    return command
