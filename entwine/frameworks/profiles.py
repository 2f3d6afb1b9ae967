# entwine/frameworks/profiles.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from entwine.app.settings import settings

__all__ = ["FrameworkProfile", "SILK", "BEPINEX", "FRAMEWORKS", "getProfile"]



@dataclass(frozen=True)
class FrameworkProfile:
    """
    Everything that differs between two injection frameworks.

    Both install into one root directory under the game folder, keep their
    version in a marker file inside it, and may own a few loose files next
    to the game executable.
    """
    key: str
    displayName: str
    rootDir: str
    markerName: str = "version.txt"
    # Files placed directly in the game directory (doorstop proxy and its config)
    looseFiles: tuple[str, ...] = ()
    # Only archive members under rootDir are extracted when set
    onlyRootMembers: bool = False
    # Sub-paths of rootDir holding user data; carried across reinstalls, kept on uninstall
    preserved: tuple[str, ...] = field(default_factory=tuple)

    @property
    def markerRelPath(self) -> PurePosixPath:
        return PurePosixPath(self.rootDir) / self.markerName

    def acceptsMember(self, memberName: str) -> bool:
        if not self.onlyRootMembers:
            return True
        return memberName.startswith(self.rootDir + "/")

    def releasesUrl(self) -> str:
        return str(settings(f"frameworks.{self.key}.releasesUrl", ""))

    def downloadUrl(self, version: str) -> str:
        template = str(settings(f"frameworks.{self.key}.downloadUrlTemplate", ""))
        return template.format(version=version)



SILK = FrameworkProfile(
    key="silk",
    displayName="Silk",
    rootDir="Silk",
    looseFiles=("winhttp.dll", "doorstop_config.ini", ".doorstop_version"),
    preserved=("Mods", "Config"),
)

# Rides on Silk's doorstop proxy, so it owns no loose files of its own
BEPINEX = FrameworkProfile(
    key="bepinex",
    displayName="BepInEx",
    rootDir="BepInEx",
    onlyRootMembers=True,
    preserved=("plugins", "config"),
)

FRAMEWORKS: dict[str, FrameworkProfile] = {SILK.key: SILK, BEPINEX.key: BEPINEX}



def getProfile(key: str) -> FrameworkProfile:
    try:
        return FRAMEWORKS[key]
    except KeyError:
        raise ValueError(f"Unknown framework {key!r}") from None
