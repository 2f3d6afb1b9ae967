# entwine/frameworks/compatibility.py
from __future__ import annotations
import logging
from pathlib import Path

from entwine.catalog.models import Mod
from entwine.core.errors import IncompatibleVersionError
from entwine.frameworks.manager import FrameworkManager
from entwine.mods.metadata import findRecordById
from entwine.mods.models import ModVersionInfo
from entwine.semver import boundsRequirement, tryParseSemVersion, versionSatisfiesRequirement

logger = logging.getLogger(__name__)

__all__ = ["CompatibilityChecker"]



def _infoFromFields(
    modId: str,
    version: str,
    silkVersion: str | None,
    minSilkVersion: str | None,
    maxSilkVersion: str | None,
) -> ModVersionInfo | None:
    if not (silkVersion or minSilkVersion or maxSilkVersion):
        return None
    return ModVersionInfo(
        modId=modId,
        version=version or "Unknown",
        silkVersion=silkVersion or minSilkVersion or maxSilkVersion or "",
        minSilkVersion=minSilkVersion,
        maxSilkVersion=maxSilkVersion,
    )



class CompatibilityChecker:
    """
    Answers "may this mod run on the installed primary framework?".

    Fails closed: no framework, no declared range, or anything unparsable
    means incompatible.
    """

    def __init__(self, framework: FrameworkManager) -> None:
        self._framework = framework

    def versionInfo(self, modsPath: str | Path, modId: str) -> ModVersionInfo | None:
        record = findRecordById(modsPath, modId)
        if record is None:
            return None
        return _infoFromFields(record.id, record.version, record.silkVersion, record.minSilkVersion, record.maxSilkVersion)

    def isCompatible(self, installedVersion: str, info: ModVersionInfo) -> bool:
        installed = tryParseSemVersion(installedVersion)
        if installed is None:
            logger.warning("Installed framework version %r does not parse", installedVersion)
            return False

        lower, upper = info.minSilkVersion, info.maxSilkVersion
        if lower is None and upper is None:
            # Only a target version declared: treat it as the floor
            lower = info.silkVersion
        try:
            requirement = boundsRequirement(lower, upper)
        except ValueError as err:
            logger.warning("Mod '%s' declares an unusable version range: %s", info.modId, err)
            return False
        return versionSatisfiesRequirement(installed, requirement)

    def checkModCompatibility(self, gamePath: str | Path, modsPath: str | Path, modId: str) -> bool:
        if not self._framework.isInstalled(gamePath):
            logger.debug("'%s' incompatible: %s not installed", modId, self._framework.profile.displayName)
            return False

        info = self.versionInfo(modsPath, modId)
        if info is None:
            logger.debug("'%s' incompatible: no version info", modId)
            return False

        return self.isCompatible(self._framework.getVersion(gamePath), info)

    def enforceForMod(self, gamePath: str | Path, mod: Mod) -> None:
        """
        Install-time gate for a catalog mod that is not on disk yet.

        Raises IncompatibleVersionError under the same fail-closed rules.
        """
        info = _infoFromFields(mod.id, mod.version, mod.silkVersion, mod.minSilkVersion, mod.maxSilkVersion)
        installed = self._framework.getVersion(gamePath) if self._framework.isInstalled(gamePath) else None
        if info is not None and installed is not None and self.isCompatible(installed, info):
            return
        raise IncompatibleVersionError(
            f"Mod '{mod.name}' is not compatible with the installed {self._framework.profile.displayName}",
            details={
                "modId": mod.id,
                "installedVersion": installed,
                "minSilkVersion": mod.minSilkVersion,
                "maxSilkVersion": mod.maxSilkVersion,
            },
        )
