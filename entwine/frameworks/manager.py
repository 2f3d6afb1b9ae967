# entwine/frameworks/manager.py
from __future__ import annotations
import logging
import os
import shutil
import tempfile
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path

from entwine.core.archives import extractZip
from entwine.core.errors import EntwineError, FileSystemError, NotInstalledError, PathNotFoundError
from entwine.core.fsutils import TEMP_PREFIX, atomicWriteText, removePath
from entwine.core.locks import GAME_PATH_LOCKS, KeyedLocks, pathKey
from entwine.frameworks.models import SilkVersion
from entwine.frameworks.profiles import FrameworkProfile
from entwine.frameworks.registry import ReleaseRegistry
from entwine.http.client import download
from entwine.semver import tryParseSemVersion

logger = logging.getLogger(__name__)

__all__ = ["FrameworkManager"]

Downloader = Callable[[str], bytes]

# ------------------------------------------------------------------ #
# Layout inside the game directory, for a framework rooted at R
# ------------------------------------------------------------------ #
# R/                                  # live installation
# R/version.txt                       # marker, written into staging before the swap
# <loose files>                       # e.g. winhttp.dll next to the game executable
# .entwine-staging-<key>-*/           # extraction area; R/ inside it becomes live
# .entwine-backup-<key>-<id>/         # journal of one install or uninstall
#     fresh                           #   there was no R/ before this install
#     added                           #   loose files that did not exist before, one per line
#     loose/                          #   loose files as they were before
#     root/                           #   R/ as it was before
#     committed                       #   the change is final
#
# Writing `committed` is the commit point. A journal without it is rolled
# back, one with it is finished; `_recover` does either on the next change.
#
BACKUP_FRESH = "fresh"
BACKUP_ADDED = "added"
BACKUP_LOOSE = "loose"
BACKUP_ROOT = "root"
BACKUP_COMMITTED = "committed"



class FrameworkManager:
    """
    Lifecycle of one injection framework inside a game directory.

    One class serves every framework; what differs lives in FrameworkProfile.
    Mutations are serialized per game directory through GAME_PATH_LOCKS, so
    two installs, or an install and an uninstall, never interleave.
    """

    def __init__(
        self,
        profile: FrameworkProfile,
        *,
        registry: ReleaseRegistry | None = None,
        downloader: Downloader | None = None,
        locks: KeyedLocks = GAME_PATH_LOCKS,
    ) -> None:
        self.profile = profile
        self.registry = registry or ReleaseRegistry(profile)
        self._download = downloader or download
        self._locks = locks

    # ----- Layout helpers -----

    def _stagingPrefix(self) -> str:
        return f"{TEMP_PREFIX}staging-{self.profile.key}-"

    def _backupPrefix(self) -> str:
        return f"{TEMP_PREFIX}backup-{self.profile.key}-"

    def _trashPrefix(self) -> str:
        return f"{TEMP_PREFIX}trash-{self.profile.key}-"

    def _liveRoot(self, gamePath: Path) -> Path:
        return gamePath / self.profile.rootDir

    def _backups(self, gamePath: Path) -> list[Path]:
        if not gamePath.is_dir():
            return []
        return sorted(p for p in gamePath.iterdir() if p.name.startswith(self._backupPrefix()) and p.is_dir())

    def _markerPath(self, gamePath: Path) -> Path | None:
        """
        Marker of the installation that currently counts.

        While a change is not committed, that is the previous installation,
        wherever its files are at the moment.
        """
        for backup in self._backups(gamePath):
            if (backup / BACKUP_COMMITTED).exists():
                continue
            previous = backup / BACKUP_ROOT / self.profile.markerName
            if previous.is_file():
                return previous
            if (backup / BACKUP_FRESH).exists():
                return None
        marker = gamePath / self.profile.markerRelPath
        return marker if marker.is_file() else None

    def _requireGameDir(self, gamePath: Path) -> None:
        if not gamePath.is_dir():
            raise PathNotFoundError(f"Game directory '{gamePath}' does not exist", details={"gamePath": str(gamePath)})

    def _carryPreserved(self, source: Path, target: Path) -> None:
        # User data from `source` wins over whatever the new archive shipped
        for name in self.profile.preserved:
            src = source / name
            if not src.exists():
                continue
            target.mkdir(exist_ok=True)
            dst = target / name
            removePath(dst)
            os.rename(src, dst)
            logger.debug("Carried '%s' into the %s directory", name, self.profile.displayName)

    # ----- Journal -----

    def _openBackup(self, gamePath: Path, *, fresh: bool) -> Path:
        backup = gamePath / f"{self._backupPrefix()}{uuid.uuid4().hex[:12]}"
        backup.mkdir()
        if fresh:
            atomicWriteText(backup / BACKUP_FRESH, "")
        return backup

    def _setLooseAside(self, gamePath: Path, backup: Path, names: Iterable[str]) -> None:
        names = list(names)
        held = backup / BACKUP_LOOSE
        held.mkdir()
        atomicWriteText(backup / BACKUP_ADDED, "\n".join(n for n in names if not (gamePath / n).exists()))
        for name in names:
            if (gamePath / name).exists():
                os.replace(gamePath / name, held / name)

    def _rollBack(self, gamePath: Path, backup: Path) -> None:
        live = self._liveRoot(gamePath)
        previous = backup / BACKUP_ROOT
        if previous.is_dir():
            removePath(live)
            os.rename(previous, live)
        elif (backup / BACKUP_FRESH).exists():
            removePath(live)

        added = backup / BACKUP_ADDED
        if added.is_file():
            for name in added.read_text(encoding="utf-8").split():
                removePath(gamePath / name)
        held = backup / BACKUP_LOOSE
        if held.is_dir():
            for entry in list(held.iterdir()):
                os.replace(entry, gamePath / entry.name)

        self._discard(gamePath, backup)
        logger.warning("Rolled back unfinished %s change '%s'", self.profile.displayName, backup.name)

    def _abandon(self, gamePath: Path, backup: Path) -> None:
        """Rolls back after a failure; the caller re-raises that failure."""
        try:
            self._rollBack(gamePath, backup)
        except OSError:
            logger.exception("Rollback of '%s' failed, the next change to '%s' retries it", backup.name, gamePath)

    def _finish(self, gamePath: Path, backup: Path) -> None:
        previous = backup / BACKUP_ROOT
        if previous.is_dir():
            self._carryPreserved(previous, self._liveRoot(gamePath))
        self._discard(gamePath, backup)

    def _discard(self, gamePath: Path, backup: Path) -> None:
        # One rename takes the whole journal out of play; a half-deleted journal must never be replayed
        trash = gamePath / f"{self._trashPrefix()}{uuid.uuid4().hex[:12]}"
        os.rename(backup, trash)
        try:
            removePath(trash)
        except OSError as err:
            logger.warning("Could not remove '%s', the next change retries: %s", trash.name, err)

    def _recover(self, gamePath: Path) -> None:
        """Settles journals a crash or a failed cleanup left behind. Caller holds the gamePath lock."""
        for backup in self._backups(gamePath):
            if (backup / BACKUP_COMMITTED).exists():
                logger.warning("Finishing interrupted %s change '%s'", self.profile.displayName, backup.name)
                self._finish(gamePath, backup)
            else:
                self._rollBack(gamePath, backup)

        for leftover in list(gamePath.iterdir()):
            if leftover.name.startswith((self._stagingPrefix(), self._trashPrefix())) and leftover.is_dir():
                shutil.rmtree(leftover, ignore_errors=True)
                logger.info("Removed stale directory '%s'", leftover.name)

    # ----- Install steps -----

    def _stage(self, gamePath: Path, data: bytes, version: str) -> Path:
        staging = Path(tempfile.mkdtemp(prefix=self._stagingPrefix(), dir=gamePath))
        try:
            extracted = extractZip(data, staging, memberFilter=self.profile.acceptsMember)
            stagedRoot = staging / self.profile.rootDir
            if not stagedRoot.is_dir():
                raise FileSystemError(
                    f"{self.profile.displayName} archive has no '{self.profile.rootDir}' directory",
                    details={"framework": self.profile.key, "version": version, "files": len(extracted)},
                )
            atomicWriteText(stagedRoot / self.profile.markerName, version)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        return staging

    def _swap(self, gamePath: Path, staging: Path, version: str) -> None:
        live = self._liveRoot(gamePath)
        names = [name for name in self.profile.looseFiles if (staging / name).is_file()]
        backup = self._openBackup(gamePath, fresh=not live.exists())
        try:
            self._setLooseAside(gamePath, backup, names)
            for name in names:
                os.replace(staging / name, gamePath / name)
            if live.exists():
                os.rename(live, backup / BACKUP_ROOT)
            os.rename(staging / self.profile.rootDir, live)
            atomicWriteText(backup / BACKUP_COMMITTED, version)
        except OSError:
            self._abandon(gamePath, backup)
            raise
        self._finish(gamePath, backup)

    # ----- Queries -----

    def isInstalled(self, gamePath: str | Path) -> bool:
        return self._markerPath(Path(gamePath)) is not None

    def getVersion(self, gamePath: str | Path) -> str:
        marker = self._markerPath(Path(gamePath))
        if marker is None:
            raise NotInstalledError(
                f"{self.profile.displayName} is not installed",
                details={"framework": self.profile.key, "gamePath": str(gamePath)},
            )
        try:
            return marker.read_text(encoding="utf-8").strip()
        except OSError as err:
            raise FileSystemError(f"Cannot read {self.profile.displayName} version marker: {err}", details={"path": str(marker)}) from err

    def getLatestVersion(self) -> str:
        return self.registry.latestVersion()

    def listAvailableVersions(self) -> list[str]:
        return self.registry.listVersions()

    def checkForUpdates(self, gamePath: str | Path) -> SilkVersion | None:
        """
        Upgrade descriptor when the newest release is above the installed one.

        Not installed → None; installing is a separate decision. An installed
        version that does not parse is treated as outdated.
        """
        if not self.isInstalled(gamePath):
            return None
        installedRaw = self.getVersion(gamePath)
        latestRaw = self.getLatestVersion()

        installed = tryParseSemVersion(installedRaw)
        latest = tryParseSemVersion(latestRaw)
        if installed is None:
            logger.warning("Installed %s version %r is not a version number", self.profile.displayName, installedRaw)
        elif latest is None or latest <= installed:
            return None
        return SilkVersion(version=latestRaw, downloadUrl=self.registry.downloadUrl(latestRaw))


    # ----- Mutations -----

    def recover(self, gamePath: str | Path) -> None:
        """Settles any change a crash left unfinished in `gamePath`."""
        gameDir = Path(gamePath)
        if not gameDir.is_dir():
            return
        with self._locks.hold(pathKey(gameDir)):
            try:
                self._recover(gameDir)
            except OSError as err:
                raise FileSystemError(
                    f"Failed to recover {self.profile.displayName} in '{gameDir}': {err}",
                    details={"framework": self.profile.key, "gamePath": str(gameDir)},
                ) from err

    def install(self, gamePath: str | Path) -> str:
        """Installs the newest published release. Returns the installed version."""
        version = self.getLatestVersion()
        self._installResolved(Path(gamePath), version)
        return version

    def installVersion(self, version: str, gamePath: str | Path) -> str:
        gameDir = Path(gamePath)
        self._requireGameDir(gameDir)
        # VersionNotFoundError surfaces here, before anything on disk changes
        resolved = self.registry.resolveVersion(version)
        self._installResolved(gameDir, resolved)
        return resolved

    def _installResolved(self, gameDir: Path, version: str) -> None:
        self._requireGameDir(gameDir)
        url = self.registry.downloadUrl(version)
        logger.info("Downloading %s %s from %s", self.profile.displayName, version, url)
        data = self._download(url)

        with self._locks.hold(pathKey(gameDir)):
            try:
                self._recover(gameDir)
                staging = self._stage(gameDir, data, version)
                try:
                    self._swap(gameDir, staging, version)
                finally:
                    shutil.rmtree(staging, ignore_errors=True)
            except EntwineError:
                raise
            except OSError as err:
                raise FileSystemError(
                    f"Failed to install {self.profile.displayName} {version}: {err}",
                    details={"framework": self.profile.key, "gamePath": str(gameDir)},
                ) from err

        logger.info("Installed %s %s into '%s'", self.profile.displayName, version, gameDir)

    def uninstall(self, gamePath: str | Path) -> None:
        """
        Removes the framework's files but keeps its user-data sub-paths.

        The whole root and the loose files move into a journal first, so a
        failure leaves the installation as it was and the call can be retried.
        Once it succeeds, a second call reports NotInstalledError.
        """
        gameDir = Path(gamePath)
        with self._locks.hold(pathKey(gameDir)):
            try:
                if gameDir.is_dir():
                    self._recover(gameDir)
                if not (gameDir / self.profile.markerRelPath).is_file():
                    raise NotInstalledError(
                        f"{self.profile.displayName} is not installed",
                        details={"framework": self.profile.key, "gamePath": str(gameDir)},
                    )

                names = [name for name in self.profile.looseFiles if (gameDir / name).exists()]
                backup = self._openBackup(gameDir, fresh=False)
                try:
                    self._setLooseAside(gameDir, backup, names)
                    os.rename(self._liveRoot(gameDir), backup / BACKUP_ROOT)
                    atomicWriteText(backup / BACKUP_COMMITTED, "uninstalled")
                except OSError:
                    self._abandon(gameDir, backup)
                    raise
                self._finish(gameDir, backup)
            except EntwineError:
                raise
            except OSError as err:
                raise FileSystemError(
                    f"Failed to uninstall {self.profile.displayName}: {err}",
                    details={"framework": self.profile.key, "gamePath": str(gameDir)},
                ) from err

        logger.info("Uninstalled %s from '%s'", self.profile.displayName, gameDir)
