# entwine/frameworks/registry.py
from __future__ import annotations
import logging
from typing import Any

from entwine.core.errors import NetworkError, VersionNotFoundError
from entwine.frameworks.profiles import FrameworkProfile
from entwine.http.client import getJson
from entwine.semver import SemVersion, SemVerResolver, tryParseSemVersion

logger = logging.getLogger(__name__)

__all__ = ["ReleaseRegistry"]



def _releaseVersion(raw: Any) -> tuple[SemVersion, str] | None:
    if not isinstance(raw, dict):
        return None
    if raw.get("draft") or raw.get("prerelease"):
        return None
    tag = str(raw.get("tag_name") or "").strip()
    parsed = tryParseSemVersion(tag)
    if parsed is None or parsed.isPrerelease:
        return None
    # Keep the tag's own spelling (minus the 'v') so download URLs match it
    return parsed, tag[1:] if tag[:1] in ("v", "V") else tag



class ReleaseRegistry:
    """
    Published releases of one framework, read from its GitHub releases feed.

    Nothing is cached: every call is a fresh network round trip, and a
    failure is a NetworkError rather than an empty list.
    """

    def __init__(self, profile: FrameworkProfile, *, timeoutMs: int | None = None) -> None:
        self.profile = profile
        self._timeoutMs = timeoutMs

    def listVersions(self) -> list[str]:
        """Stable release versions, newest first."""
        url = self.profile.releasesUrl()
        payload = getJson(url, timeoutMs=self._timeoutMs, headers={"Accept": "application/vnd.github+json"})
        if not isinstance(payload, list):
            raise NetworkError(
                f"{self.profile.displayName} release feed answered with an unexpected payload",
                details={"url": url, "type": type(payload).__name__},
            )

        candidates: list[tuple[SemVersion, str]] = []
        seen: set[SemVersion] = set()
        for raw in payload:
            parsed = _releaseVersion(raw)
            if parsed is None or parsed[0] in seen:
                continue
            seen.add(parsed[0])
            candidates.append(parsed)

        result = SemVerResolver.matchCandidates(candidates)
        versions = [tag for _, tag in result.matches]
        logger.debug("%s releases: %s", self.profile.displayName, versions)
        return versions

    def latestVersion(self) -> str:
        versions = self.listVersions()
        if not versions:
            raise VersionNotFoundError(
                f"No published {self.profile.displayName} release found",
                details={"framework": self.profile.key},
            )
        return versions[0]

    def resolveVersion(self, version: str) -> str:
        """
        Maps a requested version onto a published one ("v1.2" finds "1.2.0").

        Raises VersionNotFoundError when nothing matches.
        """
        wanted = tryParseSemVersion(str(version or "").strip())
        if wanted is not None:
            for tag in self.listVersions():
                if tryParseSemVersion(tag) == wanted:
                    return tag
        raise VersionNotFoundError(
            f"{self.profile.displayName} version '{version}' is not published",
            details={"framework": self.profile.key, "version": version},
        )

    def downloadUrl(self, version: str) -> str:
        return self.profile.downloadUrl(version)
