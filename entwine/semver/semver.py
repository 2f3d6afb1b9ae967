# entwine/semver/semver.py
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Literal, Iterable, Generic, TypeVar

__all__ = [
    "SemVersion", "parseSemVersion", "tryParseSemVersion",
    "SemVerComparator", "SemVerRequirement", "boundsRequirement",
    "versionSatisfiesRequirement", "SemVerMatchResult", "SemVerResolver",
]



SEMVER_PATTERN_RE = re.compile(
    r"^(?P<core>(?:0|[1-9]\d*)(?:\.(?:0|[1-9]\d*)){2,3})"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*)"
    r"(?:\.(?:0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)



T = TypeVar("T")


@total_ordering
@dataclass(frozen=True)
class SemVersion:
    """
    Semantic version with an optional fourth numeric `revision` component.

    Framework releases are not all strict SemVer (BepInEx ships 5.4.23.4), so
    a revision is accepted and ordered after patch. It is omitted from str()
    when zero.
    """
    major: int
    minor: int
    patch: int
    revision: int = 0
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            base += f".{self.revision}"
        prerelease = f"-{'.'.join(self.prerelease)}" if self.prerelease else ""
        build = f"+{'.'.join(self.build)}" if self.build else ""
        return f"{base}{prerelease}{build}"

    def _prereleaseCmpKey(self) -> tuple:
        # Numeric identifiers have lower precedence than non-numeric.
        # We encode numeric as (0, int), non-numeric as (1, str),
        # so numeric < non-numeric in tuple comparison.
        parts: list[tuple[int, int | str]] = []
        for ident in self.prerelease:
            if ident.isdigit():
                parts.append((0, int(ident)))
            else:
                parts.append((1, ident))
        return tuple(parts)

    def _cmpKey(self) -> tuple:
        # Build is ignored for ordering
        # No prerelease version is preferred over any prerelease version
        releaseFlag = 1 if not self.prerelease else 0
        return (
            self.major,
            self.minor,
            self.patch,
            self.revision,
            releaseFlag,
            self._prereleaseCmpKey()
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVersion):
            return NotImplemented
        return self._cmpKey() == other._cmpKey()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVersion):
            return NotImplemented
        return self._cmpKey() < other._cmpKey()

    def __hash__(self) -> int:
        return hash(self._cmpKey())

    @property
    def isPrerelease(self) -> bool:
        return bool(self.prerelease)



def parseSemVersion(raw: str) -> SemVersion:
    """
    Parse a version string into SemVersion.

    Accepted forms (examples):
        "1"             -> 1.0.0
        "1.2"           -> 1.2.0
        "1.2.3"         -> 1.2.3
        "5.4.23.4"      -> 5.4.23 revision 4
        "1.2.3-alpha.1"
        "1.2.3+build.1"
        "v1.2.3"

    Rejected:
        ".1", "1.", "1..3", "1.2.3.4.5", "01.2.3" (leading zeroes), etc.
    """
    if raw is None:
        raise ValueError("Version string cannot be None")

    if not isinstance(raw, str):
        raise TypeError(f"Version string must be a string type, got {type(raw).__name__}")

    raw = raw.strip()
    if not raw:
        raise ValueError("Version string cannot be empty or whitespace only")

    # Accept a single 'v' and remove it (v1.2.3 -> 1.2.3)
    if raw[0] in ("v", "V") and len(raw) > 1 and "0" <= raw[1] <= "9":
        raw = raw[1:]

    # Split into core (numeric) and suffix (-prerelease +build)
    sepIndex = len(raw)
    for ch in ("-", "+"):
        idx = raw.find(ch)
        if idx != -1 and idx < sepIndex:
            sepIndex = idx

    core = raw[:sepIndex]
    suffix = raw[sepIndex:]

    coreParts = core.split(".")
    if not 1 <= len(coreParts) <= 4:
        raise ValueError(f"Invalid version core {core!r} in {raw!r}")

    # Reject empty components: ".1", "1.", "1..3"
    if any(part == "" for part in coreParts):
        raise ValueError(f"Empty numeric component in version {raw!r}")

    numericParts: list[int] = []
    for part in coreParts:
        if not re.fullmatch(r"0|[1-9]\d*", part):
            raise ValueError(f"Invalid numeric component {part!r} in version {raw!r}")
        numericParts.append(int(part))

    while len(numericParts) < 3:
        numericParts.append(0)

    normalized = ".".join(str(num) for num in numericParts) + suffix
    mtch = SEMVER_PATTERN_RE.match(normalized)
    if not mtch:
        raise ValueError(f"Invalid semantic version {raw!r} (normalized {normalized!r})")

    prereleaseGroup = mtch.group("prerelease")
    buildGroup = mtch.group("build")

    return SemVersion(
        major=numericParts[0],
        minor=numericParts[1],
        patch=numericParts[2],
        revision=numericParts[3] if len(numericParts) > 3 else 0,
        prerelease=tuple(prereleaseGroup.split(".")) if prereleaseGroup is not None else (),
        build=tuple(buildGroup.split(".")) if buildGroup is not None else (),
    )



def tryParseSemVersion(raw: str | None) -> SemVersion | None:
    """parseSemVersion that answers None instead of raising."""
    try:
        return parseSemVersion(raw) # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None



@dataclass(frozen=True)
class SemVerComparator:
    operator: Literal["<", "<=", ">", ">=", "=="]
    version: SemVersion



@dataclass(frozen=True)
class SemVerRequirement:
    # All comparators are AND-ed. Empty means "any version".
    comparators: tuple[SemVerComparator, ...] = ()

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return " ".join(f"{comp.operator}{comp.version}" for comp in self.comparators)



def boundsRequirement(minVersion: str | None, maxVersion: str | None) -> SemVerRequirement:
    """
    Inclusive range `min <= v <= max`. A missing bound leaves that side open.

    Raises ValueError when a bound does not parse or max < min.
    """
    comparators: list[SemVerComparator] = []
    lower = parseSemVersion(minVersion) if minVersion else None
    upper = parseSemVersion(maxVersion) if maxVersion else None
    if lower is not None and upper is not None and upper < lower:
        raise ValueError(f"Invalid range: upper {upper} < lower {lower}")
    if lower is not None:
        comparators.append(SemVerComparator(">=", lower))
    if upper is not None:
        comparators.append(SemVerComparator("<=", upper))
    return SemVerRequirement(comparators=tuple(comparators))



def versionSatisfiesRequirement(
    version: SemVersion,
    requirement: SemVerRequirement | None,
) -> bool:
    """
    Checks if a version satisfies the given requirement.

    requirement None or without comparators => always returns True.
    """
    if requirement is None:
        return True

    for comparator in requirement.comparators:
        if comparator.operator == "==":
            if not (version == comparator.version):
                return False
        elif comparator.operator == ">=":
            if not (version >= comparator.version):
                return False
        elif comparator.operator == "<=":
            if not (version <= comparator.version):
                return False
        elif comparator.operator == ">":
            if not (version > comparator.version):
                return False
        elif comparator.operator == "<":
            if not (version < comparator.version):
                return False
        else:
            raise ValueError(f"Unknown operator {comparator.operator!r}")
    return True



@dataclass(frozen=True)
class SemVerMatchResult(Generic[T]):
    """
    Result of semver-based selection among candidate versions.

    - matches: candidates that satisfy the requirement, newest first.
    - best: the single best match by version, or None if no matches.
            If multiple candidates share the same best version, the
            first one in the input order is returned.
    """
    requirement: SemVerRequirement | None
    matches: tuple[tuple[SemVersion, T], ...]
    best: tuple[SemVersion, T] | None



class SemVerResolver:
    @staticmethod
    def matchCandidates(
        candidates: Iterable[tuple[SemVersion, T]],
        requirement: SemVerRequirement | None = None,
    ) -> SemVerMatchResult[T]:
        """
        Filter candidates by requirement and order them newest-first.

        Sorting is stable, so equal versions keep their input order and the
        first of them becomes `best`.
        """
        matchList = [
            (version, payload)
            for version, payload in candidates
            if versionSatisfiesRequirement(version, requirement)
        ]
        matchList.sort(key=lambda pair: pair[0], reverse=True)

        return SemVerMatchResult(
            requirement=requirement,
            matches=tuple(matchList),
            best=matchList[0] if matchList else None,
        )
