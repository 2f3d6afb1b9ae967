# entwine/semver/__init__.py
from __future__ import annotations

from .semver import (
    SemVersion,
    parseSemVersion,
    tryParseSemVersion,
    SemVerComparator,
    SemVerRequirement,
    boundsRequirement,
    versionSatisfiesRequirement,
    SemVerMatchResult,
    SemVerResolver,
)

__all__ = [
    "SemVersion",
    "parseSemVersion",
    "tryParseSemVersion",
    "SemVerComparator",
    "SemVerRequirement",
    "boundsRequirement",
    "versionSatisfiesRequirement",
    "SemVerMatchResult",
    "SemVerResolver",
]
