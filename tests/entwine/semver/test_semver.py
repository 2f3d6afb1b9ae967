# tests/entwine/semver/test_semver.py
from __future__ import annotations
import pytest

from entwine.semver import (
    SemVerResolver,
    boundsRequirement,
    parseSemVersion,
    tryParseSemVersion,
    versionSatisfiesRequirement,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1", "1.0.0"),
        ("1.2", "1.2.0"),
        ("v0.6.1", "0.6.1"),
        ("5.4.23.4", "5.4.23.4"),
        ("1.2.3-alpha.1+build.7", "1.2.3-alpha.1+build.7"),
    ],
)
def test_parse_accepts_loose_forms(raw, expected):
    assert str(parseSemVersion(raw)) == expected


@pytest.mark.parametrize("raw", ["", ".1", "1.", "1..3", "1.2.3.4.5", "01.2.3", "latest"])
def test_parse_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parseSemVersion(raw)
    assert tryParseSemVersion(raw) is None


def test_ordering_includes_revision_and_prerelease():
    ordered = ["1.0.0-alpha", "1.0.0-alpha.1", "1.0.0-beta", "1.0.0", "1.0.0.1", "1.0.1", "2.0.0"]
    parsed = [parseSemVersion(v) for v in ordered]
    assert parsed == sorted(parsed)
    assert parseSemVersion("2.1.0") > parseSemVersion("2.0.0")
    assert parseSemVersion("1.2") == parseSemVersion("1.2.0")


def test_build_metadata_does_not_affect_equality():
    assert parseSemVersion("1.0.0+a") == parseSemVersion("1.0.0+b")
    assert hash(parseSemVersion("1.0.0+a")) == hash(parseSemVersion("1.0.0"))


@pytest.mark.parametrize(
    "installed, compatible",
    [("2.5.0", True), ("2.0.0", True), ("3.0.0", True), ("1.9.0", False), ("3.1.0", False)],
)
def test_boundsRequirement_is_inclusive(installed, compatible):
    requirement = boundsRequirement("2.0.0", "3.0.0")
    assert versionSatisfiesRequirement(parseSemVersion(installed), requirement) is compatible


def test_boundsRequirement_open_sides():
    assert str(boundsRequirement(None, None)) == "*"
    assert versionSatisfiesRequirement(parseSemVersion("99.0.0"), boundsRequirement("1.0.0", None))
    assert not versionSatisfiesRequirement(parseSemVersion("0.9.0"), boundsRequirement("1.0.0", None))
    assert versionSatisfiesRequirement(parseSemVersion("0.1.0"), boundsRequirement(None, "1.0.0"))


def test_boundsRequirement_rejects_inverted_range():
    with pytest.raises(ValueError):
        boundsRequirement("3.0.0", "2.0.0")


def test_matchCandidates_orders_newest_first_and_keeps_ties_stable():
    candidates = [(parseSemVersion(v), tag) for v, tag in [("1.0.0", "a"), ("2.0.0", "b"), ("2.0.0", "c"), ("1.5.0", "d")]]

    result = SemVerResolver.matchCandidates(candidates, boundsRequirement("1.2.0", None))

    assert [tag for _, tag in result.matches] == ["b", "c", "d"]
    assert result.best is not None
    assert result.best[1] == "b"


def test_matchCandidates_empty():
    result = SemVerResolver.matchCandidates([])
    assert result.matches == ()
    assert result.best is None
