# tests/entwine/core/test_archives.py
from __future__ import annotations
import pytest

from entwine.core.archives import extractZip
from entwine.core.errors import FileSystemError
from tests.helpers import makeZip


def test_extracts_nested_members(tmp_path):
    data = makeZip({"Silk/core.dll": b"core", "Silk/Mods/": "", "winhttp.dll": b"proxy"})

    extracted = extractZip(data, tmp_path)

    assert sorted(extracted) == ["Silk/core.dll", "winhttp.dll"]
    assert (tmp_path / "Silk" / "core.dll").read_bytes() == b"core"
    assert (tmp_path / "Silk" / "Mods").is_dir()


def test_member_filter_skips_other_members(tmp_path):
    data = makeZip({"BepInEx/core/BepInEx.dll": b"x", "winhttp.dll": b"y", "changelog.txt": "z"})

    extracted = extractZip(data, tmp_path, memberFilter=lambda name: name.startswith("BepInEx/"))

    assert extracted == ["BepInEx/core/BepInEx.dll"]
    assert not (tmp_path / "winhttp.dll").exists()


def test_backslash_members_land_in_subdirectories(tmp_path):
    data = makeZip({"Silk\\Config\\silk.cfg": "a=1"})
    extractZip(data, tmp_path)
    assert (tmp_path / "Silk" / "Config" / "silk.cfg").read_text() == "a=1"


@pytest.mark.parametrize("evil", ["../escape.txt", "/abs.txt", "a/../../escape.txt", "C:/win.txt"])
def test_rejects_members_escaping_destination(tmp_path, evil):
    dest = tmp_path / "dest"
    dest.mkdir()
    with pytest.raises(FileSystemError):
        extractZip(makeZip({evil: "boom"}), dest)
    assert not (tmp_path / "escape.txt").exists()


def test_corrupt_archive_is_filesystem_error(tmp_path):
    with pytest.raises(FileSystemError):
        extractZip(b"definitely not a zip", tmp_path)
