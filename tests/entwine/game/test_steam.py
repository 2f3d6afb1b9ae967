# tests/entwine/game/test_steam.py
from __future__ import annotations
from pathlib import Path

from entwine.game.steam import detectGamePath, looksLikeGameDir, steamLibraryPaths


def test_library_paths_per_platform(tmp_path):
    linux = steamLibraryPaths("linux", home=tmp_path)
    assert tmp_path / ".local/share/Steam/steamapps/common" in linux

    windows = steamLibraryPaths("win32", home=tmp_path)
    assert Path("C:\\Program Files (x86)\\Steam\\steamapps\\common") in windows
    assert Path("Z:\\SteamLibrary\\steamapps\\common") in windows

    assert steamLibraryPaths("darwin", home=tmp_path) == [tmp_path / "Library/Application Support/Steam/steamapps/common"]


def test_extra_library_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("ENTWINE_STEAM_LIBRARY", str(tmp_path / "lib"))
    assert steamLibraryPaths("darwin", home=tmp_path)[0] == tmp_path / "lib"


def test_detect_picks_first_valid_library(tmp_path):
    empty = tmp_path / "lib1"
    (empty / "SpiderHeck").mkdir(parents=True)
    good = tmp_path / "lib2"
    (good / "SpiderHeck").mkdir(parents=True)
    (good / "SpiderHeck" / "SpiderHeck.exe").write_bytes(b"MZ")

    assert detectGamePath([tmp_path / "missing", empty, good]) == good / "SpiderHeck"
    assert detectGamePath([empty]) is None


def test_looksLikeGameDir(gameDir, tmp_path):
    assert looksLikeGameDir(gameDir)
    assert not looksLikeGameDir(tmp_path / "nope")


def test_looksLikeGameDir_accepts_app_bundle_directory(tmp_path):
    gameDir = tmp_path / "game"
    (gameDir / "SpiderHeck").mkdir(parents=True)
    assert looksLikeGameDir(gameDir)
