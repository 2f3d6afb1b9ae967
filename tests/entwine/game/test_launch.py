# tests/entwine/game/test_launch.py
from __future__ import annotations
import pytest

from entwine.app.app_settings import LaunchMethod
from entwine.core.errors import LaunchError, PathNotFoundError
from entwine.game import launch


class _FakePopen:
    calls: list[tuple[list[str], str | None]] = []

    def __init__(self, command, cwd=None, **kwargs):
        type(self).calls.append((command, cwd))


@pytest.fixture
def spawned(monkeypatch):
    _FakePopen.calls = []
    monkeypatch.setattr(launch.subprocess, "Popen", _FakePopen)
    return _FakePopen.calls


def test_openerCommand_per_platform():
    assert launch.openerCommand("steam://x", "linux") == ["xdg-open", "steam://x"]
    assert launch.openerCommand("steam://x", "darwin") == ["open", "steam://x"]
    assert launch.openerCommand("steam://x", "win32")[:3] == ["cmd", "/C", "start"]


def test_launch_via_steam(spawned, gameDir):
    command = launch.launchGame(gameDir, LaunchMethod.STEAM)
    assert command[-1] == "steam://rungameid/1329500"
    assert spawned == [(command, None)]


def test_launch_executable_runs_in_game_dir(spawned, gameDir, monkeypatch):
    monkeypatch.setattr(launch.sys, "platform", "linux")
    exe = gameDir / "SpiderHeckApp.exe"
    exe.write_bytes(b"MZ")

    launch.launchGame(gameDir, LaunchMethod.EXECUTABLE)

    assert spawned == [([str(exe)], str(gameDir))]


def test_launch_executable_missing(spawned, gameDir):
    with pytest.raises(PathNotFoundError):
        launch.launchGame(gameDir, LaunchMethod.EXECUTABLE)
    assert spawned == []


def test_spawn_failure_is_launch_error(gameDir, monkeypatch):
    def boom(*args, **kwargs):
        raise FileNotFoundError("xdg-open")

    monkeypatch.setattr(launch.subprocess, "Popen", boom)
    with pytest.raises(LaunchError):
        launch.launchGame(gameDir, LaunchMethod.STEAM)
