# tests/entwine/mods/test_toggle.py
from __future__ import annotations
import threading

import pytest

from entwine.core.errors import PathNotFoundError
from entwine.mods.scanner import ModScanner
from entwine.mods.toggle import ModToggle


def _state(modsDir):
    return {m.id: m.enabled for m in ModScanner().getInstalledMods(modsDir)}


def test_disable_then_enable(modsDir):
    (modsDir / "Timer.dll").write_bytes(b"x")
    toggle = ModToggle()

    toggle.toggleMod(modsDir, "Timer.dll", False)
    assert (modsDir / "Timer.dll.disabled").is_file()
    assert not (modsDir / "Timer.dll").exists()

    toggle.toggleMod(modsDir, "Timer.dll.disabled", True)
    assert (modsDir / "Timer.dll").is_file()


def test_toggle_is_idempotent(modsDir):
    (modsDir / "Timer.dll").write_bytes(b"x")
    toggle = ModToggle()

    toggle.toggleMod(modsDir, "Timer.dll", True)
    toggle.toggleMod(modsDir, "Timer.dll", True)
    assert _state(modsDir) == {"Timer": True}

    toggle.toggleMod(modsDir, "Timer.dll", False)
    toggle.toggleMod(modsDir, "Timer.dll", False)
    assert _state(modsDir) == {"Timer": False}


def test_toggle_folder_mod(modsDir):
    (modsDir / "BigPack").mkdir()
    ModToggle().toggleMod(modsDir, "BigPack", False)
    assert (modsDir / "BigPack.disabled").is_dir()


def test_toggle_missing_is_path_not_found(modsDir):
    with pytest.raises(PathNotFoundError):
        ModToggle().toggleMod(modsDir, "Ghost.dll", True)


def test_concurrent_toggles_leave_exactly_one_form(modsDir):
    (modsDir / "Timer.dll").write_bytes(b"x")
    toggle = ModToggle()
    errors: list[BaseException] = []

    def worker(enable: bool):
        try:
            for _ in range(20):
                toggle.toggleMod(modsDir, "Timer.dll", enable)
        except BaseException as err:
            errors.append(err)

    threads = [threading.Thread(target=worker, args=(flag,)) for flag in (True, False, True, False)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    names = sorted(p.name for p in modsDir.iterdir())
    assert names in (["Timer.dll"], ["Timer.dll.disabled"])
